"""Timetable feasibility validator: main CLI.

Usage:
  python main.py validate <document.json>        Run the feasibility checks
  python main.py validate <doc> --excel-out x    ... and write an Excel report
  python main.py checks                          List the registered checks
  python main.py optimize <doc> --block <id>     Re-run block ordering for one block
  python main.py generate                        Generate a demo document
  python main.py config show                     Show the configuration
  python main.py config init                     Write the default configuration
"""

import logging
import random
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_JSON = Path("output/version_data.json")


def _setup_logging(level: str) -> None:
    from rich.logging import RichHandler
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config_or_abort(ctx: click.Context):
    """Loads the config (defaults when there is none) or aborts on an invalid file."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        if path is not None:
            return mgr, mgr.load(path)
        return mgr, mgr.load_or_default()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


def _load_document_or_abort(path: Path):
    from models.version_data import VersionData
    try:
        return VersionData.load_json(path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red bold]Could not load document:[/red bold]\n{escape(str(e))}")
        sys.exit(1)


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.argument("document", type=click.Path(path_type=Path), default=str(DEFAULT_DOCUMENT_JSON))
@click.option("--parallel/--sequential", default=None,
              help="Run checks concurrently (default: from config).")
@click.option("--details", is_flag=True, default=False,
              help="Show details and recommendations.")
@click.option("--json-out", type=click.Path(path_type=Path), default=None,
              help="Write the result as JSON.")
@click.option("--excel-out", type=click.Path(path_type=Path), default=None,
              help="Write the result as an Excel report.")
@click.pass_context
def cmd_validate(ctx, document: Path, parallel: Optional[bool], details: bool,
                 json_out: Optional[Path], excel_out: Optional[Path]):
    """Runs the feasibility checks on a version document."""
    from validation.engine import validate_document
    from validation.registry import get_active_checks

    mgr, config = _load_config_or_abort(ctx)
    console.print(f"[bold]Loading document:[/bold] {document}")
    data = _load_document_or_abort(document)
    console.print(f"\n[dim]{data.summary()}[/dim]\n")

    if parallel is None:
        parallel = config.validation.parallel
    checks = get_active_checks(config.validation.disabled_checks)
    result = validate_document(data, checks=checks, parallel=parallel)
    result.print_rich(show_details=details)

    if json_out is not None:
        json_out.parent.mkdir(parents=True, exist_ok=True)
        json_out.write_text(result.to_json(), encoding="utf-8")
        console.print(f"[green]✓[/green] JSON saved: {json_out}")

    if excel_out is not None:
        from export.excel_export import IssueExcelExporter
        IssueExcelExporter(result).export(excel_out)
        console.print(f"[green]✓[/green] Excel report saved: {excel_out}")

    sys.exit(1 if result.has_errors else 0)


# ─── CHECKS ───────────────────────────────────────────────────────────────────

@click.command("checks")
@click.pass_context
def cmd_checks(ctx):
    """Lists all registered checks."""
    from validation.registry import CHECK_REGISTRY

    mgr, config = _load_config_or_abort(ctx)
    disabled = set(config.validation.disabled_checks)

    table = Table(title="Registered checks", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Description")
    for check in CHECK_REGISTRY:
        status = "[dim]disabled[/dim]" if check.id in disabled else "[green]active[/green]"
        table.add_row(check.id, check.name, check.category, status, check.description)
    console.print(table)


# ─── OPTIMIZE ─────────────────────────────────────────────────────────────────

@click.command("optimize")
@click.argument("document", type=click.Path(path_type=Path))
@click.option("--block", "block_id", required=True, help="Id of the block to reorder.")
@click.option("--seed", type=int, default=None,
              help="Random seed (default: from config).")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Save the updated document here.")
@click.pass_context
def cmd_optimize(ctx, document: Path, block_id: str, seed: Optional[int],
                 output: Optional[Path]):
    """Re-runs the lesson to meta-period ordering for one block."""
    from data.block_builder import order_block
    from solver.block_ordering import PlacementStatus

    mgr, config = _load_config_or_abort(ctx)
    data = _load_document_or_abort(document)

    block = data.block_by_id(block_id)
    if block is None:
        console.print(f"[red]Block not found: {block_id}[/red]")
        sys.exit(1)

    if seed is None:
        seed = config.optimizer.seed
    logger.info(f"Reordering block {block_id} (seed: {seed})")
    updated, result = order_block(
        block,
        rng=random.Random(seed),
        score_multiplier=config.optimizer.score_multiplier,
    )

    classes = {lesson.id: cls for _, cls in updated.iter_classes() for lesson in cls.lessons}
    lessons = {lesson.id: lesson for _, cls in updated.iter_classes() for lesson in cls.lessons}
    feeder_names = []
    for fg_id in updated.feeder_form_groups:
        form_group = data.form_group_by_id(fg_id)
        feeder_names.append(form_group.display_name if form_group else fg_id)
    table = Table(
        title=f"Block ordering: {updated.display_name}",
        caption=f"Feeder groups: {', '.join(feeder_names) or '-'}",
        box=box.ROUNDED,
    )
    table.add_column("Lesson", style="bold")
    table.add_column("Class")
    table.add_column("Subject")
    table.add_column("Teacher")
    table.add_column("Slot")
    table.add_column("Status")
    status_style = {
        PlacementStatus.CLEAN: "green",
        PlacementStatus.CONFLICT: "yellow",
        PlacementStatus.UNASSIGNED: "red",
    }
    for placement in sorted(result.placements, key=lambda p: p.lesson_id):
        cls = classes.get(placement.lesson_id)
        slot = "-"
        if placement.meta_period_id:
            location = updated.locate_meta_period(placement.meta_period_id)
            if location:
                slot = f"ML {location[0]} / MP {location[1]}"
        lesson = lessons.get(placement.lesson_id)
        teacher_id = lesson.teacher_id if lesson else ""
        teacher = data.teacher_by_id(teacher_id) if teacher_id else None
        style = status_style[placement.status]
        table.add_row(
            placement.lesson_id,
            cls.display_name if cls else "-",
            data.subject_name(cls.subject) if cls else "-",
            teacher.display_name if teacher else (teacher_id or "-"),
            slot,
            f"[{style}]{placement.status.value}[/{style}]",
        )
    console.print(table)

    if result.is_clean:
        console.print("[green]✓[/green] All lessons placed without conflicts.")
    else:
        console.print(
            f"[yellow]{len(result.conflicts)} conflict(s), "
            f"{len(result.unassigned)} unassigned lesson(s).[/yellow]"
        )

    if output is not None:
        index = data.model.blocks.index(block)
        data.model.blocks[index] = updated
        data.save_json(output)
        console.print(f"[green]✓[/green] Document saved: {output}")


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Random seed for reproducible data.")
@click.option("--output", "-o", type=click.Path(path_type=Path),
              default=str(DEFAULT_DOCUMENT_JSON), help="Path of the JSON document.")
@click.option("--validate/--no-validate", "run_validate", default=True,
              help="Run the feasibility checks after generating.")
@click.pass_context
def cmd_generate(ctx, seed: int, output: Path, run_validate: bool):
    """Generates a demo version document (cycle, staff, groups, blocks)."""
    from data.fake_data import FakeVersionDataGenerator

    console.print("[bold]Generating test data...[/bold]")
    gen = FakeVersionDataGenerator(seed=seed)
    data = gen.generate()
    gen.print_summary(data)

    data.save_json(output)
    console.print(f"[green]✓[/green] JSON saved: {output}")

    if run_validate:
        from validation.engine import validate_document
        from validation.registry import get_active_checks

        mgr, config = _load_config_or_abort(ctx)
        checks = get_active_checks(config.validation.disabled_checks)
        validate_document(
            data, checks=checks, parallel=config.validation.parallel,
        ).print_rich()


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Show or create the configuration."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx):
    """Shows the active configuration."""
    mgr, config = _load_config_or_abort(ctx)
    source = ctx.obj.get("config_path") or (
        mgr.DEFAULT_CONFIG if not mgr.first_run_check() else "defaults"
    )

    console.print(Panel(
        f"Source: [bold]{source}[/bold]",
        title="Configuration",
        border_style="cyan",
    ))

    table = Table(box=box.ROUNDED)
    table.add_column("Section", style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")
    vc = config.validation
    table.add_row("validation", "parallel", str(vc.parallel))
    table.add_row("", "disabled_checks", ", ".join(vc.disabled_checks) or "-")
    oc = config.optimizer
    table.add_row("optimizer", "seed", "random" if oc.seed is None else str(oc.seed))
    table.add_row("", "score_multiplier", str(oc.score_multiplier))
    table.add_row("logging", "level", config.logging.level)
    console.print(table)


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing file.")
@click.pass_context
def config_init(ctx, force: bool):
    """Writes the default configuration as YAML."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    target = Path(ctx.obj.get("config_path") or mgr.DEFAULT_CONFIG)
    if target.exists() and not force:
        console.print(
            f"[yellow]A configuration already exists: {target}[/yellow]\n"
            "Use [bold]--force[/bold] to overwrite it."
        )
        sys.exit(1)
    mgr.save(default_app_config(), target)


# ─── MAIN CLI ─────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Path to a YAML config file.")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                                case_sensitive=False),
              help="Override the configured log level.")
@click.pass_context
def cli(ctx, config_path: Optional[Path], log_level: Optional[str]):
    """Feasibility checks and block ordering for school timetables.

    Start with: python main.py generate
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    level = log_level
    if level is None:
        from config.manager import ConfigManager
        try:
            level = ConfigManager().load_or_default(config_path).logging.level
        except (FileNotFoundError, ValueError):
            level = "WARNING"
    _setup_logging(level.upper())


def main():
    """Entry point."""
    cli(obj={})


cli.add_command(cmd_validate)
cli.add_command(cmd_checks)
cli.add_command(cmd_optimize)
cli.add_command(cmd_generate)
cli.add_command(cmd_config)


if __name__ == "__main__":
    main()
