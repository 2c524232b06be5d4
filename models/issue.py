"""Issue and ValidationResult: output of the validation engine (Pydantic v2)."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class IssueType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueSeverity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SEVERITY_ORDER = {
    IssueSeverity.CRITICAL: 0,
    IssueSeverity.HIGH: 1,
    IssueSeverity.MEDIUM: 2,
    IssueSeverity.LOW: 3,
}


class _CamelModel(BaseModel):
    """Python names on the inside, camelCase keys in JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IssueAction(_CamelModel):
    """Navigation hint for a UI router. Opaque to the engine."""

    label: str
    path: str


class Issue(_CamelModel):
    """A single problem found by a check.

    Only ``id`` and ``timestamp`` vary between runs; everything else is
    derived from the document.
    """

    id: str
    type: IssueType
    severity: IssueSeverity
    title: str
    description: str
    details: str
    recommendation: str
    action: Optional[IssueAction] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    check_id: str
    timestamp: int           # milliseconds since epoch

    def logical_content(self) -> dict[str, Any]:
        """Everything except the random id and the timestamp."""
        return self.model_dump(exclude={"id", "timestamp"})


class ValidationResult(_CamelModel):
    """Aggregate result of one validation run."""

    issues: list[Issue]
    checks_run: list[str]
    checks_skipped: list[str]
    timestamp: int

    @property
    def error_count(self) -> int:
        return len(self.issues_by_type(IssueType.ERROR))

    @property
    def warning_count(self) -> int:
        return len(self.issues_by_type(IssueType.WARNING))

    @property
    def info_count(self) -> int:
        return len(self.issues_by_type(IssueType.INFO))

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def issues_by_type(self, issue_type: IssueType) -> list[Issue]:
        return [i for i in self.issues if i.type == issue_type]

    def issues_for_check(self, check_id: str) -> list[Issue]:
        return [i for i in self.issues if i.check_id == check_id]

    def sorted_issues(self) -> list[Issue]:
        """Issues ordered by severity, most severe first (stable)."""
        return sorted(self.issues, key=lambda i: SEVERITY_ORDER[i.severity])

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, by_alias=True, exclude_none=True)

    def print_rich(self, show_details: bool = False) -> None:
        """Prints the result as a rich panel plus issue table."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold red]✗ BLOCKING ISSUES FOUND[/bold red]"
            if self.has_errors
            else "[bold green]✓ NO BLOCKING ISSUES[/bold green]"
        )
        lines = [
            status,
            f"Errors: {self.error_count} | Warnings: {self.warning_count} | Info: {self.info_count}",
            f"Checks run: {len(self.checks_run)} | skipped: {len(self.checks_skipped)}",
        ]
        if self.checks_skipped:
            lines.append(
                f"[dim]Skipped (missing data): {', '.join(self.checks_skipped)}[/dim]"
            )
        console.print(Panel("\n".join(lines), title="Feasibility Check", border_style="cyan"))

        if not self.issues:
            console.print("[dim]No issues found.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Type", width=8)
        table.add_column("Severity", width=9)
        table.add_column("Title", width=32)
        table.add_column("Description")
        if show_details:
            table.add_column("Details")

        for issue in self.sorted_issues():
            color = {"error": "red", "warning": "yellow"}.get(issue.type.value, "blue")
            row = [
                f"[{color}]{issue.type.value.upper()}[/{color}]",
                issue.severity.value,
                issue.title,
                issue.description,
            ]
            if show_details:
                row.append(f"{issue.details}\n\n[italic]{issue.recommendation}[/italic]")
            table.add_row(*row)
        console.print(table)
