"""Configuration manager: load, save and validate the YAML config.

Uses ruamel.yaml so the written file carries section comments.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import AppConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML COMMENTS ───

_YAML_HEADER = f"""\
# ============================================
# Timetable feasibility validator: configuration
# Created: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "validation": (
        "Validation",
        "parallel: run checks on worker threads.\n"
        "disabled_checks: ids from `main.py checks` that are never run.",
    ),
    "optimizer": (
        "Block ordering",
        "seed: fixed seed for reproducible orderings (null = random).",
    ),
    "logging": (
        "Logging",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "validator_config.yaml"

    def first_run_check(self) -> bool:
        """True when no config file exists yet."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Load ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Loads the YAML config, validated via pydantic."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Config file not found: {target}\n"
                f"Run 'python main.py config init' to create one."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return AppConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Invalid config file: {target}\n"
                f"Pydantic error: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> AppConfig:
        """Like ``load`` but falls back to defaults when the file is missing."""
        from config.defaults import default_app_config
        try:
            return self.load(path)
        except FileNotFoundError:
            return default_app_config()

    # ─── Save ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> Path:
        """Writes the config as commented YAML."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Config saved: {target}")
        return target

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        """Builds the YAML structure with section comments."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        optimizer_map = CommentedMap(cm["optimizer"])
        optimizer_map.yaml_add_eol_comment("keep above any subject count", "score_multiplier")
        cm["optimizer"] = optimizer_map

        return cm
