from pydantic import BaseModel, Field, field_validator
from typing import Optional


# ─── VALIDATION ───

class ValidationConfig(BaseModel):
    """How the validation engine runs."""
    # Run checks concurrently on worker threads instead of one after the other
    parallel: bool = Field(False,
        description="Run checks concurrently")
    # Check ids that are never run (see `main.py checks`)
    disabled_checks: list[str] = Field(default_factory=list,
        description="Check ids to skip")

    @field_validator("disabled_checks")
    @classmethod
    def unknown_checks(cls, v: list[str]) -> list[str]:
        from validation.registry import CHECK_REGISTRY
        known = {c.id for c in CHECK_REGISTRY}
        unknown = [c for c in v if c not in known]
        if unknown:
            raise ValueError(
                f"Unknown check id(s): {', '.join(unknown)}. "
                f"Known: {', '.join(sorted(known))}"
            )
        return v


# ─── OPTIMIZER ───

class OptimizerConfig(BaseModel):
    """Block-ordering optimizer settings."""
    # Fixed seed for reproducible orderings (None = different result each run)
    seed: Optional[int] = Field(None,
        description="Random seed (empty = random)")
    # Weight of the subject peak against the local count in the placement score.
    # Must stay larger than any local count so a lower peak always wins.
    score_multiplier: int = Field(10_000, ge=1,
        description="Score weight of the subject peak")


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    level: str = Field("WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator("level")
    @classmethod
    def known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


# ─── FULL CONFIG ───

class AppConfig(BaseModel):
    """Complete application configuration."""
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
