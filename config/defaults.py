from config.schema import (
    AppConfig,
    LoggingConfig,
    OptimizerConfig,
    ValidationConfig,
)
from solver.block_ordering import DEFAULT_SCORE_MULTIPLIER


def default_app_config() -> AppConfig:
    """Default configuration: all checks, sequential, unseeded optimizer."""
    return AppConfig(
        validation=ValidationConfig(parallel=False, disabled_checks=[]),
        optimizer=OptimizerConfig(seed=None, score_multiplier=DEFAULT_SCORE_MULTIPLIER),
        logging=LoggingConfig(level="WARNING"),
    )
