"""Feasibility validation of a version document before it goes to the solver."""

from validation.context import CheckDefinition, CheckPrerequisites, ValidationContext
from validation.engine import (
    prerequisites_met,
    run_check,
    run_validation,
    run_validation_sync,
    validate_document,
)
from validation.registry import (
    CHECK_REGISTRY,
    get_active_checks,
    get_check_by_id,
    get_checks_by_category,
)

__all__ = [
    "CheckDefinition",
    "CheckPrerequisites",
    "ValidationContext",
    "prerequisites_met",
    "run_check",
    "run_validation",
    "run_validation_sync",
    "validate_document",
    "CHECK_REGISTRY",
    "get_active_checks",
    "get_check_by_id",
    "get_checks_by_category",
]
