"""Central registry of all validation checks.

Each entry carries its id, a human-readable name and description, the
timetabling phase it belongs to, the data it needs before it can run, and
the check function itself. The order here is the order results are
reported in.
"""

from typing import Iterable, Optional

from validation.checks import (
    check_class_spacing_feasibility,
    check_concurrent_teachers_capacity,
    check_consecutive_period_availability,
    check_form_group_period_coverage,
    check_teacher_daily_load_distribution,
    check_teaching_hours_availability,
)
from validation.context import CheckCategory, CheckDefinition, CheckPrerequisites

CHECK_REGISTRY: tuple[CheckDefinition, ...] = (
    CheckDefinition(
        id="teaching-hours-availability",
        name="Teaching Hours Availability",
        description=(
            "Validates that sufficient teaching hours are available to deliver "
            "all required lessons"
        ),
        category="model",
        prerequisites=CheckPrerequisites(
            requires_blocks=True, requires_teachers=True, requires_subjects=True,
        ),
        check=check_teaching_hours_availability,
    ),
    CheckDefinition(
        id="concurrent-teachers-capacity",
        name="Concurrent Teachers Capacity",
        description=(
            "Validates that enough teachers exist to deliver lessons running "
            "concurrently in blocks"
        ),
        category="model",
        prerequisites=CheckPrerequisites(
            requires_blocks=True, requires_teachers=True, requires_subjects=True,
        ),
        check=check_concurrent_teachers_capacity,
    ),
    CheckDefinition(
        id="form-group-period-coverage",
        name="Form Group Period Coverage",
        description=(
            "Validates that form group block periods match the total lesson "
            "periods in the cycle"
        ),
        category="model",
        prerequisites=CheckPrerequisites(
            requires_blocks=True, requires_form_groups=True, requires_cycle=True,
        ),
        check=check_form_group_period_coverage,
    ),
    CheckDefinition(
        id="class-spacing-feasibility",
        name="Class Spacing Feasibility",
        description=(
            "Validates that every class fits into the cycle with at most one "
            "lesson per day"
        ),
        category="model",
        prerequisites=CheckPrerequisites(requires_blocks=True, requires_cycle=True),
        check=check_class_spacing_feasibility,
    ),
    CheckDefinition(
        id="consecutive-period-availability",
        name="Consecutive Period Availability",
        description=(
            "Validates that the cycle has enough consecutive lesson periods for "
            "double and longer meta-lessons"
        ),
        category="model",
        prerequisites=CheckPrerequisites(requires_blocks=True, requires_cycle=True),
        check=check_consecutive_period_availability,
    ),
    CheckDefinition(
        id="teacher-daily-load-distribution",
        name="Teacher Daily Load Distribution",
        description=(
            "Validates that pre-assigned teacher loads can be spread over the "
            "cycle within each teacher's daily limit"
        ),
        category="staffing",
        prerequisites=CheckPrerequisites(
            requires_blocks=True, requires_teachers=True, requires_cycle=True,
        ),
        check=check_teacher_daily_load_distribution,
    ),
)


def get_check_by_id(check_id: str) -> Optional[CheckDefinition]:
    return next((c for c in CHECK_REGISTRY if c.id == check_id), None)


def get_checks_by_category(category: CheckCategory) -> list[CheckDefinition]:
    return [c for c in CHECK_REGISTRY if c.category == category]


def get_active_checks(disabled: Iterable[str] = ()) -> list[CheckDefinition]:
    """All registered checks minus the ids switched off in the configuration."""
    disabled = set(disabled)
    return [c for c in CHECK_REGISTRY if c.id not in disabled]
