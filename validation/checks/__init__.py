"""The individual feasibility checks. Each is a pure ``(context) -> list[Issue]``."""

from validation.checks.teaching_hours_availability import check_teaching_hours_availability
from validation.checks.concurrent_teachers_capacity import check_concurrent_teachers_capacity
from validation.checks.form_group_period_coverage import check_form_group_period_coverage
from validation.checks.class_spacing_feasibility import check_class_spacing_feasibility
from validation.checks.consecutive_period_availability import check_consecutive_period_availability
from validation.checks.teacher_daily_load_distribution import check_teacher_daily_load_distribution

__all__ = [
    "check_teaching_hours_availability",
    "check_concurrent_teachers_capacity",
    "check_form_group_period_coverage",
    "check_class_spacing_feasibility",
    "check_consecutive_period_availability",
    "check_teacher_daily_load_distribution",
]
