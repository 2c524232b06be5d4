"""Check: Teacher Daily Load Distribution.

A teacher may have enough total capacity yet still be unschedulable: the
lessons already pinned to them, spread evenly, may need more days than the
cycle has once their ``max_periods_per_day`` cap is applied. Only lessons
with a ``teacher_id`` count; unstaffed lessons are the solver's business.
"""

import math
from collections import defaultdict

from models.issue import Issue, IssueSeverity, IssueType
from validation.context import ValidationContext
from validation.utils import make_issue, plural

CHECK_ID = "teacher-daily-load-distribution"


def check_teacher_daily_load_distribution(context: ValidationContext) -> list[Issue]:
    issues: list[Issue] = []
    vd = context.version_data
    if vd is None or not vd.teachers or not vd.blocks or vd.cycle is None:
        return issues

    days_in_cycle = vd.days_in_cycle()
    if days_in_cycle == 0:
        return issues

    total_periods: dict[str, int] = defaultdict(int)
    subject_breakdown: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for _, cls, lesson in vd.iter_lessons():
        if not lesson.teacher_id:
            continue
        length = lesson.length or 1
        total_periods[lesson.teacher_id] += length
        subject_breakdown[lesson.teacher_id][cls.subject] += length

    for teacher in vd.teachers:
        if not teacher.has_daily_cap or teacher.id not in total_periods:
            continue

        total = total_periods[teacher.id]
        cap = teacher.max_periods_per_day
        min_days_needed = math.ceil(total / cap)
        if min_days_needed <= days_in_cycle:
            continue

        shortage = min_days_needed - days_in_cycle
        max_possible = days_in_cycle * cap
        excess = total - max_possible
        needed_cap = math.ceil(total / days_in_cycle)
        name = teacher.display_name
        breakdown = dict(subject_breakdown[teacher.id])
        subject_lines = "\n".join(
            f"  • {vd.subject_name(subject_id, 'Unknown')}: {periods} periods"
            for subject_id, periods in breakdown.items()
        )

        issues.append(make_issue(
            check_id=CHECK_ID,
            issue_type=IssueType.ERROR,
            severity=IssueSeverity.HIGH,
            title="Impossible Daily Load Distribution",
            description=f"{name} has too many assigned periods",
            details=(
                f"This teacher has {total} periods of pre-assigned lessons, but with a "
                f"daily limit of {cap} periods and only {days_in_cycle} days in the "
                f"cycle, they can only teach a maximum of {max_possible} periods.\n\n"
                f"Teacher: {name}\n"
                f"Pre-assigned periods: {total}\n"
                f"Daily limit: {cap} periods\n"
                f"Days in cycle: {days_in_cycle}\n"
                f"Maximum possible periods: {max_possible}\n"
                f"Excess periods: {excess}\n\n"
                f"Subject breakdown:\n{subject_lines}"
            ),
            recommendation=(
                f"Either reduce the number of pre-assigned lessons for this teacher by "
                f"{excess} periods, increase their daily limit to at least {needed_cap} "
                f"periods, or extend the cycle by at least {shortage} "
                f"{plural(shortage, 'day')}."
            ),
            action_label="Go to Teachers",
            action_path=context.route("teachers"),
            metadata={
                "affected_entities": {"teacher_ids": [teacher.id]},
                "suggested_fix": (
                    f"Reduce assigned lessons by {excess} periods or increase daily "
                    f"limit to {needed_cap}"
                ),
                "teacher_name": name,
                "total_periods": total,
                "max_periods_per_day": cap,
                "days_in_cycle": days_in_cycle,
                "min_days_needed": min_days_needed,
                "shortage": shortage,
                "excess_periods": excess,
                "subject_breakdown": breakdown,
            },
        ))

    return issues
