"""Check: Consecutive Period Availability.

Double (or longer) meta-lessons need that many back-to-back Lesson periods
on a single day. The longest such run anywhere in the cycle bounds the
meta-lesson length a block may use.
"""

from collections import defaultdict

from models.issue import Issue, IssueSeverity, IssueType
from validation.context import ValidationContext
from validation.utils import make_issue, plural

CHECK_ID = "consecutive-period-availability"


def check_consecutive_period_availability(context: ValidationContext) -> list[Issue]:
    issues: list[Issue] = []
    vd = context.version_data
    if vd is None or not vd.blocks or vd.cycle is None:
        return issues

    cycle = vd.cycle
    by_day = cycle.max_consecutive_lessons_by_day()
    max_consecutive = max(by_day.values(), default=0)

    # Periods exist but none is a Lesson: a broader problem, nothing to compare against.
    if max_consecutive == 0 and cycle.periods and not cycle.lesson_periods:
        return issues

    for block in vd.blocks:
        by_length: dict[int, list[dict]] = defaultdict(list)
        for index, meta_lesson in enumerate(block.meta_lessons):
            length = meta_lesson.length or 1
            if length > 1:
                by_length[length].append({
                    "index": index + 1,
                    "length": length,
                    "id": meta_lesson.id,
                })

        for required in sorted(by_length):
            if required <= max_consecutive:
                continue
            issues.append(_build_issue(
                context, block, required, by_length[required], max_consecutive, by_day,
            ))

    return issues


def _build_issue(context, block, required: int, meta_lessons: list[dict],
                 max_consecutive: int, by_day: dict[str, int]) -> Issue:
    cycle = context.version_data.cycle
    block_name = block.display_name
    shortage = required - max_consecutive
    period_word = plural(max_consecutive, "period")

    best_days = []
    for day_id, slots in by_day.items():
        if slots == max_consecutive:
            day = cycle.day_by_id(day_id)
            best_days.append(day.name if day and day.name else day_id)

    day_context = ""
    if best_days:
        day_context = (
            f" The best available is {max_consecutive} consecutive lesson "
            f"{period_word} (on {', '.join(best_days)})."
        )
    descriptions = ", ".join(
        f"Meta Lesson {ml['index']} ({ml['length']} periods)" for ml in meta_lessons
    )

    return make_issue(
        check_id=CHECK_ID,
        issue_type=IssueType.ERROR,
        severity=IssueSeverity.CRITICAL,
        title="Insufficient Consecutive Lesson Periods",
        description=f"{block_name} requires {required} consecutive lesson periods",
        details=(
            f"This block contains meta-lessons that require {required} consecutive "
            f"lesson periods, but the cycle structure only has a maximum of "
            f"{max_consecutive} consecutive lesson {period_word} in any single day."
            f"{day_context}\n\n"
            f"Block: {block_name}\n"
            f"Meta-lessons requiring {required} consecutive periods: {len(meta_lessons)}\n"
            f"{descriptions}\n\n"
            f"Maximum consecutive lesson periods available: {max_consecutive}\n"
            f"Shortage: {shortage} {plural(shortage, 'period')}"
        ),
        recommendation=(
            f"Either restructure the cycle to include at least {required} consecutive "
            f"lesson periods in some days (remove breaks/lunch between periods), or "
            f"split the {required}-period meta-lessons into shorter segments."
        ),
        action_label="Go to Cycle",
        action_path=context.route("cycle"),
        metadata={
            "affected_entities": {"block_ids": [block.id]},
            "suggested_fix": (
                f"Add {shortage} more consecutive lesson periods to cycle structure"
            ),
            "block_name": block_name,
            "required_consecutive": required,
            "available_consecutive": max_consecutive,
            "shortage": shortage,
            "affected_meta_lessons": len(meta_lessons),
            "meta_lessons": meta_lessons,
            "best_days": best_days,
            "consecutive_slots_by_day": dict(by_day),
        },
    )
