"""Check: Class Spacing Feasibility.

A class gets at most one lesson per day, so a class with more lessons than
the cycle has days can never be spaced out.
"""

from models.issue import Issue, IssueSeverity, IssueType
from validation.context import ValidationContext
from validation.utils import make_issue, plural

CHECK_ID = "class-spacing-feasibility"


def check_class_spacing_feasibility(context: ValidationContext) -> list[Issue]:
    issues: list[Issue] = []
    vd = context.version_data
    if vd is None or not vd.blocks or vd.cycle is None:
        return issues

    days_in_cycle = vd.days_in_cycle()
    if days_in_cycle == 0:
        return issues

    for block, _, cls in vd.iter_classes():
        total_lessons = len(cls.lessons)
        if total_lessons <= days_in_cycle:
            continue

        shortage = total_lessons - days_in_cycle
        day_word = plural(shortage, "day")
        class_name = cls.display_name
        block_name = block.display_name
        subject_name = vd.subject_name(cls.subject)

        issues.append(make_issue(
            check_id=CHECK_ID,
            issue_type=IssueType.ERROR,
            severity=IssueSeverity.CRITICAL,
            title="Impossible Class Spacing",
            description=f"{class_name} in {block_name}",
            details=(
                f"This class has {total_lessons} lessons but the cycle only has "
                f"{days_in_cycle} days. Since classes can have at most one lesson "
                f"per day, it's mathematically impossible to schedule all lessons.\n\n"
                f"Class: {class_name}\n"
                f"Subject: {subject_name}\n"
                f"Lessons required: {total_lessons}\n"
                f"Days available: {days_in_cycle}\n"
                f"Shortage: {shortage} {day_word}"
            ),
            recommendation=(
                f"Either reduce the number of lessons for this class by {shortage} "
                f"or extend the cycle by at least {shortage} {day_word}. "
                f"Alternatively, split this class into multiple smaller classes."
            ),
            action_label="Go to Blocks",
            action_path=context.route("blocks"),
            metadata={
                "affected_entities": {
                    "block_ids": [block.id],
                    "subject_ids": [cls.subject] if cls.subject else [],
                },
                "suggested_fix": (
                    f"Reduce lessons by {shortage} or extend cycle by {shortage} {day_word}"
                ),
                "block_name": block_name,
                "class_name": class_name,
                "total_lessons": total_lessons,
                "days_in_cycle": days_in_cycle,
                "shortage": shortage,
            },
        ))

    return issues
