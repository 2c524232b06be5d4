"""Check: Teaching Hours Availability.

Compares, per subject, the periods teachers are allocated to teach against
the lessons the curriculum model asks for.
"""

from models.issue import Issue, IssueSeverity, IssueType
from validation.context import ValidationContext
from validation.utils import make_issue

CHECK_ID = "teaching-hours-availability"


def check_teaching_hours_availability(context: ValidationContext) -> list[Issue]:
    issues: list[Issue] = []
    vd = context.version_data
    if vd is None or not vd.teachers or not vd.subjects or not vd.blocks:
        return issues

    # available = Σ allocations over all teachers
    available_per_subject: dict[str, int] = {s.id: 0 for s in vd.subjects}
    for teacher in vd.teachers:
        for subject_id, periods in teacher.subject_allocations.items():
            if teacher.can_teach(subject_id):
                available_per_subject[subject_id] = (
                    available_per_subject.get(subject_id, 0) + periods
                )

    # required = number of lessons of every class of that subject
    required_per_subject: dict[str, int] = {s.id: 0 for s in vd.subjects}
    for _, _, cls in vd.iter_classes():
        if not cls.subject:
            continue
        required_per_subject[cls.subject] = (
            required_per_subject.get(cls.subject, 0) + len(cls.lessons)
        )

    for subject in vd.subjects:
        required = required_per_subject.get(subject.id, 0)
        available = available_per_subject.get(subject.id, 0)
        if required <= available:
            continue

        shortfall = required - available
        name = subject.display_name
        issues.append(make_issue(
            check_id=CHECK_ID,
            issue_type=IssueType.WARNING,
            severity=IssueSeverity.MEDIUM,
            title="Insufficient Teaching Hours",
            description=name,
            details=(
                f"There are insufficient teaching hours available to deliver all "
                f"{name} lessons.\n\n"
                f"Required: {required} periods\n"
                f"Available: {available} periods\n"
                f"Shortfall: {shortfall} periods"
            ),
            recommendation=(
                f"Either increase teacher allocations for {name} in the Teachers "
                f"section, or reduce the number of {name} lessons in your "
                f"curriculum model."
            ),
            action_label="Go to Teachers",
            action_path=context.route("teachers"),
            metadata={
                "affected_entities": {"subject_ids": [subject.id]},
                "suggested_fix": (
                    f"Add {shortfall} more teaching periods for {name} "
                    f"by adjusting teacher allocations"
                ),
                "required": required,
                "available": available,
                "shortfall": shortfall,
            },
        ))

    return issues
