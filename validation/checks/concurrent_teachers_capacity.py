"""Check: Concurrent Teachers Capacity.

Lessons mapped to the same meta-period run at the same time and need
distinct teachers. For every block this counts, per meta-period and
subject, how many classes run concurrently and compares that to the number
of teachers able to teach the subject. Violations are reported once per
block and subject, listing every offending meta-period.
"""

from collections import defaultdict

from models.issue import Issue, IssueSeverity, IssueType
from validation.context import ValidationContext
from validation.utils import make_issue, plural

CHECK_ID = "concurrent-teachers-capacity"


def check_concurrent_teachers_capacity(context: ValidationContext) -> list[Issue]:
    issues: list[Issue] = []
    vd = context.version_data
    if vd is None or not vd.teachers or not vd.subjects or not vd.blocks:
        return issues

    teachers_per_subject: dict[str, int] = {s.id: 0 for s in vd.subjects}
    for teacher in vd.teachers:
        for subject_id in teacher.subject_allocations:
            if teacher.can_teach(subject_id):
                teachers_per_subject[subject_id] = teachers_per_subject.get(subject_id, 0) + 1

    for block in vd.blocks:
        # meta_period_id -> subject ids of the lessons sharing it
        subjects_by_meta_period: dict[str, list[str]] = defaultdict(list)
        for _, cls in block.iter_classes():
            if not cls.subject:
                continue
            for lesson in cls.lessons:
                if lesson.meta_period_id:
                    subjects_by_meta_period[lesson.meta_period_id].append(cls.subject)

        violations_by_subject: dict[str, list[dict]] = defaultdict(list)
        for meta_period_id, subject_ids in subjects_by_meta_period.items():
            concurrent_per_subject: dict[str, int] = defaultdict(int)
            for subject_id in subject_ids:
                concurrent_per_subject[subject_id] += 1

            for subject_id, concurrent in concurrent_per_subject.items():
                available = teachers_per_subject.get(subject_id, 0)
                if concurrent <= available:
                    continue
                location = block.locate_meta_period(meta_period_id)
                ml_number, mp_number = (
                    (str(location[0]), str(location[1])) if location else ("unknown", "unknown")
                )
                violations_by_subject[subject_id].append({
                    "meta_period_id": meta_period_id,
                    "meta_lesson": ml_number,
                    "meta_period": mp_number,
                    "concurrent": concurrent,
                    "available": available,
                    "shortage": concurrent - available,
                })

        for subject_id, violations in violations_by_subject.items():
            issues.append(_build_issue(context, block, subject_id, violations,
                                       teachers_per_subject.get(subject_id, 0)))

    return issues


def _build_issue(context, block, subject_id: str, violations: list[dict],
                 available_teachers: int) -> Issue:
    vd = context.version_data
    subject_name = vd.subject_name(subject_id)
    block_name = block.display_name
    max_shortage = max(v["shortage"] for v in violations)
    teacher_word = plural(max_shortage, "teacher")

    lines = []
    for v in violations:
        if v["meta_period"] != "unknown":
            where = f"Meta Lesson {v['meta_lesson']}, Period {v['meta_period']}"
        else:
            where = "Unknown meta period"
        lines.append(
            f"  • {where}: {v['concurrent']} concurrent classes, "
            f"{v['available']} teachers available (shortage: {v['shortage']})"
        )

    return make_issue(
        check_id=CHECK_ID,
        issue_type=IssueType.WARNING,
        severity=IssueSeverity.MEDIUM,
        title="Insufficient Teachers for Concurrent Classes",
        description=f"{subject_name} in {block_name}",
        details=(
            f"The block structure requires more {subject_name} teachers than are "
            f"available to teach concurrent classes.\n\n"
            f"Available {subject_name} teachers: {available_teachers}\n"
            f"Meta periods with violations: {len(violations)}\n\n"
            f"Violations:\n" + "\n".join(lines)
        ),
        recommendation=(
            f"Either add at least {max_shortage} more {subject_name} {teacher_word}, "
            f"or restructure the block to reduce the number of concurrent "
            f"{subject_name} classes."
        ),
        action_label="Go to Teachers",
        action_path=context.route("teachers"),
        metadata={
            "affected_entities": {
                "block_ids": [block.id],
                "subject_ids": [subject_id],
            },
            "suggested_fix": (
                f"Add at least {max_shortage} more {subject_name} {teacher_word} "
                f"or restructure the block"
            ),
            "block_name": block_name,
            "total_violations": len(violations),
            "max_shortage": max_shortage,
            "violations": violations,
        },
    )
