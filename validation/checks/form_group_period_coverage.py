"""Check: Form Group Period Coverage.

Every form group should be fed into blocks whose periods add up to exactly
the number of Lesson periods in the cycle. All mismatching form groups are
reported together in one issue.
"""

from models.issue import Issue, IssueSeverity, IssueType
from validation.context import ValidationContext
from validation.utils import make_issue

CHECK_ID = "form-group-period-coverage"


def check_form_group_period_coverage(context: ValidationContext) -> list[Issue]:
    issues: list[Issue] = []
    vd = context.version_data
    if vd is None or not vd.form_groups or not vd.blocks or vd.cycle is None:
        return issues

    total_lesson_periods = len(vd.lesson_periods())
    if total_lesson_periods == 0:
        return issues

    violations: list[dict] = []
    for form_group in vd.form_groups:
        fed_blocks = [
            {
                "block_id": block.id,
                "block_title": block.display_name,
                "periods": block.total_periods,
            }
            for block in vd.blocks_for_form_group(form_group.id)
        ]
        allocated = sum(b["periods"] for b in fed_blocks)
        if allocated != total_lesson_periods:
            violations.append({
                "form_group_id": form_group.id,
                "form_group_name": form_group.display_name,
                "allocated": allocated,
                "expected": total_lesson_periods,
                "difference": allocated - total_lesson_periods,
                "blocks": fed_blocks,
            })

    if not violations:
        return issues

    lines = []
    for v in violations:
        if v["difference"] > 0:
            status = f"{v['difference']} periods over"
        else:
            status = f"{-v['difference']} periods short"
        lines.append(
            f"  • {v['form_group_name']}: {v['allocated']}/{v['expected']} periods ({status})"
        )

    count = len(violations)
    verb = "group doesn't have" if count == 1 else "groups don't have"
    issues.append(make_issue(
        check_id=CHECK_ID,
        issue_type=IssueType.WARNING,
        severity=IssueSeverity.MEDIUM,
        title="Form Group Period Mismatch",
        description=f"{count} form {verb} enough periods in the Model",
        details=(
            f"Some form groups have block periods that don't add up to the total "
            f"number of lesson periods in the cycle.\n\n"
            f"Total lesson periods in cycle: {total_lesson_periods}\n"
            f"Form groups with mismatches: {count}/{len(vd.form_groups)}\n\n"
            + "\n".join(lines)
        ),
        recommendation=(
            f"Review each form group's block allocations to ensure they total "
            f"{total_lesson_periods} periods. Either adjust block lengths or "
            f"add/remove blocks to match the cycle structure."
        ),
        action_label="Go to Model",
        action_path=context.route("model"),
        metadata={
            "affected_entities": {
                "form_group_ids": [v["form_group_id"] for v in violations],
            },
            "suggested_fix": (
                f"Adjust block allocations to match {total_lesson_periods} "
                f"lesson periods per form group"
            ),
            "total_lesson_periods": total_lesson_periods,
            "violation_count": count,
            "violations": violations,
        },
    ))
    return issues
