"""Validation engine: prerequisite gating plus fan-out over the registry.

Checks whose prerequisites are not met are skipped (and reported as such);
the rest run independently. A check that raises is logged and contributes
no issues; it never stops the other checks.
"""

import asyncio
import logging
from typing import Optional, Sequence

from models.issue import Issue, ValidationResult
from models.version_data import VersionData
from validation.context import CheckDefinition, CheckPrerequisites, ValidationContext
from validation.registry import get_active_checks
from validation.utils import now_ms

logger = logging.getLogger(__name__)

# Prerequisite flag -> collection that must be non-empty
_COLLECTION_REQUIREMENTS = (
    ("requires_blocks", lambda vd: vd.model.blocks),
    ("requires_teachers", lambda vd: vd.data.teachers),
    ("requires_subjects", lambda vd: vd.data.subjects),
    ("requires_year_groups", lambda vd: vd.data.year_groups),
    ("requires_bands", lambda vd: vd.data.bands),
    ("requires_form_groups", lambda vd: vd.data.form_groups),
    ("requires_departments", lambda vd: vd.data.departments),
)


def prerequisites_met(prerequisites: CheckPrerequisites, context: ValidationContext) -> bool:
    """True when every declared prerequisite holds for the context."""
    vd: Optional[VersionData] = context.version_data
    if vd is None:
        return False

    for flag, collection in _COLLECTION_REQUIREMENTS:
        if getattr(prerequisites, flag) and not collection(vd):
            return False

    if prerequisites.requires_cycle and vd.cycle is None:
        return False

    if prerequisites.custom_validator is not None:
        try:
            return bool(prerequisites.custom_validator(context))
        except Exception:
            logger.exception("Error in custom prerequisite; check skipped")
            return False

    return True


def run_check(check: CheckDefinition, context: ValidationContext) -> list[Issue]:
    """Runs one check; failures are logged and yield no issues."""
    try:
        return list(check.check(context))
    except Exception:
        logger.exception(f"Error running check '{check.id}'")
        return []


def _partition(
    checks: Sequence[CheckDefinition], context: ValidationContext
) -> tuple[list[CheckDefinition], list[str]]:
    to_run: list[CheckDefinition] = []
    skipped: list[str] = []
    for check in checks:
        if prerequisites_met(check.prerequisites, context):
            to_run.append(check)
        else:
            skipped.append(check.id)
    if skipped:
        logger.info(f"Skipping {len(skipped)} check(s) with missing data: {', '.join(skipped)}")
    return to_run, skipped


def run_validation_sync(
    context: ValidationContext,
    checks: Optional[Sequence[CheckDefinition]] = None,
) -> ValidationResult:
    """Runs all applicable checks one after the other."""
    if checks is None:
        checks = get_active_checks()
    to_run, skipped = _partition(checks, context)

    issues: list[Issue] = []
    for check in to_run:
        issues.extend(run_check(check, context))

    return ValidationResult(
        issues=issues,
        checks_run=[c.id for c in to_run],
        checks_skipped=skipped,
        timestamp=now_ms(),
    )


async def run_validation(
    context: ValidationContext,
    checks: Optional[Sequence[CheckDefinition]] = None,
) -> ValidationResult:
    """Runs all applicable checks concurrently on worker threads.

    Checks are pure and only read the document, so no locking is needed.
    Issues are aggregated in registry order.
    """
    if checks is None:
        checks = get_active_checks()
    to_run, skipped = _partition(checks, context)

    results = await asyncio.gather(
        *(asyncio.to_thread(run_check, check, context) for check in to_run)
    )

    return ValidationResult(
        issues=[issue for result in results for issue in result],
        checks_run=[c.id for c in to_run],
        checks_skipped=skipped,
        timestamp=now_ms(),
    )


def validate_document(
    version_data: VersionData,
    checks: Optional[Sequence[CheckDefinition]] = None,
    parallel: bool = False,
) -> ValidationResult:
    """Convenience entry point: builds the context and runs the engine."""
    context = ValidationContext.from_document(version_data)
    if parallel:
        return asyncio.run(run_validation(context, checks))
    return run_validation_sync(context, checks)
