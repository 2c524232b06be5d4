"""Small helpers shared by the check modules."""

import random
import string
import time
from typing import Any, Optional

from models.issue import Issue, IssueAction, IssueSeverity, IssueType

ISSUE_ID_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
ISSUE_ID_LENGTH = 8


def generate_short_id(rng: Optional[random.Random] = None) -> str:
    """Random 8-character URL-safe id for an issue."""
    rng = rng or random
    return "".join(rng.choices(ISSUE_ID_ALPHABET, k=ISSUE_ID_LENGTH))


def now_ms() -> int:
    return int(time.time() * 1000)


def plural(count: int, singular: str, plural_form: Optional[str] = None) -> str:
    """``singular`` for exactly one, otherwise the plural form."""
    if count == 1:
        return singular
    return plural_form or f"{singular}s"


def make_issue(
    *,
    check_id: str,
    issue_type: IssueType,
    severity: IssueSeverity,
    title: str,
    description: str,
    details: str,
    recommendation: str,
    metadata: dict[str, Any],
    action_label: Optional[str] = None,
    action_path: Optional[str] = None,
) -> Issue:
    """Creates an Issue with a fresh id and timestamp."""
    action = None
    if action_label and action_path:
        action = IssueAction(label=action_label, path=action_path)
    return Issue(
        id=generate_short_id(),
        type=issue_type,
        severity=severity,
        title=title,
        description=description,
        details=details,
        recommendation=recommendation,
        action=action,
        metadata=metadata,
        check_id=check_id,
        timestamp=now_ms(),
    )
