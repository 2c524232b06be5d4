"""Shared helpers for the report exporters."""

from datetime import date

from models.issue import Issue, IssueSeverity, IssueType

# ─── Colour palette (RRGGBB, no #) ────────────────────────────────────────────

COLORS: dict[str, str] = {
    "critical": "FF9999",
    "high":     "FFCCCC",
    "medium":   "FFF2B3",
    "low":      "E0E0E0",
    "ok":       "CCFFCC",
    "skipped":  "F5F5F5",
    "header":   "4472C4",
}

_TYPE_LABELS = {
    IssueType.ERROR: "Error",
    IssueType.WARNING: "Warning",
    IssueType.INFO: "Info",
}


def today_str() -> str:
    """Today's date as YYYY-MM-DD."""
    return date.today().isoformat()


def severity_color(severity: IssueSeverity) -> str:
    return COLORS.get(severity.value, COLORS["low"])


def type_label(issue_type: IssueType) -> str:
    return _TYPE_LABELS.get(issue_type, issue_type.value)


def affected_entities(issue: Issue) -> str:
    """``metadata.affected_entities`` flattened to ``kind: id, id; kind: id``."""
    entities = issue.metadata.get("affected_entities") or {}
    parts = []
    for kind, ids in entities.items():
        if ids:
            parts.append(f"{kind}: {', '.join(str(i) for i in ids)}")
    return "; ".join(parts)
