"""Data model for a teacher (Pydantic v2)."""

from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from models.base import DocumentModel


class Teacher(DocumentModel):
    """A member of staff and how many periods of each subject they can teach."""

    id: str
    name: str = Field("", validation_alias=AliasChoices("name", "title"))
    subject_allocations: dict[str, int] = {}   # subject_id -> periods per cycle
    max_periods_per_day: Optional[int] = None  # None / 0 = no daily cap

    @field_validator("subject_allocations", mode="before")
    @classmethod
    def _drop_non_numeric(cls, v: Any) -> dict[str, Any]:
        """Blank or non-numeric allocations count as no allocation."""
        if not isinstance(v, dict):
            return {}
        return {
            subject_id: periods for subject_id, periods in v.items()
            if isinstance(periods, int) and not isinstance(periods, bool)
        }

    @field_validator("subject_allocations")
    @classmethod
    def _check_allocations(cls, v: dict[str, int]) -> dict[str, int]:
        for subject_id, periods in v.items():
            if periods < 0:
                raise ValueError(
                    f"Allocation for subject '{subject_id}' must be >= 0 (got {periods})"
                )
        return v

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def has_daily_cap(self) -> bool:
        return bool(self.max_periods_per_day and self.max_periods_per_day > 0)

    def can_teach(self, subject_id: str) -> bool:
        """True when the teacher has a positive allocation for the subject."""
        return self.subject_allocations.get(subject_id, 0) > 0
