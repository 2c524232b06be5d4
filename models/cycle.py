"""Teaching cycle: weeks, days and periods (Pydantic v2)."""

from collections import defaultdict
from enum import Enum
from typing import Any, Optional, Union

from pydantic import field_validator

from models.base import DocumentModel


class PeriodType(str, Enum):
    REGISTRATION = "Registration"
    LESSON = "Lesson"
    BREAK = "Break"
    LUNCH = "Lunch"
    TWILIGHT = "Twilight"


class Week(DocumentModel):
    id: str
    name: str = ""
    order: int = 0


class Day(DocumentModel):
    id: str
    name: str = ""
    week_id: str = ""
    order: int = 0


class Period(DocumentModel):
    """A single slot of a day. Only ``Lesson`` periods carry teaching."""

    id: str
    day_id: str
    type: Union[PeriodType, str] = PeriodType.LESSON   # unknown types kept as text
    column: int = 0          # position within the day, left to right

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, v: Any) -> Any:
        try:
            return PeriodType(v)
        except ValueError:
            return str(v)

    @property
    def is_lesson(self) -> bool:
        return self.type == PeriodType.LESSON


class CycleStructure(DocumentModel):
    """Legacy day layout some documents still carry next to ``days``."""

    days: list[Any] = []


class Cycle(DocumentModel):
    """The school's repeating teaching cycle (e.g. two weeks of five days)."""

    weeks: list[Week] = []
    days: list[Day] = []
    periods: list[Period] = []
    structure: Optional[CycleStructure] = None

    @property
    def lesson_periods(self) -> list[Period]:
        """All periods of type Lesson, in document order."""
        return [p for p in self.periods if p.is_lesson]

    @property
    def day_count(self) -> int:
        """Number of distinct days in the cycle.

        ``days`` is authoritative; the legacy ``structure.days`` list is only
        consulted when a document has no ``days`` at all.
        """
        if self.days:
            return len({d.id for d in self.days})
        if self.structure is not None:
            return len(self.structure.days)
        return 0

    def day_by_id(self, day_id: str) -> Optional[Day]:
        for day in self.days:
            if day.id == day_id:
                return day
        return None

    def periods_by_day(self) -> dict[str, list[Period]]:
        """Periods grouped by ``day_id`` and ordered by ``column``."""
        grouped: dict[str, list[Period]] = defaultdict(list)
        for period in self.periods:
            grouped[period.day_id].append(period)
        return {
            day_id: sorted(periods, key=lambda p: p.column)
            for day_id, periods in grouped.items()
        }

    def max_consecutive_lessons_by_day(self) -> dict[str, int]:
        """Longest run of back-to-back Lesson periods per day.

        Any non-Lesson period (registration, break, lunch, twilight) ends a run.
        """
        result: dict[str, int] = {}
        for day_id, periods in self.periods_by_day().items():
            current = 0
            best = 0
            for period in periods:
                if period.is_lesson:
                    current += 1
                    best = max(best, current)
                else:
                    current = 0
            result[day_id] = best
        return result
