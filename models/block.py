"""Curriculum model: blocks, meta-lessons, teaching groups, classes, lessons.

A block is taught by a set of feeder form groups. Its meta-lessons describe
the block's slots (single or double); every class in every teaching group
maps each of its lessons onto one meta-period. Lessons sharing a
meta-period run at the same time.
"""

from typing import Optional, Union

from models.base import DocumentModel


class MetaPeriod(DocumentModel):
    id: str
    length: int = 1
    start_period_id: str = ""   # set by the external solver once scheduled


class MetaLesson(DocumentModel):
    id: str
    length: int = 1             # 1 = single, 2 = double
    meta_periods: list[MetaPeriod] = []

    @property
    def is_scheduled(self) -> bool:
        return bool(self.meta_periods) and all(
            mp.start_period_id for mp in self.meta_periods
        )


class Lesson(DocumentModel):
    number: int = 0
    id: str = ""                # "{class_id}-l{number}"
    length: int = 1
    meta_period_id: str = ""    # empty until mapped
    teacher_id: str = ""        # empty until staffed


class SchoolClass(DocumentModel):
    """One class of a teaching group (a subject taught to that group)."""

    id: str = ""
    title: Optional[str] = None
    subject: str = ""
    total_periods: int = 0
    period_breakdown: str = ""
    lessons: list[Lesson] = []

    @property
    def display_name(self) -> str:
        return self.title or self.id


class TeachingGroup(DocumentModel):
    number: int = 0
    classes: list[SchoolClass] = []


class Block(DocumentModel):
    id: str
    title: str = ""
    total_periods: int = 0
    period_breakdown: str = ""          # e.g. "DDS" = two doubles, one single
    feeder_form_groups: list[str] = []
    year_group: Union[int, str, None] = None
    meta_lessons: list[MetaLesson] = []
    teaching_groups: list[TeachingGroup] = []

    @property
    def display_name(self) -> str:
        return self.title or self.id

    def iter_classes(self):
        """Yields ``(teaching_group, school_class)`` pairs in document order."""
        for tg in self.teaching_groups:
            for cls in tg.classes:
                yield tg, cls

    def locate_meta_period(self, meta_period_id: str) -> Optional[tuple[int, int]]:
        """1-based ``(meta_lesson_number, meta_period_number)`` of an id."""
        for ml_index, ml in enumerate(self.meta_lessons):
            for mp_index, mp in enumerate(ml.meta_periods):
                if mp.id == meta_period_id:
                    return ml_index + 1, mp_index + 1
        return None
