"""Block builder: turns a block draft into a complete curriculum block.

Breakdown strings describe how periods are split into lessons: ``S`` is a
single, ``D`` a double, so a 5-period class taught as ``DDS`` has three
lessons. The block's own breakdown yields its meta-lessons; each class's
breakdown yields its lessons, which are then mapped onto meta-periods
(optimized, or filled in order).

Id scheme:
  meta-lesson  {block_id}-ml{n}
  meta-period  {block_id}-ml{n}-mp{i}
  lesson       {class_id}-l{n}
"""

import random
import string
from collections import defaultdict
from typing import Annotated, Optional, Sequence, Union

from pydantic import AfterValidator, BaseModel, Field, model_validator

from models.block import Block, Lesson, MetaLesson, MetaPeriod, SchoolClass, TeachingGroup
from solver.block_ordering import (
    DEFAULT_SCORE_MULTIPLIER,
    LessonInput,
    MetaLessonInput,
    MetaPeriodRef,
    OrderingResult,
    optimize_block_ordering,
)

SINGLE = "S"
DOUBLE = "D"


def _check_breakdown(v: str) -> str:
    v = v.strip().upper()
    invalid = set(v) - {SINGLE, DOUBLE}
    if invalid:
        raise ValueError(
            f"Period breakdown '{v}' may only contain '{SINGLE}' and '{DOUBLE}'"
        )
    return v


Breakdown = Annotated[str, AfterValidator(_check_breakdown)]


def breakdown_lengths(breakdown: str) -> list[int]:
    """``"DSS"`` -> ``[2, 1, 1]``."""
    return [2 if ch == DOUBLE else 1 for ch in breakdown]


def generate_period_breakdowns(num_periods: int) -> list[str]:
    """All single/double splits of ``num_periods``, doubles first.

    >>> generate_period_breakdowns(4)
    ['SSSS', 'DSS', 'DD']
    """
    if num_periods < 1:
        return []
    options = []
    for doubles in range(num_periods // 2 + 1):
        singles = num_periods - doubles * 2
        options.append(DOUBLE * doubles + SINGLE * singles)
    return options


def generate_id(prefix: str, rng: Optional[random.Random] = None) -> str:
    """``{prefix}-`` plus 8 random base-36 characters."""
    rng = rng or random
    alphabet = string.digits + string.ascii_lowercase
    return f"{prefix}-{''.join(rng.choices(alphabet, k=8))}"


# ─── Drafts (what the block-authoring form collects) ─────────────────────────

class ClassDraft(BaseModel):
    id: Optional[str] = None
    title: str = ""
    subject_id: str
    num_periods: int = Field(ge=0)
    period_breakdown: Breakdown = ""

    @model_validator(mode="after")
    def _check_periods(self):
        if self.period_breakdown and sum(breakdown_lengths(self.period_breakdown)) != self.num_periods:
            raise ValueError(
                f"Breakdown '{self.period_breakdown}' does not add up to "
                f"{self.num_periods} periods"
            )
        return self


class TeachingGroupDraft(BaseModel):
    number: int
    title: str = ""
    classes: list[ClassDraft] = []


class BlockDraft(BaseModel):
    title: str
    year_group: Union[int, str, None] = None
    teaching_periods: int = Field(ge=0)
    period_breakdown: Breakdown
    feeder_form_groups: list[str] = []
    teaching_groups: list[TeachingGroupDraft] = []

    @model_validator(mode="after")
    def _check_periods(self):
        if sum(breakdown_lengths(self.period_breakdown)) != self.teaching_periods:
            raise ValueError(
                f"Block breakdown '{self.period_breakdown}' does not add up to "
                f"{self.teaching_periods} periods"
            )
        return self


# ─── Building blocks ─────────────────────────────────────────────────────────

def build_meta_lessons(block_id: str, breakdown: str) -> list[MetaLesson]:
    meta_lessons = []
    for n, length in enumerate(breakdown_lengths(breakdown), start=1):
        ml_id = f"{block_id}-ml{n}"
        meta_lessons.append(MetaLesson(
            id=ml_id,
            length=length,
            meta_periods=[
                MetaPeriod(id=f"{ml_id}-mp{i}", length=1, start_period_id="")
                for i in range(1, length + 1)
            ],
        ))
    return meta_lessons


def build_lessons(class_id: str, breakdown: str,
                  mappings: Optional[dict[str, str]] = None) -> list[Lesson]:
    mappings = mappings or {}
    lessons = []
    for n, length in enumerate(breakdown_lengths(breakdown), start=1):
        lesson_id = f"{class_id}-l{n}"
        lessons.append(Lesson(
            number=n,
            id=lesson_id,
            length=length,
            meta_period_id=mappings.get(lesson_id, ""),
        ))
    return lessons


def ordering_inputs(block: Block) -> tuple[list[LessonInput], list[MetaLessonInput]]:
    """Optimizer inputs for all lessons and meta-lessons of a block."""
    lessons = [
        LessonInput(
            id=lesson.id,
            class_id=cls.id,
            class_name=cls.display_name,
            subject_id=cls.subject,
            tg_number=tg.number,
            lesson_number=lesson.number,
            length=lesson.length,
        )
        for tg, cls in block.iter_classes()
        for lesson in cls.lessons
    ]
    meta_lessons = [
        MetaLessonInput(
            id=ml.id,
            number=n,
            length=ml.length,
            periods=[MetaPeriodRef(id=mp.id, number=i) for i, mp in enumerate(ml.meta_periods, start=1)],
        )
        for n, ml in enumerate(block.meta_lessons, start=1)
    ]
    return lessons, meta_lessons


def default_lesson_mappings(lessons: Sequence[LessonInput],
                            meta_lessons: Sequence[MetaLessonInput]) -> dict[str, str]:
    """Fills each teaching group's lessons into the meta-periods in order.

    Doubles skip forward to the next double meta-lesson. No subject
    balancing; this is the starting point before optimization.
    """
    mappings: dict[str, str] = {}
    by_tg: dict[int, list[LessonInput]] = defaultdict(list)
    for lesson in lessons:
        by_tg[lesson.tg_number].append(lesson)

    for tg_lessons in by_tg.values():
        ml_index = 0
        period_index = 0
        for lesson in tg_lessons:
            while ml_index < len(meta_lessons):
                ml = meta_lessons[ml_index]
                if lesson.length == 1 and period_index < len(ml.periods):
                    mappings[lesson.id] = ml.periods[period_index].id
                    period_index += 1
                    if period_index >= len(ml.periods):
                        ml_index += 1
                        period_index = 0
                    break
                if lesson.length == 2 and ml.length == 2 and period_index == 0 and ml.periods:
                    mappings[lesson.id] = ml.periods[0].id
                    ml_index += 1
                    break
                ml_index += 1
                period_index = 0
    return mappings


def apply_lesson_mappings(block: Block, mappings: dict[str, str]) -> Block:
    """Copy of ``block`` whose lessons point at the mapped meta-periods.

    Lessons missing from ``mappings`` end up unassigned (empty id).
    """
    updated = block.model_copy(deep=True)
    for _, cls in updated.iter_classes():
        for lesson in cls.lessons:
            lesson.meta_period_id = mappings.get(lesson.id, "")
    return updated


def order_block(
    block: Block,
    rng: Optional[random.Random] = None,
    score_multiplier: int = DEFAULT_SCORE_MULTIPLIER,
) -> tuple[Block, OrderingResult]:
    """Re-runs block ordering on an existing block."""
    lessons, meta_lessons = ordering_inputs(block)
    result = optimize_block_ordering(lessons, meta_lessons, rng=rng,
                                     score_multiplier=score_multiplier)
    return apply_lesson_mappings(block, result.mappings), result


def build_block(
    draft: BlockDraft,
    block_id: Optional[str] = None,
    optimize: bool = True,
    rng: Optional[random.Random] = None,
    score_multiplier: int = DEFAULT_SCORE_MULTIPLIER,
) -> Block:
    """Assembles a complete block from a draft."""
    block_id = block_id or generate_id("block", rng)

    teaching_groups = []
    for tg in draft.teaching_groups:
        classes = []
        for cls in tg.classes:
            class_id = cls.id or generate_id("cls", rng)
            classes.append(SchoolClass(
                id=class_id,
                title=cls.title or tg.title or None,
                subject=cls.subject_id,
                total_periods=cls.num_periods,
                period_breakdown=cls.period_breakdown,
                lessons=build_lessons(class_id, cls.period_breakdown),
            ))
        teaching_groups.append(TeachingGroup(number=tg.number, classes=classes))

    block = Block(
        id=block_id,
        title=draft.title,
        total_periods=draft.teaching_periods,
        period_breakdown=draft.period_breakdown,
        feeder_form_groups=list(draft.feeder_form_groups),
        year_group=draft.year_group,
        meta_lessons=build_meta_lessons(block_id, draft.period_breakdown),
        teaching_groups=teaching_groups,
    )

    if optimize:
        block, _ = order_block(block, rng=rng, score_multiplier=score_multiplier)
    else:
        lessons, meta_lessons = ordering_inputs(block)
        block = apply_lesson_mappings(block, default_lesson_mappings(lessons, meta_lessons))
    return block
