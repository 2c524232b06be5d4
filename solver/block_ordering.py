"""Block ordering: greedy assignment of lessons to meta-period slots.

Within a block, every lesson of every class must be mapped onto one of the
block's meta-periods. Lessons of the same teaching group may not share a
meta-period (the students cannot be in two places), and a double lesson
takes both periods of a double meta-lesson. Among the placements that
respect this, the optimizer keeps the peak number of concurrent lessons of
any one subject as low as possible, since that peak is the number of
teachers of that subject the block needs at once.

The algorithm is sequential: each placement depends on the counts left by
the previous ones.
"""

import logging
import random
from collections import defaultdict
from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Large enough that "lower peak" always beats "lower local count"
DEFAULT_SCORE_MULTIPLIER = 10_000


# ─── Input / output models ────────────────────────────────────────────────────

class LessonInput(BaseModel):
    """A lesson waiting for a meta-period."""

    id: str
    class_id: str = ""
    class_name: str = ""
    subject_id: str
    tg_number: int          # teaching group number
    lesson_number: int = 1
    length: int = 1         # 1 = single, 2 = double


class MetaPeriodRef(BaseModel):
    id: str
    number: int = 1


class MetaLessonInput(BaseModel):
    id: str
    number: int = 1
    length: int = 1
    periods: list[MetaPeriodRef]


class PlacementStatus(str, Enum):
    CLEAN = "clean"             # placed without a teaching-group clash
    CONFLICT = "conflict"       # best-effort fallback, clashes with its teaching group
    UNASSIGNED = "unassigned"   # no compatible meta-period at all


class Placement(BaseModel):
    lesson_id: str
    meta_period_id: Optional[str] = None
    status: PlacementStatus


class OrderingResult(BaseModel):
    """Mapping lesson id -> meta-period id (partial) plus per-lesson outcome."""

    mappings: dict[str, str]
    placements: list[Placement]

    @property
    def unassigned(self) -> list[str]:
        return [p.lesson_id for p in self.placements if p.status == PlacementStatus.UNASSIGNED]

    @property
    def conflicts(self) -> list[str]:
        return [p.lesson_id for p in self.placements if p.status == PlacementStatus.CONFLICT]

    @property
    def is_clean(self) -> bool:
        return all(p.status == PlacementStatus.CLEAN for p in self.placements)


# ─── Optimizer ────────────────────────────────────────────────────────────────

class BlockOrderingOptimizer:
    """Greedy subject-spreading optimizer for one block.

    ``rng`` drives the initial shuffle and the tie-break; pass a seeded
    ``random.Random`` for reproducible results.
    """

    def __init__(
        self,
        meta_lessons: Sequence[MetaLessonInput],
        rng: Optional[random.Random] = None,
        score_multiplier: int = DEFAULT_SCORE_MULTIPLIER,
    ) -> None:
        self.meta_lessons = list(meta_lessons)
        self.rng = rng or random.Random()
        self.score_multiplier = score_multiplier

        # period id -> subject id -> count, period id -> occupying teaching groups
        self._subject_counts: dict[str, dict[str, int]] = {}
        self._tg_occupancy: dict[str, set[int]] = {}
        self._period_to_meta: dict[str, MetaLessonInput] = {}
        for ml in self.meta_lessons:
            for p in ml.periods:
                self._subject_counts[p.id] = defaultdict(int)
                self._tg_occupancy[p.id] = set()
                self._period_to_meta[p.id] = ml

    # ─── Public API ───

    def optimize(self, lessons: Sequence[LessonInput]) -> OrderingResult:
        mappings: dict[str, str] = {}
        placements: list[Placement] = []

        for lesson in self._order_lessons(lessons):
            placement = self._place(lesson)
            placements.append(placement)
            if placement.meta_period_id is not None:
                mappings[lesson.id] = placement.meta_period_id

        conflicts = sum(1 for p in placements if p.status == PlacementStatus.CONFLICT)
        if conflicts:
            logger.info(f"Block ordering: {conflicts} lesson(s) placed with a teaching-group conflict")
        return OrderingResult(mappings=mappings, placements=placements)

    # ─── Steps ───

    def _order_lessons(self, lessons: Sequence[LessonInput]) -> list[LessonInput]:
        """Most frequent subjects first, doubles before singles, random among equals."""
        frequency: dict[str, int] = defaultdict(int)
        for lesson in lessons:
            frequency[lesson.subject_id] += 1

        ordered = list(lessons)
        self.rng.shuffle(ordered)
        ordered.sort(key=lambda lesson: (-frequency[lesson.subject_id], -lesson.length))
        return ordered

    def _slot_periods(self, period_id: str, length: int) -> list[str]:
        """Periods a lesson occupies when placed at ``period_id``."""
        if length == 2:
            return [p.id for p in self._period_to_meta[period_id].periods]
        return [period_id]

    def _compatible(self, lesson: LessonInput) -> list[str]:
        compatible: list[str] = []
        for ml in self.meta_lessons:
            if lesson.length == 1:
                compatible.extend(p.id for p in ml.periods)
            elif lesson.length == 2 and ml.length == 2 and ml.periods:
                compatible.append(ml.periods[0].id)
        return compatible

    def _is_free(self, period_id: str, lesson: LessonInput) -> bool:
        return all(
            lesson.tg_number not in self._tg_occupancy[pid]
            for pid in self._slot_periods(period_id, lesson.length)
        )

    def _score(self, period_id: str, lesson: LessonInput) -> int:
        """``peak_after * multiplier + local_count``: lower is better."""
        subject = lesson.subject_id
        impacted = set(self._slot_periods(period_id, lesson.length))
        peak_after = 0
        for pid, counts in self._subject_counts.items():
            value = counts.get(subject, 0) + (1 if pid in impacted else 0)
            peak_after = max(peak_after, value)
        local = sum(self._subject_counts[pid].get(subject, 0) for pid in impacted)
        return peak_after * self.score_multiplier + local

    def _place(self, lesson: LessonInput) -> Placement:
        compatible = self._compatible(lesson)
        available = [pid for pid in compatible if self._is_free(pid, lesson)]
        status = PlacementStatus.CLEAN

        if not available:
            # Best effort: accept a teaching-group clash rather than leave it unplaced.
            available = compatible
            status = PlacementStatus.CONFLICT
            if not available:
                logger.warning(f"No compatible meta period found for lesson {lesson.id}")
                return Placement(lesson_id=lesson.id, status=PlacementStatus.UNASSIGNED)

        best_score: Optional[int] = None
        candidates: list[str] = []
        for pid in available:
            score = self._score(pid, lesson)
            if best_score is None or score < best_score:
                best_score = score
                candidates = [pid]
            elif score == best_score:
                candidates.append(pid)

        selected = self.rng.choice(candidates)
        for pid in self._slot_periods(selected, lesson.length):
            self._subject_counts[pid][lesson.subject_id] += 1
            self._tg_occupancy[pid].add(lesson.tg_number)

        return Placement(lesson_id=lesson.id, meta_period_id=selected, status=status)


def optimize_block_ordering(
    lessons: Sequence[LessonInput],
    meta_lessons: Sequence[MetaLessonInput],
    rng: Optional[random.Random] = None,
    score_multiplier: int = DEFAULT_SCORE_MULTIPLIER,
) -> OrderingResult:
    """Runs the optimizer and returns mappings plus placement details."""
    optimizer = BlockOrderingOptimizer(meta_lessons, rng=rng, score_multiplier=score_multiplier)
    return optimizer.optimize(lessons)


def optimize_lesson_assignments(
    lessons: Sequence[LessonInput],
    meta_lessons: Sequence[MetaLessonInput],
    rng: Optional[random.Random] = None,
    score_multiplier: int = DEFAULT_SCORE_MULTIPLIER,
) -> dict[str, str]:
    """Lesson id -> meta-period id. Missing keys mean "unassigned"."""
    return optimize_block_ordering(lessons, meta_lessons, rng, score_multiplier).mappings
