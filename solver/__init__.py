"""Solver module: heuristic block ordering (lessons -> meta-periods)."""

from .block_ordering import (
    BlockOrderingOptimizer,
    LessonInput,
    MetaLessonInput,
    MetaPeriodRef,
    OrderingResult,
    Placement,
    PlacementStatus,
    optimize_block_ordering,
    optimize_lesson_assignments,
)

__all__ = [
    "BlockOrderingOptimizer",
    "LessonInput",
    "MetaLessonInput",
    "MetaPeriodRef",
    "OrderingResult",
    "Placement",
    "PlacementStatus",
    "optimize_block_ordering",
    "optimize_lesson_assignments",
]
