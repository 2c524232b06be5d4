"""VersionData: the complete version document plus read-only accessors (Pydantic v2)."""

import json
from pathlib import Path
from typing import Any, Iterator, Optional

from pydantic import Field, ValidationError

from models.base import DocumentModel
from models.block import Block, Lesson, SchoolClass, TeachingGroup
from models.cycle import Cycle, Period
from models.groups import Band, Department, FormGroup, YearGroup
from models.subject import Subject
from models.teacher import Teacher


class DocumentMetadata(DocumentModel):
    org_id: str = ""
    org_title: str = ""
    project_id: str = ""
    project_title: str = ""
    version_id: str = ""
    version_number: int = 0


class SchoolData(DocumentModel):
    """The ``data`` section: reference data authored on the data pages."""

    departments: list[Department] = []
    subjects: list[Subject] = []
    year_groups: list[YearGroup] = []
    bands: list[Band] = []
    form_groups: list[FormGroup] = []
    teachers: list[Teacher] = []


class CurriculumModel(DocumentModel):
    """The ``model`` section: curriculum blocks."""

    blocks: list[Block] = []


class VersionData(DocumentModel):
    """One version of a project's timetabling document.

    ``cycle`` stays ``None`` when the document has none, every other
    collection defaults to empty. Nothing here mutates the document.
    """

    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    cycle: Optional[Cycle] = None
    data: SchoolData = Field(default_factory=SchoolData)
    model: CurriculumModel = Field(default_factory=CurriculumModel)
    staffing: dict[str, Any] = {}
    timetable: dict[str, Any] = {}
    settings: dict[str, Any] = {}

    # ─── Shortcuts ───

    @property
    def blocks(self) -> list[Block]:
        return self.model.blocks

    @property
    def teachers(self) -> list[Teacher]:
        return self.data.teachers

    @property
    def subjects(self) -> list[Subject]:
        return self.data.subjects

    @property
    def form_groups(self) -> list[FormGroup]:
        return self.data.form_groups

    # ─── Lookups ───

    def subject_by_id(self, subject_id: str) -> Optional[Subject]:
        return next((s for s in self.data.subjects if s.id == subject_id), None)

    def subject_name(self, subject_id: str, default: str = "Unknown Subject") -> str:
        subject = self.subject_by_id(subject_id)
        return subject.display_name if subject else default

    def teacher_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.data.teachers if t.id == teacher_id), None)

    def form_group_by_id(self, form_group_id: str) -> Optional[FormGroup]:
        return next((f for f in self.data.form_groups if f.id == form_group_id), None)

    def block_by_id(self, block_id: str) -> Optional[Block]:
        return next((b for b in self.model.blocks if b.id == block_id), None)

    # ─── Traversal ───

    def iter_classes(self) -> Iterator[tuple[Block, TeachingGroup, SchoolClass]]:
        """All classes of all teaching groups of all blocks."""
        for block in self.model.blocks:
            for tg, cls in block.iter_classes():
                yield block, tg, cls

    def iter_lessons(self) -> Iterator[tuple[Block, SchoolClass, Lesson]]:
        for block, _, cls in self.iter_classes():
            for lesson in cls.lessons:
                yield block, cls, lesson

    def blocks_for_form_group(self, form_group_id: str) -> list[Block]:
        return [b for b in self.model.blocks if form_group_id in b.feeder_form_groups]

    # ─── Cycle ───

    def lesson_periods(self) -> list[Period]:
        return self.cycle.lesson_periods if self.cycle else []

    def days_in_cycle(self) -> int:
        """Single day-count accessor shared by all day-based checks."""
        return self.cycle.day_count if self.cycle else 0

    def summary(self) -> str:
        """Short overview of the document."""
        lessons = sum(1 for _ in self.iter_lessons())
        lines = [
            f"Project: {self.metadata.project_title or self.metadata.project_id or '-'}"
            f" (version {self.metadata.version_number})",
            f"Cycle: {self.days_in_cycle()} days, "
            f"{len(self.lesson_periods())} lesson periods" if self.cycle else "Cycle: none",
            f"Subjects: {len(self.data.subjects)}",
            f"Teachers: {len(self.data.teachers)}",
            f"Form groups: {len(self.data.form_groups)}",
            f"Blocks: {len(self.model.blocks)} ({lessons} lessons)",
        ]
        return "\n".join(lines)

    # ─── Persistence ───────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Writes the document as indented JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2, exclude_none=True))

    @classmethod
    def load_json(cls, path: Path) -> "VersionData":
        """Loads a document from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Version document not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
        try:
            return cls.model_validate(json.loads(raw))
        except (ValidationError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid version document: {path}\n{e}") from e
