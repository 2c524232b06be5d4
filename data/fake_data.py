"""Test-data generator: a complete, realistic version document.

Builds a two-week cycle, reference data and a curriculum of blocks whose
periods add up to the cycle for every form group. One bottleneck is built
in on purpose so a validation run has something to report:

  Computing: a single part-time teacher, allocated fewer lessons than the
  option blocks ask for (teaching-hours shortfall).

Everything is drawn from ``random.Random(seed)``: the same seed gives the
same document, ids included.
"""

import random
from collections import defaultdict
from typing import Optional

from data.block_builder import BlockDraft, ClassDraft, TeachingGroupDraft, build_block
from models.block import Block
from models.cycle import Cycle, Day, Period, PeriodType, Week
from models.groups import Band, Department, FormGroup, YearGroup
from models.subject import Subject
from models.teacher import Teacher
from models.version_data import CurriculumModel, DocumentMetadata, SchoolData, VersionData

# ─── Name lists ───────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Alice", "Ben", "Charlotte", "Daniel", "Emma", "Farah", "George", "Hannah",
    "Imran", "Jack", "Katie", "Liam", "Megan", "Nathan", "Olivia", "Priya",
    "Rachel", "Sam", "Tom", "Uma", "Victoria", "William", "Yasmin", "Zach",
]

_LAST_NAMES = [
    "Smith", "Jones", "Taylor", "Brown", "Williams", "Wilson", "Johnson",
    "Davies", "Patel", "Robinson", "Wright", "Thompson", "Evans", "Walker",
    "White", "Roberts", "Green", "Hall", "Khan", "Clarke", "Lewis", "Hughes",
]

# ─── Reference data ───────────────────────────────────────────────────────────

# id, name, abbreviation, colour, department id
_SUBJECTS = [
    ("sub-eng", "English", "En", "#e6194b", "dep-eng"),
    ("sub-mat", "Maths", "Ma", "#3cb44b", "dep-mat"),
    ("sub-sci", "Science", "Sc", "#4363d8", "dep-sci"),
    ("sub-his", "History", "Hi", "#f58231", "dep-hum"),
    ("sub-geo", "Geography", "Gg", "#911eb4", "dep-hum"),
    ("sub-fre", "French", "Fr", "#46f0f0", "dep-mfl"),
    ("sub-spa", "Spanish", "Sp", "#f032e6", "dep-mfl"),
    ("sub-art", "Art", "Ar", "#bcf60c", "dep-art"),
    ("sub-mus", "Music", "Mu", "#fabebe", "dep-art"),
    ("sub-com", "Computing", "Cp", "#008080", "dep-sci"),
    ("sub-pe", "PE", "PE", "#9a6324", "dep-pe"),
]

_DEPARTMENTS = [
    ("dep-eng", "English"),
    ("dep-mat", "Mathematics"),
    ("dep-sci", "Science & Computing"),
    ("dep-hum", "Humanities"),
    ("dep-mfl", "Modern Languages"),
    ("dep-art", "Creative Arts"),
    ("dep-pe", "Physical Education"),
]

_WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

# Daily layout: (type, label). Two morning pairs, one afternoon lesson.
_DAY_LAYOUT = [
    (PeriodType.REGISTRATION, "reg"),
    (PeriodType.LESSON, "p1"),
    (PeriodType.LESSON, "p2"),
    (PeriodType.BREAK, "break"),
    (PeriodType.LESSON, "p3"),
    (PeriodType.LESSON, "p4"),
    (PeriodType.LUNCH, "lunch"),
    (PeriodType.LESSON, "p5"),
]

# Block templates per band: title, periods, breakdown, teaching groups.
# A teaching group is a list of (subject id, periods, breakdown); None means
# "one teaching group per form group of the band", all with the same classes.
_BLOCK_TEMPLATES = [
    ("Core", 20, "DDDDSSSSSSSSSSSS", None,
     [("sub-eng", 7, "DDSSS"), ("sub-mat", 7, "DDSSS"), ("sub-sci", 6, "SSSSSS")]),
    ("Humanities", 12, "DDSSSSSSSS", None,
     [("sub-his", 6, "DSSSS"), ("sub-geo", 6, "DSSSS")]),
    ("Languages", 8, "DSSSSSS",
     [[("sub-fre", 8, "DSSSSSS")], [("sub-spa", 8, "DSSSSSS")]], None),
    ("Options", 6, "DDSS",
     [[("sub-art", 6, "DDSS")], [("sub-mus", 6, "DDSS")], [("sub-com", 6, "DDSS")]], None),
    ("PE", 4, "DD", None, [("sub-pe", 4, "DD")]),
]

FULL_TIME_LOAD = 22
PART_TIME_LOAD = 12
PART_TIME_DAILY_CAP = 3
FULL_TIME_DAILY_CAP = 5

_BOTTLENECK_SUBJECT = "sub-com"


class FakeVersionDataGenerator:
    """Generates a complete version document for demos and tests."""

    def __init__(
        self,
        seed: Optional[int] = None,
        year_groups: int = 3,
        bands_per_year: int = 2,
        forms_per_band: int = 2,
        weeks: int = 2,
    ) -> None:
        self.seed = seed
        self.rng = random.Random(seed)
        self.num_year_groups = year_groups
        self.bands_per_year = bands_per_year
        self.forms_per_band = forms_per_band
        self.num_weeks = weeks

    # ─── Cycle ────────────────────────────────────────────────────────────────

    def _generate_cycle(self) -> Cycle:
        weeks: list[Week] = []
        days: list[Day] = []
        periods: list[Period] = []
        for w in range(1, self.num_weeks + 1):
            week_id = f"wk{w}"
            weeks.append(Week(id=week_id, name=f"Week {w}", order=w))
            for d, weekday in enumerate(_WEEKDAYS, start=1):
                day_id = f"{week_id}-d{d}"
                days.append(Day(id=day_id, name=f"{weekday} {w}", week_id=week_id,
                                order=(w - 1) * len(_WEEKDAYS) + d))
                for column, (period_type, label) in enumerate(_DAY_LAYOUT):
                    periods.append(Period(id=f"{day_id}-{label}", day_id=day_id,
                                          type=period_type, column=column))
        return Cycle(weeks=weeks, days=days, periods=periods)

    # ─── Reference data ───────────────────────────────────────────────────────

    def _generate_subjects(self) -> list[Subject]:
        return [
            Subject(id=sid, name=name, abbreviation=abbr, color=color, department_id=dep)
            for sid, name, abbr, color, dep in _SUBJECTS
        ]

    def _generate_departments(self) -> list[Department]:
        return [Department(id=did, name=name) for did, name in _DEPARTMENTS]

    def _generate_groups(self) -> tuple[list[YearGroup], list[Band], list[FormGroup]]:
        year_groups: list[YearGroup] = []
        bands: list[Band] = []
        form_groups: list[FormGroup] = []
        for y in range(self.num_year_groups):
            year = 7 + y
            yg_id = f"yg{year}"
            year_groups.append(YearGroup(id=yg_id, name=f"Year {year}"))
            for b in range(self.bands_per_year):
                letter = "XYZW"[b % 4]
                band_id = f"{yg_id}-{letter.lower()}"
                bands.append(Band(id=band_id, name=f"{year}{letter}", year_group_id=yg_id))
                for f in range(1, self.forms_per_band + 1):
                    form_groups.append(FormGroup(
                        id=f"{band_id}{f}", name=f"{year}{letter}{f}", band_id=band_id,
                    ))
        return year_groups, bands, form_groups

    # ─── Curriculum ───────────────────────────────────────────────────────────

    def _generate_blocks(self, bands: list[Band], form_groups: list[FormGroup],
                         subject_names: dict[str, str]) -> list[Block]:
        blocks: list[Block] = []
        for band in bands:
            feeders = [fg.id for fg in form_groups if fg.band_id == band.id]
            year = int(band.year_group_id.removeprefix("yg"))
            for title, periods, breakdown, groups, per_form in _BLOCK_TEMPLATES:
                if groups is None:
                    groups = [per_form] * len(feeders)
                teaching_groups = []
                for number, classes in enumerate(groups, start=1):
                    teaching_groups.append(TeachingGroupDraft(
                        number=number,
                        classes=[
                            ClassDraft(
                                title=f"{band.name} {subject_names[sid]} {number}",
                                subject_id=sid,
                                num_periods=n,
                                period_breakdown=bd,
                            )
                            for sid, n, bd in classes
                        ],
                    ))
                draft = BlockDraft(
                    title=f"{band.name} {title}",
                    year_group=year,
                    teaching_periods=periods,
                    period_breakdown=breakdown,
                    feeder_form_groups=feeders,
                    teaching_groups=teaching_groups,
                )
                blocks.append(build_block(draft, rng=self.rng))
        return blocks

    # ─── Staff ────────────────────────────────────────────────────────────────

    def _make_teacher(self, number: int, allocations: dict[str, int],
                      part_time: bool) -> Teacher:
        first = self.rng.choice(_FIRST_NAMES)
        last = self.rng.choice(_LAST_NAMES)
        return Teacher(
            id=f"t-{number:03d}",
            name=f"{first} {last}",
            subject_allocations=allocations,
            max_periods_per_day=PART_TIME_DAILY_CAP if part_time else FULL_TIME_DAILY_CAP,
        )

    def _generate_teachers(self, blocks: list[Block]) -> list[Teacher]:
        """Enough allocation per subject to cover its lessons, bottleneck aside."""
        demand: dict[str, int] = defaultdict(int)
        for block in blocks:
            for _, cls in block.iter_classes():
                demand[cls.subject] += len(cls.lessons)

        teachers: list[Teacher] = []
        for sid, *_ in _SUBJECTS:
            remaining = demand.get(sid, 0)
            if sid == _BOTTLENECK_SUBJECT:
                # Half of what the option blocks need.
                teachers.append(self._make_teacher(
                    len(teachers) + 1, {sid: remaining // 2}, part_time=True))
                continue
            while remaining > 0:
                part_time = self.rng.random() < 0.2
                load = PART_TIME_LOAD if part_time else FULL_TIME_LOAD
                allocation = min(remaining, load)
                remaining -= allocation
                teachers.append(self._make_teacher(len(teachers) + 1, {sid: allocation}, part_time))

        # Some full-timers pick up a little of a second subject.
        for teacher in teachers:
            if teacher.max_periods_per_day == FULL_TIME_DAILY_CAP and self.rng.random() < 0.25:
                second = self.rng.choice([s[0] for s in _SUBJECTS if s[0] != _BOTTLENECK_SUBJECT])
                teacher.subject_allocations.setdefault(second, 2)
        return teachers

    # ─── Full document ────────────────────────────────────────────────────────

    def generate(self) -> VersionData:
        """Builds the complete document."""
        subjects = self._generate_subjects()
        subject_names = {s.id: s.name for s in subjects}
        year_groups, bands, form_groups = self._generate_groups()
        blocks = self._generate_blocks(bands, form_groups, subject_names)
        teachers = self._generate_teachers(blocks)
        return VersionData(
            metadata=DocumentMetadata(
                org_id="org-demo",
                org_title="Demo Academy",
                project_id="proj-demo",
                project_title="Demo timetable",
                version_id=f"ver-{self.seed if self.seed is not None else 'random'}",
                version_number=1,
            ),
            cycle=self._generate_cycle(),
            data=SchoolData(
                departments=self._generate_departments(),
                subjects=subjects,
                year_groups=year_groups,
                bands=bands,
                form_groups=form_groups,
                teachers=teachers,
            ),
            model=CurriculumModel(blocks=blocks),
        )

    # ─── Output ───────────────────────────────────────────────────────────────

    def print_summary(self, data: VersionData) -> None:
        """Prints a rich table summarising the generated document."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Generated test data", box=box.ROUNDED)
        table.add_column("Category", style="bold cyan")
        table.add_column("Count", justify="right")
        table.add_column("Details")

        part_time = sum(1 for t in data.teachers if t.max_periods_per_day == PART_TIME_DAILY_CAP)
        lessons = sum(1 for _ in data.iter_lessons())
        table.add_row("Days", str(data.days_in_cycle()),
                      f"{len(data.lesson_periods())} lesson periods")
        table.add_row("Subjects", str(len(data.subjects)), "")
        table.add_row("Form groups", str(len(data.form_groups)),
                      f"{len(data.data.year_groups)} year groups, {len(data.data.bands)} bands")
        table.add_row("Teachers", str(len(data.teachers)),
                      f"{part_time} part-time, {len(data.teachers) - part_time} full-time")
        table.add_row("Blocks", str(len(data.blocks)), f"{lessons} lessons")

        console.print(table)
