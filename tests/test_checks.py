"""Tests for the six feasibility checks."""

from typing import Optional

import pytest

from models.block import Block, Lesson, MetaLesson, MetaPeriod, SchoolClass, TeachingGroup
from models.cycle import Cycle, CycleStructure, Day, Period, PeriodType
from models.groups import FormGroup
from models.issue import IssueSeverity, IssueType
from models.subject import Subject
from models.teacher import Teacher
from models.version_data import CurriculumModel, SchoolData, VersionData
from validation.checks import (
    check_class_spacing_feasibility,
    check_concurrent_teachers_capacity,
    check_consecutive_period_availability,
    check_form_group_period_coverage,
    check_teacher_daily_load_distribution,
    check_teaching_hours_availability,
)
from validation.context import ValidationContext


# ─── Helpers ──────────────────────────────────────────────────────────────────

def make_cycle(days: int = 5, lessons_per_day: int = 2,
               layout: Optional[list[PeriodType]] = None) -> Cycle:
    """``days`` days, each with ``layout`` (default: that many back-to-back lessons)."""
    layout = layout or [PeriodType.LESSON] * lessons_per_day
    day_list = [Day(id=f"d{d}", name=f"Day {d}") for d in range(1, days + 1)]
    periods = [
        Period(id=f"d{d}-p{i}", day_id=f"d{d}", type=t, column=i)
        for d in range(1, days + 1)
        for i, t in enumerate(layout)
    ]
    return Cycle(days=day_list, periods=periods)


def make_lessons(class_id: str, count: int, meta_period_id: str = "",
                 teacher_id: str = "", length: int = 1) -> list[Lesson]:
    return [
        Lesson(number=n, id=f"{class_id}-l{n}", length=length,
               meta_period_id=meta_period_id, teacher_id=teacher_id)
        for n in range(1, count + 1)
    ]


def make_class(class_id: str, subject: str, lessons: list[Lesson]) -> SchoolClass:
    return SchoolClass(id=class_id, title=class_id.upper(), subject=subject,
                       total_periods=sum(lesson.length for lesson in lessons), lessons=lessons)


def make_block(block_id: str, classes_by_tg: list[list[SchoolClass]],
               meta_lessons: Optional[list[MetaLesson]] = None,
               total_periods: int = 0, feeders: Optional[list[str]] = None) -> Block:
    return Block(
        id=block_id,
        title=f"Block {block_id}",
        total_periods=total_periods,
        feeder_form_groups=feeders or [],
        meta_lessons=meta_lessons or [],
        teaching_groups=[
            TeachingGroup(number=n, classes=classes)
            for n, classes in enumerate(classes_by_tg, start=1)
        ],
    )


def make_context(blocks: list[Block], teachers: Optional[list[Teacher]] = None,
                 subjects: Optional[list[Subject]] = None,
                 form_groups: Optional[list[FormGroup]] = None,
                 cycle: Optional[Cycle] = None) -> ValidationContext:
    vd = VersionData(
        cycle=cycle,
        data=SchoolData(
            teachers=teachers or [],
            subjects=subjects or [Subject(id="s1", name="Maths")],
            form_groups=form_groups or [],
        ),
        model=CurriculumModel(blocks=blocks),
    )
    return ValidationContext.from_document(vd, org_id="org", project_id="proj")


# ─── TEACHING HOURS AVAILABILITY ──────────────────────────────────────────────

class TestTeachingHoursAvailability:
    def _context(self, allocation: int):
        classes = [
            make_class("c1", "s1", make_lessons("c1", 2)),
            make_class("c2", "s1", make_lessons("c2", 2)),
            make_class("c3", "s1", make_lessons("c3", 8)),
        ]
        return make_context(
            blocks=[make_block("b1", [[c] for c in classes])],
            teachers=[Teacher(id="t1", name="Ada", subject_allocations={"s1": allocation})],
        )

    def test_shortfall(self):
        issues = check_teaching_hours_availability(self._context(10))
        assert len(issues) == 1
        issue = issues[0]
        assert issue.type == IssueType.WARNING
        assert issue.severity == IssueSeverity.MEDIUM
        assert issue.description == "Maths"
        assert issue.metadata["required"] == 12
        assert issue.metadata["available"] == 10
        assert issue.metadata["shortfall"] == 2
        assert issue.metadata["affected_entities"] == {"subject_ids": ["s1"]}
        assert issue.action.path == "/dashboard/org/proj/teachers"

    def test_enough_hours(self):
        assert check_teaching_hours_availability(self._context(12)) == []

    def test_allocations_summed_across_teachers(self):
        ctx = self._context(0)
        ctx.version_data.data.teachers = [
            Teacher(id="t1", subject_allocations={"s1": 5}),
            Teacher(id="t2", subject_allocations={"s1": 7}),
        ]
        assert check_teaching_hours_availability(ctx) == []

    def test_subject_without_classes_ignored(self):
        ctx = self._context(12)
        ctx.version_data.data.subjects.append(Subject(id="s2", name="Art"))
        assert check_teaching_hours_availability(ctx) == []

    def test_blank_allocation_counts_as_none(self):
        ctx = self._context(0)
        ctx.version_data.data.teachers = [
            Teacher.model_validate({"id": "t1", "subject_allocations": {"s1": ""}}),
            Teacher.model_validate({"id": "t2", "subject_allocations": {"s1": 10}}),
        ]
        issues = check_teaching_hours_availability(ctx)
        assert [i.metadata["available"] for i in issues] == [10]


# ─── CONCURRENT TEACHERS CAPACITY ─────────────────────────────────────────────

class TestConcurrentTeachersCapacity:
    def _meta_lessons(self):
        return [MetaLesson(id="ml1", meta_periods=[MetaPeriod(id="mp1")]),
                MetaLesson(id="ml2", meta_periods=[MetaPeriod(id="mp2")])]

    def test_shortage_of_one(self):
        classes = [
            make_class("c1", "s1", make_lessons("c1", 1, meta_period_id="mp1")),
            make_class("c2", "s1", make_lessons("c2", 1, meta_period_id="mp1")),
        ]
        ctx = make_context(
            blocks=[make_block("b1", [[c] for c in classes], self._meta_lessons())],
            teachers=[Teacher(id="t1", subject_allocations={"s1": 20})],
        )
        issues = check_concurrent_teachers_capacity(ctx)
        assert len(issues) == 1
        meta = issues[0].metadata
        assert meta["affected_entities"] == {"block_ids": ["b1"], "subject_ids": ["s1"]}
        assert meta["total_violations"] == 1
        assert meta["max_shortage"] == 1
        violation = meta["violations"][0]
        assert violation["meta_period_id"] == "mp1"
        assert violation["meta_lesson"] == "1"
        assert violation["meta_period"] == "1"
        assert violation["concurrent"] == 2
        assert violation["available"] == 1
        assert violation["shortage"] == 1
        assert issues[0].description == "Maths in Block b1"

    def test_spread_lessons_ok(self):
        classes = [
            make_class("c1", "s1", make_lessons("c1", 1, meta_period_id="mp1")),
            make_class("c2", "s1", make_lessons("c2", 1, meta_period_id="mp2")),
        ]
        ctx = make_context(
            blocks=[make_block("b1", [[c] for c in classes], self._meta_lessons())],
            teachers=[Teacher(id="t1", subject_allocations={"s1": 20})],
        )
        assert check_concurrent_teachers_capacity(ctx) == []

    def test_zero_allocation_does_not_count(self):
        classes = [make_class("c1", "s1", make_lessons("c1", 1, meta_period_id="mp1"))]
        ctx = make_context(
            blocks=[make_block("b1", [classes], self._meta_lessons())],
            teachers=[Teacher(id="t1", subject_allocations={"s1": 0})],
        )
        issues = check_concurrent_teachers_capacity(ctx)
        assert len(issues) == 1
        assert issues[0].metadata["violations"][0]["available"] == 0

    def test_unknown_meta_period(self):
        classes = [
            make_class("c1", "s1", make_lessons("c1", 1, meta_period_id="ghost")),
            make_class("c2", "s1", make_lessons("c2", 1, meta_period_id="ghost")),
        ]
        ctx = make_context(
            blocks=[make_block("b1", [[c] for c in classes])],
            teachers=[Teacher(id="t1", subject_allocations={"s1": 5})],
        )
        issues = check_concurrent_teachers_capacity(ctx)
        assert len(issues) == 1
        violation = issues[0].metadata["violations"][0]
        assert violation["meta_lesson"] == "unknown"
        assert "Unknown meta period" in issues[0].details

    def test_unmapped_lessons_ignored(self):
        classes = [
            make_class("c1", "s1", make_lessons("c1", 1)),
            make_class("c2", "s1", make_lessons("c2", 1)),
        ]
        ctx = make_context(
            blocks=[make_block("b1", [[c] for c in classes], self._meta_lessons())],
            teachers=[Teacher(id="t1", subject_allocations={"s1": 5})],
        )
        assert check_concurrent_teachers_capacity(ctx) == []


# ─── FORM GROUP PERIOD COVERAGE ───────────────────────────────────────────────

class TestFormGroupPeriodCoverage:
    def test_mismatch_reported_in_one_issue(self):
        cycle = make_cycle(days=5, lessons_per_day=2)   # 10 lesson periods
        ctx = make_context(
            blocks=[
                make_block("b1", [], total_periods=8, feeders=["f1"]),
                make_block("b2", [], total_periods=10, feeders=["f2"]),
                make_block("b3", [], total_periods=6, feeders=["f3"]),
                make_block("b4", [], total_periods=6, feeders=["f3"]),
            ],
            form_groups=[FormGroup(id="f1", name="7A"), FormGroup(id="f2", name="7B"),
                         FormGroup(id="f3", name="7C")],
            cycle=cycle,
        )
        issues = check_form_group_period_coverage(ctx)
        assert len(issues) == 1
        meta = issues[0].metadata
        assert meta["total_lesson_periods"] == 10
        assert meta["violation_count"] == 2
        by_id = {v["form_group_id"]: v for v in meta["violations"]}
        assert set(by_id) == {"f1", "f3"}
        assert by_id["f1"]["difference"] == -2
        assert by_id["f3"]["difference"] == 2
        assert [b["block_id"] for b in by_id["f3"]["blocks"]] == ["b3", "b4"]
        assert "2 form groups don't have" in issues[0].description
        assert "7A: 8/10 periods (2 periods short)" in issues[0].details
        assert "7C: 12/10 periods (2 periods over)" in issues[0].details

    def test_exact_coverage(self):
        ctx = make_context(
            blocks=[make_block("b1", [], total_periods=10, feeders=["f1"])],
            form_groups=[FormGroup(id="f1")],
            cycle=make_cycle(days=5, lessons_per_day=2),
        )
        assert check_form_group_period_coverage(ctx) == []

    def test_form_group_without_blocks(self):
        ctx = make_context(
            blocks=[make_block("b1", [], total_periods=10, feeders=["f1"])],
            form_groups=[FormGroup(id="f1"), FormGroup(id="f2")],
            cycle=make_cycle(days=5, lessons_per_day=2),
        )
        issues = check_form_group_period_coverage(ctx)
        violation = issues[0].metadata["violations"][0]
        assert violation["form_group_id"] == "f2"
        assert violation["allocated"] == 0
        assert "1 form group doesn't have" in issues[0].description

    def test_no_lesson_periods(self):
        ctx = make_context(
            blocks=[make_block("b1", [], total_periods=10, feeders=["f1"])],
            form_groups=[FormGroup(id="f1")],
            cycle=make_cycle(days=5, layout=[PeriodType.BREAK]),
        )
        assert check_form_group_period_coverage(ctx) == []


# ─── CLASS SPACING FEASIBILITY ────────────────────────────────────────────────

class TestClassSpacingFeasibility:
    def _context(self, lesson_count: int, cycle: Optional[Cycle] = None):
        cls = make_class("c1", "s1", make_lessons("c1", lesson_count))
        return make_context(blocks=[make_block("b1", [[cls]])],
                            cycle=cycle or make_cycle(days=5))

    def test_one_lesson_too_many(self):
        issues = check_class_spacing_feasibility(self._context(6))
        assert len(issues) == 1
        issue = issues[0]
        assert issue.type == IssueType.ERROR
        assert issue.severity == IssueSeverity.CRITICAL
        assert issue.metadata["shortage"] == 1
        assert issue.metadata["affected_entities"]["block_ids"] == ["b1"]
        assert issue.metadata["total_lessons"] == 6

    def test_exactly_one_per_day(self):
        assert check_class_spacing_feasibility(self._context(5)) == []

    def test_legacy_structure_days(self):
        cycle = Cycle(structure=CycleStructure(days=[{}, {}, {}]))
        issues = check_class_spacing_feasibility(self._context(5, cycle))
        assert issues[0].metadata["shortage"] == 2

    def test_no_days(self):
        assert check_class_spacing_feasibility(self._context(6, Cycle())) == []


# ─── CONSECUTIVE PERIOD AVAILABILITY ──────────────────────────────────────────

class TestConsecutivePeriodAvailability:
    LAYOUT = [PeriodType.LESSON, PeriodType.LESSON, PeriodType.BREAK, PeriodType.LESSON]

    def _context(self, lengths: list[int], layout=None):
        meta_lessons = [
            MetaLesson(id=f"ml{i}", length=length,
                       meta_periods=[MetaPeriod(id=f"ml{i}-mp{j}") for j in range(length)])
            for i, length in enumerate(lengths, start=1)
        ]
        return make_context(blocks=[make_block("b1", [], meta_lessons)],
                            cycle=make_cycle(days=2, layout=layout or self.LAYOUT))

    def test_triple_over_double_cycle(self):
        issues = check_consecutive_period_availability(self._context([1, 3, 2]))
        assert len(issues) == 1
        meta = issues[0].metadata
        assert meta["required_consecutive"] == 3
        assert meta["available_consecutive"] == 2
        assert meta["shortage"] == 1
        assert meta["meta_lessons"] == [{"index": 2, "length": 3, "id": "ml2"}]
        assert meta["best_days"] == ["Day 1", "Day 2"]
        assert meta["consecutive_slots_by_day"] == {"d1": 2, "d2": 2}
        assert issues[0].severity == IssueSeverity.CRITICAL

    def test_one_issue_per_length(self):
        issues = check_consecutive_period_availability(self._context([4, 3, 3]))
        assert [i.metadata["required_consecutive"] for i in issues] == [3, 4]
        assert issues[0].metadata["affected_meta_lessons"] == 2

    def test_doubles_fit(self):
        assert check_consecutive_period_availability(self._context([2, 2, 1])) == []

    def test_unknown_period_type_breaks_the_run(self):
        layout = [PeriodType.LESSON, "Assembly", PeriodType.LESSON]
        issues = check_consecutive_period_availability(self._context([2], layout=layout))
        assert len(issues) == 1
        assert issues[0].metadata["available_consecutive"] == 1

    def test_no_lesson_periods_at_all(self):
        ctx = self._context([3], layout=[PeriodType.BREAK, PeriodType.LUNCH])
        assert check_consecutive_period_availability(ctx) == []


# ─── TEACHER DAILY LOAD DISTRIBUTION ──────────────────────────────────────────

class TestTeacherDailyLoadDistribution:
    def _context(self, assigned: int, cap: Optional[int], days: int = 5):
        classes = [
            make_class("c1", "s1", make_lessons("c1", assigned, teacher_id="t1")),
            make_class("c2", "s1", make_lessons("c2", 3)),
        ]
        return make_context(
            blocks=[make_block("b1", [classes])],
            teachers=[Teacher(id="t1", name="Ada", max_periods_per_day=cap,
                              subject_allocations={"s1": 30})],
            cycle=make_cycle(days=days),
        )

    def test_too_many_assigned(self):
        issues = check_teacher_daily_load_distribution(self._context(11, cap=2))
        assert len(issues) == 1
        meta = issues[0].metadata
        assert meta["total_periods"] == 11
        assert meta["min_days_needed"] == 6
        assert meta["shortage"] == 1
        assert meta["excess_periods"] == 1
        assert meta["subject_breakdown"] == {"s1": 11}
        assert issues[0].severity == IssueSeverity.HIGH
        assert "Maths: 11 periods" in issues[0].details

    def test_fits(self):
        assert check_teacher_daily_load_distribution(self._context(10, cap=2)) == []

    def test_no_cap(self):
        assert check_teacher_daily_load_distribution(self._context(40, cap=None)) == []
        assert check_teacher_daily_load_distribution(self._context(40, cap=0)) == []

    def test_double_lessons_count_twice(self):
        cls = make_class("c1", "s1", make_lessons("c1", 3, teacher_id="t1", length=2))
        ctx = make_context(
            blocks=[make_block("b1", [[cls]])],
            teachers=[Teacher(id="t1", max_periods_per_day=1)],
            cycle=make_cycle(days=5),
        )
        issues = check_teacher_daily_load_distribution(ctx)
        assert issues[0].metadata["total_periods"] == 6


# ─── IDEMPOTENCE ──────────────────────────────────────────────────────────────

@pytest.mark.parametrize("check", [
    check_teaching_hours_availability,
    check_class_spacing_feasibility,
    check_teacher_daily_load_distribution,
])
def test_checks_are_idempotent(check):
    cls = make_class("c1", "s1", make_lessons("c1", 12, teacher_id="t1"))
    ctx = make_context(
        blocks=[make_block("b1", [[cls]])],
        teachers=[Teacher(id="t1", max_periods_per_day=1, subject_allocations={"s1": 1})],
        cycle=make_cycle(days=5),
    )
    first = check(ctx)
    second = check(ctx)
    assert first
    assert [i.logical_content() for i in first] == [i.logical_content() for i in second]
