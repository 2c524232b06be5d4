"""Tests for the version-data document models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from models.block import Block, Lesson, MetaLesson, MetaPeriod, SchoolClass, TeachingGroup
from models.cycle import Cycle, CycleStructure, Day, Period, PeriodType
from models.issue import Issue, IssueSeverity, IssueType, ValidationResult
from models.teacher import Teacher
from models.version_data import VersionData


# ─── Helpers ──────────────────────────────────────────────────────────────────

def make_day(day_id: str, types: list[PeriodType]) -> tuple[Day, list[Period]]:
    day = Day(id=day_id, name=day_id.upper())
    periods = [
        Period(id=f"{day_id}-{i}", day_id=day_id, type=t, column=i)
        for i, t in enumerate(types)
    ]
    return day, periods


def make_issue(severity: IssueSeverity, issue_type: IssueType = IssueType.ERROR,
               check_id: str = "some-check") -> Issue:
    return Issue(
        id="abc12345",
        type=issue_type,
        severity=severity,
        title="T",
        description="D",
        details="",
        recommendation="",
        check_id=check_id,
        timestamp=0,
    )


# ─── MISSING ⇒ EMPTY ─────────────────────────────────────────────────────────

class TestDocumentParsing:
    def test_empty_document(self):
        vd = VersionData.model_validate({})
        assert vd.cycle is None
        assert vd.blocks == []
        assert vd.teachers == []
        assert vd.subjects == []
        assert vd.form_groups == []
        assert vd.staffing == {}

    def test_nulls_become_empty(self):
        vd = VersionData.model_validate({
            "data": {"teachers": None, "subjects": None},
            "model": {"blocks": None},
            "cycle": None,
        })
        assert vd.teachers == []
        assert vd.subjects == []
        assert vd.blocks == []
        assert vd.cycle is None

    def test_nested_nulls(self):
        vd = VersionData.model_validate({
            "model": {"blocks": [{
                "id": "b1",
                "meta_lessons": None,
                "teaching_groups": [{"number": 1, "classes": [
                    {"id": "c1", "subject": "s1", "lessons": None},
                ]}],
            }]},
        })
        block = vd.blocks[0]
        assert block.meta_lessons == []
        assert block.teaching_groups[0].classes[0].lessons == []

    def test_unknown_keys_preserved(self):
        vd = VersionData.model_validate({"data": {"subjects": [
            {"id": "s1", "name": "Maths", "ui_colour_hint": "blue"},
        ]}})
        dumped = vd.model_dump()
        assert dumped["data"]["subjects"][0]["ui_colour_hint"] == "blue"

    def test_teacher_title_alias(self):
        t = Teacher.model_validate({"id": "t1", "title": "Ms Smith"})
        assert t.display_name == "Ms Smith"

    def test_negative_allocation_rejected(self):
        with pytest.raises(ValidationError):
            Teacher(id="t1", subject_allocations={"s1": -1})

    @pytest.mark.parametrize("value", [None, "", "5", 2.5, True, [1]])
    def test_non_numeric_allocation_dropped(self, value):
        vd = VersionData.model_validate({"data": {"teachers": [
            {"id": "t1", "subject_allocations": {"s1": value, "s2": 4}},
        ]}})
        teacher = vd.teachers[0]
        assert teacher.subject_allocations == {"s2": 4}
        assert not teacher.can_teach("s1")
        assert teacher.can_teach("s2")

    def test_allocations_not_a_mapping(self):
        teacher = Teacher.model_validate({"id": "t1", "subject_allocations": ["s1"]})
        assert teacher.subject_allocations == {}

    def test_zero_allocation_cannot_teach(self):
        teacher = Teacher(id="t1", subject_allocations={"s1": 0})
        assert not teacher.can_teach("s1")
        assert not teacher.can_teach("missing")

    def test_unknown_period_type_kept(self):
        vd = VersionData.model_validate({"cycle": {"periods": [
            {"id": "p1", "day_id": "d1", "type": "Lesson", "column": 1},
            {"id": "p2", "day_id": "d1", "type": "Assembly", "column": 2},
            {"id": "p3", "day_id": "d1", "type": "Lesson", "column": 3},
        ]}})
        p1, p2, _ = vd.cycle.periods
        assert p1.type is PeriodType.LESSON
        assert p2.type == "Assembly"
        assert not p2.is_lesson
        assert [p.id for p in vd.lesson_periods()] == ["p1", "p3"]
        assert vd.cycle.max_consecutive_lessons_by_day() == {"d1": 1}

    def test_unknown_period_type_survives_save(self, tmp_path: Path):
        vd = VersionData.model_validate({"cycle": {"periods": [
            {"id": "p1", "day_id": "d1", "type": "Assembly"},
        ]}})
        path = tmp_path / "doc.json"
        vd.save_json(path)
        assert VersionData.load_json(path).cycle.periods[0].type == "Assembly"


# ─── CYCLE ────────────────────────────────────────────────────────────────────

class TestCycle:
    def test_max_consecutive_per_day(self):
        day, periods = make_day("mon", [
            PeriodType.LESSON, PeriodType.LESSON, PeriodType.BREAK, PeriodType.LESSON,
        ])
        cycle = Cycle(days=[day], periods=periods)
        assert cycle.max_consecutive_lessons_by_day() == {"mon": 2}

    def test_registration_and_lunch_break_runs(self):
        day, periods = make_day("tue", [
            PeriodType.REGISTRATION, PeriodType.LESSON, PeriodType.LESSON,
            PeriodType.LESSON, PeriodType.LUNCH, PeriodType.LESSON,
        ])
        cycle = Cycle(days=[day], periods=periods)
        assert cycle.max_consecutive_lessons_by_day()["tue"] == 3

    def test_periods_sorted_by_column(self):
        periods = [
            Period(id="p3", day_id="d", type=PeriodType.LESSON, column=3),
            Period(id="p1", day_id="d", type=PeriodType.LESSON, column=1),
            Period(id="p2", day_id="d", type=PeriodType.BREAK, column=2),
        ]
        cycle = Cycle(periods=periods)
        assert [p.id for p in cycle.periods_by_day()["d"]] == ["p1", "p2", "p3"]
        assert cycle.max_consecutive_lessons_by_day()["d"] == 1

    def test_day_count_from_days(self):
        cycle = Cycle(days=[Day(id="a"), Day(id="b"), Day(id="b")])
        assert cycle.day_count == 2

    def test_day_count_falls_back_to_structure(self):
        cycle = Cycle(structure=CycleStructure(days=[{}, {}, {}]))
        assert cycle.day_count == 3

    def test_days_take_precedence_over_structure(self):
        cycle = Cycle(days=[Day(id="a")], structure=CycleStructure(days=[{}, {}]))
        assert cycle.day_count == 1

    def test_lesson_periods(self):
        day, periods = make_day("mon", [PeriodType.REGISTRATION, PeriodType.LESSON])
        vd = VersionData(cycle=Cycle(days=[day], periods=periods))
        assert [p.id for p in vd.lesson_periods()] == ["mon-1"]
        assert vd.days_in_cycle() == 1

    def test_no_cycle(self):
        vd = VersionData()
        assert vd.lesson_periods() == []
        assert vd.days_in_cycle() == 0


# ─── BLOCK ────────────────────────────────────────────────────────────────────

class TestBlock:
    def _block(self) -> Block:
        return Block(
            id="b1",
            meta_lessons=[
                MetaLesson(id="ml1", length=2, meta_periods=[
                    MetaPeriod(id="ml1-a"), MetaPeriod(id="ml1-b"),
                ]),
                MetaLesson(id="ml2", meta_periods=[MetaPeriod(id="ml2-a")]),
            ],
            teaching_groups=[
                TeachingGroup(number=1, classes=[
                    SchoolClass(id="c1", subject="s1", lessons=[Lesson(id="l1")]),
                ]),
                TeachingGroup(number=2, classes=[SchoolClass(id="c2", subject="s2")]),
            ],
        )

    def test_locate_meta_period(self):
        block = self._block()
        assert block.locate_meta_period("ml1-b") == (1, 2)
        assert block.locate_meta_period("ml2-a") == (2, 1)
        assert block.locate_meta_period("nope") is None

    def test_iter_classes(self):
        block = self._block()
        assert [(tg.number, cls.id) for tg, cls in block.iter_classes()] == [(1, "c1"), (2, "c2")]

    def test_meta_lesson_scheduled_once_every_period_has_a_start(self):
        block = self._block()
        double = block.meta_lessons[0]
        assert not double.is_scheduled
        double.meta_periods[0].start_period_id = "mon-1"
        assert not double.is_scheduled
        double.meta_periods[1].start_period_id = "mon-2"
        assert double.is_scheduled
        assert not MetaLesson(id="empty").is_scheduled

    def test_display_name_falls_back_to_id(self):
        assert self._block().display_name == "b1"

    def test_document_traversal(self):
        vd = VersionData.model_validate({"model": {"blocks": [self._block().model_dump()]}})
        assert [cls.id for _, _, cls in vd.iter_classes()] == ["c1", "c2"]
        assert [lesson.id for _, _, lesson in vd.iter_lessons()] == ["l1"]
        assert vd.block_by_id("b1") is not None

    def test_staff_and_form_group_lookups(self):
        vd = VersionData.model_validate({"data": {
            "teachers": [{"id": "t1", "title": "Ada"}],
            "form_groups": [{"id": "f1", "name": "7A"}],
        }})
        assert vd.teacher_by_id("t1").display_name == "Ada"
        assert vd.form_group_by_id("f1").display_name == "7A"
        assert vd.teacher_by_id("t9") is None
        assert vd.form_group_by_id("f9") is None


# ─── PERSISTENCE ──────────────────────────────────────────────────────────────

class TestPersistence:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        day, periods = make_day("mon", [PeriodType.LESSON, PeriodType.LESSON])
        vd = VersionData(cycle=Cycle(days=[day], periods=periods))
        path = tmp_path / "doc.json"
        vd.save_json(path)
        loaded = VersionData.load_json(path)
        assert loaded.days_in_cycle() == 1
        assert len(loaded.lesson_periods()) == 2

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            VersionData.load_json(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            VersionData.load_json(path)

    def test_load_invalid_shape(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"data": {"teachers": [{"name": "no id"}]}}), encoding="utf-8")
        with pytest.raises(ValueError):
            VersionData.load_json(path)


# ─── VALIDATION RESULT ────────────────────────────────────────────────────────

class TestValidationResult:
    def test_counts_and_sorting(self):
        result = ValidationResult(
            issues=[
                make_issue(IssueSeverity.MEDIUM, IssueType.WARNING),
                make_issue(IssueSeverity.CRITICAL),
                make_issue(IssueSeverity.LOW, IssueType.INFO),
            ],
            checks_run=["some-check"],
            checks_skipped=[],
            timestamp=0,
        )
        assert result.error_count == 1
        assert result.warning_count == 1
        assert result.info_count == 1
        assert result.has_errors
        assert [i.severity for i in result.sorted_issues()] == [
            IssueSeverity.CRITICAL, IssueSeverity.MEDIUM, IssueSeverity.LOW,
        ]

    def test_json_uses_camel_case(self):
        result = ValidationResult(
            issues=[make_issue(IssueSeverity.HIGH)],
            checks_run=["some-check"],
            checks_skipped=["other"],
            timestamp=1,
        )
        raw = json.loads(result.to_json())
        assert raw["checksRun"] == ["some-check"]
        assert raw["checksSkipped"] == ["other"]
        assert raw["issues"][0]["checkId"] == "some-check"
        assert "action" not in raw["issues"][0]

    def test_logical_content_ignores_id_and_timestamp(self):
        a = make_issue(IssueSeverity.HIGH)
        b = a.model_copy(update={"id": "zzz", "timestamp": 99})
        assert a.logical_content() == b.logical_content()
