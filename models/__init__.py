from models.cycle import Cycle, CycleStructure, Day, Period, PeriodType, Week
from models.subject import Subject
from models.teacher import Teacher
from models.groups import Band, Department, FormGroup, YearGroup
from models.block import Block, Lesson, MetaLesson, MetaPeriod, SchoolClass, TeachingGroup
from models.version_data import CurriculumModel, DocumentMetadata, SchoolData, VersionData
from models.issue import Issue, IssueAction, IssueSeverity, IssueType, ValidationResult

__all__ = [
    "Cycle",
    "CycleStructure",
    "Day",
    "Period",
    "PeriodType",
    "Week",
    "Subject",
    "Teacher",
    "Band",
    "Department",
    "FormGroup",
    "YearGroup",
    "Block",
    "Lesson",
    "MetaLesson",
    "MetaPeriod",
    "SchoolClass",
    "TeachingGroup",
    "CurriculumModel",
    "DocumentMetadata",
    "SchoolData",
    "VersionData",
    "Issue",
    "IssueAction",
    "IssueSeverity",
    "IssueType",
    "ValidationResult",
]
