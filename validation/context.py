"""Inputs and check metadata shared by the engine and the checks."""

from dataclasses import dataclass, field
from typing import Callable, Literal, Optional

from pydantic import BaseModel

from models.issue import Issue
from models.version_data import VersionData


class ValidationContext(BaseModel):
    """Everything a check gets to look at: the document plus route ids."""

    version_data: Optional[VersionData] = None
    org_id: str = ""
    project_id: str = ""
    version_id: str = ""

    @classmethod
    def from_document(cls, version_data: VersionData, **ids: str) -> "ValidationContext":
        """Builds a context, taking missing ids from the document metadata."""
        meta = version_data.metadata
        return cls(
            version_data=version_data,
            org_id=ids.get("org_id") or meta.org_id,
            project_id=ids.get("project_id") or meta.project_id,
            version_id=ids.get("version_id") or meta.version_id,
        )

    def route(self, page: str) -> str:
        """Dashboard path hint for an issue action."""
        return f"/dashboard/{self.org_id}/{self.project_id}/{page}"


CheckFunction = Callable[[ValidationContext], list[Issue]]
CheckCategory = Literal["data", "model", "staffing", "scheduling"]


@dataclass(frozen=True)
class CheckPrerequisites:
    """Data a check needs before it is worth running.

    Every flag set to True must hold; ``custom_validator`` (if given) must
    additionally return True.
    """

    requires_blocks: bool = False
    requires_teachers: bool = False
    requires_subjects: bool = False
    requires_year_groups: bool = False
    requires_bands: bool = False
    requires_form_groups: bool = False
    requires_departments: bool = False
    requires_cycle: bool = False
    custom_validator: Optional[Callable[[ValidationContext], bool]] = None


@dataclass(frozen=True)
class CheckDefinition:
    id: str
    name: str
    description: str
    category: CheckCategory
    check: CheckFunction
    prerequisites: CheckPrerequisites = field(default_factory=CheckPrerequisites)
