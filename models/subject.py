"""Data model for a subject (Pydantic v2)."""

from models.base import DocumentModel


class Subject(DocumentModel):
    """A taught subject, referenced by id from teachers and classes."""

    id: str
    name: str = ""
    abbreviation: str = ""
    color: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.id
