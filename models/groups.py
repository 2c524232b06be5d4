"""Student and staff groupings: departments, year groups, bands, form groups."""

from models.base import DocumentModel


class Department(DocumentModel):
    id: str
    name: str = ""


class YearGroup(DocumentModel):
    id: str
    name: str = ""


class Band(DocumentModel):
    """A band belongs to one year group."""

    id: str
    name: str = ""
    year_group_id: str = ""


class FormGroup(DocumentModel):
    """A form group (registration class) belongs to one band."""

    id: str
    name: str = ""
    band_id: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.id
