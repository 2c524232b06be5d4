"""Common base for all version-data document models (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict, model_validator


class DocumentModel(BaseModel):
    """Base class for records inside the version-data document.

    ``null`` and missing keys both fall back to the field default (empty
    lists / dicts). Unknown keys are kept so that a loaded document can be
    written back without losing UI-only fields.
    """

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data
