"""Base models for pygarage.

:class:`GarageBaseModel` fixes the shared configuration: instances are
frozen (every edit goes through ``model_copy``), unknown keys are ignored and
fields can be populated either by alias or by name.

:class:`CatalogRecordModel` additionally stashes the original catalog row in
``raw`` and drops ``None`` values so the field defaults apply.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GarageBaseModel(BaseModel):
    """Base for all pygarage models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )


class CatalogRecordModel(GarageBaseModel):
    """Base for read-only catalog records (brands, vehicles)."""

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)
    """Original catalog row."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls_and_stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicit raw= when constructing from kwargs.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
