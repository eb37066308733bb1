"""Catalog models: brands and the vehicles they sell."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pygarage.models._base import CatalogRecordModel
from pygarage.normalize import safe_int, split_feature_tags


class Brand(CatalogRecordModel):
    """A vehicle brand as listed by the catalog collaborator."""

    id: str = Field(validation_alias=AliasChoices("id", "brand_id"))
    name: str = Field(default="", validation_alias=AliasChoices("brand_name", "brand", "name"))
    """Display name (e.g. ``"Pegassi"``)."""
    name_en: str = Field(default="", validation_alias=AliasChoices("brand_name_en", "brand_en", "name_en"))
    """English display name."""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


class CatalogItem(CatalogRecordModel):
    """A purchasable vehicle.

    Fields are mapped from the catalog's ``vehicle_overview`` rows.  The
    core never mutates these; placing one in a garage copies its display
    fields into a :class:`~pygarage.models.slot.SlotSnapshot`.
    """

    id: str
    name: str = Field(default="", validation_alias=AliasChoices("vehicle_name", "name"))
    """Vehicle name (e.g. ``"Zentorno"``)."""
    name_en: str = Field(default="", validation_alias=AliasChoices("vehicle_name_en", "name_en"))
    """English vehicle name."""
    brand_id: str = Field(default="", validation_alias=AliasChoices("brand_id", "brandId"))
    vehicle_type: str = Field(default="", validation_alias=AliasChoices("vehicle_type", "vehicleType", "type"))
    """Vehicle type code, translated through the dictionaries collaborator."""
    price: int = 0
    feature_tags: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("feature", "feature_tags", "featureTags"),
    )
    """Feature tag codes in catalog order (e.g. ``("BENNY", "DRIFT")``)."""
    remarks: str | None = None

    @field_validator("id", "brand_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> int:
        return safe_int(value) or 0

    @field_validator("feature_tags", mode="before")
    @classmethod
    def _parse_feature_tags(cls, value: Any) -> tuple[str, ...]:
        try:
            return split_feature_tags(value) or ()
        except TypeError as exc:
            raise ValueError(str(exc)) from exc
