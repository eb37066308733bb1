"""Slot snapshot model.

A garage slot is either empty or holds a *snapshot*: a denormalized copy of
a catalog vehicle's display fields plus a free-text remark.  Snapshots do not
reference the catalog, so later catalog edits never change parked vehicles.

Occupancy is decided by key presence, not by a tag or by values: a snapshot
built from no key at all is the empty slot, and one carrying *any* key (even
only ``remarks``, an explicit ``null`` or a key this model does not know) is
occupied.  Stored records follow the same rule, ``{}`` being an empty slot.
Unknown keys are kept and written back unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from pygarage.models._base import GarageBaseModel
from pygarage.normalize import join_feature_tags, safe_int, split_feature_tags

if TYPE_CHECKING:
    from pygarage.models.catalog import Brand, CatalogItem


class SlotSnapshot(GarageBaseModel):
    """Contents of one garage slot.

    Record keys are camelCase (``vehicleName``, ``brandNameEn``...), except
    ``id``, ``feature`` and ``vehicle_type`` which keep the names the stored
    records have always used.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    item_id: str | None = Field(default=None, alias="id")
    """Catalog id of the vehicle this snapshot was copied from."""
    vehicle_name: str | None = None
    vehicle_name_en: str | None = None
    brand_name: str | None = None
    brand_name_en: str | None = None
    feature_tags: tuple[str, ...] | None = Field(default=None, alias="feature")
    price: int | None = None
    vehicle_type: str | None = Field(default=None, alias="vehicle_type")
    plate: str | None = None
    remarks: str | None = None

    @field_validator("item_id", mode="before")
    @classmethod
    def _coerce_item_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("feature_tags", mode="before")
    @classmethod
    def _parse_feature_tags(cls, value: Any) -> tuple[str, ...] | None:
        try:
            return split_feature_tags(value)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc

    @field_serializer("feature_tags")
    def _serialize_feature_tags(self, tags: tuple[str, ...] | None) -> str | None:
        if tags is None:
            return None
        return join_feature_tags(tags)

    @property
    def populated_fields(self) -> dict[str, Any]:
        """Keys present in the snapshot, known fields by name and unknown keys as stored."""
        present = {name: getattr(self, name) for name in self.model_fields_set}
        present.update(self.model_extra or {})
        return present

    @property
    def is_empty(self) -> bool:
        return not self.model_fields_set and not self.model_extra

    @property
    def display_name(self) -> str:
        return self.vehicle_name or self.vehicle_name_en or ""

    @classmethod
    def from_item(cls, item: CatalogItem, brand: Brand | None = None, *, remarks: str = "") -> SlotSnapshot:
        """Copy the display fields of a catalog vehicle into a new snapshot."""
        return cls(
            item_id=item.id,
            vehicle_name=item.name,
            vehicle_name_en=item.name_en,
            brand_name=brand.name if brand is not None else "",
            brand_name_en=brand.name_en if brand is not None else "",
            feature_tags=item.feature_tags,
            price=item.price,
            vehicle_type=item.vehicle_type,
            remarks=remarks,
        )

    def to_record(self) -> dict[str, Any]:
        """Serialize to the stored record shape; the empty slot becomes ``{}``.

        Every present key is written, ``None`` included, so an occupied slot
        never comes back empty.
        """
        return self.model_dump(by_alias=True, exclude_unset=True)


EMPTY_SLOT = SlotSnapshot()
"""The empty slot: a snapshot with no populated field."""
