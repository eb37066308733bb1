"""Garage models."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator

from pygarage import slots as slot_array
from pygarage._constants import GarageId
from pygarage.exceptions import GarageValidationError, SlotIndexInvalidError
from pygarage.models._base import GarageBaseModel
from pygarage.models.slot import SlotSnapshot
from pygarage.normalize import clean_text


class Garage(GarageBaseModel):
    """A named, fixed-capacity container of slots.

    ``len(slots) == capacity`` always holds: it is checked on construction
    and by :meth:`with_slots`, the only way to swap the slot tuple on a
    frozen instance.
    """

    id: GarageId
    name: str
    capacity: int = Field(ge=0)
    remarks: str | None = None
    order: int | None = None
    """Display order assigned by the persistence collaborator."""
    slots: tuple[SlotSnapshot, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _default_slots(cls, values: Any) -> Any:
        if isinstance(values, dict) and values.get("slots") is None and "capacity" in values:
            merged = dict(values)
            merged["slots"] = slot_array.empty_slots(int(values["capacity"]))
            return merged
        return values

    @model_validator(mode="after")
    def _check_capacity(self) -> Garage:
        if len(self.slots) != self.capacity:
            raise ValueError(f"garage {self.id!r} has {len(self.slots)} slots but capacity {self.capacity}")
        return self

    def slot(self, index: int) -> SlotSnapshot:
        if not 0 <= index < self.capacity:
            raise SlotIndexInvalidError(index, self.capacity, garage_id=self.id)
        return self.slots[index]

    @property
    def occupied_count(self) -> int:
        return slot_array.occupied_count(self.slots)

    @property
    def is_full(self) -> bool:
        return self.occupied_count >= self.capacity

    @property
    def free_indices(self) -> tuple[int, ...]:
        return slot_array.free_indices(self.slots)

    def with_slots(self, slots: Iterable[SlotSnapshot]) -> Garage:
        new_slots = tuple(slots)
        if len(new_slots) != self.capacity:
            raise ValueError(f"garage {self.id!r} needs exactly {self.capacity} slots, got {len(new_slots)}")
        return self.model_copy(update={"slots": new_slots})

    def with_remarks(self, remarks: str | None) -> Garage:
        return self.model_copy(update={"remarks": clean_text(remarks)})


class GarageDraft(GarageBaseModel):
    """Parameters for a garage that does not exist yet."""

    name: str
    capacity: int
    remarks: str | None = None
    order: int | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("garage name must be non-empty")
        return name

    @field_validator("remarks")
    @classmethod
    def _clean_remarks(cls, value: str | None) -> str | None:
        return clean_text(value)

    @classmethod
    def build(
        cls,
        name: str,
        capacity: int,
        *,
        remarks: str | None = None,
        min_capacity: int,
        max_capacity: int,
    ) -> GarageDraft:
        """Validate user input into a draft.

        Raises :class:`GarageValidationError` instead of pydantic's
        ``ValidationError`` so callers only deal with library exceptions.
        """
        try:
            draft = cls(name=name, capacity=capacity, remarks=remarks)
        except ValidationError as exc:
            raise GarageValidationError(str(exc)) from exc
        if not min_capacity <= draft.capacity <= max_capacity:
            raise GarageValidationError(
                f"garage capacity must be between {min_capacity} and {max_capacity}, got {draft.capacity}"
            )
        return draft

    def to_garage(self, garage_id: GarageId, *, order: int | None = None) -> Garage:
        return Garage(
            id=garage_id,
            name=self.name,
            capacity=self.capacity,
            remarks=self.remarks,
            order=order if order is not None else self.order,
        )
