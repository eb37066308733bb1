"""Slot-array primitives.

A slot array is a plain tuple of :class:`SlotSnapshot` whose length is the
garage capacity.  Every helper returns a new tuple; positions are never
reordered.
"""

from __future__ import annotations

from collections.abc import Sequence

from pygarage.exceptions import SlotIndexInvalidError
from pygarage.models.slot import EMPTY_SLOT, SlotSnapshot

SlotArray = tuple[SlotSnapshot, ...]


def is_empty(slot: SlotSnapshot) -> bool:
    """Return ``True`` when *slot* has no populated field."""
    return slot.is_empty


def occupied_count(slots: Sequence[SlotSnapshot]) -> int:
    return sum(1 for slot in slots if not is_empty(slot))


def empty_slots(capacity: int) -> SlotArray:
    return (EMPTY_SLOT,) * capacity


def free_indices(slots: Sequence[SlotSnapshot]) -> tuple[int, ...]:
    return tuple(index for index, slot in enumerate(slots) if is_empty(slot))


def check_index(slots: Sequence[SlotSnapshot], index: int) -> None:
    if not 0 <= index < len(slots):
        raise SlotIndexInvalidError(index, len(slots))


def with_slot_set(slots: Sequence[SlotSnapshot], index: int, value: SlotSnapshot) -> SlotArray:
    """Return a copy of *slots* with *index* replaced by *value*."""
    check_index(slots, index)
    updated = list(slots)
    updated[index] = value
    return tuple(updated)


def with_slot_cleared(slots: Sequence[SlotSnapshot], index: int) -> SlotArray:
    return with_slot_set(slots, index, EMPTY_SLOT)
