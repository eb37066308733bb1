"""Placement engine.

Pure decision logic over an :class:`InventoryStore`.  No function here
mutates its input: each either raises before building anything or returns a
new store holding *all* of its edits.  A failed plan therefore always leaves
the caller with the exact store it passed in.

Overwriting an occupied slot is split from plain placement on purpose:
:func:`plan_insert` and :func:`plan_move` refuse occupied targets with
:class:`SlotOccupiedConflictError`, and only :func:`plan_replace` and
:func:`plan_swap` may touch an occupied slot, once the caller has shown the
conflict to the user.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from pygarage import slots as slot_array
from pygarage._constants import GarageId
from pygarage.exceptions import (
    BothEmptyNoopError,
    SelfSwapNoopError,
    SlotOccupiedConflictError,
    SourceEmptyError,
)
from pygarage.models._base import GarageBaseModel
from pygarage.models.catalog import CatalogItem
from pygarage.models.garage import Garage
from pygarage.models.slot import EMPTY_SLOT, SlotSnapshot
from pygarage.store import InventoryStore

_logger = logging.getLogger(__name__)


class SlotState(StrEnum):
    EMPTY = "empty"
    OCCUPIED = "occupied"


class TargetClass(GarageBaseModel):
    """Result of :func:`classify_target`."""

    state: SlotState
    snapshot: SlotSnapshot | None = None
    """Vehicle currently in the slot (``None`` when empty)."""

    @property
    def is_empty(self) -> bool:
        return self.state == SlotState.EMPTY


@dataclass(frozen=True, slots=True)
class FeatureSyncPlan:
    """Outcome of :func:`plan_feature_sync`."""

    store: InventoryStore
    changed_garage_ids: tuple[GarageId, ...]
    updated_slots: int


def _locate(store: InventoryStore, garage_id: GarageId, index: int) -> tuple[Garage, SlotSnapshot]:
    garage = store.require(garage_id)
    return garage, garage.slot(index)


def _apply_edits(store: InventoryStore, edits: Mapping[GarageId, Mapping[int, SlotSnapshot]]) -> InventoryStore:
    """Apply per-garage slot edits and return them together in one new store."""
    updated: list[Garage] = []
    for garage_id, changes in edits.items():
        garage = store.require(garage_id)
        slots = garage.slots
        for index, value in changes.items():
            slots = slot_array.with_slot_set(slots, index, value)
        updated.append(garage.with_slots(slots))
    return store.with_garages(*updated)


def _dual_edit(
    store: InventoryStore,
    first: tuple[GarageId, int, SlotSnapshot],
    second: tuple[GarageId, int, SlotSnapshot],
) -> InventoryStore:
    # Same-garage edits collapse into a single updated garage.
    edits: dict[GarageId, dict[int, SlotSnapshot]] = {}
    for garage_id, index, value in (first, second):
        edits.setdefault(garage_id, {})[index] = value
    return _apply_edits(store, edits)


def classify_target(store: InventoryStore, target_garage_id: GarageId, target_index: int) -> TargetClass:
    """Tell whether a target slot is free or who is parked there."""
    _garage, current = _locate(store, target_garage_id, target_index)
    if current.is_empty:
        return TargetClass(state=SlotState.EMPTY)
    return TargetClass(state=SlotState.OCCUPIED, snapshot=current)


def plan_insert(
    store: InventoryStore,
    target_garage_id: GarageId,
    target_index: int,
    snapshot: SlotSnapshot,
) -> InventoryStore:
    """Place a new snapshot (typically from the catalog) into an empty slot."""
    _garage, current = _locate(store, target_garage_id, target_index)
    if not current.is_empty:
        raise SlotOccupiedConflictError(target_garage_id, target_index, current)
    _logger.debug("Insert %r into garage %r slot %d", snapshot.display_name, target_garage_id, target_index)
    return _apply_edits(store, {target_garage_id: {target_index: snapshot}})


def plan_replace(
    store: InventoryStore,
    target_garage_id: GarageId,
    target_index: int,
    snapshot: SlotSnapshot,
) -> InventoryStore:
    """Overwrite a slot unconditionally.  Only call after the conflict was confirmed."""
    _garage, current = _locate(store, target_garage_id, target_index)
    _logger.debug(
        "Replace %r with %r in garage %r slot %d",
        current.display_name,
        snapshot.display_name,
        target_garage_id,
        target_index,
    )
    return _apply_edits(store, {target_garage_id: {target_index: snapshot}})


def plan_move(
    store: InventoryStore,
    source_garage_id: GarageId,
    source_index: int,
    target_garage_id: GarageId,
    target_index: int,
) -> InventoryStore:
    """Move a parked vehicle to an empty slot, in the same or another garage."""
    _source, moving = _locate(store, source_garage_id, source_index)
    _target, current = _locate(store, target_garage_id, target_index)
    if moving.is_empty:
        raise SourceEmptyError(source_garage_id, source_index)
    if not current.is_empty:
        raise SlotOccupiedConflictError(target_garage_id, target_index, current)
    _logger.debug(
        "Move %r from garage %r slot %d to garage %r slot %d",
        moving.display_name,
        source_garage_id,
        source_index,
        target_garage_id,
        target_index,
    )
    return _dual_edit(
        store,
        (source_garage_id, source_index, EMPTY_SLOT),
        (target_garage_id, target_index, moving),
    )


def plan_swap(
    store: InventoryStore,
    source_garage_id: GarageId,
    source_index: int,
    target_garage_id: GarageId,
    target_index: int,
) -> InventoryStore:
    """Exchange the contents of two slots.

    Occupied/empty pairs degenerate to a move.  Swapping two empty slots or
    a slot with itself is rejected rather than committed as a no-op.
    """
    _source, source_value = _locate(store, source_garage_id, source_index)
    _target, target_value = _locate(store, target_garage_id, target_index)
    if source_garage_id == target_garage_id and source_index == target_index:
        raise SelfSwapNoopError(f"Cannot swap slot {source_index} of garage {source_garage_id!r} with itself")
    if source_value.is_empty and target_value.is_empty:
        raise BothEmptyNoopError(
            f"Slot {source_index} of garage {source_garage_id!r} and slot {target_index} "
            f"of garage {target_garage_id!r} are both empty"
        )
    _logger.debug(
        "Swap garage %r slot %d with garage %r slot %d",
        source_garage_id,
        source_index,
        target_garage_id,
        target_index,
    )
    return _dual_edit(
        store,
        (source_garage_id, source_index, target_value),
        (target_garage_id, target_index, source_value),
    )


def plan_clear(store: InventoryStore, garage_id: GarageId, index: int) -> InventoryStore:
    """Remove the vehicle parked in a slot."""
    _garage, current = _locate(store, garage_id, index)
    if current.is_empty:
        raise SourceEmptyError(garage_id, index)
    _logger.debug("Clear garage %r slot %d (%r)", garage_id, index, current.display_name)
    return _apply_edits(store, {garage_id: {index: EMPTY_SLOT}})


def plan_remarks(store: InventoryStore, garage_id: GarageId, remarks: str | None) -> InventoryStore:
    """Edit a garage's remarks; blank text removes them."""
    garage = store.require(garage_id)
    return store.with_garages(garage.with_remarks(remarks))


def plan_delete(store: InventoryStore, garage_id: GarageId) -> InventoryStore:
    """Drop a garage and everything parked in it."""
    return store.without_garage(garage_id)


def feature_map_from_items(items: Iterable[CatalogItem]) -> dict[str, tuple[str, ...]]:
    return {item.id: item.feature_tags for item in items if item.id}


def plan_feature_sync(store: InventoryStore, feature_map: Mapping[str, Sequence[str]]) -> FeatureSyncPlan:
    """Re-sync stored feature tags with the catalog.

    Every snapshot carrying a catalog id gets the catalog's current tags.
    Ids missing from *feature_map* clear the stored tags.  Snapshots without
    a catalog id (hand-entered, blank id, or empty slots) are left alone.
    Only garages where at least one slot changed appear in the plan.
    """
    changed: list[Garage] = []
    updated_slots = 0
    for garage in store.garages():
        new_slots: list[SlotSnapshot] = []
        garage_changed = False
        for slot in garage.slots:
            if not slot.item_id:
                new_slots.append(slot)
                continue
            tags = tuple(feature_map.get(slot.item_id, ()))
            # A missing feature field and an empty one mean the same thing.
            if (slot.feature_tags or ()) == tags:
                new_slots.append(slot)
                continue
            new_slots.append(slot.model_copy(update={"feature_tags": tags}))
            garage_changed = True
            updated_slots += 1
        if garage_changed:
            changed.append(garage.with_slots(new_slots))

    _logger.debug("Feature sync touches %d slot(s) in %d garage(s)", updated_slots, len(changed))
    return FeatureSyncPlan(
        store=store.with_garages(*changed),
        changed_garage_ids=tuple(garage.id for garage in changed),
        updated_slots=updated_slots,
    )
