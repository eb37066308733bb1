from __future__ import annotations

import pytest

from pygarage.exceptions import (
    GarageNotFoundError,
    SelfSwapNoopError,
    SlotIndexInvalidError,
    SourceEmptyError,
    WorkflowBusyError,
    WorkflowStateError,
)
from pygarage.models import EMPTY_SLOT, Brand, CatalogItem, Garage, SlotSnapshot
from pygarage.store import InventoryStore
from pygarage.workflow import (
    CatalogSource,
    Resolution,
    SlotSource,
    TransferKind,
    TransferWorkflow,
    WorkflowState,
)


def _store() -> InventoryStore:
    civic = SlotSnapshot(vehicle_name="Honda Civic")
    supra = SlotSnapshot(vehicle_name="Toyota Supra")
    return InventoryStore(
        [
            Garage(id=1, name="Eclipse", capacity=3, slots=(EMPTY_SLOT, civic, EMPTY_SLOT)),
            Garage(id=2, name="Arcadius", capacity=2, slots=(supra, EMPTY_SLOT)),
        ]
    )


def _catalog_source() -> CatalogSource:
    item = CatalogItem(id="7", vehicle_name="Zentorno", brand_id="3", feature="BENNY", price=725000)
    return CatalogSource.from_item(item, Brand(id=3, brand_name="Pegassi"))


def test_move_to_empty_slot_commits_in_one_step() -> None:
    workflow = TransferWorkflow(_store())

    intent = workflow.begin(SlotSource(garage_id=1, index=1))
    assert workflow.state == WorkflowState.SELECTING_TARGET
    assert intent.snapshot.vehicle_name == "Honda Civic"

    workflow.choose_target_garage(2)
    assert workflow.state == WorkflowState.SELECTING_SLOT

    outcome = workflow.choose_target_slot(1)

    assert outcome.committed
    assert outcome.kind == TransferKind.MOVE
    assert outcome.intent.resolution == Resolution.CONFIRMED
    assert outcome.changed_garage_ids == (1, 2)
    assert outcome.previous_store == _store()
    assert workflow.is_idle
    assert workflow.intent is None
    assert workflow.store.require(2).slots[1].vehicle_name == "Honda Civic"
    assert workflow.store.require(1).slots[1].is_empty


def test_catalog_insert_into_empty_slot() -> None:
    workflow = TransferWorkflow(_store())

    workflow.begin(_catalog_source())
    workflow.choose_target_garage(1)
    outcome = workflow.choose_target_slot(0)

    placed = workflow.store.require(1).slots[0]
    assert outcome.kind == TransferKind.INSERT
    assert outcome.changed_garage_ids == (1,)
    assert placed.vehicle_name == "Zentorno"
    assert placed.brand_name == "Pegassi"
    assert placed.item_id == "7"
    assert placed.feature_tags == ("BENNY",)
    assert placed.price == 725000


def test_occupied_target_waits_for_confirmation_then_swaps() -> None:
    workflow = TransferWorkflow(_store())
    workflow.begin(SlotSource(garage_id=1, index=1))
    workflow.choose_target_garage(2)

    pending = workflow.choose_target_slot(0)

    assert not pending.committed
    assert pending.kind == TransferKind.SWAP
    assert pending.conflict is not None
    assert pending.conflict.vehicle_name == "Toyota Supra"
    assert pending.changed_garage_ids == ()
    assert workflow.state == WorkflowState.AWAITING_CONFLICT_CONFIRMATION
    assert workflow.store == _store()

    outcome = workflow.confirm_conflict()

    assert outcome.committed
    assert outcome.kind == TransferKind.SWAP
    assert workflow.store.require(1).slots[1].vehicle_name == "Toyota Supra"
    assert workflow.store.require(2).slots[0].vehicle_name == "Honda Civic"
    assert workflow.is_idle


def test_catalog_conflict_confirms_as_replace() -> None:
    workflow = TransferWorkflow(_store())
    workflow.begin(_catalog_source())
    workflow.choose_target_garage(2)

    pending = workflow.choose_target_slot(0)
    assert pending.kind == TransferKind.REPLACE

    outcome = workflow.confirm_conflict()

    assert outcome.kind == TransferKind.REPLACE
    assert workflow.store.require(2).slots[0].vehicle_name == "Zentorno"


def test_begin_while_busy_raises() -> None:
    workflow = TransferWorkflow(_store())
    workflow.begin(SlotSource(garage_id=1, index=1))

    with pytest.raises(WorkflowBusyError):
        workflow.begin(_catalog_source())
    with pytest.raises(WorkflowBusyError):
        workflow.store = InventoryStore()


def test_begin_from_empty_slot_raises_and_stays_idle() -> None:
    workflow = TransferWorkflow(_store())

    with pytest.raises(SourceEmptyError):
        workflow.begin(SlotSource(garage_id=1, index=0))

    assert workflow.is_idle


def test_failed_transitions_keep_state() -> None:
    workflow = TransferWorkflow(_store())
    workflow.begin(SlotSource(garage_id=1, index=1))

    with pytest.raises(GarageNotFoundError):
        workflow.choose_target_garage(99)
    assert workflow.state == WorkflowState.SELECTING_TARGET

    workflow.choose_target_garage(2)
    with pytest.raises(SlotIndexInvalidError):
        workflow.choose_target_slot(5)
    assert workflow.state == WorkflowState.SELECTING_SLOT
    assert workflow.store == _store()


def test_choosing_the_source_slot_raises() -> None:
    workflow = TransferWorkflow(_store())
    workflow.begin(SlotSource(garage_id=1, index=1))
    workflow.choose_target_garage(1)

    with pytest.raises(SelfSwapNoopError):
        workflow.choose_target_slot(1)

    assert workflow.state == WorkflowState.SELECTING_SLOT


def test_transitions_out_of_order_raise_state_error() -> None:
    workflow = TransferWorkflow(_store())

    with pytest.raises(WorkflowStateError):
        workflow.choose_target_garage(1)
    with pytest.raises(WorkflowStateError):
        workflow.confirm_conflict()
    with pytest.raises(WorkflowStateError):
        workflow.back()

    workflow.begin(SlotSource(garage_id=1, index=1))
    with pytest.raises(WorkflowStateError):
        workflow.choose_target_slot(0)


def test_back_steps_through_selections() -> None:
    workflow = TransferWorkflow(_store())
    workflow.begin(_catalog_source())
    workflow.choose_target_garage(2)
    workflow.choose_target_slot(0)

    intent = workflow.back()
    assert workflow.state == WorkflowState.SELECTING_SLOT
    assert intent.target_garage_id == 2
    assert intent.target_index is None
    assert intent.conflict is None

    intent = workflow.back()
    assert workflow.state == WorkflowState.SELECTING_TARGET
    assert intent.target_garage_id is None

    workflow.choose_target_garage(1)
    outcome = workflow.choose_target_slot(2)
    assert outcome.committed


def test_cancel_discards_intent_and_keeps_store() -> None:
    workflow = TransferWorkflow(_store())
    assert workflow.cancel() is None

    workflow.begin(SlotSource(garage_id=2, index=0))
    workflow.choose_target_garage(1)
    workflow.choose_target_slot(1)

    cancelled = workflow.cancel()

    assert cancelled is not None
    assert cancelled.resolution == Resolution.CANCELLED
    assert workflow.is_idle
    assert workflow.store == _store()
