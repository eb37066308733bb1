"""Two-step transfer workflow.

Drives the placement engine through the user-facing protocol::

    IDLE -> SELECTING_TARGET -> SELECTING_SLOT
         -> (AWAITING_CONFLICT_CONFIRMATION) -> COMMITTING -> IDLE

A transfer starts either from a garage slot (move, or swap on conflict) or
from a catalog snapshot (insert, or replace on conflict).  The store is only
replaced while committing; a transition that raises leaves both the state and
the store exactly as they were.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from pygarage import engine
from pygarage._constants import GarageId
from pygarage.exceptions import SelfSwapNoopError, SourceEmptyError, WorkflowBusyError, WorkflowStateError
from pygarage.models._base import GarageBaseModel
from pygarage.models.catalog import Brand, CatalogItem
from pygarage.models.slot import SlotSnapshot
from pygarage.store import InventoryStore

_logger = logging.getLogger(__name__)


class WorkflowState(StrEnum):
    IDLE = "idle"
    SELECTING_TARGET = "selecting_target"
    SELECTING_SLOT = "selecting_slot"
    AWAITING_CONFLICT_CONFIRMATION = "awaiting_conflict_confirmation"
    COMMITTING = "committing"


class Resolution(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class TransferKind(StrEnum):
    INSERT = "insert"
    REPLACE = "replace"
    MOVE = "move"
    SWAP = "swap"


class SlotSource(GarageBaseModel):
    """A vehicle already parked in a garage slot."""

    garage_id: GarageId
    index: int


class CatalogSource(GarageBaseModel):
    """A catalog vehicle about to be added to a garage."""

    snapshot: SlotSnapshot

    @classmethod
    def from_item(cls, item: CatalogItem, brand: Brand | None = None) -> CatalogSource:
        return cls(snapshot=SlotSnapshot.from_item(item, brand))


TransferSource = SlotSource | CatalogSource


class TransferIntent(GarageBaseModel):
    """An in-flight transfer.  Replaced (never mutated) on every transition."""

    source: SlotSource | CatalogSource
    snapshot: SlotSnapshot
    """The vehicle being placed."""
    target_garage_id: GarageId | None = None
    target_index: int | None = None
    conflict: SlotSnapshot | None = None
    """Vehicle found in the chosen target slot, awaiting confirmation."""
    resolution: Resolution = Resolution.PENDING

    @property
    def is_insert(self) -> bool:
        return isinstance(self.source, CatalogSource)


@dataclass(frozen=True, slots=True)
class TransferOutcome:
    """What a slot choice or a confirmation produced.

    ``committed`` is ``False`` only when a conflict was found; ``store`` is
    then the unchanged store and ``conflict`` the vehicle to confirm over.
    """

    kind: TransferKind
    committed: bool
    store: InventoryStore
    previous_store: InventoryStore
    intent: TransferIntent
    conflict: SlotSnapshot | None = None

    @property
    def changed_garage_ids(self) -> tuple[GarageId, ...]:
        """Garages whose slots differ between ``previous_store`` and ``store``."""
        if not self.committed:
            return ()
        candidates: list[GarageId] = []
        if isinstance(self.intent.source, SlotSource):
            candidates.append(self.intent.source.garage_id)
        if self.intent.target_garage_id is not None and self.intent.target_garage_id not in candidates:
            candidates.append(self.intent.target_garage_id)
        return tuple(candidates)


class TransferWorkflow:
    """State machine for one transfer at a time.

    Usage::

        workflow = TransferWorkflow(store)
        workflow.begin(SlotSource(garage_id=1, index=0))
        workflow.choose_target_garage(2)
        outcome = workflow.choose_target_slot(3)
        if not outcome.committed:
            outcome = workflow.confirm_conflict()  # swap
        store = workflow.store
    """

    def __init__(self, store: InventoryStore | None = None) -> None:
        self._store = store if store is not None else InventoryStore()
        self._state = WorkflowState.IDLE
        self._intent: TransferIntent | None = None

    @property
    def store(self) -> InventoryStore:
        return self._store

    @store.setter
    def store(self, store: InventoryStore) -> None:
        # Swapping the store under an in-flight intent would invalidate its references.
        if self._state != WorkflowState.IDLE:
            raise WorkflowBusyError("Cannot replace the store while a transfer is in progress")
        self._store = store

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def intent(self) -> TransferIntent | None:
        return self._intent

    @property
    def is_idle(self) -> bool:
        return self._state == WorkflowState.IDLE

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_state(self, action: str, *allowed: WorkflowState) -> TransferIntent:
        if self._state not in allowed or self._intent is None:
            raise WorkflowStateError(f"Cannot {action} while {self._state.value}")
        return self._intent

    def _transition(self, state: WorkflowState, intent: TransferIntent | None) -> None:
        _logger.debug("Transfer workflow %s -> %s", self._state.value, state.value)
        self._state = state
        self._intent = intent

    def _commit(
        self,
        kind: TransferKind,
        intent: TransferIntent,
        plan: Callable[[], InventoryStore],
    ) -> TransferOutcome:
        previous_state = self._state
        previous_store = self._store
        self._state = WorkflowState.COMMITTING
        try:
            new_store = plan()
        except Exception:
            self._state = previous_state
            raise
        confirmed = intent.model_copy(update={"resolution": Resolution.CONFIRMED})
        self._store = new_store
        self._transition(WorkflowState.IDLE, None)
        _logger.debug("Committed %s of %r", kind.value, confirmed.snapshot.display_name)
        return TransferOutcome(
            kind=kind,
            committed=True,
            store=new_store,
            previous_store=previous_store,
            intent=confirmed,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin(self, source: TransferSource) -> TransferIntent:
        """Start a transfer from a garage slot or a catalog vehicle."""
        if self._state != WorkflowState.IDLE:
            raise WorkflowBusyError(f"A transfer is already {self._state.value}; finish or cancel it first")
        if isinstance(source, SlotSource):
            garage = self._store.require(source.garage_id)
            snapshot = garage.slot(source.index)
            if snapshot.is_empty:
                raise SourceEmptyError(source.garage_id, source.index)
        else:
            snapshot = source.snapshot
        intent = TransferIntent(source=source, snapshot=snapshot)
        self._transition(WorkflowState.SELECTING_TARGET, intent)
        return intent

    def choose_target_garage(self, garage_id: GarageId) -> TransferIntent:
        intent = self._require_state("choose a target garage", WorkflowState.SELECTING_TARGET)
        self._store.require(garage_id)
        intent = intent.model_copy(update={"target_garage_id": garage_id})
        self._transition(WorkflowState.SELECTING_SLOT, intent)
        return intent

    def choose_target_slot(self, index: int) -> TransferOutcome:
        """Pick the target slot.

        An empty slot commits straight away.  An occupied one moves the
        workflow to conflict confirmation and returns an uncommitted
        outcome carrying the vehicle found there.
        """
        intent = self._require_state("choose a target slot", WorkflowState.SELECTING_SLOT)
        target_garage_id = intent.target_garage_id
        assert target_garage_id is not None  # noqa: S101
        source = intent.source
        if isinstance(source, SlotSource) and source.garage_id == target_garage_id and source.index == index:
            raise SelfSwapNoopError(f"Slot {index} of garage {target_garage_id!r} is the transfer source")

        target = engine.classify_target(self._store, target_garage_id, index)
        intent = intent.model_copy(update={"target_index": index})

        if target.is_empty:
            if isinstance(source, SlotSource):
                return self._commit(
                    TransferKind.MOVE,
                    intent,
                    lambda: engine.plan_move(self._store, source.garage_id, source.index, target_garage_id, index),
                )
            return self._commit(
                TransferKind.INSERT,
                intent,
                lambda: engine.plan_insert(self._store, target_garage_id, index, intent.snapshot),
            )

        intent = intent.model_copy(update={"conflict": target.snapshot})
        self._transition(WorkflowState.AWAITING_CONFLICT_CONFIRMATION, intent)
        return TransferOutcome(
            kind=TransferKind.REPLACE if intent.is_insert else TransferKind.SWAP,
            committed=False,
            store=self._store,
            previous_store=self._store,
            intent=intent,
            conflict=target.snapshot,
        )

    def confirm_conflict(self) -> TransferOutcome:
        """Overwrite (insert) or swap with (move) the conflicting vehicle."""
        intent = self._require_state("confirm a conflict", WorkflowState.AWAITING_CONFLICT_CONFIRMATION)
        target_garage_id = intent.target_garage_id
        target_index = intent.target_index
        assert target_garage_id is not None and target_index is not None  # noqa: S101
        source = intent.source
        if isinstance(source, SlotSource):
            return self._commit(
                TransferKind.SWAP,
                intent,
                lambda: engine.plan_swap(self._store, source.garage_id, source.index, target_garage_id, target_index),
            )
        return self._commit(
            TransferKind.REPLACE,
            intent,
            lambda: engine.plan_replace(self._store, target_garage_id, target_index, intent.snapshot),
        )

    def back(self) -> TransferIntent:
        """Step back one selection.

        From slot selection, forget the target garage.  From conflict
        confirmation, forget the target slot and pick another one.
        """
        intent = self._require_state(
            "go back",
            WorkflowState.SELECTING_SLOT,
            WorkflowState.AWAITING_CONFLICT_CONFIRMATION,
        )
        if self._state == WorkflowState.SELECTING_SLOT:
            intent = intent.model_copy(update={"target_garage_id": None})
            self._transition(WorkflowState.SELECTING_TARGET, intent)
        else:
            intent = intent.model_copy(update={"target_index": None, "conflict": None})
            self._transition(WorkflowState.SELECTING_SLOT, intent)
        return intent

    def cancel(self) -> TransferIntent | None:
        """Drop the in-flight transfer, if any.  Never fails; the store is untouched."""
        intent = self._intent
        self._transition(WorkflowState.IDLE, None)
        if intent is None:
            return None
        return intent.model_copy(update={"resolution": Resolution.CANCELLED})
