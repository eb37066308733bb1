"""Custom exception hierarchy for pygarage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pygarage._constants import GarageId

if TYPE_CHECKING:
    from pygarage.models.slot import SlotSnapshot


class GarageError(Exception):
    """Base exception for all pygarage errors."""


class GarageConfigError(GarageError):
    """Invalid or missing configuration."""


class GarageValidationError(GarageError, ValueError):
    """A garage draft or edit failed validation (name, capacity, ...)."""


class GarageNotFoundError(GarageError, KeyError):
    """The referenced garage is not part of the inventory store.

    Usually a stale reference; re-fetch the store and retry.
    """

    def __init__(self, garage_id: GarageId) -> None:
        self.garage_id = garage_id
        super().__init__(f"Garage {garage_id!r} not found")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class SlotIndexInvalidError(GarageError, IndexError):
    """Slot index outside ``[0, capacity)`` for the referenced garage."""

    def __init__(self, index: int, capacity: int, *, garage_id: GarageId | None = None) -> None:
        self.garage_id = garage_id
        self.index = index
        self.capacity = capacity
        where = f" of garage {garage_id!r}" if garage_id is not None else ""
        super().__init__(f"Slot index {index} out of range{where} (capacity {capacity})")


class SlotOccupiedConflictError(GarageError):
    """Target slot is occupied; an explicit replace or swap is required.

    This is an expected signal rather than a bug: the transfer workflow turns
    it into a confirmation step.  ``snapshot`` is the vehicle currently parked
    in the target slot.
    """

    def __init__(self, garage_id: GarageId, index: int, snapshot: SlotSnapshot) -> None:
        self.garage_id = garage_id
        self.index = index
        self.snapshot = snapshot
        super().__init__(f"Slot {index} of garage {garage_id!r} is occupied")


class TransferError(GarageError):
    """A move/swap request that cannot do anything useful."""


class SourceEmptyError(TransferError):
    """Source slot holds no vehicle, so there is nothing to move."""

    def __init__(self, garage_id: GarageId, index: int) -> None:
        self.garage_id = garage_id
        self.index = index
        super().__init__(f"Slot {index} of garage {garage_id!r} is empty")


class TargetEmptyError(TransferError):
    """Target slot holds no vehicle where one was required.

    The engine never raises it, since a swap with one empty side is a move.
    It is provided for callers that build stricter transfers of their own,
    such as an exchange that must find a vehicle on both sides.
    """

    def __init__(self, garage_id: GarageId, index: int) -> None:
        self.garage_id = garage_id
        self.index = index
        super().__init__(f"Slot {index} of garage {garage_id!r} is empty")


class BothEmptyNoopError(TransferError):
    """Both swap slots are empty."""


class SelfSwapNoopError(TransferError):
    """Source and target refer to the same slot."""


class WorkflowError(GarageError):
    """Base for transfer-workflow protocol errors."""


class WorkflowBusyError(WorkflowError):
    """A transfer is already in flight; finish or cancel it first."""


class WorkflowStateError(WorkflowError):
    """Transition requested from a state that does not allow it."""


class PersistenceError(GarageError):
    """Failure reported by (or while talking to) the persistence collaborator.

    Kept apart from the placement errors so callers can decide to roll back an
    optimistic in-memory update.
    """

    def __init__(self, message: str, *, garage_id: GarageId | None = None) -> None:
        self.garage_id = garage_id
        super().__init__(message)


class GarageSaveError(PersistenceError):
    """Saving an updated garage failed."""


class GarageDeleteError(PersistenceError):
    """Deleting a garage failed."""


class RecordFormatError(PersistenceError):
    """A stored garage record could not be decoded."""
