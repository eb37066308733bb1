"""High-level async facade over the store, the workflow and the collaborators."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TypeVar

from pygarage import engine
from pygarage._constants import GarageId
from pygarage.collaborators import DictionarySource, GarageRepository, VehicleCatalog
from pygarage.config import GarageConfig
from pygarage.exceptions import (
    GarageConfigError,
    GarageDeleteError,
    GarageSaveError,
    PersistenceError,
    WorkflowBusyError,
)
from pygarage.labels import SlotLabels, describe_slot
from pygarage.models.catalog import Brand, CatalogItem
from pygarage.models.garage import Garage, GarageDraft
from pygarage.store import InventoryStore
from pygarage.workflow import CatalogSource, TransferIntent, TransferOutcome, TransferSource, TransferWorkflow

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class BulkDeleteResult:
    """Per-garage outcome of :meth:`GarageManager.delete_garages`.

    Deletions are independent: some may succeed while others fail.
    """

    deleted: tuple[GarageId, ...] = ()
    failed: dict[GarageId, PersistenceError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True, slots=True)
class FeatureSyncResult:
    """Per-garage outcome of :meth:`GarageManager.sync_features`."""

    updated_garage_ids: tuple[GarageId, ...] = ()
    updated_slots: int = 0
    failed: dict[GarageId, PersistenceError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class GarageManager:
    """Async entry point for applications.

    Owns the current :class:`InventoryStore` (through its
    :class:`TransferWorkflow`) and writes every committed change back via the
    :class:`GarageRepository`.  Usage::

        async with GarageManager(repository, catalog=catalog) as manager:
            manager.begin_add(item, brand)
            manager.choose_target_garage(garage_id)
            outcome = await manager.choose_target_slot(0)
            if not outcome.committed:
                await manager.confirm_conflict()

    Local state is updated optimistically before saving.  When a save fails
    the store is rolled back to its pre-commit snapshot (unless
    ``config.rollback_on_save_failure`` is off) and the
    :class:`GarageSaveError` is re-raised.  Nothing is retried.
    """

    def __init__(
        self,
        repository: GarageRepository,
        *,
        catalog: VehicleCatalog | None = None,
        dictionaries: DictionarySource | None = None,
        config: GarageConfig | None = None,
    ) -> None:
        self._repository = repository
        self._catalog = catalog
        self._dictionaries = dictionaries
        self._config = config or GarageConfig()
        self._workflow = TransferWorkflow()
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GarageManager:
        await self.load()
        return self

    async def __aexit__(self, *exc: object) -> None:
        self._workflow.cancel()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def config(self) -> GarageConfig:
        return self._config

    @property
    def store(self) -> InventoryStore:
        return self._workflow.store

    @property
    def workflow(self) -> TransferWorkflow:
        return self._workflow

    def garage(self, garage_id: GarageId) -> Garage:
        return self.store.require(garage_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_catalog(self) -> VehicleCatalog:
        if self._catalog is None:
            raise GarageConfigError("No catalog collaborator configured")
        return self._catalog

    def _require_dictionaries(self) -> DictionarySource:
        if self._dictionaries is None:
            raise GarageConfigError("No dictionaries collaborator configured")
        return self._dictionaries

    def _require_idle(self) -> None:
        if self._lock.locked():
            raise WorkflowBusyError("A save is in progress")
        if not self._workflow.is_idle:
            raise WorkflowBusyError(f"A transfer is {self._workflow.state.value}; finish or cancel it first")

    async def _call_repository(
        self,
        fn: Callable[[], Awaitable[T]],
        *,
        error_cls: type[PersistenceError],
        action: str,
        garage_id: GarageId | None = None,
    ) -> T:
        """Run a repository call, wrapping foreign failures in *error_cls*."""
        try:
            return await fn()
        except PersistenceError:
            raise
        except Exception as exc:
            raise error_cls(f"{action} failed: {exc}", garage_id=garage_id) from exc

    async def _save(self, garage: Garage) -> Garage:
        return await self._call_repository(
            lambda: self._repository.save_garage(garage),
            error_cls=GarageSaveError,
            action=f"Saving garage {garage.id!r}",
            garage_id=garage.id,
        )

    async def _persist(
        self,
        previous: InventoryStore,
        updated: InventoryStore,
        garage_ids: Iterable[GarageId],
    ) -> list[Garage]:
        """Publish *updated* and save the given garages one by one, in order.

        When a save fails and rollback is enabled, the local store goes back
        to *previous* and every garage already saved is saved again in its
        previous version.  A failing restore is logged; the original error is
        re-raised either way.
        """
        ids = list(dict.fromkeys(garage_ids))
        self._workflow.store = updated
        saved: list[Garage] = []
        for garage_id in ids:
            try:
                saved.append(await self._save(updated.require(garage_id)))
            except PersistenceError as exc:
                if not self._config.rollback_on_save_failure:
                    _logger.warning("Save of garage %r failed, keeping local changes: %s", garage_id, exc)
                    self._workflow.store = updated.with_garages(*saved)
                    raise
                _logger.warning("Save of garage %r failed, rolling back: %s", garage_id, exc)
                self._workflow.store = previous
                await self._restore(previous, [garage.id for garage in saved])
                raise
        self._workflow.store = updated.with_garages(*saved)
        return saved

    async def _restore(self, previous: InventoryStore, garage_ids: Iterable[GarageId]) -> None:
        for garage_id in garage_ids:
            try:
                await self._save(previous.require(garage_id))
            except PersistenceError as exc:
                _logger.error("Restoring garage %r after a failed save failed: %s", garage_id, exc)

    async def _commit_outcome(self, outcome: TransferOutcome) -> TransferOutcome:
        if outcome.committed:
            # Target before source: a failure in between duplicates a vehicle, never drops it.
            ids = outcome.changed_garage_ids[::-1]
            await self._persist(outcome.previous_store, outcome.store, ids)
        return outcome

    # ------------------------------------------------------------------
    # Garage lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> InventoryStore:
        """Replace the local store with the repository's garages."""
        self._require_idle()
        async with self._lock:
            garages = await self._call_repository(
                self._repository.load_garages,
                error_cls=PersistenceError,
                action="Loading garages",
            )
            self._workflow.store = InventoryStore(garages)
        _logger.debug("Loaded %d garage(s)", len(self.store))
        return self.store

    async def create_garage(self, name: str, capacity: int, *, remarks: str | None = None) -> Garage:
        """Validate and create a garage with *capacity* empty slots."""
        draft = GarageDraft.build(
            name,
            capacity,
            remarks=remarks,
            min_capacity=self._config.min_capacity,
            max_capacity=self._config.max_capacity,
        )
        self._require_idle()
        async with self._lock:
            garage = await self._call_repository(
                lambda: self._repository.create_garage(draft),
                error_cls=GarageSaveError,
                action=f"Creating garage {draft.name!r}",
            )
            self._workflow.store = self.store.with_garages(garage)
        return garage

    async def delete_garage(self, garage_id: GarageId) -> None:
        self._require_idle()
        self.store.require(garage_id)
        async with self._lock:
            await self._call_repository(
                lambda: self._repository.delete_garage(garage_id),
                error_cls=GarageDeleteError,
                action=f"Deleting garage {garage_id!r}",
                garage_id=garage_id,
            )
            self._workflow.store = engine.plan_delete(self.store, garage_id)

    async def delete_garages(self, garage_ids: Iterable[GarageId]) -> BulkDeleteResult:
        """Delete several garages as independent commands and report each outcome."""
        self._require_idle()
        ids = list(dict.fromkeys(garage_ids))
        async with self._lock:
            results = await asyncio.gather(
                *(
                    self._call_repository(
                        lambda garage_id=garage_id: self._repository.delete_garage(garage_id),
                        error_cls=GarageDeleteError,
                        action=f"Deleting garage {garage_id!r}",
                        garage_id=garage_id,
                    )
                    for garage_id in ids
                ),
                return_exceptions=True,
            )
            deleted: list[GarageId] = []
            failed: dict[GarageId, PersistenceError] = {}
            store = self.store
            for garage_id, result in zip(ids, results, strict=True):
                if isinstance(result, PersistenceError):
                    failed[garage_id] = result
                    continue
                if isinstance(result, BaseException):
                    raise result
                deleted.append(garage_id)
                if garage_id in store:
                    store = engine.plan_delete(store, garage_id)
            self._workflow.store = store

        if failed:
            _logger.warning("Deleted %d garage(s), %d failed: %s", len(deleted), len(failed), list(failed))
        return BulkDeleteResult(deleted=tuple(deleted), failed=failed)

    async def update_remarks(self, garage_id: GarageId, remarks: str | None) -> Garage:
        self._require_idle()
        async with self._lock:
            previous = self.store
            updated = engine.plan_remarks(previous, garage_id, remarks)
            (saved,) = await self._persist(previous, updated, [garage_id])
        return saved

    async def clear_slot(self, garage_id: GarageId, index: int) -> Garage:
        """Remove the vehicle parked in a slot."""
        self._require_idle()
        async with self._lock:
            previous = self.store
            updated = engine.plan_clear(previous, garage_id, index)
            (saved,) = await self._persist(previous, updated, [garage_id])
        return saved

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    def begin_transfer(self, source: TransferSource) -> TransferIntent:
        if self._lock.locked():
            raise WorkflowBusyError("A save is in progress")
        return self._workflow.begin(source)

    def begin_add(self, item: CatalogItem, brand: Brand | None = None) -> TransferIntent:
        """Start adding a catalog vehicle to a garage."""
        return self.begin_transfer(CatalogSource.from_item(item, brand))

    def choose_target_garage(self, garage_id: GarageId) -> TransferIntent:
        return self._workflow.choose_target_garage(garage_id)

    def back(self) -> TransferIntent:
        return self._workflow.back()

    def cancel(self) -> TransferIntent | None:
        return self._workflow.cancel()

    async def choose_target_slot(self, index: int) -> TransferOutcome:
        """Choose the target slot; commits and saves unless the slot is occupied."""
        async with self._lock:
            outcome = self._workflow.choose_target_slot(index)
            return await self._commit_outcome(outcome)

    async def confirm_conflict(self) -> TransferOutcome:
        """Confirm replace/swap over an occupied slot, then save."""
        async with self._lock:
            outcome = self._workflow.confirm_conflict()
            return await self._commit_outcome(outcome)

    # ------------------------------------------------------------------
    # Catalog / dictionaries
    # ------------------------------------------------------------------

    async def sync_features(self) -> FeatureSyncResult:
        """Refresh stored feature tags from the catalog.

        Each changed garage is saved on its own; garages whose save fails
        keep their previous tags locally and are reported in ``failed``.
        """
        catalog = self._require_catalog()
        self._require_idle()
        async with self._lock:
            items = await catalog.list_all_items()
            plan = engine.plan_feature_sync(self.store, engine.feature_map_from_items(items))
            results = await asyncio.gather(
                *(self._save(plan.store.require(garage_id)) for garage_id in plan.changed_garage_ids),
                return_exceptions=True,
            )
            saved: list[Garage] = []
            failed: dict[GarageId, PersistenceError] = {}
            for garage_id, result in zip(plan.changed_garage_ids, results, strict=True):
                if isinstance(result, PersistenceError):
                    failed[garage_id] = result
                elif isinstance(result, BaseException):
                    raise result
                else:
                    saved.append(result)
            previous = self.store
            self._workflow.store = previous.with_garages(*saved)

        if failed:
            _logger.warning("Feature sync failed for garage(s) %s", list(failed))
        updated_slots = sum(
            1
            for garage in saved
            for new, old in zip(garage.slots, previous.require(garage.id).slots, strict=True)
            if new != old
        )
        return FeatureSyncResult(
            updated_garage_ids=tuple(garage.id for garage in saved),
            updated_slots=updated_slots,
            failed=failed,
        )

    async def list_brands(self) -> list[Brand]:
        return list(await self._require_catalog().list_brands())

    async def list_items(self, brand_id: str | None = None) -> list[CatalogItem]:
        catalog = self._require_catalog()
        if brand_id is None:
            return list(await catalog.list_all_items())
        return list(await catalog.list_items_by_brand(brand_id))

    async def describe_slot(self, garage_id: GarageId, index: int) -> SlotLabels:
        """Display labels for the vehicle in a slot."""
        dictionaries = self._require_dictionaries()
        snapshot = self.store.require(garage_id).slot(index)
        feature_labels, type_labels = await asyncio.gather(
            dictionaries.feature_labels(),
            dictionaries.vehicle_type_labels(),
        )
        return describe_slot(snapshot, feature_labels, type_labels)
