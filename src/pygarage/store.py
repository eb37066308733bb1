"""Immutable in-memory inventory store.

The store is the unit of truth the placement engine operates over.  It is
never mutated: every edit returns a new store that shares the untouched
garages with its predecessor, so any earlier store remains a valid snapshot
to roll back to.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from pygarage._constants import GarageId
from pygarage.exceptions import GarageNotFoundError
from pygarage.models.garage import Garage, GarageDraft


class InventoryStore(Mapping[GarageId, Garage]):
    """Ordered, read-only mapping of garage id to :class:`Garage`.

    Iteration order is display order; it carries no meaning for placement.
    """

    __slots__ = ("_garages",)

    def __init__(self, garages: Iterable[Garage] = ()) -> None:
        ordered: dict[GarageId, Garage] = {}
        for garage in garages:
            if garage.id in ordered:
                raise ValueError(f"duplicate garage id {garage.id!r}")
            ordered[garage.id] = garage
        self._garages = ordered

    @classmethod
    def _from_dict(cls, garages: dict[GarageId, Garage]) -> InventoryStore:
        store = cls.__new__(cls)
        store._garages = garages
        return store

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, garage_id: GarageId) -> Garage:
        return self._garages[garage_id]

    def __iter__(self) -> Iterator[GarageId]:
        return iter(self._garages)

    def __len__(self) -> int:
        return len(self._garages)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, InventoryStore):
            return NotImplemented
        return list(self._garages.items()) == list(other._garages.items())

    def __repr__(self) -> str:
        return f"InventoryStore({list(self._garages.values())!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def require(self, garage_id: GarageId) -> Garage:
        """Return the garage or raise :class:`GarageNotFoundError`."""
        garage = self._garages.get(garage_id)
        if garage is None:
            raise GarageNotFoundError(garage_id)
        return garage

    def garages(self) -> tuple[Garage, ...]:
        return tuple(self._garages.values())

    def next_id(self) -> int:
        """Smallest integer id above every integer id in use."""
        int_ids = [garage_id for garage_id in self._garages if isinstance(garage_id, int)]
        return max(int_ids, default=0) + 1

    # ------------------------------------------------------------------
    # Copy-on-write edits
    # ------------------------------------------------------------------

    def with_garages(self, *garages: Garage) -> InventoryStore:
        """Return a store where each given garage replaces (or is appended after) its namesake.

        All replacements land in the same new store, which is how the
        engine keeps two-garage edits atomic.
        """
        updated = dict(self._garages)
        for garage in garages:
            updated[garage.id] = garage
        return self._from_dict(updated)

    def without_garage(self, garage_id: GarageId) -> InventoryStore:
        if garage_id not in self._garages:
            raise GarageNotFoundError(garage_id)
        updated = dict(self._garages)
        del updated[garage_id]
        return self._from_dict(updated)

    def add_garage(self, draft: GarageDraft) -> tuple[InventoryStore, Garage]:
        """Create a garage with ``draft.capacity`` empty slots and a fresh id.

        For stores used without a repository.  :class:`GarageManager` takes
        ids from :meth:`GarageRepository.create_garage` instead.
        """
        garage_id = self.next_id()
        order = draft.order if draft.order is not None else len(self._garages) + 1
        garage = draft.to_garage(garage_id, order=order)
        return self.with_garages(garage), garage
