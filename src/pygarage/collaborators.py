"""Structural interfaces for the collaborators the core talks to.

The core owns no storage, catalog or translation tables.  These protocols
describe what it consumes, so production backends and test doubles can be
swapped freely.  :mod:`pygarage.memory` ships in-memory implementations.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from pygarage._constants import GarageId
from pygarage.models.catalog import Brand, CatalogItem
from pygarage.models.garage import Garage, GarageDraft


class VehicleCatalog(Protocol):
    """Read-only vehicle catalog."""

    async def list_brands(self) -> Sequence[Brand]:
        ...

    async def list_items_by_brand(self, brand_id: str) -> Sequence[CatalogItem]:
        ...

    async def list_all_items(self) -> Sequence[CatalogItem]:
        ...


class GarageRepository(Protocol):
    """Key-value record store for garages, keyed by garage id.

    Implementations raise :class:`~pygarage.exceptions.PersistenceError`
    subclasses on failure; anything else escaping a call is wrapped by the
    manager.
    """

    async def load_garages(self) -> Sequence[Garage]:
        ...

    async def create_garage(self, draft: GarageDraft) -> Garage:
        ...

    async def save_garage(self, garage: Garage) -> Garage:
        ...

    async def delete_garage(self, garage_id: GarageId) -> None:
        ...


class DictionarySource(Protocol):
    """Code-to-label tables used for display only."""

    async def feature_labels(self) -> dict[str, str]:
        ...

    async def vehicle_type_labels(self) -> dict[str, str]:
        ...
