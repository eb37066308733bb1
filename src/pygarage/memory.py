"""In-memory collaborator implementations.

Useful as defaults for tests and demos, and as the reference behaviour for
real backends: the garage repository stores the same flat records a
database-backed one would (see :mod:`pygarage.records`).
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pygarage._constants import GarageId
from pygarage.exceptions import GarageDeleteError, GarageSaveError
from pygarage.labels import build_label_map
from pygarage.models.catalog import Brand, CatalogItem
from pygarage.models.garage import Garage, GarageDraft
from pygarage.records import draft_to_record, garage_from_record, garage_to_record

_logger = logging.getLogger(__name__)


def _order_key(record: Mapping[str, Any]) -> tuple[bool, int]:
    order = record.get("garage_order")
    return (order is None, order if isinstance(order, int) else 0)


class InMemoryGarageRepository:
    """Garage records kept in a dict keyed by garage id.

    New garages get the next integer id and, unless the draft says
    otherwise, the next display order.  Loading returns garages sorted by
    display order, unordered ones last.
    """

    def __init__(self, records: Iterable[Mapping[str, Any]] = ()) -> None:
        self._records: dict[GarageId, dict[str, Any]] = {}
        for record in records:
            self._records[record["id"]] = dict(record)

    @property
    def records(self) -> list[dict[str, Any]]:
        """Deep copy of the stored records, in insertion order."""
        return copy.deepcopy(list(self._records.values()))

    def _next_id(self) -> int:
        int_ids = [garage_id for garage_id in self._records if isinstance(garage_id, int)]
        return max(int_ids, default=0) + 1

    def _next_order(self) -> int:
        orders = [record.get("garage_order") for record in self._records.values()]
        return max((order for order in orders if isinstance(order, int)), default=0) + 1

    async def load_garages(self) -> list[Garage]:
        records = sorted(self._records.values(), key=_order_key)
        return [garage_from_record(record) for record in records]

    async def create_garage(self, draft: GarageDraft) -> Garage:
        record = draft_to_record(draft)
        record["id"] = self._next_id()
        if record["garage_order"] is None:
            record["garage_order"] = self._next_order()
        self._records[record["id"]] = record
        _logger.debug("Created garage %r (%s)", record["id"], draft.name)
        return garage_from_record(record)

    async def save_garage(self, garage: Garage) -> Garage:
        if garage.id not in self._records:
            raise GarageSaveError(f"Garage {garage.id!r} does not exist", garage_id=garage.id)
        record = garage_to_record(garage)
        self._records[garage.id] = record
        return garage_from_record(record)

    async def delete_garage(self, garage_id: GarageId) -> None:
        if self._records.pop(garage_id, None) is None:
            raise GarageDeleteError(f"Garage {garage_id!r} does not exist", garage_id=garage_id)


class InMemoryCatalog:
    """Static catalog of brands and vehicles."""

    def __init__(self, brands: Iterable[Brand] = (), items: Iterable[CatalogItem] = ()) -> None:
        self._brands = list(brands)
        self._items = list(items)

    @classmethod
    def from_rows(
        cls,
        brand_rows: Iterable[Mapping[str, Any]],
        item_rows: Iterable[Mapping[str, Any]],
    ) -> InMemoryCatalog:
        return cls(
            brands=[Brand.model_validate(row) for row in brand_rows],
            items=[CatalogItem.model_validate(row) for row in item_rows],
        )

    async def list_brands(self) -> list[Brand]:
        return list(self._brands)

    async def list_items_by_brand(self, brand_id: str) -> list[CatalogItem]:
        return [item for item in self._items if item.brand_id == str(brand_id)]

    async def list_all_items(self) -> list[CatalogItem]:
        return list(self._items)


class StaticDictionaries:
    """Fixed label tables."""

    def __init__(
        self,
        feature_labels: Mapping[str, str] | None = None,
        vehicle_type_labels: Mapping[str, str] | None = None,
    ) -> None:
        self._feature_labels = dict(feature_labels or {})
        self._vehicle_type_labels = dict(vehicle_type_labels or {})

    @classmethod
    def from_rows(
        cls,
        feature_rows: Sequence[Mapping[str, Any]],
        vehicle_type_rows: Sequence[Mapping[str, Any]],
    ) -> StaticDictionaries:
        return cls(build_label_map(feature_rows), build_label_map(vehicle_type_rows))

    async def feature_labels(self) -> dict[str, str]:
        return dict(self._feature_labels)

    async def vehicle_type_labels(self) -> dict[str, str]:
        return dict(self._vehicle_type_labels)
