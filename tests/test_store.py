from __future__ import annotations

import pytest

from pygarage.exceptions import GarageNotFoundError
from pygarage.models import Garage, GarageDraft
from pygarage.store import InventoryStore


def _garage(garage_id: int | str, capacity: int = 2) -> Garage:
    return Garage(id=garage_id, name=f"Garage {garage_id}", capacity=capacity)


def test_store_is_an_ordered_mapping() -> None:
    store = InventoryStore([_garage(2), _garage(1), _garage("x")])

    assert list(store) == [2, 1, "x"]
    assert len(store) == 3
    assert store[1].name == "Garage 1"
    assert "x" in store
    assert store.garages()[0].id == 2


def test_duplicate_ids_rejected() -> None:
    with pytest.raises(ValueError):
        InventoryStore([_garage(1), _garage(1)])


def test_require_unknown_garage() -> None:
    with pytest.raises(GarageNotFoundError) as exc_info:
        InventoryStore().require(5)

    assert exc_info.value.garage_id == 5
    assert str(exc_info.value) == "Garage 5 not found"
    assert isinstance(exc_info.value, KeyError)


def test_with_garages_is_copy_on_write() -> None:
    original = InventoryStore([_garage(1), _garage(2)])
    renamed = _garage(1).model_copy(update={"name": "Renamed"})

    updated = original.with_garages(renamed, _garage(3))

    assert original[1].name == "Garage 1"
    assert 3 not in original
    assert updated[1].name == "Renamed"
    assert list(updated) == [1, 2, 3]
    assert updated[2] is original[2]


def test_without_garage() -> None:
    original = InventoryStore([_garage(1), _garage(2)])

    updated = original.without_garage(1)

    assert list(updated) == [2]
    assert list(original) == [1, 2]
    with pytest.raises(GarageNotFoundError):
        updated.without_garage(1)


def test_add_garage_assigns_next_id_and_order() -> None:
    store = InventoryStore([_garage(4), _garage("legacy")])
    draft = GarageDraft(name="Vinewood", capacity=5)

    updated, garage = store.add_garage(draft)

    assert store.next_id() == 5
    assert garage.id == 5
    assert garage.order == 3
    assert garage.capacity == 5
    assert updated[5] == garage


def test_equality_follows_contents_and_order() -> None:
    assert InventoryStore([_garage(1), _garage(2)]) == InventoryStore([_garage(1), _garage(2)])
    assert InventoryStore([_garage(1), _garage(2)]) != InventoryStore([_garage(2), _garage(1)])
