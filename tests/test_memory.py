from __future__ import annotations

import pytest

from pygarage.exceptions import GarageDeleteError, GarageSaveError
from pygarage.memory import InMemoryGarageRepository, StaticDictionaries
from pygarage.models import Garage, GarageDraft


@pytest.mark.asyncio
async def test_create_assigns_ids_and_order() -> None:
    repository = InMemoryGarageRepository()

    first = await repository.create_garage(GarageDraft(name="Eclipse", capacity=2))
    second = await repository.create_garage(GarageDraft(name="Arcadius", capacity=1, order=10))
    third = await repository.create_garage(GarageDraft(name="Vinewood", capacity=1))

    assert (first.id, first.order) == (1, 1)
    assert (second.id, second.order) == (2, 10)
    assert (third.id, third.order) == (3, 11)
    assert [garage.id for garage in await repository.load_garages()] == [1, 2, 3]


@pytest.mark.asyncio
async def test_unordered_garages_load_last() -> None:
    repository = InMemoryGarageRepository(
        [
            {"id": 1, "garage_name": "Loose", "num": 0, "vehicle_list": "[]", "garage_order": None},
            {"id": 2, "garage_name": "Ranked", "num": 0, "vehicle_list": "[]", "garage_order": 5},
        ]
    )

    assert [garage.id for garage in await repository.load_garages()] == [2, 1]


@pytest.mark.asyncio
async def test_unknown_garages_raise() -> None:
    repository = InMemoryGarageRepository()

    with pytest.raises(GarageSaveError):
        await repository.save_garage(Garage(id=9, name="Ghost", capacity=1))
    with pytest.raises(GarageDeleteError) as exc_info:
        await repository.delete_garage(9)

    assert exc_info.value.garage_id == 9


@pytest.mark.asyncio
async def test_records_are_copies() -> None:
    repository = InMemoryGarageRepository()
    await repository.create_garage(GarageDraft(name="Eclipse", capacity=1))

    repository.records[0]["garage_name"] = "Changed"

    assert repository.records[0]["garage_name"] == "Eclipse"


@pytest.mark.asyncio
async def test_static_dictionaries() -> None:
    dictionaries = StaticDictionaries({"BENNY": "Benny's"}, {"SUPER": "Super"})

    assert await dictionaries.feature_labels() == {"BENNY": "Benny's"}
    assert await dictionaries.vehicle_type_labels() == {"SUPER": "Super"}
