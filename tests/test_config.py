from __future__ import annotations

import pytest

from pygarage.config import GarageConfig
from pygarage.exceptions import GarageConfigError


def test_defaults() -> None:
    config = GarageConfig()

    assert config.min_capacity == 1
    assert config.max_capacity == 100
    assert config.rollback_on_save_failure is True


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYGARAGE_MIN_CAPACITY", "2")
    monkeypatch.setenv("PYGARAGE_MAX_CAPACITY", " 50 ")
    monkeypatch.setenv("PYGARAGE_ROLLBACK_ON_SAVE_FAILURE", "off")

    config = GarageConfig.from_env()

    assert config.min_capacity == 2
    assert config.max_capacity == 50
    assert config.rollback_on_save_failure is False


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYGARAGE_MAX_CAPACITY", "50")
    monkeypatch.setenv("PYGARAGE_ROLLBACK_ON_SAVE_FAILURE", "no")

    config = GarageConfig.from_env(max_capacity=20, rollback_on_save_failure=True)

    assert config.max_capacity == 20
    assert config.rollback_on_save_failure is True


def test_unparsable_bool_keeps_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYGARAGE_ROLLBACK_ON_SAVE_FAILURE", "maybe")

    assert GarageConfig.from_env().rollback_on_save_failure is True


def test_invalid_env_int_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYGARAGE_MAX_CAPACITY", "lots")

    with pytest.raises(GarageConfigError):
        GarageConfig.from_env()


@pytest.mark.parametrize(("min_capacity", "max_capacity"), [(0, 10), (5, 4)])
def test_invalid_bounds_raise(min_capacity: int, max_capacity: int) -> None:
    with pytest.raises(GarageConfigError):
        GarageConfig(min_capacity=min_capacity, max_capacity=max_capacity)
