"""Library configuration for pygarage."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pygarage._constants import DEFAULT_MAX_CAPACITY, DEFAULT_MIN_CAPACITY
from pygarage.exceptions import GarageConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(env_key: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise GarageConfigError(f"{env_key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class GarageConfig:
    """Manager configuration.

    Parameters
    ----------
    min_capacity : int
        Smallest capacity accepted for a new garage.
    max_capacity : int
        Largest capacity accepted for a new garage.
    rollback_on_save_failure : bool
        Restore the pre-commit store when the persistence collaborator fails
        to save a committed change.  When disabled the optimistic in-memory
        state is kept and the caller is expected to retry the save.
    """

    min_capacity: int = DEFAULT_MIN_CAPACITY
    max_capacity: int = DEFAULT_MAX_CAPACITY
    rollback_on_save_failure: bool = True

    def __post_init__(self) -> None:
        if self.min_capacity < 1:
            raise GarageConfigError(f"min_capacity must be >= 1, got {self.min_capacity}")
        if self.max_capacity < self.min_capacity:
            raise GarageConfigError(
                f"max_capacity ({self.max_capacity}) must not be below min_capacity ({self.min_capacity})"
            )

    @classmethod
    def from_env(cls, **overrides: Any) -> GarageConfig:
        """Create configuration from ``PYGARAGE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_INT_MAP = {
            "PYGARAGE_MIN_CAPACITY": "min_capacity",
            "PYGARAGE_MAX_CAPACITY": "max_capacity",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_int(env_key, val)

        if "rollback_on_save_failure" not in overrides:
            config_kwargs["rollback_on_save_failure"] = _env_bool(
                env.get("PYGARAGE_ROLLBACK_ON_SAVE_FAILURE"),
                True,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
