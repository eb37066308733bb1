"""Normalization helpers.

Centralizes defensive parsing of catalog and stored records.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from pygarage._constants import FEATURE_SEPARATOR


def safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def clean_text(value: str | None) -> str | None:
    """Strip *value* and collapse blank strings to ``None``."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def split_feature_tags(value: Any) -> tuple[str, ...] | None:
    """Parse feature tags from ``"BENNY, DRIFT"`` or an iterable of strings.

    Order is preserved and blank entries are dropped.  ``None`` stays ``None``
    so callers can tell "no feature field" from "empty feature list".
    """
    if value is None:
        return None
    if isinstance(value, str):
        parts: Iterable[Any] = value.split(FEATURE_SEPARATOR)
    elif isinstance(value, Iterable):
        parts = value
    else:
        raise TypeError(f"feature tags must be a string or a list, got {type(value).__name__}")
    return tuple(text for text in (str(part).strip() for part in parts) if text)


def join_feature_tags(tags: Iterable[str]) -> str:
    return FEATURE_SEPARATOR.join(tags)
