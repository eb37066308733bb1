"""Display labels for feature and vehicle-type codes.

Labels are a read-only side table: snapshots only carry opaque codes, and
nothing in the placement engine looks at labels.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pygarage.models._base import GarageBaseModel
from pygarage.models.slot import SlotSnapshot


def build_label_map(
    rows: Iterable[Mapping[str, Any]],
    *,
    key_field: str = "dict_key",
    value_field: str = "dict_value",
) -> dict[str, str]:
    """Turn dictionary rows into a ``code -> label`` map.

    Keys and values are stripped; rows missing either side are skipped.
    """
    labels: dict[str, str] = {}
    for row in rows:
        key = row.get(key_field)
        value = row.get(value_field)
        if not key or not value:
            continue
        key_text = str(key).strip()
        value_text = str(value).strip()
        if key_text and value_text:
            labels[key_text] = value_text
    return labels


def label_for(code: str, labels: Mapping[str, str]) -> str:
    """Label for *code*, falling back to the code itself."""
    code = code.strip()
    return labels.get(code, code)


class SlotLabels(GarageBaseModel):
    """Human-readable annotation of a snapshot."""

    title: str
    brand: str
    features: tuple[str, ...] = ()
    vehicle_type: str | None = None


def describe_slot(
    snapshot: SlotSnapshot,
    feature_labels: Mapping[str, str],
    vehicle_type_labels: Mapping[str, str],
) -> SlotLabels:
    return SlotLabels(
        title=snapshot.display_name,
        brand=snapshot.brand_name or snapshot.brand_name_en or "",
        features=tuple(label_for(tag, feature_labels) for tag in snapshot.feature_tags or ()),
        vehicle_type=label_for(snapshot.vehicle_type, vehicle_type_labels) if snapshot.vehicle_type else None,
    )
