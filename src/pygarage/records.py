"""Garage <-> stored record mapping.

Garages are persisted as flat records::

    {
        "id": 3,
        "garage_name": "Eclipse Tower",
        "num": 10,
        "vehicle_list": "[{}, {\"vehicleName\": \"Zentorno\", ...}, ...]",
        "remarks": null,
        "garage_order": 2
    }

``vehicle_list`` is a JSON string holding one object per slot, ``{}`` for an
empty slot.  Decoding pads short lists with empty slots; a list longer than
``num`` is only accepted when the overflow is empty.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pygarage import slots as slot_array
from pygarage.exceptions import RecordFormatError
from pygarage.models.garage import Garage, GarageDraft
from pygarage.models.slot import SlotSnapshot
from pygarage.normalize import clean_text, safe_int, safe_str

_logger = logging.getLogger(__name__)


def _encode_vehicle_list(slots: tuple[SlotSnapshot, ...]) -> str:
    return json.dumps([slot.to_record() for slot in slots], ensure_ascii=False, separators=(",", ":"))


def _decode_vehicle_list(raw: Any, *, garage_id: Any) -> list[Any]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RecordFormatError(
                f"vehicle_list of garage {garage_id!r} is not JSON: {raw[:64]}",
                garage_id=garage_id,
            ) from exc
    else:
        decoded = raw
    if not isinstance(decoded, list):
        raise RecordFormatError(f"vehicle_list of garage {garage_id!r} is not a list", garage_id=garage_id)
    return decoded


def _decode_slot(entry: Any, *, garage_id: Any, index: int) -> SlotSnapshot:
    if not isinstance(entry, Mapping):
        raise RecordFormatError(f"slot {index} of garage {garage_id!r} is not an object", garage_id=garage_id)
    try:
        return SlotSnapshot.model_validate(dict(entry))
    except ValidationError as exc:
        raise RecordFormatError(f"slot {index} of garage {garage_id!r} is invalid: {exc}", garage_id=garage_id) from exc


def garage_from_record(record: Mapping[str, Any]) -> Garage:
    """Decode a stored record into a :class:`Garage`."""
    garage_id = record.get("id")
    if garage_id is None or garage_id == "":
        raise RecordFormatError("garage record without id")
    capacity = safe_int(record.get("num"))
    if capacity is None or capacity < 0:
        raise RecordFormatError(f"garage {garage_id!r} has invalid capacity {record.get('num')!r}", garage_id=garage_id)

    entries = _decode_vehicle_list(record.get("vehicle_list"), garage_id=garage_id)
    slots = [_decode_slot(entry, garage_id=garage_id, index=index) for index, entry in enumerate(entries)]

    if len(slots) > capacity:
        overflow = slots[capacity:]
        if slot_array.occupied_count(overflow):
            raise RecordFormatError(
                f"garage {garage_id!r} holds {len(slots)} slots but capacity is {capacity}",
                garage_id=garage_id,
            )
        _logger.debug("Dropping %d empty overflow slot(s) from garage %r", len(overflow), garage_id)
        slots = slots[:capacity]
    elif len(slots) < capacity:
        slots.extend(slot_array.empty_slots(capacity - len(slots)))

    return Garage(
        id=garage_id,
        name=str(record.get("garage_name") or ""),
        capacity=capacity,
        remarks=clean_text(safe_str(record.get("remarks"))),
        order=safe_int(record.get("garage_order")),
        slots=tuple(slots),
    )


def garage_to_record(garage: Garage) -> dict[str, Any]:
    return {
        "id": garage.id,
        "garage_name": garage.name,
        "num": garage.capacity,
        "vehicle_list": _encode_vehicle_list(garage.slots),
        "remarks": garage.remarks,
        "garage_order": garage.order,
    }


def draft_to_record(draft: GarageDraft) -> dict[str, Any]:
    """Record for a garage that has not been assigned an id yet."""
    return {
        "garage_name": draft.name,
        "num": draft.capacity,
        "vehicle_list": _encode_vehicle_list(slot_array.empty_slots(draft.capacity)),
        "remarks": draft.remarks,
        "garage_order": draft.order,
    }
