from __future__ import annotations

from pygarage.labels import build_label_map, describe_slot, label_for
from pygarage.models import SlotSnapshot


def test_build_label_map_trims_and_skips_blanks() -> None:
    rows = [
        {"dict_key": " BENNY ", "dict_value": " Benny's "},
        {"dict_key": "HSW", "dict_value": "   "},
        {"dict_key": "", "dict_value": "Nothing"},
        {"dict_value": "No key"},
        {"dict_key": "DRIFT", "dict_value": "Drift"},
    ]

    assert build_label_map(rows) == {"BENNY": "Benny's", "DRIFT": "Drift"}


def test_build_label_map_custom_fields() -> None:
    rows = [{"code": "SUPER", "label": "Super"}]

    assert build_label_map(rows, key_field="code", value_field="label") == {"SUPER": "Super"}


def test_unknown_code_falls_back_to_code() -> None:
    assert label_for(" IMANI ", {"BENNY": "Benny's"}) == "IMANI"


def test_describe_slot() -> None:
    slot = SlotSnapshot(
        vehicle_name_en="Zentorno",
        brand_name_en="Pegassi",
        feature_tags=("BENNY", "IMANI"),
        vehicle_type="SUPER",
    )

    labels = describe_slot(slot, {"BENNY": "Benny's"}, {"SUPER": "Super"})

    assert labels.title == "Zentorno"
    assert labels.brand == "Pegassi"
    assert labels.features == ("Benny's", "IMANI")
    assert labels.vehicle_type == "Super"


def test_describe_slot_without_codes() -> None:
    labels = describe_slot(SlotSnapshot(remarks="x"), {}, {})

    assert labels.title == ""
    assert labels.features == ()
    assert labels.vehicle_type is None
