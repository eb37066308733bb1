from __future__ import annotations

import pytest

from pygarage.normalize import clean_text, join_feature_tags, safe_int, safe_str, split_feature_tags


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        ("", None),
        ("12", 12),
        ("12.9", 12),
        (7, 7),
        ("nan", None),
        ("abc", None),
        ([], None),
    ],
)
def test_safe_int(value: object, expected: int | None) -> None:
    assert safe_int(value) == expected


def test_safe_str_and_clean_text() -> None:
    assert safe_str(None) is None
    assert safe_str("") is None
    assert safe_str(5) == "5"
    assert clean_text("  hi ") == "hi"
    assert clean_text("   ") is None
    assert clean_text(None) is None


def test_split_feature_tags() -> None:
    assert split_feature_tags(None) is None
    assert split_feature_tags("") == ()
    assert split_feature_tags("BENNY, ,DRIFT ") == ("BENNY", "DRIFT")
    assert split_feature_tags(["HSW", " IMANI "]) == ("HSW", "IMANI")
    assert join_feature_tags(("BENNY", "DRIFT")) == "BENNY,DRIFT"


def test_split_feature_tags_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        split_feature_tags(5)
