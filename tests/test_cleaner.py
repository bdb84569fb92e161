"""Tests for site data normalisation."""

import pytest

from cleaner import normalise_site
from schema_site import DEFAULT_DATA, clone, describe_image_ref


def test_default_data_is_already_normal():
    assert normalise_site(clone(DEFAULT_DATA)) == DEFAULT_DATA


def test_missing_fields_become_empty_and_unknown_keys_drop():
    out = normalise_site({
        "bio": "hi",
        "career": [{"date": "2021"}],
        "works": [{"id": 7, "title": "A", "extra": 1}],
        "theme": "dark",
    })
    assert out == {
        "profileImg": "",
        "bio": "hi",
        "career": [{"date": "2021", "title": "", "role": ""}],
        "works": [{"id": 7, "title": "A", "img": "", "url": ""}],
    }


def test_returns_independent_copy():
    raw = clone(DEFAULT_DATA)
    out = normalise_site(raw)
    out["works"][0]["title"] = "changed"
    assert raw["works"][0]["title"] == "Visual Archive_1"


@pytest.mark.parametrize("raw", [
    [],
    "text",
    {"career": "not a list"},
    {"works": ["not an object"]},
    {"bio": 12},
    {"works": [{"title": "no id"}]},
    {"works": [{"id": "1"}]},
    {"works": [{"id": True}]},
    {"works": [{"id": 1}, {"id": 1}]},
])
def test_rejects_malformed_data(raw):
    with pytest.raises(ValueError):
        normalise_site(raw)


def test_embedded_images_are_labelled_not_shown():
    assert describe_image_ref("data:image/png;base64,AAAA") == "Local file uploaded"
    assert describe_image_ref("https://example.com/a.jpg") == "https://example.com/a.jpg"
    assert describe_image_ref("") == ""
