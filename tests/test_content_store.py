"""Tests for the committed site data and its snapshot lifecycle."""

import json
import logging

import pytest

from content_store import ContentStore
from errors import ConfirmationRequiredError, PersistenceError
from schema_site import DEFAULT_DATA


def _sample():
    return {
        "profileImg": "data:image/png;base64,AAAA",
        "bio": "line one\nline two",
        "career": [{"date": "2024", "title": "Studio", "role": "Editor"}],
        "works": [
            {"id": 10, "title": "First", "img": "", "url": "https://youtu.be/aqz-KE-bpKQ"},
            {"id": 3, "title": "Second", "img": "https://example.com/a.jpg", "url": ""},
        ],
    }


def test_load_without_snapshot_gives_defaults(store):
    assert store.load() == DEFAULT_DATA
    assert not store.has_snapshot()


def test_commit_then_load_round_trips(storage):
    first = ContentStore(storage, key="snap")
    first.commit(_sample())

    second = ContentStore(storage, key="snap")
    assert second.load() == _sample()


def test_snapshot_is_plain_json(storage):
    ContentStore(storage, key="snap").commit(_sample())
    assert json.loads(storage.get_item("snap")) == _sample()


def test_corrupt_snapshot_falls_back_with_diagnostic(storage, caplog):
    storage.set_item("snap", "{not json")
    store = ContentStore(storage, key="snap")
    with caplog.at_level(logging.WARNING, logger="content_store"):
        assert store.load() == DEFAULT_DATA
    assert "Failed to parse saved data" in caplog.text


def test_wrong_shape_snapshot_falls_back(storage):
    storage.set_item("snap", json.dumps({"works": [{"id": 1}, {"id": 1}]}))
    assert ContentStore(storage, key="snap").load() == DEFAULT_DATA


def test_unreadable_storage_falls_back(storage, monkeypatch):
    def boom(key):
        raise OSError("permission denied")

    monkeypatch.setattr(storage, "get_item", boom)
    assert ContentStore(storage, key="snap").load() == DEFAULT_DATA


def test_failed_write_keeps_previous_commit(store, monkeypatch):
    store.commit(_sample())
    before = store.data

    def boom(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(store._storage, "set_item", boom)
    changed = _sample()
    changed["bio"] = "never saved"
    with pytest.raises(PersistenceError):
        store.commit(changed)

    assert store.data == before
    monkeypatch.undo()
    assert ContentStore(store._storage, key="test_snapshot").load() == before


def test_commit_rejects_malformed_data_without_change(store):
    with pytest.raises(ValueError):
        store.commit({"works": [{"id": "x"}]})
    assert store.data == DEFAULT_DATA
    assert not store.has_snapshot()


def test_data_is_a_copy(store):
    data = store.data
    data["works"].clear()
    assert len(store.data["works"]) == 6


def test_reset_requires_confirmation(store):
    store.commit(_sample())
    with pytest.raises(ConfirmationRequiredError):
        store.reset()
    assert store.data == _sample()
    assert store.has_snapshot()


def test_reset_restores_defaults_and_is_idempotent(store):
    store.commit(_sample())
    assert store.reset(confirmed=True) == DEFAULT_DATA
    assert not store.has_snapshot()
    assert store.reset(confirmed=True) == DEFAULT_DATA
    assert not store.has_snapshot()
    assert store.load() == DEFAULT_DATA


def test_non_utf8_snapshot_falls_back_with_diagnostic(storage, caplog):
    storage.root.mkdir(parents=True, exist_ok=True)
    (storage.root / "snap.json").write_bytes(b'{"bio": "\xff\xfe"}')
    store = ContentStore(storage, key="snap")
    with caplog.at_level(logging.WARNING, logger="content_store"):
        assert store.load() == DEFAULT_DATA
    assert "Failed to read saved data" in caplog.text


def test_deeply_nested_snapshot_falls_back_with_diagnostic(storage, caplog):
    storage.set_item("snap", "[" * 200000 + "]" * 200000)
    store = ContentStore(storage, key="snap")
    with caplog.at_level(logging.WARNING, logger="content_store"):
        assert store.load() == DEFAULT_DATA
    assert "Failed to parse saved data" in caplog.text


@pytest.mark.parametrize("key", ["bad/key", "", ".hidden", "snap\n"])
def test_invalid_snapshot_key_is_rejected_at_construction(storage, key):
    with pytest.raises(ValueError):
        ContentStore(storage, key=key)
