"""Tests for the admin gate state machine."""

import pytest

from auth_gate import NOTICE_BAD_KEY, NOTICE_RESET, NOTICE_SAVED, AuthGate, GateState
from config import ADMIN_KEY
from errors import ConfirmationRequiredError, GateLockedError, PersistenceError
from schema_site import DEFAULT_DATA


@pytest.fixture
def gate(store):
    return AuthGate(store)


def test_starts_closed_and_locked_out(gate):
    assert gate.state is GateState.CLOSED
    with pytest.raises(GateLockedError):
        gate.editor


def test_trigger_opens_locked_session_from_store(gate, store):
    session = gate.trigger()
    assert gate.state is GateState.LOCKED
    assert session.is_open
    assert session.working == store.data
    with pytest.raises(GateLockedError):
        gate.editor


@pytest.mark.parametrize("candidate", ["", "08", "081", "0819", "08180", " 0818", "0818 "])
def test_only_exact_key_unlocks(gate, candidate):
    gate.trigger()
    gate.candidate_input = candidate
    assert gate.verify(candidate) is False
    assert gate.state is GateState.LOCKED
    assert gate.candidate_input == ""
    assert gate.notice == NOTICE_BAD_KEY


def test_exact_key_unlocks(gate):
    gate.trigger()
    assert gate.verify(ADMIN_KEY) is True
    assert gate.state is GateState.UNLOCKED
    assert gate.editor is gate.session
    assert gate.notice == ""


def test_verify_outside_locked_state_does_nothing(gate):
    assert gate.verify(ADMIN_KEY) is False
    assert gate.state is GateState.CLOSED


def test_custom_secret(store):
    gate = AuthGate(store, secret="letmein")
    gate.trigger()
    assert not gate.verify(ADMIN_KEY)
    assert gate.verify("letmein")


def test_save_commits_and_closes(gate, store):
    gate.trigger()
    gate.verify(ADMIN_KEY)
    session = gate.editor
    session.set_bio("saved bio")
    gate.save()
    assert store.data["bio"] == "saved bio"
    assert store.has_snapshot()
    assert gate.state is GateState.CLOSED
    assert gate.notice == NOTICE_SAVED
    assert not session.is_open


def test_failed_save_stays_unlocked(gate, store, monkeypatch):
    def boom(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(store._storage, "set_item", boom)
    gate.trigger()
    gate.verify(ADMIN_KEY)
    gate.editor.set_bio("pending")
    with pytest.raises(PersistenceError):
        gate.save()
    assert gate.state is GateState.UNLOCKED
    assert gate.editor.working["bio"] == "pending"
    assert store.data == DEFAULT_DATA


def test_close_discards_edits(gate, store):
    before = store.data
    gate.trigger()
    gate.verify(ADMIN_KEY)
    session = gate.editor
    session.set_bio("thrown away")
    gate.close()
    assert gate.state is GateState.CLOSED
    assert not session.is_open
    assert store.data == before


def test_close_from_locked(gate):
    session = gate.trigger()
    gate.close()
    assert gate.state is GateState.CLOSED
    assert not session.is_open


def test_retrigger_replaces_open_session(gate):
    first = gate.trigger()
    gate.verify(ADMIN_KEY)
    first.set_bio("unsaved")
    second = gate.trigger()
    assert not first.is_open
    assert second.is_open
    assert gate.state is GateState.LOCKED
    assert second.working["bio"] == DEFAULT_DATA["bio"]


def test_reset_needs_unlock_and_confirmation(gate, store):
    store.commit({**DEFAULT_DATA, "bio": "custom"})
    gate.trigger()
    with pytest.raises(GateLockedError):
        gate.reset(confirmed=True)
    gate.verify(ADMIN_KEY)
    with pytest.raises(ConfirmationRequiredError):
        gate.reset()
    assert store.data["bio"] == "custom"
    assert gate.state is GateState.UNLOCKED

    session = gate.editor
    assert gate.reset(confirmed=True) == DEFAULT_DATA
    assert store.data == DEFAULT_DATA
    assert not store.has_snapshot()
    assert gate.state is GateState.CLOSED
    assert gate.notice == NOTICE_RESET
    assert not session.is_open
