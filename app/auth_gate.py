"""
Admin gate in front of the in-place editor.

CLOSED → LOCKED (admin icon) → UNLOCKED (correct key) → CLOSED (save/close).

This is a cosmetic gate, not a security boundary: the key ships with the
running client and anyone who reads it can open the editor. Do not put
anything sensitive behind it.
"""
from __future__ import annotations
import logging
from enum import Enum

from config import ADMIN_KEY
from content_store import ContentStore
from edit_session import EditSession
from errors import GateLockedError

log = logging.getLogger(__name__)

NOTICE_BAD_KEY = "Key is not valid."
NOTICE_SAVED = "Saved."
NOTICE_RESET = "Reset to defaults."


class GateState(Enum):
    CLOSED = "closed"
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class AuthGate:
    def __init__(self, store: ContentStore, secret: str = ADMIN_KEY):
        self.store = store
        self._secret = secret
        self.state = GateState.CLOSED
        self.session: EditSession | None = None
        self.candidate_input = ""
        self.notice = ""

    def trigger(self) -> EditSession:
        """Open the editor locked, seeded from the committed data.

        Any session still open is dropped unsaved; only one is live.
        """
        self._drop_session()
        self.session = EditSession.open(self.store.data)
        self.state = GateState.LOCKED
        self.candidate_input = ""
        self.notice = ""
        return self.session

    def verify(self, candidate: str) -> bool:
        if self.state is not GateState.LOCKED:
            return False
        if candidate == self._secret:
            self.state = GateState.UNLOCKED
            self.candidate_input = ""
            self.notice = ""
            return True
        log.info("Admin key rejected")
        self.candidate_input = ""
        self.notice = NOTICE_BAD_KEY
        return False

    @property
    def editor(self) -> EditSession:
        if self.state is not GateState.UNLOCKED or self.session is None:
            raise GateLockedError("editor is locked")
        return self.session

    def save(self):
        """Commit the edits and close. On a failed save stay unlocked."""
        committed = self.editor.commit(self.store)
        self._close(NOTICE_SAVED)
        return committed

    def close(self) -> None:
        """Leave the editor without saving."""
        self._drop_session()
        self._close("")

    def reset(self, confirmed: bool = False):
        """Factory reset from the editor, then close it."""
        if self.state is not GateState.UNLOCKED:
            raise GateLockedError("editor is locked")
        restored = self.store.reset(confirmed=confirmed)
        self._drop_session()
        self._close(NOTICE_RESET)
        return restored

    # ───────────────────────────────────────── helpers ──
    def _drop_session(self):
        if self.session is not None and self.session.is_open:
            self.session.cancel()

    def _close(self, notice: str):
        self.session = None
        self.state = GateState.CLOSED
        self.candidate_input = ""
        self.notice = notice
