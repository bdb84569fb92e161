"""
Owner of the committed site data and its persisted snapshot.

The store is constructed explicitly and handed to whoever needs it. The
snapshot is written before the in-memory value is swapped, so a failed
write leaves the previous commit as the visible state.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Dict

from cleaner import normalise_site
from config import SNAPSHOT_KEY
from errors import ConfirmationRequiredError, PersistenceError
from schema_site import DEFAULT_DATA, clone
from storage import LocalStorage

log = logging.getLogger(__name__)


class ContentStore:
    def __init__(
        self,
        storage: LocalStorage,
        key: str = SNAPSHOT_KEY,
        default: Dict[str, Any] = DEFAULT_DATA,
    ):
        storage.check_key(key)
        self._storage = storage
        self._key = key
        self._default = clone(default)
        self._data = clone(default)

    @property
    def data(self) -> Dict[str, Any]:
        """Copy of the committed site data."""
        return clone(self._data)

    def load(self) -> Dict[str, Any]:
        """Read the snapshot into memory, falling back to the defaults.

        Never raises: a missing snapshot is normal, an unreadable one is
        logged and ignored.
        """
        try:
            saved = self._storage.get_item(self._key)
        except (OSError, ValueError) as e:  # UnicodeDecodeError is a ValueError
            log.warning("Failed to read saved data %r: %s", self._key, e)
            saved = None

        if saved is None:
            self._data = clone(self._default)
            return self.data

        try:
            self._data = normalise_site(json.loads(saved))
        except (ValueError, RecursionError) as e:  # deeply nested JSON overflows the decoder
            log.warning("Failed to parse saved data %r, using defaults: %s", self._key, e)
            self._data = clone(self._default)
        return self.data

    def commit(self, new_data: Dict[str, Any]) -> Dict[str, Any]:
        """Persist *new_data* and make it the committed value.

        Raises ValueError for malformed data and PersistenceError if the
        snapshot cannot be written; in both cases nothing changes.
        """
        data = normalise_site(new_data)
        payload = json.dumps(data, ensure_ascii=False)
        try:
            self._storage.set_item(self._key, payload)
        except OSError as e:
            log.error("Failed to save %r: %s", self._key, e)
            raise PersistenceError(f"could not save site data: {e}") from e
        self._data = data
        log.info("Saved site data (%d career, %d works)", len(data["career"]), len(data["works"]))
        return self.data

    def reset(self, confirmed: bool = False) -> Dict[str, Any]:
        """Drop the snapshot and restore the defaults. Irreversible."""
        if not confirmed:
            raise ConfirmationRequiredError("reset must be explicitly confirmed")
        try:
            self._storage.remove_item(self._key)
        except OSError as e:
            log.error("Failed to remove %r: %s", self._key, e)
            raise PersistenceError(f"could not remove saved data: {e}") from e
        self._data = clone(self._default)
        log.info("Site data reset to defaults")
        return self.data

    def has_snapshot(self) -> bool:
        return self._storage.has_item(self._key)
