"""
File-backed key/value storage for a single running instance.

Each key maps to <dir>/<key>.json. Writes go to a temporary file in the
same directory and are moved into place with os.replace, so a reader sees
either the old value or the new one, never a half-written file.
"""
from __future__ import annotations
import os
import re
import tempfile
from pathlib import Path

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStorage:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    @staticmethod
    def check_key(key: str) -> str:
        if not _KEY_RE.fullmatch(key) or key.startswith("."):
            raise ValueError(f"invalid storage key: {key!r}")
        return key

    def _path(self, key: str) -> Path:
        self.check_key(key)
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        """Stored text for *key*, or None when nothing is stored."""
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.root.mkdir(parents=True, exist_ok=True)
        tmp_file = tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.root, suffix=".tmp", delete=False
        )
        tmp_path = Path(tmp_file.name)
        try:
            with tmp_file:
                tmp_file.write(value)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        """Delete *key*; deleting a missing key is a no-op."""
        self._path(key).unlink(missing_ok=True)

    def has_item(self, key: str) -> bool:
        return self._path(key).exists()
