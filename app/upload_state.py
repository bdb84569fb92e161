"""
Bookkeeping for the editor's file uploaders.

Streamlit hands back the same uploaded file on every rerun, so each
selection must be sent to the ingestor only once. Markers are kept for the
live edit session only and dropped as soon as another one starts.
"""
from __future__ import annotations
from typing import Set, Tuple, Union

from image_ingestor import PROFILE_TARGET


def image_field_key(generation: int, target: Union[str, int]) -> str:
    """Widget key of the URL input that shows *target*'s image."""
    if target == PROFILE_TARGET:
        return f"profile_url_{generation}"
    return f"work_{generation}_{target}_img"


class UploadTracker:
    def __init__(self):
        self.generation: int | None = None
        self._seen: Set[Tuple[str, str, int]] = set()

    def first_time(self, generation: int, uploader_key: str, name: str, size: int) -> bool:
        """True the first time a selection is seen in session *generation*."""
        if generation != self.generation:
            self.generation = generation
            self._seen = set()
        marker = (uploader_key, name, size)
        if marker in self._seen:
            return False
        self._seen.add(marker)
        return True

    def clear(self) -> None:
        self.generation = None
        self._seen = set()

    def __len__(self) -> int:
        return len(self._seen)
