"""
Working copy of the site data opened for editing.

Every mutator builds a new working value instead of changing the old one
in place, and hands callers a copy, so nothing outside the session ever
holds a reference into it. Each session carries a generation number that
late async work (image uploads) checks before touching it.
"""
from __future__ import annotations
import itertools
import logging
import time
from typing import Any, Dict

from errors import InvalidEditError, SessionClosedError
from schema_site import CAREER_FIELDS, WORK_EDITABLE, clone

log = logging.getLogger(__name__)

_generations = itertools.count(1)


class EditSession:
    def __init__(self, current: Dict[str, Any]):
        self._working = clone(current)
        self.generation = next(_generations)
        self.is_open = True

    @classmethod
    def open(cls, current: Dict[str, Any]) -> "EditSession":
        return cls(current)

    @property
    def working(self) -> Dict[str, Any]:
        return clone(self._working)

    # ───────────────────────────────────────── helpers ──
    def _check_open(self):
        if not self.is_open:
            raise SessionClosedError(f"edit session {self.generation} is closed")

    def _replace(self, **changes) -> Dict[str, Any]:
        self._working = {**self._working, **changes}
        return self.working

    @staticmethod
    def _check_index(seq: list, index: int, what: str):
        # negative indices would silently address from the end
        if not isinstance(index, int) or not 0 <= index < len(seq):
            raise InvalidEditError(f"{what} index {index!r} out of range (0..{len(seq) - 1})")

    # ───────────────────────────────────────── mutators ──
    def set_profile_image(self, value: str) -> Dict[str, Any]:
        self._check_open()
        return self._replace(profileImg=value)

    def set_bio(self, text: str) -> Dict[str, Any]:
        self._check_open()
        return self._replace(bio=text)

    def update_career_item(self, index: int, field: str, value: str) -> Dict[str, Any]:
        self._check_open()
        career = self._working["career"]
        self._check_index(career, index, "career")
        if field not in CAREER_FIELDS:
            raise InvalidEditError(f"unknown career field {field!r}")
        new_career = list(career)
        new_career[index] = {**career[index], field: value}
        return self._replace(career=new_career)

    def update_work_field(self, index: int, field: str, value: str) -> Dict[str, Any]:
        self._check_open()
        works = self._working["works"]
        self._check_index(works, index, "works")
        if field not in WORK_EDITABLE:
            raise InvalidEditError(f"work field {field!r} is not editable")
        new_works = list(works)
        new_works[index] = {**works[index], field: value}
        return self._replace(works=new_works)

    def set_work_image(self, work_id: int, value: str) -> Dict[str, Any]:
        """Set img on the work with *work_id*, wherever it now sits."""
        self._check_open()
        works = self._working["works"]
        for i, w in enumerate(works):
            if w["id"] == work_id:
                return self.update_work_field(i, "img", value)
        raise InvalidEditError(f"no work with id {work_id}")

    def add_work(self) -> Dict[str, Any]:
        self._check_open()
        works = self._working["works"]
        # time-based like the page always did, but never behind an existing id
        new_id = max(int(time.time() * 1000), max((w["id"] for w in works), default=0) + 1)
        return self._replace(works=[*works, {"id": new_id, "title": "", "img": "", "url": ""}])

    def remove_work(self, index: int) -> Dict[str, Any]:
        self._check_open()
        works = self._working["works"]
        self._check_index(works, index, "works")
        return self._replace(works=works[:index] + works[index + 1:])

    # ───────────────────────────────────────── lifecycle ──
    def commit(self, store) -> Dict[str, Any]:
        """Hand the working value to *store*; close only once it is saved."""
        self._check_open()
        committed = store.commit(self._working)
        self.is_open = False
        log.info("Edit session %d committed", self.generation)
        return committed

    def cancel(self) -> None:
        self._check_open()
        self._working = {}
        self.is_open = False
        log.info("Edit session %d cancelled", self.generation)
