"""
Shape checks and normalisation for site data read back from storage.
"""
from __future__ import annotations
from typing import Any, Dict, List

from schema_site import CAREER_FIELDS

_STRING_FIELDS = ("profileImg", "bio")


# ───────────────────────────────────────── helpers ──
def _text(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{where} must be a string, got {type(value).__name__}")
    return value


def _records(value: Any, where: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{where} must be a list")
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            raise ValueError(f"{where}[{i}] must be an object")
    return value


def _work_id(value: Any, where: str) -> int:
    # bool is an int subclass; a stored `true` is not a valid id
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{where}.id must be an integer")
    return value


# ───────────────────────────────────────── cleaner ──
def normalise_site(raw: Any) -> Dict[str, Any]:
    """Return a fresh, well-formed SiteData dict built from *raw*.

    Missing strings become "", unknown keys are dropped. Anything that
    cannot be read as site data raises ValueError.
    """
    if not isinstance(raw, dict):
        raise ValueError("site data must be an object")

    out: Dict[str, Any] = {k: _text(raw.get(k), k) for k in _STRING_FIELDS}

    out["career"] = [
        {f: _text(c.get(f), f"career[{i}].{f}") for f in CAREER_FIELDS}
        for i, c in enumerate(_records(raw.get("career"), "career"))
    ]

    works, seen = [], set()
    for i, w in enumerate(_records(raw.get("works"), "works")):
        wid = _work_id(w.get("id"), f"works[{i}]")
        if wid in seen:
            raise ValueError(f"duplicate work id {wid}")
        seen.add(wid)
        works.append({
            "id":    wid,
            "title": _text(w.get("title"), f"works[{i}].title"),
            "img":   _text(w.get("img"),   f"works[{i}].img"),
            "url":   _text(w.get("url"),   f"works[{i}].url"),
        })
    out["works"] = works
    return out
