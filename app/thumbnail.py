"""
Display thumbnail for a work item.

img if set → YouTube still for the work's url → generic placeholder.
Only builds strings; nothing here touches the network.
"""
from __future__ import annotations
import re
from typing import Any, Dict

PLACEHOLDER_IMAGE = "https://placehold.co/600x400/111/333?text=NO+IMAGE"
_YT_THUMB = "https://img.youtube.com/vi/{}/maxresdefault.jpg"

# short link, /v/, /u/<c>/, embed, watch?v= and &v= forms
_YT_URL = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
_YT_ID_LEN = 11


def youtube_id(url: str) -> str | None:
    """Video id from a YouTube url, or None if the url has no 11-char id."""
    m = _YT_URL.match(url or "")
    if m and len(m.group(2)) == _YT_ID_LEN:
        return m.group(2)
    return None


def resolve(work: Dict[str, Any]) -> str:
    if work.get("img"):
        return work["img"]
    if yt_id := youtube_id(work.get("url", "")):
        return _YT_THUMB.format(yt_id)
    return PLACEHOLDER_IMAGE
