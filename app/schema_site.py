"""
Canonical site schema and the built-in default content.
"""
from __future__ import annotations
import json
from typing import Any, Dict

CAREER_FIELDS = ("date", "title", "role")
# fields the editor may change on a work item (id is fixed at creation)
WORK_EDITABLE = ("title", "img", "url")

DEFAULT_DATA = {
    "profileImg": "https://images.unsplash.com/photo-1573496359142-b8d87734a5a2?q=80&w=1000&auto=format&fit=crop",
    "bio": "복잡한 정보를 누구나 이해할 수 있는 영상으로 만듭니다.\n단순한 나열을 넘어 구조와 맥락을 중심으로 편집합니다.",
    "career": [
        {"date": "2022 — 2025", "title": "한국탐사저널리즘센터", "role": "뉴스 및 다큐멘터리 편집 총괄"},
        {"date": "2021", "title": "경기콘텐츠진흥원", "role": "사업기획 및 프로젝트 총괄"},
        {"date": "2012 — 2017", "title": "농협은행", "role": "수신 및 은행 업무 전반"},
    ],
    "works": [
        {"id": 1, "title": "Visual Archive_1", "img": "", "url": "https://www.youtube.com/watch?v=aqz-KE-bpKQ"},
        {"id": 2, "title": "Visual Archive_2", "img": "", "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"},
        {"id": 3, "title": "Visual Archive_3", "img": "", "url": ""},
        {"id": 4, "title": "Visual Archive_4", "img": "", "url": ""},
        {"id": 5, "title": "Visual Archive_5", "img": "", "url": ""},
        {"id": 6, "title": "Visual Archive_6", "img": "", "url": ""},
    ],
}


def clone(data: Dict[str, Any]) -> Dict[str, Any]:
    """Deep, independent copy of JSON-shaped site data."""
    return json.loads(json.dumps(data))


def describe_image_ref(value: str) -> str:
    """Short label for an image field: embedded uploads are not shown raw."""
    if value.startswith("data:"):
        return "Local file uploaded"
    return value
