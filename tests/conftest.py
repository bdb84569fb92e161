import io

import pytest
from PIL import Image

from content_store import ContentStore
from storage import LocalStorage


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "storage")


@pytest.fixture
def store(storage):
    s = ContentStore(storage, key="test_snapshot")
    s.load()
    return s


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (41, 98, 255)).save(buf, format="PNG")
    return buf.getvalue()
