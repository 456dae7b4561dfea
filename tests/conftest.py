import io

import pytest
from fastapi.testclient import TestClient

from mediavault.config import Settings
from mediavault.main import create_app
from mediavault.storage import MediaStorage

SAMPLE = (bytes(range(256)) * 4)[:1000]


class BytesSource:
    """Minimal async byte source, standing in for an UploadFile."""

    def __init__(self, data: bytes):
        self._buf = io.BytesIO(data)

    async def read(self, size: int = -1) -> bytes:
        return self._buf.read(size)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        storage_path=tmp_path / "uploads",
        max_upload_size_mb=1,
        stream_chunk_size=64,
        upload_chunk_size=256,
        _env_file=None,
    )


@pytest.fixture
def storage(settings):
    s = MediaStorage.from_settings(settings)
    s.ensure_root()
    return s


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def upload_root(settings):
    return settings.storage_path
