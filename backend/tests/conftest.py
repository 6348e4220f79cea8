"""Test fixtures: a served directory tree and FastAPI test client."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dirserve.config import Settings
from dirserve.main import create_app


@pytest.fixture
def files_root(tmp_path):
    """Directory tree served under /files.

    srv/
      notes.txt          "hello"
      photos/
        raw/
        a.jpg
    """
    root = tmp_path / "srv"
    root.mkdir()
    (root / "notes.txt").write_text("hello", encoding="utf-8")
    photos = root / "photos"
    photos.mkdir()
    (photos / "raw").mkdir()
    (photos / "a.jpg").write_bytes(b"\xff\xd8\xff\xe0")
    return root


@pytest.fixture
def settings(files_root):
    return Settings(_env_file=None, root=str(files_root), base_url="/files")


@pytest_asyncio.fixture
async def client(settings):
    """Provide an async test client serving files_root."""
    app = create_app(settings)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
