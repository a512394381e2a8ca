"""Test fixtures: temporary storage root, services and FastAPI test client."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from filedeck.config import Settings
from filedeck.main import create_app
from filedeck.services.catalog import EntryCatalog
from filedeck.services.content_reader import ContentReader
from filedeck.services.file_operations import FileOperations
from filedeck.services.path_resolver import PathResolver


@pytest.fixture
def root(tmp_path):
    """Empty storage root inside the per-test temp directory."""
    path = tmp_path / "storage"
    path.mkdir()
    return path


@pytest.fixture
def resolver(root):
    return PathResolver(root)


@pytest.fixture
def catalog(resolver):
    return EntryCatalog(resolver)


@pytest.fixture
def ops(resolver):
    return FileOperations(resolver)


@pytest.fixture
def reader(resolver):
    return ContentReader(resolver)


@pytest.fixture
def settings(tmp_path, root):
    return Settings(
        storage_root=str(root),
        chat_file=str(tmp_path / "data" / "chat.json"),
        max_upload_mb=1,
        _env_file=None,
    )


@pytest_asyncio.fixture
async def client(settings):
    """Async test client; no disk probes, so storage disk fields are null."""
    app = create_app(settings, probes=[])

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
