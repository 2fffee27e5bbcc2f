"""HTTP client fixtures bound to the per-test database."""

import httpx
import pytest
import pytest_asyncio

from aosha.api.app import app
from aosha.api.routes.assets import get_asset_repository
from aosha.api.routes.auth import get_user_repository
from aosha.api.routes.maps import get_map_repository


@pytest_asyncio.fixture
async def client(map_repo, user_repo, asset_repo):
    """Async client talking to the FastAPI app in-process (no lifespan)."""
    app.dependency_overrides[get_map_repository] = lambda: map_repo
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_asset_repository] = lambda: asset_repo
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.fixture
def bearer():
    """Authorization header builder: ``bearer(token)``."""
    return lambda token: {"Authorization": f"Bearer {token}"}
