from contextlib import asynccontextmanager
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.database.dependencies import verify_database
from src.tracking.main import app
from tests.mocks.config_mocks import mock_get_settings  # noqa: F401

# -----------------------------------------------------------------------------
# FASTAPI CLIENT FOR API TESTING
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_openapi_schema():
    app.openapi_schema = None
    yield
    app.openapi_schema = None


@pytest.fixture
def mock_session():
    """A stand-in AsyncSession handed to every route through verify_database."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture(scope="function")
async def async_client(mock_session):
    """
    Provide an async client for FastAPI test with lifespan events.
    """

    @asynccontextmanager
    async def test_lifespan(_):
        yield

    async def override_verify_database():
        yield mock_session

    app.router.lifespan_context = test_lifespan
    app.dependency_overrides[verify_database] = override_verify_database
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    app.dependency_overrides.clear()


# -----------------------------------------------------------------------------
# DOMAIN FIXTURES
# -----------------------------------------------------------------------------


@pytest.fixture
def customer():
    return SimpleNamespace(
        id=1,
        name="Acme Logistics",
        email="ops@acmelogistics.com",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def vehicle():
    return SimpleNamespace(
        id=10,
        license_plate="ABC-123",
        customer_id=1,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def open_trip():
    return SimpleNamespace(
        id=100,
        vehicle_id=10,
        driver_id=20,
        start_time=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
        end_time=None,
        distance=0.0,
        created_at=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def authenticated(customer):
    """Make authenticate_customer resolve the customer fixture."""
    with patch(
        "src.tracking.middleware.auth.customer_repo.get_by_id",
        new_callable=AsyncMock,
        return_value=customer,
    ) as mock_get_by_id:
        yield mock_get_by_id
