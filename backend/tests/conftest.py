"""Root conftest: shared fixtures for gateway tests.

Invariants:
    - Every test gets a fresh Gateway (no state shared between tests)
    - Time is a ManualClock: window expiry is driven by clock.advance(), never sleep
    - Settings never read a .env file
"""

import pytest
from httpx import ASGITransport, AsyncClient

from toolbox_gateway.config import Settings
from toolbox_gateway.core.clock import ManualClock
from toolbox_gateway.main import create_app
from toolbox_gateway.services.gateway import Gateway


@pytest.fixture
def clock():
    return ManualClock(start=1_000.0)


@pytest.fixture
def settings():
    return Settings(_env_file=None, log_format="text")


@pytest.fixture
def gateway(settings, clock):
    return Gateway(settings, clock=clock)


@pytest.fixture
def app(gateway):
    return create_app(gateway=gateway)


@pytest.fixture
async def client(app):
    """FastAPI test client; ASGITransport reports the peer as 127.0.0.1."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

