"""Pytest fixtures and configuration"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from whati8.api.deps import get_store
from whati8.main import app
from whati8.services.ledger_service import SplitLedger
from whati8.services.session_store import MemorySessionStore


@pytest.fixture
def store() -> MemorySessionStore:
    """Fresh in-memory session store for each test"""
    return MemorySessionStore()


@pytest_asyncio.fixture
async def client(store: MemorySessionStore) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with session store override"""
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def ledger() -> SplitLedger:
    """Empty ledger"""
    return SplitLedger(event_name="Pizza Night")


@pytest.fixture
def pizza_ledger(ledger: SplitLedger):
    """Alice and Bob share a 10.00 pizza with 1.00 tax"""
    alice = ledger.add_participant("Alice")
    bob = ledger.add_participant("Bob")
    pizza = ledger.add_line_item("Pizza", "10.00", [alice, bob])
    ledger.set_total_tax("1.00")
    return ledger, alice, bob, pizza


@pytest_asyncio.fixture
async def session_id(client: AsyncClient) -> str:
    """Create a ledger session through the API"""
    response = await client.post("/api/v1/ledgers", json={"event_name": "Pizza Night"})
    assert response.status_code == 201
    return response.json()["session_id"]
