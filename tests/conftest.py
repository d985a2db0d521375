"""
Shared fixtures for the Fintrack test-suite.

Test strategy:
1. Unit tests for models, validation and aggregation (pure, no I/O)
2. Service tests against the in-memory store
3. HTTP tests through FastAPI's TestClient
4. No real Google API calls in tests (fake worksheets / mocks)
"""

import asyncio
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from fintrack.api import create_api
from fintrack.config import Settings
from fintrack.ledger import LedgerService
from fintrack.orchestrator import create_app_components
from fintrack.services.identity import JWTIdentityVerifier
from fintrack.services.storage import InMemoryLedgerStore


SECRET = "test-secret-do-not-use"

SALARY = {"amount": 1000, "type": "income", "category": "Salary", "date": "2024-01-05"}
FOOD = {"amount": 200, "type": "expense", "category": "Food", "date": "2024-01-20"}


def run_async(coro):
    """Run a coroutine to completion from synchronous test code."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
        asyncio.set_event_loop(None)


def make_token(owner="alice", secret=SECRET, expires_in=timedelta(minutes=15), **claims):
    payload = {"id": owner, "exp": datetime.utcnow() + expires_in}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_header(owner="alice", **kwargs):
    return {"Authorization": f"Bearer {make_token(owner, **kwargs)}"}


@pytest.fixture
def store():
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(store):
    return LedgerService(store=store)


@pytest.fixture
def verifier():
    return JWTIdentityVerifier(secret=SECRET)


@pytest.fixture
def components(store, verifier):
    return create_app_components(settings=Settings(), store=store, verifier=verifier)


@pytest.fixture
def client(components):
    with TestClient(create_api(components)) as test_client:
        yield test_client
