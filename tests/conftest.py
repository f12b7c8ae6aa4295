from __future__ import annotations

from typing import AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from blogapp import database
from blogapp.api.deps import get_db, get_identity_service
from blogapp.client import BlogApiClient, SWRCache
from blogapp.main import app

from .fakes import FakeFirestore, FakeIdentityService, run_in_fake_transaction


@pytest.fixture()
def db() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture()
def identity() -> FakeIdentityService:
    service = FakeIdentityService()
    service.add_user(uid="u1", email="ada@example.com", password="secret123", display_name="Ada")
    return service


@pytest.fixture(autouse=True)
def fake_transactions(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(database, "run_in_transaction", run_in_fake_transaction)


@pytest.fixture()
def overrides(db: FakeFirestore, identity: FakeIdentityService) -> Generator[None, None, None]:
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_identity_service] = lambda: identity
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(overrides: None) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def api(overrides: None) -> AsyncGenerator[BlogApiClient, None]:
    """Blog API client talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield BlogApiClient(http_client=http_client)


@pytest.fixture()
def cache() -> SWRCache:
    return SWRCache()
