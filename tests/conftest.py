"""Shared test fixtures: fake clock, in-memory stores and an app wired to them."""

import pytest
from fastapi.testclient import TestClient

from newsletter_api.api.app import create_app
from newsletter_api.api.dependencies import AppContainer
from newsletter_api.config import Settings
from newsletter_api.services import PasswordHasher, TokenService
from tests.fakes import FakeClock, InMemoryCacheStore, InMemoryRecordStore


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_store(clock):
    return InMemoryCacheStore(clock)


@pytest.fixture
def record_store(clock):
    return InMemoryRecordStore(clock)


@pytest.fixture
def test_settings():
    return Settings(
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        app_base_url="http://app.test",
        log_json=False,
        log_level="warning",
    )


@pytest.fixture
def tokens(test_settings, clock):
    return TokenService.create(test_settings, clock=clock)


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def container(test_settings, cache_store, record_store, tokens, hasher):
    return AppContainer.assemble(test_settings, cache_store, record_store, tokens=tokens, hasher=hasher)


@pytest.fixture
def client(container, test_settings):
    """Test client over the in-memory stores."""
    with TestClient(create_app(container, test_settings)) as test_client:
        yield test_client


@pytest.fixture
def register_and_sign_in(client):
    """Register a user and return (user id, auth headers)."""

    def _register(email: str = "ana@example.com", name: str = "Ana", password: str = "s3cret") -> tuple[int, dict]:
        created = client.post("/register", json={"name": name, "email": email, "password": password})
        assert created.status_code == 201
        signed_in = client.post("/signin", json={"email": email, "password": password})
        assert signed_in.status_code == 200
        return created.json()["id"], {"Authorization": f"Bearer {signed_in.json()['token']}"}

    return _register
