"""Fixtures for API unit tests: fresh settings/container per test, seeded demo users, AsyncClient."""

import pytest
from httpx import ASGITransport, AsyncClient

from performance_api.config.settings import AppSettings
from performance_api.container import build_container
from performance_api.main import create_app


@pytest.fixture
def settings():
    return AppSettings(
        _env_file=None,
        environment="test",
        jwt_secret="api-test-jwt-secret-at-least-32-characters",
        encryption_key="api-test-encryption-key",
        seed_demo_users=True,
        sensitive_window_seconds=900,
        sensitive_max_attempts=5,
    )


@pytest.fixture
async def container(settings):
    """Built and started per test so limiter and audit state never leak between tests."""
    c = build_container(settings)
    await c.startup()
    yield c
    await c.shutdown()


@pytest.fixture
def app(container):
    return create_app(container)


@pytest.fixture
async def async_client(app):
    """Async HTTP client for testing; ASGITransport does not run lifespan, container is started above."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(container):
    def _headers(user_id: str, **extra) -> dict:
        token, _ = container.tokens.issue(user_id)
        return {"Authorization": f"Bearer {token}", **extra}

    return _headers


@pytest.fixture
def audit_entries(container):
    """Snapshot accessor for the in-memory audit store."""
    return lambda: container.audit_repository.entries
