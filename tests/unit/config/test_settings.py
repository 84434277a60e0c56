"""AppSettings validation."""

import pytest
from pydantic import ValidationError

from performance_api.config.settings import AppSettings

SECRETS = {
    "jwt_secret": "settings-test-jwt-secret-32-characters!",
    "encryption_key": "settings-test-encryption-key",
}


def test_defaults():
    s = AppSettings(_env_file=None, **SECRETS)
    assert s.storage_backend == "memory"
    assert s.rate_limit_backend == "memory"
    assert s.sensitive_window_seconds == 900
    assert s.sensitive_max_attempts == 5
    assert s.seed_demo_users is False


def test_short_jwt_secret_rejected():
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, jwt_secret="short", encryption_key=SECRETS["encryption_key"])


def test_database_backend_requires_url():
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        AppSettings(_env_file=None, storage_backend="database", **SECRETS)


def test_redis_backend_requires_url():
    with pytest.raises(ValidationError, match="REDIS_URL"):
        AppSettings(_env_file=None, rate_limit_backend="redis", **SECRETS)


def test_demo_seed_refused_in_prod():
    with pytest.raises(ValidationError, match="SEED_DEMO_USERS"):
        AppSettings(_env_file=None, environment="prod", seed_demo_users=True, **SECRETS)


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SENSITIVE_MAX_ATTEMPTS", "3")
    monkeypatch.setenv("RATE_LIMIT_BACKEND", "redis")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    s = AppSettings(_env_file=None, **SECRETS)
    assert s.sensitive_max_attempts == 3
    assert s.redis_url == "redis://localhost:6379/0"
