"""Shared fixtures. Settings env is set before any performance_api import reads it."""

import os

os.environ.setdefault("JWT_SECRET", "test-jwt-secret-at-least-32-characters-long")
os.environ.setdefault("ENCRYPTION_KEY", "test-encryption-key-for-totp-secrets")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest

from performance_api.domain.models.user import Role, User


@pytest.fixture
def make_user():
    """Factory for domain users; password hash is a placeholder unless given."""

    def _make(
        user_id: str = "u1",
        role: Role = Role.EMPLOYEE,
        department: str = "IT Department",
        **overrides,
    ) -> User:
        fields = {
            "id": user_id,
            "name": f"User {user_id}",
            "email": f"{user_id}@brahmaputra.gov.in",
            "password_hash": "not-a-real-hash",
            "role": role,
            "department": department,
        }
        fields.update(overrides)
        return User(**fields)

    return _make
