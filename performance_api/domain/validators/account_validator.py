"""Validators for account and audit-query rules. Pure functions, no infrastructure or DB access."""

from datetime import datetime, timezone
from typing import Optional

from performance_api.domain.exceptions import DomainValidationError

PASSWORD_MIN_LENGTH = 6


def validate_password(password: str) -> None:
    """Raises DomainValidationError if the password is too short or blank."""
    if not password or not password.strip():
        raise DomainValidationError("Password must not be empty")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise DomainValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        )


def validate_department(department: str) -> None:
    if not department or not department.strip():
        raise DomainValidationError("Department must not be empty")


def validate_date_range(start: Optional[datetime], end: Optional[datetime]) -> None:
    """Both bounds optional; when both are given start must not be after end."""
    if start is not None and end is not None and start > end:
        raise DomainValidationError("start_date must not be after end_date")


def as_utc_bound(value: Optional[datetime]) -> Optional[datetime]:
    """Date filters without an offset are read as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def validate_search_query(text: Optional[str]) -> str:
    """Returns the stripped search text; blank raises DomainValidationError."""
    if not text or not text.strip():
        raise DomainValidationError("Search query is required")
    return text.strip()
