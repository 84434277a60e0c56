"""Domain model for users. Pure business semantics; no ORM or infrastructure."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Closed set of roles. Access decisions dispatch on this."""

    EMPLOYEE = "employee"
    DIVISION_HEAD = "division_head"
    ADMINISTRATOR = "administrator"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """
    Registered account. Never physically deleted; disabled via is_active.
    two_factor_secret holds the encrypted TOTP secret, never the raw value.
    """

    id: str
    name: str
    email: str
    password_hash: str
    role: Role
    department: str
    is_active: bool = True
    two_factor_enabled: bool = False
    two_factor_secret: Optional[str] = None
    avatar: str = ""
    last_login: Optional[datetime] = None
    created_at: datetime = field(default_factory=_utcnow)

    def record_login(self, at: Optional[datetime] = None) -> None:
        self.last_login = at or _utcnow()
