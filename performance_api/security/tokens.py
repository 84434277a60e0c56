"""Stateless bearer tokens (JWT, HS256). Issue and verify; nothing is stored server-side."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt

from performance_api.security.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

CLAIM_SUB = "sub"
CLAIM_IAT = "iat"
CLAIM_EXP = "exp"


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Signs and validates access tokens carrying the user id in `sub`."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires = timedelta(minutes=expires_minutes)

    def issue(self, user_id: str, now: Optional[datetime] = None) -> Tuple[str, int]:
        """Return (token, expires_in_seconds)."""
        now = now or datetime.now(timezone.utc)
        payload = {
            CLAIM_SUB: str(user_id),
            CLAIM_IAT: int(now.timestamp()),
            CLAIM_EXP: int((now + self._expires).timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return token, int(self._expires.total_seconds())

    def decode(self, token: str) -> TokenClaims:
        """Verify signature, expiry and required claims. Raises AuthenticationError."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": [CLAIM_SUB, CLAIM_EXP]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Token has expired.") from e
        except jwt.InvalidTokenError as e:
            logger.info("token_rejected", extra={"reason": type(e).__name__})
            raise AuthenticationError("Invalid token.") from e

        user_id = payload.get(CLAIM_SUB)
        if not isinstance(user_id, str) or not user_id:
            raise AuthenticationError("Invalid token.")
        return TokenClaims(
            user_id=user_id,
            issued_at=datetime.fromtimestamp(payload.get(CLAIM_IAT, 0), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload[CLAIM_EXP], tz=timezone.utc),
        )
