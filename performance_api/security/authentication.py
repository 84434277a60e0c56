"""Bearer-token authentication: header -> claims -> active user. No FastAPI."""

import logging
from typing import Optional

from performance_api.application.repositories import UserRepository
from performance_api.domain.models.user import User
from performance_api.security.exceptions import AuthenticationError
from performance_api.security.tokens import TokenService

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the credential from 'Bearer <token>', or None if absent/malformed."""
    if not authorization or not authorization.strip():
        return None
    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME or not credential.strip():
        return None
    return credential.strip()


class Authenticator:
    """Verify a bearer credential and resolve it to an active user."""

    def __init__(self, tokens: TokenService, users: UserRepository) -> None:
        self._tokens = tokens
        self._users = users

    async def authenticate(self, authorization: Optional[str]) -> User:
        """
        Raises AuthenticationError when the header is missing, the token is
        invalid/expired, or its user no longer exists or is inactive.
        """
        token = extract_bearer_token(authorization)
        if token is None:
            raise AuthenticationError("Access denied. No token provided.")

        claims = self._tokens.decode(token)
        user = await self._users.get_by_id(claims.user_id)
        if user is None or not user.is_active:
            logger.warning("token_user_rejected", extra={"token_user_id": claims.user_id})
            raise AuthenticationError("Invalid token or user not found.")
        return user
