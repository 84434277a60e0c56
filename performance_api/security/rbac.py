"""Role-based access control. No FastAPI."""

from typing import Iterable, Optional

from performance_api.domain.models.user import Role, User
from performance_api.security.exceptions import AuthenticationError, AuthorizationError


class RBACService:
    """Gate on a fixed set of permitted roles. Pure, synchronous, no I/O."""

    def require_role(self, user: Optional[User], allowed_roles: Iterable[Role]) -> None:
        """Raises AuthenticationError without a user, AuthorizationError if role not allowed."""
        if user is None:
            raise AuthenticationError("Authentication required.")
        if user.role not in frozenset(allowed_roles):
            raise AuthorizationError("Insufficient permissions.")
