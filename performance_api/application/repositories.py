"""User and resource repository protocols. Application and security layers depend on these; infrastructure implements them."""

from typing import List, Optional, Protocol, Union

from performance_api.domain.models.resource import ResourceCategory, Score, Task
from performance_api.domain.models.user import User

OwnedResource = Union[Task, Score]


class UserRepository(Protocol):
    """Source of truth for credentials, roles, departments and active flags."""

    async def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    async def get_by_email(self, email: str) -> Optional[User]:
        """Lookup by lower-cased email."""
        ...

    async def list_ids_by_department(self, department: str) -> List[str]:
        ...

    async def add(self, user: User) -> User:
        """Insert a new user. Email uniqueness is checked by the caller."""
        ...

    async def save(self, user: User) -> User:
        """Persist changes to an existing user."""
        ...


class ResourceRepository(Protocol):
    """Tasks and scores; each exposes owner_id for scoped access checks."""

    async def find_by_id(self, category: ResourceCategory, resource_id: str) -> Optional[OwnedResource]:
        """category is TASK or SCORE. Returns None when not found."""
        ...

    async def list_scores_for_user(self, user_id: str) -> List[Score]:
        ...

    async def save(self, resource: OwnedResource) -> OwnedResource:
        """Insert or update a task or score."""
        ...
