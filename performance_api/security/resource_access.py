"""
Resource-scoped access control. No FastAPI.

Policy table (one decision function per role):

Role           user target            task / score target
ADMINISTRATOR  always                 always
DIVISION_HEAD  same department        owner in same department
EMPLOYEE       own id only            owner is requester

Lookups that find nothing deny. Store failures surface as AccessResolutionError.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict

from performance_api.application.repositories import ResourceRepository, UserRepository
from performance_api.domain.models.resource import ResourceCategory
from performance_api.domain.models.user import Role, User
from performance_api.security.exceptions import (
    AccessResolutionError,
    AuthorizationError,
    SecurityError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceTarget:
    category: ResourceCategory
    resource_id: str


class _UnresolvedTarget(Exception):
    """Target resource or its owner does not exist."""


Decision = Callable[["ResourceAccessPolicy", User, ResourceTarget], Awaitable[bool]]


class ResourceAccessPolicy:
    """Decide whether a requester may touch a user, task or score."""

    def __init__(self, users: UserRepository, resources: ResourceRepository) -> None:
        self._users = users
        self._resources = resources

    async def check(self, requester: User, target: ResourceTarget) -> None:
        """Returns if permitted; raises AuthorizationError or AccessResolutionError."""
        decide = _DECISIONS.get(requester.role)
        if decide is None:
            raise AuthorizationError("Access denied.")
        try:
            allowed = await decide(self, requester, target)
        except _UnresolvedTarget:
            allowed = False
        except SecurityError:
            raise
        except Exception as e:
            logger.exception(
                "resource_access_resolution_failed",
                extra={"category": target.category.value, "resource_id": target.resource_id},
            )
            raise AccessResolutionError("Error checking resource access.") from e

        if not allowed:
            if requester.role == Role.EMPLOYEE:
                raise AuthorizationError("You can only access your own resources.")
            raise AuthorizationError("Access denied.")

    async def _owner_id(self, target: ResourceTarget) -> str:
        if target.category == ResourceCategory.USER:
            return target.resource_id
        resource = await self._resources.find_by_id(target.category, target.resource_id)
        if resource is None:
            raise _UnresolvedTarget(target.resource_id)
        return resource.owner_id

    async def _owner_department(self, target: ResourceTarget) -> str:
        owner = await self._users.get_by_id(await self._owner_id(target))
        if owner is None:
            raise _UnresolvedTarget(target.resource_id)
        return owner.department


async def _administrator(policy: ResourceAccessPolicy, requester: User, target: ResourceTarget) -> bool:
    return True


async def _division_head(policy: ResourceAccessPolicy, requester: User, target: ResourceTarget) -> bool:
    return await policy._owner_department(target) == requester.department


async def _employee(policy: ResourceAccessPolicy, requester: User, target: ResourceTarget) -> bool:
    if target.category == ResourceCategory.USER:
        return target.resource_id == requester.id
    return await policy._owner_id(target) == requester.id


_DECISIONS: Dict[Role, Decision] = {
    Role.ADMINISTRATOR: _administrator,
    Role.DIVISION_HEAD: _division_head,
    Role.EMPLOYEE: _employee,
}
