"""
FastAPI dependency injection: container, current user and the per-route guard chain.

Routes list guards in this order: get_current_user -> require_role ->
require_resource_access -> require_two_factor -> sensitive_operation_limit ->
audit_action. Any guard that raises ends the request; later guards never run.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from performance_api.api.middleware import AuditIntent
from performance_api.container import Container
from performance_api.core.context import user_id_ctx
from performance_api.domain.models.resource import ResourceCategory
from performance_api.domain.models.user import Role, User
from performance_api.governance.audit_models import AuditCategory, EntityType, Severity
from performance_api.scalability.rate_limiter import SensitiveOperationLimiter
from performance_api.security.resource_access import ResourceTarget


def get_container(request: Request) -> Container:
    """Return the process container built in create_app."""
    return request.app.state.container


async def get_current_user(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> User:
    """Verify the bearer token; attach the user to request.state and the logging context."""
    user = await container.authenticator.authenticate(authorization)
    request.state.user = user
    user_id_ctx.set(user.id)
    return user


def require_role(*roles: Role):
    allowed = frozenset(roles)

    async def dependency(
        user: Annotated[User, Depends(get_current_user)],
        container: Annotated[Container, Depends(get_container)],
    ) -> User:
        container.rbac.require_role(user, allowed)
        return user

    return dependency


def require_resource_access(category: ResourceCategory, param: str = "id"):
    """Scoped check on the resource named by path parameter `param`."""

    async def dependency(
        request: Request,
        user: Annotated[User, Depends(get_current_user)],
        container: Annotated[Container, Depends(get_container)],
    ) -> User:
        target = ResourceTarget(category=category, resource_id=str(request.path_params[param]))
        await container.access_policy.check(user, target)
        return user

    return dependency


async def require_two_factor(
    user: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
    x_2fa_token: Annotated[Optional[str], Header(alias="X-2FA-Token")] = None,
) -> None:
    container.two_factor_gate.check(user, x_2fa_token)


def _actor_key(request: Request) -> str:
    user = getattr(request.state, "user", None)
    if user is not None:
        return user.id
    return request.client.host if request.client else "unknown"


def sensitive_operation_limit(scope: str):
    """Sliding-window limit per user id (or client IP when anonymous)."""

    async def dependency(
        request: Request,
        container: Annotated[Container, Depends(get_container)],
    ) -> None:
        limiter = SensitiveOperationLimiter(
            container.rate_limit_backend,
            window_seconds=container.settings.sensitive_window_seconds,
            max_attempts=container.settings.sensitive_max_attempts,
            scope=scope,
        )
        await limiter.hit(_actor_key(request))

    return dependency


def audit_action(
    action: str,
    entity_type: EntityType,
    category: Optional[AuditCategory] = None,
    severity: Severity = Severity.LOW,
    entity_param: str = "id",
):
    """Register an AuditIntent; AuditTriggerMiddleware writes it after the response is sent."""

    async def dependency(request: Request) -> AuditIntent:
        entity_id = request.path_params.get(entity_param)
        intent = AuditIntent(
            action=action,
            entity_type=entity_type,
            category=category,
            severity=severity,
            entity_id=str(entity_id) if entity_id is not None else None,
        )
        request.state.audit_intent = intent
        return intent

    return dependency


def get_audit_intent(request: Request) -> Optional[AuditIntent]:
    return getattr(request.state, "audit_intent", None)
