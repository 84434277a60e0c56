"""Users API router: scoped read, administrator status toggle."""

from typing import Annotated

from fastapi import APIRouter, Depends

from performance_api.api.dependencies import (
    audit_action,
    get_container,
    get_current_user,
    require_resource_access,
    require_role,
    require_two_factor,
    sensitive_operation_limit,
)
from performance_api.container import Container
from performance_api.domain.models.resource import ResourceCategory
from performance_api.domain.models.user import Role
from performance_api.domain.schemas.auth import UserPayload, UserStatusUpdateRequest
from performance_api.governance.audit_models import AuditCategory, EntityType, Severity

router = APIRouter()


@router.get(
    "/{user_id}",
    dependencies=[
        Depends(get_current_user),
        Depends(require_resource_access(ResourceCategory.USER, "user_id")),
    ],
)
async def get_user(user_id: str, container: Annotated[Container, Depends(get_container)]):
    user = await container.auth_service.get_user(user_id)
    return {"success": True, "data": UserPayload.model_validate(user).model_dump(mode="json")}


@router.patch(
    "/{user_id}/status",
    dependencies=[
        Depends(get_current_user),
        Depends(require_role(Role.ADMINISTRATOR)),
        Depends(require_resource_access(ResourceCategory.USER, "user_id")),
        Depends(require_two_factor),
        Depends(sensitive_operation_limit("user-status")),
        Depends(
            audit_action(
                "Update User Status",
                EntityType.USER,
                AuditCategory.UPDATE,
                Severity.HIGH,
                entity_param="user_id",
            )
        ),
    ],
)
async def update_user_status(
    user_id: str,
    body: UserStatusUpdateRequest,
    container: Annotated[Container, Depends(get_container)],
):
    """Soft enable/disable. Disabled users' tokens are rejected from the next request on."""
    user = await container.auth_service.set_active(user_id, body.is_active)
    state = "activated" if user.is_active else "deactivated"
    return {
        "success": True,
        "message": f"User {state} successfully",
        "data": UserPayload.model_validate(user).model_dump(mode="json"),
    }
