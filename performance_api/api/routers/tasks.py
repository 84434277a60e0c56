"""Tasks API router: scoped read and status change."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from performance_api.api.dependencies import (
    audit_action,
    get_audit_intent,
    get_container,
    get_current_user,
    require_resource_access,
)
from performance_api.api.middleware import AuditIntent
from performance_api.container import Container
from performance_api.domain.models.resource import ResourceCategory
from performance_api.domain.models.user import User
from performance_api.domain.schemas.resources import TaskResponse, TaskStatusUpdateRequest
from performance_api.governance.audit_models import AuditCategory, EntityType

router = APIRouter()


@router.get(
    "/{task_id}",
    dependencies=[
        Depends(get_current_user),
        Depends(require_resource_access(ResourceCategory.TASK, "task_id")),
    ],
)
async def get_task(task_id: str, container: Annotated[Container, Depends(get_container)]):
    task = await container.resource_service.get_task(task_id)
    return {"success": True, "data": TaskResponse.from_domain(task).model_dump(mode="json")}


@router.patch(
    "/{task_id}/status",
    dependencies=[
        Depends(get_current_user),
        Depends(require_resource_access(ResourceCategory.TASK, "task_id")),
        Depends(
            audit_action(
                "Update Task Status",
                EntityType.TASK,
                AuditCategory.UPDATE,
                entity_param="task_id",
            )
        ),
    ],
)
async def update_task_status(
    task_id: str,
    body: TaskStatusUpdateRequest,
    user: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
    intent: Annotated[Optional[AuditIntent], Depends(get_audit_intent)],
):
    task = await container.resource_service.update_task_status(
        task_id, body.status, actor=user, reason=body.reason
    )
    if intent is not None:
        intent.details = f"Task status changed to {task.status.value}"
    return {"success": True, "data": TaskResponse.from_domain(task).model_dump(mode="json")}
