"""Scores API router: per-user listing and verification."""

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
from performance_api.domain.models.user import Role, User
from performance_api.domain.schemas.resources import ScoreResponse
from performance_api.governance.audit_models import AuditCategory, EntityType, Severity

router = APIRouter()


@router.get(
    "/user/{user_id}",
    dependencies=[
        Depends(get_current_user),
        Depends(require_resource_access(ResourceCategory.USER, "user_id")),
    ],
)
async def list_user_scores(user_id: str, container: Annotated[Container, Depends(get_container)]):
    scores = await container.resource_service.list_scores_for_user(user_id)
    return {
        "success": True,
        "data": [ScoreResponse.model_validate(s).model_dump(mode="json") for s in scores],
    }


@router.post(
    "/{score_id}/verify",
    dependencies=[
        Depends(get_current_user),
        Depends(require_role(Role.DIVISION_HEAD, Role.ADMINISTRATOR)),
        Depends(require_resource_access(ResourceCategory.SCORE, "score_id")),
        Depends(require_two_factor),
        Depends(sensitive_operation_limit("verify-score")),
        Depends(
            audit_action(
                "Verify Score",
                EntityType.SCORE,
                AuditCategory.UPDATE,
                Severity.MEDIUM,
                entity_param="score_id",
            )
        ),
    ],
)
async def verify_score(
    score_id: str,
    user: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
):
    score = await container.resource_service.verify_score(score_id, verifier=user)
    return {
        "success": True,
        "message": "Score verified successfully",
        "data": ScoreResponse.model_validate(score).model_dump(mode="json"),
    }
