"""Audit logs API router: scoped listing, per-user activity, administrator views."""

from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from performance_api.api.dependencies import (
    get_container,
    get_current_user,
    require_resource_access,
    require_role,
)
from performance_api.application.audit_query_service import AuditLogFilters
from performance_api.container import Container
from performance_api.domain.models.resource import ResourceCategory
from performance_api.domain.models.user import Role, User
from performance_api.domain.schemas.audit import AuditEntryResponse
from performance_api.domain.validators import as_utc_bound, validate_date_range, validate_search_query
from performance_api.governance.audit_models import AuditCategory, AuditEntry, EntityType, Severity

router = APIRouter()

_admin_only = [Depends(get_current_user), Depends(require_role(Role.ADMINISTRATOR))]


def _serialize(entries: List[AuditEntry]) -> list:
    return [AuditEntryResponse.model_validate(e).model_dump(mode="json") for e in entries]


@router.get("")
async def list_logs(
    viewer: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
    user_id: Optional[str] = None,
    action: Optional[str] = None,
    entity_type: Optional[EntityType] = None,
    category: Optional[AuditCategory] = None,
    severity: Optional[Severity] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
):
    """Employees see their own entries, division heads their department's, administrators all."""
    start_date, end_date = as_utc_bound(start_date), as_utc_bound(end_date)
    validate_date_range(start_date, end_date)
    filters = AuditLogFilters(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        category=category,
        severity=severity,
        start=start_date,
        end=end_date,
    )
    entries, pagination = await container.audit_queries.list_logs(viewer, filters, page=page, limit=limit)
    return {"success": True, "data": _serialize(entries), "pagination": pagination}


@router.get("/stats")
async def log_stats(
    viewer: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
):
    stats = await container.audit_queries.stats(viewer)
    return {
        "success": True,
        "data": {
            "total_logs": stats.total,
            "category_stats": stats.by_category,
            "entity_type_stats": stats.by_entity_type,
            "severity_stats": stats.by_severity,
        },
    }


@router.get("/search")
async def search_logs(
    viewer: Annotated[User, Depends(get_current_user)],
    container: Annotated[Container, Depends(get_container)],
    q: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=200)] = 20,
):
    """Same scope as the listing; q matches action, details or actor name."""
    text = validate_search_query(q)
    start_date, end_date = as_utc_bound(start_date), as_utc_bound(end_date)
    validate_date_range(start_date, end_date)
    entries, pagination = await container.audit_queries.search(
        viewer, text, start=start_date, end=end_date, page=page, limit=limit
    )
    return {"success": True, "data": _serialize(entries), "pagination": pagination}


@router.get(
    "/user/{user_id}",
    dependencies=[
        Depends(get_current_user),
        Depends(require_resource_access(ResourceCategory.USER, "user_id")),
    ],
)
async def user_activity(
    user_id: str,
    container: Annotated[Container, Depends(get_container)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
):
    entries = await container.audit_queries.user_activity(user_id, limit=limit)
    return {"success": True, "data": _serialize(entries)}


@router.get("/system", dependencies=_admin_only)
async def system_logs(
    container: Annotated[Container, Depends(get_container)],
    severity: Optional[Severity] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 100,
):
    entries = await container.audit_queries.system_logs(severity=severity, limit=limit)
    return {"success": True, "data": _serialize(entries)}


@router.get("/security", dependencies=_admin_only)
async def security_events(
    container: Annotated[Container, Depends(get_container)],
    limit: Annotated[int, Query(ge=1, le=200)] = 100,
):
    entries = await container.audit_queries.security_events(limit=limit)
    return {"success": True, "data": _serialize(entries)}


@router.get("/entity/{entity_type}/{entity_id}", dependencies=_admin_only)
async def entity_trail(
    entity_type: EntityType,
    entity_id: str,
    container: Annotated[Container, Depends(get_container)],
    limit: Annotated[int, Query(ge=1, le=200)] = 100,
):
    entries = await container.audit_queries.entity_trail(entity_type, entity_id, limit=limit)
    return {"success": True, "data": _serialize(entries)}
