"""Read side of the audit trail, scoped by the viewer's role."""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Tuple

from performance_api.application.repositories import UserRepository
from performance_api.domain.models.user import Role, User
from performance_api.governance.audit_models import (
    AuditCategory,
    AuditEntry,
    AuditQuery,
    AuditStats,
    EntityType,
    Severity,
)
from performance_api.governance.audit_repository import AuditRepository

MAX_PAGE_SIZE = 200
SECURITY_CATEGORIES = frozenset({AuditCategory.LOGIN, AuditCategory.LOGOUT})
SECURITY_SEVERITIES = frozenset({Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL})


def _pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {"current": page, "pages": math.ceil(total / limit) if total else 0, "total": total}


@dataclass(frozen=True)
class AuditLogFilters:
    """Optional narrowing filters for list_logs. None means unfiltered."""

    user_id: Optional[str] = None
    action: Optional[str] = None
    entity_type: Optional[EntityType] = None
    category: Optional[AuditCategory] = None
    severity: Optional[Severity] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class AuditQueryService:
    def __init__(self, repository: AuditRepository, users: UserRepository, logger: logging.Logger) -> None:
        self._repository = repository
        self._users = users
        self._logger = logger

    async def _visible_actor_ids(self, viewer: User) -> Optional[FrozenSet[str]]:
        """None means every actor is visible."""
        if viewer.role == Role.ADMINISTRATOR:
            return None
        if viewer.role == Role.DIVISION_HEAD:
            return frozenset(await self._users.list_ids_by_department(viewer.department))
        return frozenset({viewer.id})

    async def list_logs(
        self,
        viewer: User,
        filters: AuditLogFilters,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[AuditEntry], Dict[str, int]]:
        """
        Entries newest first plus pagination {current, pages, total}.
        Filters only narrow the viewer's scope; a user_id outside it yields nothing.
        """
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        query = AuditQuery(
            actor_ids=await self._visible_actor_ids(viewer),
            actor_id=filters.user_id,
            action=filters.action,
            entity_type=filters.entity_type,
            categories=frozenset({filters.category}) if filters.category else None,
            severities=frozenset({filters.severity}) if filters.severity else None,
            start=filters.start,
            end=filters.end,
            limit=limit,
            offset=(page - 1) * limit,
        )
        result = await self._repository.query(query)
        return result.entries, _pagination(page, limit, result.total)

    async def search(
        self,
        viewer: User,
        text: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[AuditEntry], Dict[str, int]]:
        """Case-insensitive match over action, details and actor name, within the viewer's scope."""
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        result = await self._repository.query(
            AuditQuery(
                actor_ids=await self._visible_actor_ids(viewer),
                text=text,
                start=start,
                end=end,
                limit=limit,
                offset=(page - 1) * limit,
            )
        )
        return result.entries, _pagination(page, limit, result.total)

    async def stats(self, viewer: User) -> AuditStats:
        """Totals by category, entity type and severity over the viewer's scope."""
        return await self._repository.stats(AuditQuery(actor_ids=await self._visible_actor_ids(viewer)))

    async def user_activity(self, user_id: str, limit: int = 50) -> List[AuditEntry]:
        """Caller must have passed the scoped check on the user."""
        result = await self._repository.query(
            AuditQuery(actor_id=user_id, limit=min(max(limit, 1), MAX_PAGE_SIZE))
        )
        return result.entries

    async def system_logs(self, severity: Optional[Severity] = None, limit: int = 100) -> List[AuditEntry]:
        result = await self._repository.query(
            AuditQuery(
                categories=frozenset({AuditCategory.SYSTEM}),
                severities=frozenset({severity}) if severity else None,
                limit=min(max(limit, 1), MAX_PAGE_SIZE),
            )
        )
        return result.entries

    async def security_events(self, limit: int = 100) -> List[AuditEntry]:
        """Login/logout entries at medium severity or above (failed logins land here)."""
        result = await self._repository.query(
            AuditQuery(
                categories=SECURITY_CATEGORIES,
                severities=SECURITY_SEVERITIES,
                limit=min(max(limit, 1), MAX_PAGE_SIZE),
            )
        )
        return result.entries

    async def entity_trail(self, entity_type: EntityType, entity_id: str, limit: int = 100) -> List[AuditEntry]:
        result = await self._repository.query(
            AuditQuery(
                entity_type=entity_type,
                entity_id=entity_id,
                limit=min(max(limit, 1), MAX_PAGE_SIZE),
            )
        )
        return result.entries
