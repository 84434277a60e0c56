"""Immutable audit logging for security-relevant actions. No FastAPI."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from performance_api.governance.audit_models import (
    ANONYMOUS_ACTOR,
    AuditCategory,
    AuditEntry,
    EntityType,
    Severity,
)
from performance_api.governance.audit_repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Writes immutable audit entries via repository.
    Must include: who, what, which entity, from where, when (UTC).
    log_action_safely is the entry point for post-response writes: failures
    go to the operational log and never propagate.
    """

    def __init__(self, repository: AuditRepository) -> None:
        self._repository = repository

    async def log_action(
        self,
        *,
        actor_id: Optional[str],
        actor_name: Optional[str],
        action: str,
        entity_type: EntityType,
        entity_id: Optional[str],
        category: AuditCategory,
        severity: Severity = Severity.LOW,
        details: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        correlation_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditEntry:
        """Write immutable audit entry. Timestamp is UTC."""
        entry = AuditEntry(
            id=str(uuid.uuid4()),
            timestamp_utc=datetime.now(timezone.utc),
            actor_id=actor_id,
            actor_name=actor_name or ANONYMOUS_ACTOR,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or f"{action} {entity_type.value}",
            ip_address=ip_address,
            user_agent=user_agent,
            category=category,
            severity=severity,
            correlation_id=correlation_id,
            metadata=metadata,
        )
        await self._repository.save(entry)
        return entry

    async def log_action_safely(self, **kwargs: Any) -> None:
        """log_action, but a failed write is reported and swallowed."""
        try:
            await self.log_action(**kwargs)
        except Exception:
            logger.exception(
                "audit_write_failed",
                extra={
                    "action": kwargs.get("action"),
                    "entity_id": kwargs.get("entity_id"),
                    "correlation_id": kwargs.get("correlation_id"),
                },
            )
