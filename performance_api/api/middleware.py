"""API middleware: correlation ID, post-response audit trigger."""

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from starlette.background import BackgroundTask, BackgroundTasks
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from performance_api.core.context import correlation_id_ctx
from performance_api.governance.audit_models import AuditCategory, EntityType, Severity

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

_METHOD_CATEGORY: Dict[str, AuditCategory] = {
    "POST": AuditCategory.CREATE,
    "GET": AuditCategory.READ,
    "PUT": AuditCategory.UPDATE,
    "PATCH": AuditCategory.UPDATE,
    "DELETE": AuditCategory.DELETE,
}
_DENIED_STATUSES = frozenset({401, 403})


@dataclass
class AuditIntent:
    """Registered on request.state by the audit_action dependency; handlers may fill entity_id/details."""

    action: str
    entity_type: EntityType
    category: Optional[AuditCategory] = None
    severity: Severity = Severity.LOW
    entity_id: Optional[str] = None
    details: Optional[str] = None


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def _category_for(intent: AuditIntent, method: str) -> AuditCategory:
    if intent.category is not None:
        return intent.category
    return _METHOD_CATEGORY.get(method.upper(), AuditCategory.SYSTEM)


def _severity_for(intent: AuditIntent, status_code: int) -> Severity:
    if status_code in _DENIED_STATUSES and intent.severity.rank < Severity.MEDIUM.rank:
        return Severity.MEDIUM
    return intent.severity


class AuditTriggerMiddleware(BaseHTTPMiddleware):
    """
    After response: write an audit entry for routes that registered an AuditIntent.
    The write is a response background task, so it runs once the last body chunk
    has been sent. Must be the outermost user middleware for that ordering to
    hold at the server boundary.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        intent = getattr(request.state, "audit_intent", None)
        if intent is None:
            return response

        task = BackgroundTask(self._write_entry, request, intent, response.status_code)
        if response.background is None:
            response.background = task
        else:
            response.background = BackgroundTasks([response.background, task])
        return response

    async def _write_entry(self, request: Request, intent: AuditIntent, status_code: int) -> None:
        container = request.app.state.container
        user = getattr(request.state, "user", None)
        await container.audit_logger.log_action_safely(
            actor_id=user.id if user else None,
            actor_name=user.name if user else None,
            action=intent.action,
            entity_type=intent.entity_type,
            entity_id=intent.entity_id,
            category=_category_for(intent, request.method),
            severity=_severity_for(intent, status_code),
            details=intent.details,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            correlation_id=getattr(request.state, "correlation_id", None),
            metadata={
                "method": request.method,
                "url": str(request.url),
                "status_code": status_code,
            },
        )
