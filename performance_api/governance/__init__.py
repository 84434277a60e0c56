"""Governance: audit trail models, sink protocol and logger. No FastAPI."""

from performance_api.governance.audit_logger import AuditLogger
from performance_api.governance.audit_models import (
    AuditCategory,
    AuditEntry,
    AuditPage,
    AuditQuery,
    AuditStats,
    EntityType,
    Severity,
)
from performance_api.governance.audit_repository import AuditRepository

__all__ = [
    "AuditCategory",
    "AuditEntry",
    "AuditLogger",
    "AuditPage",
    "AuditQuery",
    "AuditRepository",
    "AuditStats",
    "EntityType",
    "Severity",
]
