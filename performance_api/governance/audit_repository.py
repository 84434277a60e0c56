"""Audit repository protocol. Governance layer depends on this; infrastructure implements it."""

from typing import Protocol

from performance_api.governance.audit_models import AuditEntry, AuditPage, AuditQuery, AuditStats


class AuditRepository(Protocol):
    """Protocol for the append-only audit sink."""

    async def save(self, entry: AuditEntry) -> None:
        """Append an immutable audit entry. Must not allow mutation or deletion."""
        ...

    async def query(self, query: AuditQuery) -> AuditPage:
        """Return entries matching query, newest first, plus the unpaginated total."""
        ...

    async def stats(self, query: AuditQuery) -> AuditStats:
        """Count entries matching query by category, entity type and severity. Ignores limit/offset."""
        ...
