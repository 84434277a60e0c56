"""Immutable audit record model and query types. Domain-level immutability."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional


class EntityType(str, Enum):
    USER = "user"
    KPI = "kpi"
    SCORE = "score"
    TASK = "task"
    NOTIFICATION = "notification"
    FINANCE = "finance"
    SYSTEM = "system"


class AuditCategory(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
    EXPORT = "export"
    IMPORT = "import"
    SYSTEM = "system"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]

ANONYMOUS_ACTOR = "Anonymous"


@dataclass(frozen=True)
class AuditEntry:
    """
    Immutable audit record: who, what, on which entity, from where, when (UTC).
    metadata carries request method, url and response status_code.
    """

    id: str
    timestamp_utc: datetime
    actor_id: Optional[str]
    actor_name: str
    action: str
    entity_type: EntityType
    entity_id: Optional[str]
    details: str
    ip_address: Optional[str]
    user_agent: Optional[str]
    category: AuditCategory
    severity: Severity
    correlation_id: Optional[str]
    metadata: Optional[Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging and API responses."""
        return {
            "id": self.id,
            "timestamp_utc": self.timestamp_utc.isoformat(),
            "actor_id": self.actor_id,
            "actor_name": self.actor_name,
            "action": self.action,
            "entity_type": self.entity_type.value,
            "entity_id": self.entity_id,
            "details": self.details,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "category": self.category.value,
            "severity": self.severity.value,
            "correlation_id": self.correlation_id,
            "metadata": self.metadata,
        }


def _contains_text(entry: AuditEntry, text: str) -> bool:
    needle = text.lower()
    return any(needle in value.lower() for value in (entry.action, entry.details, entry.actor_name))


@dataclass(frozen=True)
class AuditQuery:
    """
    Filter for audit reads. None means "no constraint".
    actor_ids restricts to a set (visibility scope); actor_id narrows further.
    action matches case-insensitively as a substring; text does the same over
    action, details and actor name. Results are newest first.
    """

    actor_ids: Optional[FrozenSet[str]] = None
    actor_id: Optional[str] = None
    action: Optional[str] = None
    text: Optional[str] = None
    entity_type: Optional[EntityType] = None
    entity_id: Optional[str] = None
    categories: Optional[FrozenSet[AuditCategory]] = None
    severities: Optional[FrozenSet[Severity]] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    limit: int = 50
    offset: int = 0

    def matches(self, entry: AuditEntry) -> bool:
        """In-process evaluation of the filter (used by the in-memory store)."""
        if self.actor_ids is not None and entry.actor_id not in self.actor_ids:
            return False
        if self.actor_id is not None and entry.actor_id != self.actor_id:
            return False
        if self.action and self.action.lower() not in entry.action.lower():
            return False
        if self.text and not _contains_text(entry, self.text):
            return False
        if self.entity_type is not None and entry.entity_type != self.entity_type:
            return False
        if self.entity_id is not None and entry.entity_id != self.entity_id:
            return False
        if self.categories is not None and entry.category not in self.categories:
            return False
        if self.severities is not None and entry.severity not in self.severities:
            return False
        if self.start is not None and entry.timestamp_utc < self.start:
            return False
        if self.end is not None and entry.timestamp_utc > self.end:
            return False
        return True


@dataclass(frozen=True)
class AuditPage:
    entries: List[AuditEntry] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class AuditStats:
    """Entry counts for a query's scope, keyed by enum value."""

    total: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_entity_type: Dict[str, int] = field(default_factory=dict)
    by_severity: Dict[str, int] = field(default_factory=dict)
