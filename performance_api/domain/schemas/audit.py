"""Response schema for audit log reads."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from performance_api.governance.audit_models import AuditCategory, EntityType, Severity


class AuditEntryResponse(BaseModel):
    id: str
    timestamp_utc: datetime
    actor_id: Optional[str] = None
    actor_name: str
    action: str
    entity_type: EntityType
    entity_id: Optional[str] = None
    details: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    category: AuditCategory
    severity: Severity
    correlation_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    model_config = {"from_attributes": True}
