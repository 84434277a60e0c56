"""Domain schemas. Request/response and validation."""

from performance_api.domain.schemas.audit import AuditEntryResponse
from performance_api.domain.schemas.auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TwoFactorCodeRequest,
    TwoFactorSetupPayload,
    UserPayload,
    UserStatusUpdateRequest,
)
from performance_api.domain.schemas.resources import (
    ScoreResponse,
    StatusChangeResponse,
    TaskResponse,
    TaskStatusUpdateRequest,
)

__all__ = [
    "AuditEntryResponse",
    "LoginRequest",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "ScoreResponse",
    "StatusChangeResponse",
    "TaskResponse",
    "TaskStatusUpdateRequest",
    "TwoFactorCodeRequest",
    "TwoFactorSetupPayload",
    "UserPayload",
    "UserStatusUpdateRequest",
]
