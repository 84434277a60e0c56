"""Domain layer: models, schemas, validators, exceptions. Pure business logic only."""

from performance_api.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidStatusTransitionError,
)
from performance_api.domain.models import (
    ResourceCategory,
    Role,
    Score,
    StatusChange,
    Task,
    TaskPriority,
    TaskStatus,
    User,
)
from performance_api.domain.validators import (
    validate_date_range,
    validate_department,
    validate_password,
)

__all__ = [
    "DomainError",
    "DomainValidationError",
    "InvalidStatusTransitionError",
    "ResourceCategory",
    "Role",
    "Score",
    "StatusChange",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "User",
    "validate_date_range",
    "validate_department",
    "validate_password",
]
