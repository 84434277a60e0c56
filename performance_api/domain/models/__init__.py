"""Domain models. Pure business entities."""

from performance_api.domain.models.resource import (
    ResourceCategory,
    Score,
    StatusChange,
    Task,
    TaskPriority,
    TaskStatus,
)
from performance_api.domain.models.user import Role, User

__all__ = [
    "ResourceCategory",
    "Role",
    "Score",
    "StatusChange",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "User",
]
