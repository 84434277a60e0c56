"""Pydantic schemas for task and score endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from performance_api.domain.models.resource import Task, TaskPriority, TaskStatus


class TaskStatusUpdateRequest(BaseModel):
    status: TaskStatus
    reason: Optional[str] = Field(None, max_length=500)


class StatusChangeResponse(BaseModel):
    status: TaskStatus
    changed_by: str
    changed_at: datetime
    reason: Optional[str] = None

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str
    assigned_to: str
    assigned_by: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    project: Optional[str] = None
    deadline: datetime
    completed_at: Optional[datetime] = None
    is_overdue: bool
    status_history: List[StatusChangeResponse] = []

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            assigned_to=task.assigned_to,
            assigned_by=task.assigned_by,
            status=task.status,
            priority=task.priority,
            project=task.project,
            deadline=task.deadline,
            completed_at=task.completed_at,
            is_overdue=task.is_overdue(),
            status_history=[StatusChangeResponse.model_validate(c) for c in task.status_history],
        )


class ScoreResponse(BaseModel):
    id: str
    user_id: str
    kpi_id: str
    value: float
    target: float
    month: str
    year: int
    final_score: Optional[float] = None
    notes: Optional[str] = None
    verified: bool
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
