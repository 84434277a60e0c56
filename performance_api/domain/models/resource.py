"""Domain models for owned resources (tasks, KPI scores) used by scoped access checks."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from performance_api.domain.exceptions import InvalidStatusTransitionError


class ResourceCategory(str, Enum):
    """Categories a resource-scoped check can target."""

    USER = "user"
    TASK = "task"
    SCORE = "score"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StatusChange:
    """One entry of a task's status history."""

    status: TaskStatus
    changed_by: str
    changed_at: datetime
    reason: Optional[str] = None


@dataclass
class Task:
    """Work item assigned to one user. The assignee owns the task."""

    id: str
    title: str
    description: str
    assigned_to: str
    deadline: datetime
    status: TaskStatus = TaskStatus.TODO
    assigned_by: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    project: Optional[str] = None
    completed_at: Optional[datetime] = None
    status_history: List[StatusChange] = field(default_factory=list)

    @property
    def owner_id(self) -> str:
        return self.assigned_to

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        return self.status != TaskStatus.DONE and (now or _utcnow()) > self.deadline

    def change_status(
        self,
        new_status: TaskStatus,
        changed_by: str,
        reason: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> None:
        """Move to new_status, append history, stamp completion. Same status is rejected."""
        if new_status == self.status:
            raise InvalidStatusTransitionError(
                f"Task is already {new_status.value}"
            )
        at = at or _utcnow()
        self.status = new_status
        self.completed_at = at if new_status == TaskStatus.DONE else None
        self.status_history.append(
            StatusChange(status=new_status, changed_by=changed_by, changed_at=at, reason=reason)
        )


@dataclass
class Score:
    """KPI score for one user and period. The scored user owns the score."""

    id: str
    user_id: str
    kpi_id: str
    value: float
    target: float
    month: str
    year: int
    final_score: Optional[float] = None
    notes: Optional[str] = None
    verified: bool = False
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None

    @property
    def owner_id(self) -> str:
        return self.user_id

    def verify(self, verifier_id: str, at: Optional[datetime] = None) -> None:
        self.verified = True
        self.verified_by = verifier_id
        self.verified_at = at or _utcnow()
