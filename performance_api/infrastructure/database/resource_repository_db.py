"""DB-backed task/score repository. Implements ResourceRepository protocol."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from performance_api.application.repositories import OwnedResource
from performance_api.domain.models.resource import (
    ResourceCategory,
    Score,
    StatusChange,
    Task,
    TaskPriority,
    TaskStatus,
)
from performance_api.infrastructure.database.models import ScoreRecord, TaskRecord
from performance_api.infrastructure.database.user_repository_db import as_utc


def _history_to_json(history: List[StatusChange]) -> List[Dict[str, Any]]:
    return [
        {
            "status": change.status.value,
            "changed_by": change.changed_by,
            "changed_at": change.changed_at.isoformat(),
            "reason": change.reason,
        }
        for change in history
    ]


def _history_from_json(raw: Optional[List[Dict[str, Any]]]) -> List[StatusChange]:
    return [
        StatusChange(
            status=TaskStatus(item["status"]),
            changed_by=item["changed_by"],
            changed_at=datetime.fromisoformat(item["changed_at"]),
            reason=item.get("reason"),
        )
        for item in raw or []
    ]


def _task_to_domain(orm: TaskRecord) -> Task:
    return Task(
        id=orm.id,
        title=orm.title,
        description=orm.description,
        assigned_to=orm.assigned_to,
        deadline=as_utc(orm.deadline),
        status=TaskStatus(orm.status),
        assigned_by=orm.assigned_by,
        priority=TaskPriority(orm.priority),
        project=orm.project,
        completed_at=as_utc(orm.completed_at),
        status_history=_history_from_json(orm.status_history),
    )


def _score_to_domain(orm: ScoreRecord) -> Score:
    return Score(
        id=orm.id,
        user_id=orm.user_id,
        kpi_id=orm.kpi_id,
        value=orm.value,
        target=orm.target,
        month=orm.month,
        year=orm.year,
        final_score=orm.final_score,
        notes=orm.notes,
        verified=orm.verified,
        verified_by=orm.verified_by,
        verified_at=as_utc(orm.verified_at),
    )


def _apply_task(orm: TaskRecord, task: Task) -> None:
    orm.title = task.title
    orm.description = task.description
    orm.status = task.status.value
    orm.assigned_to = task.assigned_to
    orm.assigned_by = task.assigned_by
    orm.priority = task.priority.value
    orm.project = task.project
    orm.deadline = task.deadline
    orm.completed_at = task.completed_at
    orm.status_history = _history_to_json(task.status_history)


def _apply_score(orm: ScoreRecord, score: Score) -> None:
    orm.user_id = score.user_id
    orm.kpi_id = score.kpi_id
    orm.value = score.value
    orm.target = score.target
    orm.month = score.month
    orm.year = score.year
    orm.final_score = score.final_score
    orm.notes = score.notes
    orm.verified = score.verified
    orm.verified_by = score.verified_by
    orm.verified_at = score.verified_at


class DbResourceRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_id(self, category: ResourceCategory, resource_id: str) -> Optional[OwnedResource]:
        async with self._session_factory() as session:
            if category == ResourceCategory.TASK:
                orm = await session.get(TaskRecord, resource_id)
                return _task_to_domain(orm) if orm else None
            if category == ResourceCategory.SCORE:
                orm = await session.get(ScoreRecord, resource_id)
                return _score_to_domain(orm) if orm else None
        raise ValueError(f"Not a stored resource category: {category.value}")

    async def list_scores_for_user(self, user_id: str) -> List[Score]:
        stmt = (
            select(ScoreRecord)
            .where(ScoreRecord.user_id == user_id)
            .order_by(ScoreRecord.year.desc(), ScoreRecord.month)
        )
        async with self._session_factory() as session:
            return [_score_to_domain(orm) for orm in (await session.execute(stmt)).scalars()]

    async def save(self, resource: OwnedResource) -> OwnedResource:
        async with self._session_factory() as session:
            if isinstance(resource, Task):
                orm = await session.get(TaskRecord, resource.id)
                if orm is None:
                    orm = TaskRecord(id=resource.id)
                    session.add(orm)
                _apply_task(orm, resource)
            elif isinstance(resource, Score):
                orm = await session.get(ScoreRecord, resource.id)
                if orm is None:
                    orm = ScoreRecord(id=resource.id)
                    session.add(orm)
                _apply_score(orm, resource)
            else:
                raise TypeError(f"Unsupported resource type: {type(resource).__name__}")
            await session.commit()
        return resource
