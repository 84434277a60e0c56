"""Task and score operations. Callers have already passed the scoped access check."""

import logging
from typing import List, Optional

from performance_api.application.exceptions import ResourceNotFoundError
from performance_api.application.repositories import ResourceRepository
from performance_api.domain.models.resource import ResourceCategory, Score, Task, TaskStatus
from performance_api.domain.models.user import User


class ResourceService:
    def __init__(self, resources: ResourceRepository, logger: logging.Logger) -> None:
        self._resources = resources
        self._logger = logger

    async def get_task(self, task_id: str) -> Task:
        task = await self._resources.find_by_id(ResourceCategory.TASK, task_id)
        if task is None:
            raise ResourceNotFoundError("Task not found")
        return task

    async def update_task_status(
        self,
        task_id: str,
        status: TaskStatus,
        actor: User,
        reason: Optional[str] = None,
    ) -> Task:
        """Append to history and stamp completed_at on done. Same-status moves raise a DomainError."""
        task = await self.get_task(task_id)
        previous = task.status
        task.change_status(status, changed_by=actor.id, reason=reason)
        await self._resources.save(task)
        self._logger.info(
            "task_status_changed",
            extra={"task_id": task_id, "from": previous.value, "to": status.value},
        )
        return task

    async def list_scores_for_user(self, user_id: str) -> List[Score]:
        return await self._resources.list_scores_for_user(user_id)

    async def verify_score(self, score_id: str, verifier: User) -> Score:
        score = await self._resources.find_by_id(ResourceCategory.SCORE, score_id)
        if score is None:
            raise ResourceNotFoundError("Score not found")
        score.verify(verifier.id)
        await self._resources.save(score)
        self._logger.info("score_verified", extra={"score_id": score_id, "verified_by": verifier.id})
        return score
