"""In-process repositories for local development and tests. State dies with the process."""

import copy
from collections import Counter
from typing import Dict, Iterable, List, Optional

from performance_api.application.repositories import OwnedResource
from performance_api.domain.models.resource import ResourceCategory, Score, Task
from performance_api.domain.models.user import User
from performance_api.governance.audit_models import AuditEntry, AuditPage, AuditQuery, AuditStats


class InMemoryUserRepository:
    """Implements UserRepository. Returns copies so callers must save() to persist."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: Dict[str, User] = {u.id: copy.deepcopy(u) for u in users}

    async def get_by_id(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return copy.deepcopy(user) if user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        normalized = email.strip().lower()
        for user in self._users.values():
            if user.email == normalized:
                return copy.deepcopy(user)
        return None

    async def list_ids_by_department(self, department: str) -> List[str]:
        return [u.id for u in self._users.values() if u.department == department]

    async def add(self, user: User) -> User:
        self._users[user.id] = copy.deepcopy(user)
        return user

    async def save(self, user: User) -> User:
        self._users[user.id] = copy.deepcopy(user)
        return user


class InMemoryResourceRepository:
    """Implements ResourceRepository for tasks and scores."""

    def __init__(self, resources: Iterable[OwnedResource] = ()) -> None:
        self._tasks: Dict[str, Task] = {}
        self._scores: Dict[str, Score] = {}
        for resource in resources:
            self._store(resource)

    def _store(self, resource: OwnedResource) -> None:
        if isinstance(resource, Task):
            self._tasks[resource.id] = copy.deepcopy(resource)
        elif isinstance(resource, Score):
            self._scores[resource.id] = copy.deepcopy(resource)
        else:
            raise TypeError(f"Unsupported resource type: {type(resource).__name__}")

    async def find_by_id(self, category: ResourceCategory, resource_id: str) -> Optional[OwnedResource]:
        if category == ResourceCategory.TASK:
            found = self._tasks.get(resource_id)
        elif category == ResourceCategory.SCORE:
            found = self._scores.get(resource_id)
        else:
            raise ValueError(f"Not a stored resource category: {category.value}")
        return copy.deepcopy(found) if found else None

    async def list_scores_for_user(self, user_id: str) -> List[Score]:
        return [copy.deepcopy(s) for s in self._scores.values() if s.user_id == user_id]

    async def save(self, resource: OwnedResource) -> OwnedResource:
        self._store(resource)
        return resource


class InMemoryAuditRepository:
    """Append-only list of audit entries. Implements AuditRepository."""

    def __init__(self) -> None:
        self._entries: List[AuditEntry] = []

    async def save(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    async def query(self, query: AuditQuery) -> AuditPage:
        matched = [e for e in self._entries if query.matches(e)]
        matched.sort(key=lambda e: e.timestamp_utc, reverse=True)
        page = matched[query.offset : query.offset + query.limit]
        return AuditPage(entries=page, total=len(matched))

    async def stats(self, query: AuditQuery) -> AuditStats:
        matched = [e for e in self._entries if query.matches(e)]
        return AuditStats(
            total=len(matched),
            by_category=dict(Counter(e.category.value for e in matched)),
            by_entity_type=dict(Counter(e.entity_type.value for e in matched)),
            by_severity=dict(Counter(e.severity.value for e in matched)),
        )

    @property
    def entries(self) -> List[AuditEntry]:
        return list(self._entries)
