"""AuditQueryService: role scoping, narrowing filters, pagination."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from performance_api.application.audit_query_service import AuditLogFilters, AuditQueryService
from performance_api.domain.models.user import Role
from performance_api.governance.audit_models import AuditCategory, AuditEntry, EntityType, Severity
from performance_api.infrastructure.memory.repositories import (
    InMemoryAuditRepository,
    InMemoryUserRepository,
)

BASE = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _entry(n: int, actor_id: str, **overrides) -> AuditEntry:
    fields = dict(
        id=f"a{n}",
        timestamp_utc=BASE + timedelta(minutes=n),
        actor_id=actor_id,
        actor_name=f"User {actor_id}",
        action="Update Task Status",
        entity_type=EntityType.TASK,
        entity_id="t1",
        details="",
        ip_address="127.0.0.1",
        user_agent=None,
        category=AuditCategory.UPDATE,
        severity=Severity.LOW,
        correlation_id=None,
        metadata=None,
    )
    fields.update(overrides)
    return AuditEntry(**fields)


@pytest.fixture
def people(make_user):
    return {
        "emp": make_user("e1", Role.EMPLOYEE, "IT Department"),
        "emp2": make_user("e2", Role.EMPLOYEE, "IT Department"),
        "other": make_user("o1", Role.EMPLOYEE, "Administration"),
        "head": make_user("h1", Role.DIVISION_HEAD, "IT Department"),
        "admin": make_user("a1", Role.ADMINISTRATOR, "Administration"),
    }


@pytest.fixture
async def service(people):
    audit = InMemoryAuditRepository()
    await audit.save(_entry(1, "e1"))
    await audit.save(_entry(2, "e2", action="User Login", category=AuditCategory.LOGIN))
    await audit.save(_entry(3, "o1"))
    await audit.save(
        _entry(4, "o1", action="User Login", category=AuditCategory.LOGIN, severity=Severity.MEDIUM)
    )
    await audit.save(_entry(5, "a1", category=AuditCategory.SYSTEM, severity=Severity.HIGH))
    await audit.save(_entry(6, "e1", entity_type=EntityType.SCORE, entity_id="s1"))
    return AuditQueryService(audit, InMemoryUserRepository(people.values()), logging.getLogger(__name__))


async def test_employee_sees_only_own_entries(service, people):
    entries, pagination = await service.list_logs(people["emp"], AuditLogFilters())
    assert {e.actor_id for e in entries} == {"e1"}
    assert pagination["total"] == 2


async def test_employee_filter_cannot_widen_scope(service, people):
    entries, pagination = await service.list_logs(people["emp"], AuditLogFilters(user_id="o1"))
    assert entries == []
    assert pagination["total"] == 0


async def test_division_head_sees_department(service, people):
    entries, _ = await service.list_logs(people["head"], AuditLogFilters())
    assert {e.actor_id for e in entries} == {"e1", "e2"}


async def test_administrator_sees_all_newest_first(service, people):
    entries, pagination = await service.list_logs(people["admin"], AuditLogFilters())
    assert [e.id for e in entries] == ["a6", "a5", "a4", "a3", "a2", "a1"]
    assert pagination == {"current": 1, "pages": 1, "total": 6}


async def test_filters_narrow(service, people):
    admin = people["admin"]
    entries, _ = await service.list_logs(admin, AuditLogFilters(action="LOGIN"))
    assert {e.id for e in entries} == {"a2", "a4"}
    entries, _ = await service.list_logs(admin, AuditLogFilters(entity_type=EntityType.SCORE))
    assert [e.id for e in entries] == ["a6"]
    entries, _ = await service.list_logs(
        admin, AuditLogFilters(start=BASE + timedelta(minutes=2), end=BASE + timedelta(minutes=3))
    )
    assert {e.id for e in entries} == {"a2", "a3"}


async def test_pagination(service, people):
    entries, pagination = await service.list_logs(people["admin"], AuditLogFilters(), page=2, limit=4)
    assert [e.id for e in entries] == ["a2", "a1"]
    assert pagination == {"current": 2, "pages": 2, "total": 6}


async def test_user_activity(service):
    assert [e.id for e in await service.user_activity("e1")] == ["a6", "a1"]


async def test_system_logs(service):
    assert [e.id for e in await service.system_logs()] == ["a5"]
    assert await service.system_logs(severity=Severity.LOW) == []


async def test_security_events(service):
    assert [e.id for e in await service.security_events()] == ["a4"]


async def test_entity_trail(service):
    assert [e.id for e in await service.entity_trail(EntityType.TASK, "t1")] == ["a5", "a4", "a3", "a2", "a1"]


async def test_search_is_scoped(service, people):
    entries, pagination = await service.search(people["emp"], "login")
    assert entries == []
    assert pagination == {"current": 1, "pages": 0, "total": 0}
    entries, _ = await service.search(people["head"], "login")
    assert [e.id for e in entries] == ["a2"]


async def test_search_matches_actor_name_and_bounds(service, people):
    entries, _ = await service.search(people["admin"], "user O1")
    assert [e.id for e in entries] == ["a4", "a3"]
    entries, _ = await service.search(
        people["admin"], "update", start=BASE + timedelta(minutes=3), end=BASE + timedelta(minutes=5)
    )
    assert [e.id for e in entries] == ["a5", "a3"]


async def test_search_pagination(service, people):
    entries, pagination = await service.search(people["admin"], "user", page=2, limit=4)
    assert [e.id for e in entries] == ["a2", "a1"]
    assert pagination == {"current": 2, "pages": 2, "total": 6}


async def test_stats_for_employee(service, people):
    stats = await service.stats(people["emp"])
    assert stats.total == 2
    assert stats.by_category == {"update": 2}
    assert stats.by_entity_type == {"task": 1, "score": 1}
    assert stats.by_severity == {"low": 2}


async def test_stats_for_division_head_and_administrator(service, people):
    head = await service.stats(people["head"])
    assert head.total == 3
    assert head.by_category == {"update": 2, "login": 1}

    admin = await service.stats(people["admin"])
    assert admin.total == 6
    assert admin.by_category == {"update": 3, "login": 2, "system": 1}
    assert admin.by_severity == {"low": 4, "medium": 1, "high": 1}
