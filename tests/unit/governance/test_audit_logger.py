"""Governance tests: audit immutability, field completeness, safe writes."""

import logging
from datetime import timezone
from unittest.mock import AsyncMock

import pytest

from performance_api.governance.audit_logger import AuditLogger
from performance_api.governance.audit_models import (
    ANONYMOUS_ACTOR,
    AuditCategory,
    AuditEntry,
    EntityType,
    Severity,
)


@pytest.fixture
def audit_repository():
    repo = AsyncMock()
    repo.save = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def audit_logger(audit_repository):
    return AuditLogger(repository=audit_repository)


async def test_audit_immutability(audit_logger, audit_repository):
    """Audit entry must not allow mutation; stored via repository."""
    await audit_logger.log_action(
        actor_id="3",
        actor_name="Admin User",
        action="Update User Status",
        entity_type=EntityType.USER,
        entity_id="1",
        category=AuditCategory.UPDATE,
        severity=Severity.HIGH,
        correlation_id="corr-1",
        metadata={"method": "PATCH", "url": "http://test/api/users/1/status", "status_code": 200},
    )
    assert audit_repository.save.await_count == 1
    entry = audit_repository.save.call_args[0][0]
    assert isinstance(entry, AuditEntry)
    assert entry.actor_id == "3"
    assert entry.entity_id == "1"
    assert entry.severity == Severity.HIGH
    assert entry.metadata["status_code"] == 200
    with pytest.raises(AttributeError):
        entry.action = "other"  # type: ignore[misc]


async def test_audit_fields_completeness(audit_logger, audit_repository):
    """Must include who, what, which entity, from where, when (UTC)."""
    entry = await audit_logger.log_action(
        actor_id=None,
        actor_name=None,
        action="User Login",
        entity_type=EntityType.USER,
        entity_id=None,
        category=AuditCategory.LOGIN,
        ip_address="10.0.0.5",
        user_agent="pytest",
    )
    assert entry.actor_name == ANONYMOUS_ACTOR
    assert entry.details == "User Login user"
    assert entry.severity == Severity.LOW
    assert entry.timestamp_utc.tzinfo == timezone.utc
    d = entry.to_dict()
    for key in ("id", "timestamp_utc", "actor_name", "action", "entity_type", "ip_address", "category"):
        assert key in d
    assert d["entity_type"] == "user"


async def test_entry_ids_are_unique(audit_logger):
    kwargs = dict(
        actor_id="1",
        actor_name="x",
        action="a",
        entity_type=EntityType.TASK,
        entity_id="t1",
        category=AuditCategory.READ,
    )
    first = await audit_logger.log_action(**kwargs)
    second = await audit_logger.log_action(**kwargs)
    assert first.id != second.id


async def test_safe_write_swallows_and_logs(audit_repository, caplog):
    audit_repository.save = AsyncMock(side_effect=RuntimeError("disk full"))
    audit_logger = AuditLogger(repository=audit_repository)
    with caplog.at_level(logging.ERROR, logger="performance_api.governance.audit_logger"):
        await audit_logger.log_action_safely(
            actor_id="1",
            actor_name="x",
            action="Verify Score",
            entity_type=EntityType.SCORE,
            entity_id="s1",
            category=AuditCategory.UPDATE,
        )
    assert any(r.getMessage() == "audit_write_failed" for r in caplog.records)
