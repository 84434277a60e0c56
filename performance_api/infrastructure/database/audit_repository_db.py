"""DB-backed audit repository (audit_logs table). Insert and select only."""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from performance_api.governance.audit_models import (
    AuditCategory,
    AuditEntry,
    AuditPage,
    AuditQuery,
    AuditStats,
    EntityType,
    Severity,
)
from performance_api.infrastructure.database.models import AuditLogRecord
from performance_api.infrastructure.database.user_repository_db import as_utc


def _to_domain(orm: AuditLogRecord) -> AuditEntry:
    return AuditEntry(
        id=orm.id,
        timestamp_utc=as_utc(orm.timestamp),
        actor_id=orm.actor_id,
        actor_name=orm.actor_name,
        action=orm.action,
        entity_type=EntityType(orm.entity_type),
        entity_id=orm.entity_id,
        details=orm.details,
        ip_address=orm.ip_address,
        user_agent=orm.user_agent,
        category=AuditCategory(orm.category),
        severity=Severity(orm.severity),
        correlation_id=orm.correlation_id,
        metadata=orm.metadata_,
    )


def _conditions(query: AuditQuery) -> list:
    conditions = []
    if query.actor_ids is not None:
        conditions.append(AuditLogRecord.actor_id.in_(sorted(query.actor_ids)))
    if query.actor_id is not None:
        conditions.append(AuditLogRecord.actor_id == query.actor_id)
    if query.action:
        conditions.append(func.lower(AuditLogRecord.action).contains(query.action.lower()))
    if query.text:
        needle = query.text.lower()
        conditions.append(
            or_(
                func.lower(AuditLogRecord.action).contains(needle, autoescape=True),
                func.lower(AuditLogRecord.details).contains(needle, autoescape=True),
                func.lower(AuditLogRecord.actor_name).contains(needle, autoescape=True),
            )
        )
    if query.entity_type is not None:
        conditions.append(AuditLogRecord.entity_type == query.entity_type.value)
    if query.entity_id is not None:
        conditions.append(AuditLogRecord.entity_id == query.entity_id)
    if query.categories is not None:
        conditions.append(AuditLogRecord.category.in_(sorted(c.value for c in query.categories)))
    if query.severities is not None:
        conditions.append(AuditLogRecord.severity.in_(sorted(s.value for s in query.severities)))
    if query.start is not None:
        conditions.append(AuditLogRecord.timestamp >= query.start)
    if query.end is not None:
        conditions.append(AuditLogRecord.timestamp <= query.end)
    return conditions


class DbAuditRepository:
    """Implements AuditRepository. One session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, entry: AuditEntry) -> None:
        orm = AuditLogRecord(
            id=entry.id,
            timestamp=entry.timestamp_utc,
            actor_id=entry.actor_id,
            actor_name=entry.actor_name,
            action=entry.action,
            entity_type=entry.entity_type.value,
            entity_id=entry.entity_id,
            details=entry.details,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            category=entry.category.value,
            severity=entry.severity.value,
            correlation_id=entry.correlation_id,
            metadata_=entry.metadata,
        )
        async with self._session_factory() as session:
            session.add(orm)
            await session.commit()

    async def query(self, query: AuditQuery) -> AuditPage:
        conditions = _conditions(query)
        stmt = (
            select(AuditLogRecord)
            .where(*conditions)
            .order_by(AuditLogRecord.timestamp.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        count_stmt = select(func.count()).select_from(AuditLogRecord).where(*conditions)
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
            total = (await session.execute(count_stmt)).scalar_one()
        return AuditPage(entries=[_to_domain(r) for r in rows], total=total)

    async def stats(self, query: AuditQuery) -> AuditStats:
        conditions = _conditions(query)

        def grouped(column):
            return select(column, func.count()).where(*conditions).group_by(column)

        count_stmt = select(func.count()).select_from(AuditLogRecord).where(*conditions)
        async with self._session_factory() as session:
            total = (await session.execute(count_stmt)).scalar_one()
            by_category = dict((await session.execute(grouped(AuditLogRecord.category))).all())
            by_entity_type = dict((await session.execute(grouped(AuditLogRecord.entity_type))).all())
            by_severity = dict((await session.execute(grouped(AuditLogRecord.severity))).all())
        return AuditStats(
            total=total,
            by_category=by_category,
            by_entity_type=by_entity_type,
            by_severity=by_severity,
        )
