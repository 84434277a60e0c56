"""DB-backed user repository (users table). Implements UserRepository protocol."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from performance_api.domain.models.user import Role, User
from performance_api.infrastructure.database.models import UserRecord


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_domain(orm: UserRecord) -> User:
    return User(
        id=orm.id,
        name=orm.name,
        email=orm.email,
        password_hash=orm.password_hash,
        role=Role(orm.role),
        department=orm.department,
        is_active=orm.is_active,
        two_factor_enabled=orm.two_factor_enabled,
        two_factor_secret=orm.two_factor_secret,
        avatar=orm.avatar or "",
        last_login=as_utc(orm.last_login),
        created_at=as_utc(orm.created_at) or datetime.now(timezone.utc),
    )


def _apply(orm: UserRecord, user: User) -> None:
    orm.name = user.name
    orm.email = user.email
    orm.password_hash = user.password_hash
    orm.role = user.role.value
    orm.department = user.department
    orm.is_active = user.is_active
    orm.two_factor_enabled = user.two_factor_enabled
    orm.two_factor_secret = user.two_factor_secret
    orm.avatar = user.avatar
    orm.last_login = user.last_login


class DbUserRepository:
    """One short-lived session per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, user_id: str) -> Optional[User]:
        async with self._session_factory() as session:
            orm = await session.get(UserRecord, user_id)
            return _to_domain(orm) if orm else None

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserRecord).where(UserRecord.email == email.strip().lower())
        async with self._session_factory() as session:
            orm = (await session.execute(stmt)).scalar_one_or_none()
            return _to_domain(orm) if orm else None

    async def list_ids_by_department(self, department: str) -> List[str]:
        stmt = select(UserRecord.id).where(UserRecord.department == department)
        async with self._session_factory() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def add(self, user: User) -> User:
        orm = UserRecord(id=user.id, created_at=user.created_at)
        _apply(orm, user)
        async with self._session_factory() as session:
            session.add(orm)
            await session.commit()
        return user

    async def save(self, user: User) -> User:
        async with self._session_factory() as session:
            orm = await session.get(UserRecord, user.id)
            if orm is None:
                orm = UserRecord(id=user.id, created_at=user.created_at)
                session.add(orm)
            _apply(orm, user)
            await session.commit()
        return user
