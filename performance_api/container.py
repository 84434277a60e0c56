# performance_api/container.py

"""Composition root: builds every collaborator once per process, with explicit startup/shutdown."""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from performance_api.application.audit_query_service import AuditQueryService
from performance_api.application.auth_service import AuthService
from performance_api.application.repositories import ResourceRepository, UserRepository
from performance_api.application.resource_service import ResourceService
from performance_api.config.settings import AppSettings
from performance_api.governance.audit_logger import AuditLogger
from performance_api.governance.audit_repository import AuditRepository
from performance_api.infrastructure.cache.redis_client import RedisClient
from performance_api.infrastructure.database.audit_repository_db import DbAuditRepository
from performance_api.infrastructure.database.resource_repository_db import DbResourceRepository
from performance_api.infrastructure.database.session import (
    create_engine,
    create_session_factory,
    create_tables,
)
from performance_api.infrastructure.database.user_repository_db import DbUserRepository
from performance_api.infrastructure.memory.repositories import (
    InMemoryAuditRepository,
    InMemoryResourceRepository,
    InMemoryUserRepository,
)
from performance_api.infrastructure.seed import seed_demo_users
from performance_api.scalability.rate_limiter import (
    InMemorySlidingWindowBackend,
    RedisSlidingWindowBackend,
    SlidingWindowBackend,
)
from performance_api.security.authentication import Authenticator
from performance_api.security.encryption import EncryptionService
from performance_api.security.rbac import RBACService
from performance_api.security.resource_access import ResourceAccessPolicy
from performance_api.security.tokens import TokenService
from performance_api.security.two_factor import TotpVerifier, TwoFactorGate

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: AppSettings
    users: UserRepository
    resources: ResourceRepository
    audit_repository: AuditRepository
    audit_logger: AuditLogger
    tokens: TokenService
    authenticator: Authenticator
    rbac: RBACService
    access_policy: ResourceAccessPolicy
    totp: TotpVerifier
    two_factor_gate: TwoFactorGate
    rate_limit_backend: SlidingWindowBackend
    auth_service: AuthService
    resource_service: ResourceService
    audit_queries: AuditQueryService
    engine: Optional[AsyncEngine] = None
    redis: Optional[RedisClient] = None

    async def startup(self) -> None:
        if self.engine is not None:
            await create_tables(self.engine)
        if self.settings.seed_demo_users:
            await seed_demo_users(self.users, self.resources)
        logger.info(
            "container_started",
            extra={
                "storage_backend": self.settings.storage_backend,
                "rate_limit_backend": self.settings.rate_limit_backend,
            },
        )

    async def shutdown(self) -> None:
        if self.redis is not None:
            await self.redis.close()
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("container_stopped")


def build_container(settings: AppSettings) -> Container:
    engine = None
    if settings.storage_backend == "database":
        engine = create_engine(settings.database_url)
        session_factory = create_session_factory(engine)
        users = DbUserRepository(session_factory)
        resources = DbResourceRepository(session_factory)
        audit_repository = DbAuditRepository(session_factory)
    else:
        users = InMemoryUserRepository()
        resources = InMemoryResourceRepository()
        audit_repository = InMemoryAuditRepository()

    redis_client = None
    if settings.rate_limit_backend == "redis":
        redis_client = RedisClient(settings.redis_url)
        rate_limit_backend = RedisSlidingWindowBackend(redis_client)
    else:
        rate_limit_backend = InMemorySlidingWindowBackend()

    tokens = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expiration_minutes,
    )
    totp = TotpVerifier(
        EncryptionService(settings.encryption_key),
        issuer=settings.two_factor_issuer,
        valid_window=settings.two_factor_valid_window,
    )

    return Container(
        settings=settings,
        users=users,
        resources=resources,
        audit_repository=audit_repository,
        audit_logger=AuditLogger(audit_repository),
        tokens=tokens,
        authenticator=Authenticator(tokens, users),
        rbac=RBACService(),
        access_policy=ResourceAccessPolicy(users, resources),
        totp=totp,
        two_factor_gate=TwoFactorGate(totp),
        rate_limit_backend=rate_limit_backend,
        auth_service=AuthService(users, tokens, totp, logging.getLogger("performance_api.application.auth")),
        resource_service=ResourceService(resources, logging.getLogger("performance_api.application.resources")),
        audit_queries=AuditQueryService(
            audit_repository, users, logging.getLogger("performance_api.application.audit")
        ),
        engine=engine,
        redis=redis_client,
    )
