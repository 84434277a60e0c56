"""Development seed: demo accounts plus one task and one score. Never enabled in prod."""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Tuple

from performance_api.application.repositories import ResourceRepository, UserRepository
from performance_api.domain.models.resource import ResourceCategory, Score, Task, TaskPriority
from performance_api.domain.models.user import Role, User
from performance_api.security.passwords import hash_password

logger = logging.getLogger(__name__)

# (id, name, email, password, role, department)
DEMO_USERS: List[Tuple[str, str, str, str, Role, str]] = [
    ("1", "Rajesh Kumar", "rajesh.kumar@brahmaputra.gov.in", "password123", Role.EMPLOYEE, "IT Department"),
    ("2", "Priya Sharma", "priya.sharma@brahmaputra.gov.in", "password123", Role.DIVISION_HEAD, "Administration"),
    ("3", "Admin User", "admin@brahmaputra.gov.in", "admin123", Role.ADMINISTRATOR, "Administration"),
]


def _demo_resources(now: datetime) -> list:
    return [
        Task(
            id="t1",
            title="Prepare quarterly IT inventory",
            description="Collect asset counts from all field offices.",
            assigned_to="1",
            assigned_by="3",
            deadline=now + timedelta(days=14),
            priority=TaskPriority.HIGH,
            project="Digital Infrastructure",
        ),
        Score(
            id="s1",
            user_id="1",
            kpi_id="k1",
            value=42.0,
            target=50.0,
            month="January",
            year=now.year,
            final_score=84.0,
        ),
    ]


async def seed_demo_users(users: UserRepository, resources: ResourceRepository) -> int:
    """Insert demo accounts whose email is not taken yet. Returns the number created."""
    created = 0
    for user_id, name, email, password, role, department in DEMO_USERS:
        if await users.get_by_email(email) is not None:
            continue
        await users.add(
            User(
                id=user_id,
                name=name,
                email=email,
                password_hash=hash_password(password),
                role=role,
                department=department,
            )
        )
        created += 1

    now = datetime.now(timezone.utc)
    for resource in _demo_resources(now):
        category = ResourceCategory.TASK if isinstance(resource, Task) else ResourceCategory.SCORE
        if await resources.find_by_id(category, resource.id) is None:
            await resources.save(resource)

    logger.info("demo_users_seeded", extra={"seeded_count": created})
    return created
