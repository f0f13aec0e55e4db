"""
Seed the database with the RBAC catalog and demo accounts.

Usage:
    python -m taskboard.seed
"""

import asyncio

import structlog

from taskboard.core.config import settings
from taskboard.core.logging import configure_logging
from taskboard.models.database import async_session_factory, close_db, init_db
from taskboard.models.task import Task, TaskStatus
from taskboard.models.user import LegacyRole, User
from taskboard.rbac import RBACService, seed_catalog
from taskboard.repositories.user import UserRepository
from taskboard.services.auth import hash_password

logger = structlog.get_logger()

DEMO_USERS = [
    {
        "email": "admin@example.com",
        "password": "admin123",
        "name": "Admin User",
        "role": LegacyRole.ADMIN,
        "rbac_role": "admin",
        "task": "Review team progress",
    },
    {
        "email": "user@example.com",
        "password": "user123",
        "name": "Regular User",
        "role": LegacyRole.USER,
        "rbac_role": "user",
        "task": "Complete onboarding",
    },
]


async def seed() -> None:
    await init_db()

    async with async_session_factory() as db:
        await seed_catalog(db)
        rbac = RBACService(db)
        users = UserRepository(db)

        for demo in DEMO_USERS:
            user = await users.get_by_email(demo["email"])
            if user is None:
                user = await users.create(
                    email=demo["email"],
                    password_hash=hash_password(demo["password"]),
                    name=demo["name"],
                    role=demo["role"],
                )
                db.add(Task(
                    title=demo["task"],
                    status=TaskStatus.PENDING,
                    user_id=user.id,
                ))
                logger.info("seed.user_created", email=demo["email"])
            else:
                user.role = demo["role"]

            role = await rbac.get_role_by_name(demo["rbac_role"])
            await rbac.assign_role_to_user(user.id, role.id)

        await db.commit()

    logger.info("seed.completed")


async def run() -> None:
    try:
        await seed()
    finally:
        await close_db()


def main() -> None:
    configure_logging(settings.log_level, settings.log_format)
    asyncio.run(run())


if __name__ == "__main__":
    main()
