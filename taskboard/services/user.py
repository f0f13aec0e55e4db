"""
User service.
"""

import structlog
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.exceptions import ConflictError, NotFoundError, UnauthenticatedError
from taskboard.models.project import Project, ProjectMember
from taskboard.models.rbac import UserRole
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.repositories.task import TaskRepository
from taskboard.repositories.user import UserRepository, is_email_conflict
from taskboard.schemas.user import (
    ChangePasswordRequest,
    ProfileUpdate,
    StatisticsResponse,
    UserCreate,
    UserUpdate,
)
from .auth import hash_password, verify_password

logger = structlog.get_logger()


class UserService:
    """User management service."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    async def get_by_id(self, user_id: int) -> User | None:
        """Get user by ID."""
        return await self.users.get_by_id(user_id)

    async def get(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email."""
        return await self.users.get_by_email(email)

    async def list_users(
        self,
        page: int = 1,
        per_page: int = 20,
        search: str | None = None,
    ) -> tuple[list[User], int]:
        """List users with pagination."""
        return await self.users.search(search=search, page=page, per_page=per_page)

    async def list_tasks(self, user_id: int) -> list[Task]:
        return await TaskRepository(self.db).list_filtered(user_id=user_id)

    async def create(self, data: UserCreate) -> User:
        """Admin user creation."""
        if await self.users.get_by_email(data.email):
            raise ConflictError("Email already exists")

        try:
            user = await self.users.create(
                email=data.email,
                password_hash=hash_password(data.password),
                name=data.name,
                avatar_url=data.avatar_url,
                role=data.role,
            )
        except IntegrityError as e:
            if is_email_conflict(e):
                raise ConflictError("Email already exists") from e
            raise

        logger.info("user.created", user_id=user.id)
        return user

    async def update(self, user_id: int, data: UserUpdate) -> User:
        """Admin update. A password, if given, is re-hashed."""
        user = await self.get(user_id)

        update_data = data.model_dump(exclude_unset=True)
        if "password" in update_data:
            password = update_data.pop("password")
            if password:
                update_data["password_hash"] = hash_password(password)

        new_email = update_data.get("email")
        if new_email and new_email != user.email and await self.users.get_by_email(new_email):
            raise ConflictError("Email already exists")

        try:
            await self.users.update(user, **update_data)
        except IntegrityError as e:
            if is_email_conflict(e):
                raise ConflictError("Email already exists") from e
            raise

        logger.info("user.updated", user_id=user.id, fields=sorted(update_data))
        return user

    async def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        user = await self.get(user_id)
        update_data = data.model_dump(exclude_unset=True)
        await self.users.update(user, **update_data)
        logger.info("user.profile_updated", user_id=user.id)
        return user

    async def change_password(self, user_id: int, data: ChangePasswordRequest) -> None:
        user = await self.get(user_id)
        if not verify_password(data.current_password, user.password_hash):
            raise UnauthenticatedError("Current password is incorrect")

        user.password_hash = hash_password(data.new_password)
        await self.db.flush()
        logger.info("user.password_changed", user_id=user.id)

    async def delete(self, user_id: int) -> None:
        """
        Delete a user with their tasks, role assignments, memberships and
        owned projects. Other users' tasks in those projects become personal.
        """
        user = await self.get(user_id)

        owned = await self.db.execute(
            select(Project)
            .where(Project.owner_id == user_id)
            .execution_options(populate_existing=True)
        )
        for project in owned.scalars().all():
            await self.db.delete(project)
        await self.db.flush()

        await self.db.execute(delete(Task).where(Task.user_id == user_id))
        await self.db.execute(delete(ProjectMember).where(ProjectMember.user_id == user_id))
        await self.db.execute(delete(UserRole).where(UserRole.user_id == user_id))

        await self.users.delete(user)
        logger.info("user.deleted", user_id=user_id)

    async def statistics(self) -> StatisticsResponse:
        total_users = await self.db.scalar(select(func.count()).select_from(User)) or 0
        total_tasks = await self.db.scalar(select(func.count()).select_from(Task)) or 0
        return StatisticsResponse(
            total_users=total_users,
            total_tasks=total_tasks,
            users_by_role=await self.users.count_by_role(),
            tasks_by_status=await TaskRepository(self.db).count_by_status(),
        )
