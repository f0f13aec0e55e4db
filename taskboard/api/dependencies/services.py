"""
Service dependencies.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_db
from taskboard.rbac import PermissionResolver, RBACService
from taskboard.services.auth import AuthService
from taskboard.services.project import ProjectService
from taskboard.services.task import TaskService
from taskboard.services.user import UserService


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Get auth service instance (for login/register)."""
    return AuthService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Get user service instance."""
    return UserService(db)


async def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


async def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


async def get_rbac_service(db: AsyncSession = Depends(get_db)) -> RBACService:
    return RBACService(db)


async def get_permission_resolver(db: AsyncSession = Depends(get_db)) -> PermissionResolver:
    return PermissionResolver(db)
