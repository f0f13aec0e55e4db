"""
Permission Resolver - compute a user's effective permissions.

A user's permission set is the union of the permissions granted by every
role assigned to them. Nothing is cached: each call reads the store, so a
role or grant change is visible to the very next check.

Usage:
    resolver = PermissionResolver(db)

    perms = await resolver.get_user_permissions(user_id)
    if await resolver.has_any_permission(user_id, ["task:update", "task:delete"]):
        ...
"""

from typing import Any, Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.exceptions import InvalidInputError, InternalError
from taskboard.models.rbac import Permission, Role, UserRole, role_permissions

logger = structlog.get_logger()


def validate_user_id(user_id: Any) -> int:
    """Reject anything that is not a positive int (bool included)."""
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        raise InvalidInputError("Invalid user ID provided")
    return user_id


def validate_name(value: Any, kind: str = "permission") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"Invalid {kind} name provided")
    return value


def validate_names(values: Any, kind: str = "permission") -> list[str]:
    if isinstance(values, str) or not isinstance(values, (list, tuple, set, frozenset)):
        raise InvalidInputError(f"{kind.capitalize()} names must be a list")
    if not values:
        raise InvalidInputError(f"{kind.capitalize()} list must not be empty")
    return [validate_name(v, kind) for v in values]


class PermissionResolver:
    """
    Read side of RBAC: roles and permissions held by a user.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_permissions(self, user_id: int) -> set[str]:
        """Union of permission names over all of the user's roles."""
        validate_user_id(user_id)

        query = (
            select(Permission.name)
            .join(role_permissions, role_permissions.c.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == role_permissions.c.role_id)
            .where(UserRole.user_id == user_id)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("rbac.permissions_read_failed", user_id=user_id, error=str(e))
            raise InternalError("Failed to retrieve user permissions") from e

        return set(result.scalars().all())

    async def has_permission(self, user_id: int, permission: str) -> bool:
        validate_name(permission)
        return permission in await self.get_user_permissions(user_id)

    async def has_any_permission(self, user_id: int, permissions: Sequence[str]) -> bool:
        """True if the user holds at least one of the given permissions."""
        required = validate_names(permissions)
        held = await self.get_user_permissions(user_id)
        return any(p in held for p in required)

    async def has_all_permissions(self, user_id: int, permissions: Sequence[str]) -> bool:
        """True if the user holds every one of the given permissions."""
        required = validate_names(permissions)
        held = await self.get_user_permissions(user_id)
        return all(p in held for p in required)

    async def get_user_roles(self, user_id: int) -> list[str]:
        """Names of the roles assigned to the user, sorted."""
        validate_user_id(user_id)

        query = (
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("rbac.roles_read_failed", user_id=user_id, error=str(e))
            raise InternalError("Failed to retrieve user roles") from e

        return list(result.scalars().all())

    async def get_user_roles_with_permissions(self, user_id: int) -> list[UserRole]:
        """
        Role assignments of the user, each with its role and the role's
        permission catalog loaded.
        """
        validate_user_id(user_id)

        query = (
            select(UserRole)
            .where(UserRole.user_id == user_id)
            .order_by(UserRole.id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
            assignments = list(result.scalars().all())
            for assignment in assignments:
                # role.permissions may be stale after a grant change in this session
                await self.db.refresh(assignment.role, attribute_names=["permissions"])
        except SQLAlchemyError as e:
            logger.error("rbac.roles_read_failed", user_id=user_id, error=str(e))
            raise InternalError("Failed to retrieve user roles") from e

        return assignments

    async def has_role(self, user_id: int, role_name: str) -> bool:
        validate_name(role_name, "role")
        return role_name in await self.get_user_roles(user_id)

    async def has_any_role(self, user_id: int, role_names: Sequence[str]) -> bool:
        required = validate_names(role_names, "role")
        held = await self.get_user_roles(user_id)
        return any(r in held for r in required)
