"""
RBAC Service - Manage roles, permissions, and assignments.

Usage:
    service = RBACService(db)

    # Assign role to user (idempotent)
    assignment = await service.assign_role_to_user(user_id, role.id)

    # Grant a catalog permission to a role
    await service.add_permission_to_role(role.id, "project:manage_members")
"""

from typing import Any

import structlog
from sqlalchemy import select, delete, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.exceptions import AppError, InternalError, InvalidInputError, NotFoundError
from taskboard.models.rbac import Permission, Role, UserRole, role_permissions
from taskboard.models.user import User
from .resolver import validate_name, validate_user_id

logger = structlog.get_logger()


def validate_role_id(role_id: Any) -> int:
    if isinstance(role_id, bool) or not isinstance(role_id, int) or role_id <= 0:
        raise InvalidInputError("Invalid role ID provided")
    return role_id


class RBACService:
    """
    Service for managing RBAC roles, permissions, and assignments.

    Read-side checks (has_permission and friends) live in PermissionResolver.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ============================================================
    # HELPERS
    # ============================================================

    def _insert_ignore(self, table, **values):
        """
        INSERT that leaves an existing row untouched on a unique conflict.

        Returns None on dialects without ON CONFLICT support; callers fall
        back to insert + IntegrityError there.
        """
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table).values(**values).on_conflict_do_nothing()
        if dialect == "sqlite":
            return sqlite.insert(table).values(**values).on_conflict_do_nothing()
        return None

    async def _require_user(self, user_id: int) -> None:
        found = await self.db.scalar(select(User.id).where(User.id == user_id))
        if found is None:
            raise NotFoundError(f"User with ID {user_id} not found")

    async def _require_role(self, role_id: int) -> Role:
        role = await self.get_role(role_id)
        if role is None:
            raise NotFoundError(f"Role with ID {role_id} not found")
        return role

    # ============================================================
    # ROLE MANAGEMENT
    # ============================================================

    async def get_role(self, role_id: int) -> Role | None:
        """Get role by ID."""
        result = await self.db.execute(select(Role).where(Role.id == role_id))
        return result.scalar_one_or_none()

    async def get_role_by_name(self, name: str) -> Role | None:
        """Get role by name."""
        validate_name(name, "role")
        result = await self.db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def list_roles(self) -> list[Role]:
        """List all roles with their permissions."""
        result = await self.db.execute(
            select(Role).order_by(Role.name).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_role(self, name: str, description: str | None = None) -> Role:
        """Create a role, or return the existing one with that name."""
        role = await self.get_role_by_name(name)
        if role is None:
            role = Role(name=name, description=description, permissions=[])
            self.db.add(role)
            await self.db.flush()
        return role

    async def update_role_description(self, role_id: int, description: str | None) -> Role:
        """Only the description of a role is editable."""
        validate_role_id(role_id)
        role = await self._require_role(role_id)
        role.description = description
        await self.db.flush()
        logger.info("rbac.role_updated", role_id=role_id)
        return role

    async def add_permission_to_role(self, role_id: int, permission_name: str) -> Role:
        """Grant a catalog permission to a role. Granting twice is a no-op."""
        validate_role_id(role_id)
        validate_name(permission_name)

        role = await self._require_role(role_id)
        permission = await self.get_permission_by_name(permission_name)
        if permission is None:
            raise NotFoundError(f"Permission {permission_name} not found")

        values = {"role_id": role.id, "permission_id": permission.id}
        stmt = self._insert_ignore(role_permissions, **values)
        try:
            if stmt is not None:
                await self.db.execute(stmt)
            else:
                exists = await self.db.scalar(
                    select(role_permissions.c.role_id).where(
                        role_permissions.c.role_id == role.id,
                        role_permissions.c.permission_id == permission.id,
                    )
                )
                if exists is None:
                    async with self.db.begin_nested():
                        await self.db.execute(insert(role_permissions).values(**values))
        except IntegrityError:
            # Concurrent grant of the same pair won the race
            pass
        except SQLAlchemyError as e:
            raise InternalError("Failed to grant permission") from e

        await self.db.refresh(role, attribute_names=["permissions"])
        logger.info("rbac.permission_granted", role_id=role.id, permission=permission_name)
        return role

    async def remove_permission_from_role(self, role_id: int, permission_name: str) -> Role:
        """Revoke a permission from a role. A missing grant is NotFound."""
        validate_role_id(role_id)
        validate_name(permission_name)

        role = await self._require_role(role_id)
        permission = await self.get_permission_by_name(permission_name)
        if permission is None:
            raise NotFoundError(f"Permission {permission_name} not found")

        try:
            result = await self.db.execute(
                delete(role_permissions).where(
                    role_permissions.c.role_id == role.id,
                    role_permissions.c.permission_id == permission.id,
                )
            )
        except SQLAlchemyError as e:
            raise InternalError("Failed to revoke permission") from e

        if result.rowcount == 0:
            raise NotFoundError(
                f"Role {role.name} does not have permission {permission_name}"
            )

        await self.db.refresh(role, attribute_names=["permissions"])
        logger.info("rbac.permission_revoked", role_id=role.id, permission=permission_name)
        return role

    # ============================================================
    # PERMISSION MANAGEMENT
    # ============================================================

    async def get_permission_by_name(self, name: str) -> Permission | None:
        """Get permission by its unique "resource:action" name."""
        validate_name(name)
        result = await self.db.execute(select(Permission).where(Permission.name == name))
        return result.scalar_one_or_none()

    async def get_or_create_permission(
        self,
        name: str,
        description: str | None = None,
    ) -> Permission:
        """
        Get or create a permission.

        Args:
            name: Permission in "resource:action" format
            description: Optional human-readable description
        """
        perm = await self.get_permission_by_name(name)
        if perm is None:
            resource, _, action = name.partition(":")
            perm = Permission(
                name=name,
                resource=resource,
                action=action or "*",
                description=description,
            )
            self.db.add(perm)
            await self.db.flush()
        return perm

    async def list_permissions(self) -> list[Permission]:
        """List all permissions ordered by resource then name."""
        result = await self.db.execute(
            select(Permission).order_by(Permission.resource, Permission.name)
        )
        return list(result.scalars().all())

    # ============================================================
    # USER ROLE ASSIGNMENT
    # ============================================================

    async def assign_role_to_user(self, user_id: int, role_id: int) -> UserRole:
        """
        Assign a role to a user.

        Idempotent: assigning a role the user already holds returns the
        existing assignment. Both user and role must exist.
        """
        validate_user_id(user_id)
        validate_role_id(role_id)

        try:
            await self._require_user(user_id)
            await self._require_role(role_id)

            stmt = self._insert_ignore(UserRole.__table__, user_id=user_id, role_id=role_id)
            if stmt is not None:
                await self.db.execute(stmt)
            else:
                existing = await self._get_assignment(user_id, role_id)
                if existing is None:
                    try:
                        async with self.db.begin_nested():
                            self.db.add(UserRole(user_id=user_id, role_id=role_id))
                    except IntegrityError:
                        # Concurrent assignment won; re-read below
                        pass

            assignment = await self._get_assignment(user_id, role_id)
        except AppError:
            raise
        except SQLAlchemyError as e:
            logger.error("rbac.role_assign_failed", user_id=user_id, role_id=role_id, error=str(e))
            raise InternalError("Failed to assign role to user") from e

        if assignment is None:
            raise InternalError("Failed to assign role to user")

        logger.info("rbac.role_assigned", user_id=user_id, role_id=role_id)
        return assignment

    async def remove_role_from_user(self, user_id: int, role_id: int) -> None:
        """Remove a role assignment. A missing assignment is NotFound."""
        validate_user_id(user_id)
        validate_role_id(role_id)

        try:
            await self._require_user(user_id)
            await self._require_role(role_id)

            result = await self.db.execute(
                delete(UserRole).where(
                    UserRole.user_id == user_id,
                    UserRole.role_id == role_id,
                )
            )
        except AppError:
            raise
        except SQLAlchemyError as e:
            logger.error("rbac.role_remove_failed", user_id=user_id, role_id=role_id, error=str(e))
            raise InternalError("Failed to remove role from user") from e

        if result.rowcount == 0:
            raise NotFoundError("User role assignment not found")

        logger.info("rbac.role_removed", user_id=user_id, role_id=role_id)

    async def _get_assignment(self, user_id: int, role_id: int) -> UserRole | None:
        result = await self.db.execute(
            select(UserRole)
            .where(UserRole.user_id == user_id, UserRole.role_id == role_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
