"""
Seed catalog of roles, permissions and grants.

Permission names follow "<resource>:<action>". seed_catalog() is safe to
run repeatedly; existing rows are left alone and missing grants added.
"""

from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from .service import RBACService

logger = structlog.get_logger()


PERMISSIONS: dict[str, str] = {
    "task:create": "Create tasks",
    "task:read": "Read tasks",
    "task:update": "Update tasks",
    "task:delete": "Delete tasks",
    "task:read_all": "Read every user's tasks",
    "project:create": "Create projects",
    "project:read": "Read projects",
    "project:update": "Update projects",
    "project:delete": "Delete projects",
    "project:read_all": "Read every project",
    "project:manage_members": "Add and remove project members",
    "user:read": "Read own profile",
    "user:update": "Update own profile",
    "user:read_all": "List users",
    "user:manage_roles": "Assign roles and edit the role catalog",
}

ROLES: dict[str, str] = {
    "admin": "Full access to every resource",
    "manager": "Manages projects and tasks",
    "user": "Regular user",
}

GRANTS: dict[str, list[str]] = {
    "admin": list(PERMISSIONS),
    "manager": [
        name for name in PERMISSIONS
        if name.startswith(("project:", "task:"))
    ] + ["user:read", "user:read_all"],
    "user": [
        "task:create",
        "task:read",
        "task:update",
        "task:delete",
        "project:read",
        "user:read",
        "user:update",
    ],
}


async def seed_catalog(db: AsyncSession) -> None:
    """Create the seed roles, permissions and grants if missing."""
    service = RBACService(db)

    for name, description in PERMISSIONS.items():
        await service.get_or_create_permission(name, description=description)

    for role_name, description in ROLES.items():
        role = await service.create_role(role_name, description=description)
        granted = set(role.permission_names)
        for permission_name in GRANTS[role_name]:
            if permission_name not in granted:
                await service.add_permission_to_role(role.id, permission_name)

    logger.info("rbac.catalog_seeded", roles=len(ROLES), permissions=len(PERMISSIONS))
