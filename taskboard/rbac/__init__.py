"""
RBAC - Role-Based Access Control.

Users are assigned roles, roles carry permissions, and a user's effective
permissions are the union over their roles.

Usage:
    from taskboard.rbac import PermissionResolver, RBACService

    resolver = PermissionResolver(db)
    await resolver.has_permission(user_id, "project:update")

    service = RBACService(db)
    await service.assign_role_to_user(user_id, role_id)
"""

from .resolver import PermissionResolver
from .service import RBACService
from .catalog import seed_catalog, PERMISSIONS, ROLES, GRANTS

__all__ = [
    "PermissionResolver",
    "RBACService",
    "seed_catalog",
    "PERMISSIONS",
    "ROLES",
    "GRANTS",
]
