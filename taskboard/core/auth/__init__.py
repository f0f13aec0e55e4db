"""
Authorization core.

Two layers, both must pass:

1. Guard (coarse, per endpoint): declared requirements checked against the
   principal's legacy roles and RBAC permissions.
2. Ownership (fine, per instance): owner / project manager / admin checks
   against the persisted resource, done inside the services.

Usage:
    from taskboard.core.auth import (
        require, Roles, Permissions, AnyPermission, AllPermissions,
        Principal, CurrentPrincipal,
    )
"""

from .interfaces import PolicyDecision
from .principal import Principal, normalize_roles
from .requirements import (
    Requirement,
    Roles,
    Permissions,
    AnyPermission,
    AllPermissions,
    order_requirements,
)
from .guard import AuthorizationGuard
from .ownership import (
    AccessLevel,
    ResourceAccess,
    AccessProvider,
    TaskAccessProvider,
    ProjectAccessProvider,
    check_access,
    ensure_access,
)
from .dependencies import (
    get_principal,
    get_current_user,
    require,
    CurrentPrincipal,
    CurrentUser,
)

__all__ = [
    "PolicyDecision",
    "Principal",
    "normalize_roles",
    "Requirement",
    "Roles",
    "Permissions",
    "AnyPermission",
    "AllPermissions",
    "order_requirements",
    "AuthorizationGuard",
    "AccessLevel",
    "ResourceAccess",
    "AccessProvider",
    "TaskAccessProvider",
    "ProjectAccessProvider",
    "check_access",
    "ensure_access",
    "get_principal",
    "get_current_user",
    "require",
    "CurrentPrincipal",
    "CurrentUser",
]
