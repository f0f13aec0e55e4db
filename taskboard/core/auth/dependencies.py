"""
FastAPI dependencies for authentication and authorization.

Usage:
    from taskboard.core.auth import require, Roles, AnyPermission, CurrentPrincipal

    @router.get("/me")
    async def handler(principal: CurrentPrincipal):
        ...

    @router.get("/projects")
    async def handler(principal: Annotated[Principal, require(Permissions("project:read"))]):
        ...
"""

from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.dependencies.database import get_db
from taskboard.core.exceptions import UnauthenticatedError
from taskboard.models.user import User
from taskboard.rbac.resolver import PermissionResolver
from taskboard.repositories.user import UserRepository
from taskboard.services.auth import decode_token

from .guard import AuthorizationGuard
from .principal import Principal, normalize_roles
from .requirements import Requirement, order_requirements


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# ============================================================
# PRINCIPAL
# ============================================================

async def get_principal(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """
    Build the principal from the bearer token.

    Legacy roles come from the token claim; RBAC roles are read from the
    store on every request.

    Raises:
        UnauthenticatedError: no token, invalid token, or unknown user
    """
    if not token:
        raise UnauthenticatedError("Not authenticated")

    payload = decode_token(token)
    user_id = payload["user_id"]

    if not await UserRepository(db).exists(id=user_id):
        raise UnauthenticatedError("User not found")

    rbac_roles = await PermissionResolver(db).get_user_roles(user_id)
    return Principal(
        user_id=user_id,
        roles=normalize_roles(payload.get("roles")),
        rbac_roles=tuple(rbac_roles),
    )


async def get_current_user(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Load the authenticated user's row."""
    user = await UserRepository(db).get_by_id(principal.user_id)
    if user is None:
        raise UnauthenticatedError("User not found")
    return user


# ============================================================
# REQUIREMENTS
# ============================================================

def require(*requirements: Requirement) -> Any:
    """
    Dependency that enforces requirements and yields the principal.

    Requirements are validated when the route module is imported, so an
    empty declaration fails at startup rather than per request.

    Usage:
        principal: Annotated[Principal, require(Roles("admin"))]
        principal: Annotated[Principal, require(Permissions("project:read"))]
    """
    ordered = order_requirements(requirements)
    if not ordered:
        raise ValueError("require() needs at least one requirement")

    async def enforce_requirements(
        principal: Principal = Depends(get_principal),
        db: AsyncSession = Depends(get_db),
    ) -> Principal:
        guard = AuthorizationGuard(PermissionResolver(db))
        await guard.enforce(principal, ordered)
        return principal

    return Depends(enforce_requirements)


# ============================================================
# TYPE ALIASES FOR CLEAN SIGNATURES
# ============================================================

# Authenticated principal (no requirement beyond a valid token)
CurrentPrincipal = Annotated[Principal, Depends(get_principal)]

# Authenticated user row
CurrentUser = Annotated[User, Depends(get_current_user)]
