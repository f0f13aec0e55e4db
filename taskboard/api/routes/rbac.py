"""
RBAC catalog administration routes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from taskboard.core.auth import Permissions, Principal, require
from taskboard.rbac import RBACService
from taskboard.schemas.rbac import (
    GrantPermissionRequest,
    PermissionResponse,
    RoleResponse,
    RoleUpdate,
)
from taskboard.api.dependencies.services import get_rbac_service

router = APIRouter()

RoleManager = Annotated[Principal, require(Permissions("user:manage_roles"))]
RoleId = Annotated[int, Path(gt=0)]


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    _: RoleManager,
    rbac_service: RBACService = Depends(get_rbac_service),
):
    """List roles with their permissions."""
    roles = await rbac_service.list_roles()
    return [RoleResponse.model_validate(r) for r in roles]


@router.get("/permissions", response_model=list[PermissionResponse])
async def list_permissions(
    _: RoleManager,
    rbac_service: RBACService = Depends(get_rbac_service),
):
    permissions = await rbac_service.list_permissions()
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.patch("/roles/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: RoleId,
    data: RoleUpdate,
    _: RoleManager,
    rbac_service: RBACService = Depends(get_rbac_service),
):
    """Edit a role's description. Names are fixed."""
    role = await rbac_service.update_role_description(role_id, data.description)
    return RoleResponse.model_validate(role)


@router.post("/roles/{role_id}/permissions", response_model=RoleResponse)
async def grant_permission(
    role_id: RoleId,
    data: GrantPermissionRequest,
    _: RoleManager,
    rbac_service: RBACService = Depends(get_rbac_service),
):
    """Grant a catalog permission to a role (idempotent)."""
    role = await rbac_service.add_permission_to_role(role_id, data.permission)
    return RoleResponse.model_validate(role)


@router.delete("/roles/{role_id}/permissions/{permission_name}", response_model=RoleResponse)
async def revoke_permission(
    role_id: RoleId,
    permission_name: str,
    _: RoleManager,
    rbac_service: RBACService = Depends(get_rbac_service),
):
    role = await rbac_service.remove_permission_from_role(role_id, permission_name)
    return RoleResponse.model_validate(role)
