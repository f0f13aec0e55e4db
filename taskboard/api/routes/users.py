"""
User management routes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from taskboard.core.auth import Permissions, Principal, Roles, require
from taskboard.rbac import PermissionResolver, RBACService
from taskboard.schemas.common import MessageResponse
from taskboard.schemas.rbac import AssignRoleRequest, UserRoleResponse
from taskboard.schemas.user import (
    ChangePasswordRequest,
    ProfilePermissionsResponse,
    ProfileUpdate,
    StatisticsResponse,
    UserCreate,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
    UserTaskSummary,
    UserUpdate,
)
from taskboard.services.user import UserService
from taskboard.api.dependencies.services import (
    get_permission_resolver,
    get_rbac_service,
    get_user_service,
)

router = APIRouter()

Admin = Annotated[Principal, require(Roles("admin"))]
RoleManager = Annotated[Principal, require(Permissions("user:manage_roles"))]
UserId = Annotated[int, Path(gt=0)]


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    _: Admin,
    user_service: UserService = Depends(get_user_service),
):
    """User and task counts (admin only)."""
    return await user_service.statistics()


@router.get("", response_model=UserListResponse)
async def list_users(
    _: Annotated[Principal, require(Permissions("user:read_all"))],
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: str | None = None,
    user_service: UserService = Depends(get_user_service),
):
    """List all users."""
    users, total = await user_service.list_users(
        page=page,
        per_page=per_page,
        search=search,
    )
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    principal: Annotated[Principal, require(Permissions("user:read"))],
    user_service: UserService = Depends(get_user_service),
):
    """Get current user profile."""
    user = await user_service.get(principal.user_id)
    return UserResponse.model_validate(user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    principal: Annotated[Principal, require(Permissions("user:update"))],
    user_service: UserService = Depends(get_user_service),
):
    """Update current user profile."""
    user = await user_service.update_profile(principal.user_id, data)
    return UserResponse.model_validate(user)


@router.get("/profile/permissions", response_model=ProfilePermissionsResponse)
async def get_profile_permissions(
    principal: Annotated[Principal, require(Permissions("user:read"))],
    resolver: PermissionResolver = Depends(get_permission_resolver),
):
    """Effective roles and permissions of the caller."""
    permissions = await resolver.get_user_permissions(principal.user_id)
    return ProfilePermissionsResponse(
        user_id=principal.user_id,
        legacy_roles=list(principal.roles),
        roles=list(principal.rbac_roles),
        permissions=sorted(permissions),
        is_admin=principal.is_admin,
    )


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    principal: Annotated[Principal, require(Roles("user", "admin"))],
    user_service: UserService = Depends(get_user_service),
):
    await user_service.change_password(principal.user_id, data)
    return MessageResponse(message="Password changed successfully")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    _: Admin,
    user_service: UserService = Depends(get_user_service),
):
    """Create a user (admin only)."""
    user = await user_service.create(data)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: UserId,
    _: Admin,
    user_service: UserService = Depends(get_user_service),
):
    """Get user by ID with their tasks (admin only)."""
    user = await user_service.get(user_id)
    tasks = await user_service.list_tasks(user_id)
    return UserDetailResponse(
        **UserResponse.model_validate(user).model_dump(),
        tasks=[UserTaskSummary.model_validate(t) for t in tasks],
    )


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UserId,
    data: UserUpdate,
    _: Admin,
    user_service: UserService = Depends(get_user_service),
):
    """Update user (admin only)."""
    user = await user_service.update(user_id, data)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UserId,
    _: Admin,
    user_service: UserService = Depends(get_user_service),
):
    """Delete user and everything they own (admin only)."""
    await user_service.delete(user_id)
    return MessageResponse(message=f"User with ID {user_id} has been deleted successfully")


# ============================================================
# ROLE ASSIGNMENT
# ============================================================

@router.get("/{user_id}/roles", response_model=list[UserRoleResponse])
async def get_user_roles(
    user_id: UserId,
    _: Annotated[Principal, require(Permissions("user:read"))],
    user_service: UserService = Depends(get_user_service),
    resolver: PermissionResolver = Depends(get_permission_resolver),
):
    """Role assignments of a user with each role's permissions."""
    await user_service.get(user_id)
    assignments = await resolver.get_user_roles_with_permissions(user_id)
    return [UserRoleResponse.model_validate(a) for a in assignments]


@router.post(
    "/{user_id}/roles",
    response_model=UserRoleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_role(
    user_id: UserId,
    data: AssignRoleRequest,
    _: RoleManager,
    rbac_service: RBACService = Depends(get_rbac_service),
):
    """Assign a role to a user. Assigning a held role is a no-op."""
    assignment = await rbac_service.assign_role_to_user(user_id, data.role_id)
    return UserRoleResponse.model_validate(assignment)


@router.delete("/{user_id}/roles/{role_id}", response_model=MessageResponse)
async def remove_role(
    user_id: UserId,
    role_id: Annotated[int, Path(gt=0)],
    _: RoleManager,
    rbac_service: RBACService = Depends(get_rbac_service),
):
    await rbac_service.remove_role_from_user(user_id, role_id)
    return MessageResponse(message="Role removed from user successfully")
