"""
RBAC schemas.
"""

from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, ConfigDict, PositiveInt


class PermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    resource: str
    action: str
    description: str | None = None


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    permissions: list[PermissionResponse] = []


class RoleUpdate(BaseModel):
    """Only the description of a role is editable."""
    description: str | None = Field(None, max_length=500)


class GrantPermissionRequest(BaseModel):
    permission: str = Field(
        min_length=3,
        max_length=150,
        pattern=r"^[a-z_]+:[a-z_*]+$",
        validation_alias=AliasChoices("permission", "permission_name", "permissionName"),
    )


class AssignRoleRequest(BaseModel):
    role_id: PositiveInt = Field(validation_alias=AliasChoices("role_id", "roleId"))


class UserRoleResponse(BaseModel):
    """A role assignment with the role's permission catalog."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    role_id: int
    created_at: datetime
    role: RoleResponse
