"""
User schemas.
"""

from datetime import datetime
from typing import Literal
from pydantic import AliasChoices, BaseModel, EmailStr, Field, ConfigDict, field_validator

from taskboard.models.task import TaskStatus

LegacyRoleName = Literal["user", "admin"]


class UserSummary(BaseModel):
    """Compact user embedded in other responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None = None


class UserResponse(BaseModel):
    """User response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None = None
    avatar_url: str | None = None
    role: str
    created_at: datetime
    updated_at: datetime


class UserTaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    created_at: datetime


class UserDetailResponse(UserResponse):
    """User with their tasks (admin view)."""
    tasks: list[UserTaskSummary] = []


class UserListResponse(BaseModel):
    """Paginated user list response."""
    users: list[UserResponse]
    total: int
    page: int
    per_page: int


class UserCreate(BaseModel):
    """Admin user creation."""
    email: EmailStr
    password: str = Field(min_length=6)
    name: str | None = Field(None, max_length=255)
    avatar_url: str | None = Field(
        None,
        max_length=500,
        validation_alias=AliasChoices("avatar_url", "avatar"),
    )
    role: LegacyRoleName = Field(
        "user",
        validation_alias=AliasChoices("role", "roles"),
    )


class UserUpdate(BaseModel):
    """Admin user update. Unset fields are left alone."""
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=6)
    name: str | None = Field(None, max_length=255)
    avatar_url: str | None = Field(
        None,
        max_length=500,
        validation_alias=AliasChoices("avatar_url", "avatar"),
    )
    role: LegacyRoleName | None = Field(
        None,
        validation_alias=AliasChoices("role", "roles"),
    )

    @field_validator("email", "password", "role")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ProfileUpdate(BaseModel):
    """Self-service profile update."""
    name: str | None = Field(None, min_length=1, max_length=255)
    avatar_url: str | None = Field(
        None,
        max_length=500,
        validation_alias=AliasChoices("avatar_url", "avatar"),
    )


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(
        min_length=1,
        validation_alias=AliasChoices("current_password", "currentPassword"),
    )
    new_password: str = Field(
        min_length=6,
        validation_alias=AliasChoices("new_password", "newPassword"),
    )


class StatisticsResponse(BaseModel):
    total_users: int
    total_tasks: int
    users_by_role: dict[str, int]
    tasks_by_status: dict[str, int]


class ProfilePermissionsResponse(BaseModel):
    """Effective authorization facts for the caller."""
    user_id: int
    legacy_roles: list[str]
    roles: list[str]
    permissions: list[str]
    is_admin: bool
