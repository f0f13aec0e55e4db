"""
Project schemas.
"""

from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, ConfigDict, PositiveInt, field_validator

from taskboard.models.project import ProjectRole, ProjectStatus
from taskboard.models.task import TaskStatus
from .user import UserSummary


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    status: ProjectStatus = ProjectStatus.ACTIVE


class ProjectUpdate(BaseModel):
    """Partial update. Unset fields are left alone."""
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    status: ProjectStatus | None = None

    @field_validator("name", "status")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ProjectMemberAdd(BaseModel):
    user_id: PositiveInt = Field(validation_alias=AliasChoices("user_id", "userId"))
    role: ProjectRole = ProjectRole.MEMBER


class ProjectMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    user_id: int
    role: ProjectRole
    created_at: datetime
    user: UserSummary | None = None


class ProjectTaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    status: TaskStatus
    user_id: int


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    status: ProjectStatus
    owner_id: int
    owner: UserSummary | None = None
    members: list[ProjectMemberResponse] = []
    tasks: list[ProjectTaskSummary] = []
    created_at: datetime
    updated_at: datetime
