"""
Task schemas.
"""

from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, ConfigDict, PositiveInt, field_validator

from taskboard.models.task import TaskStatus


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    project_id: PositiveInt | None = Field(
        None,
        validation_alias=AliasChoices("project_id", "projectId"),
    )


class TaskUpdate(BaseModel):
    """Partial update. Unset fields are left alone."""
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None

    @field_validator("title", "status")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    user_id: int
    project_id: int | None = None
    created_at: datetime
    updated_at: datetime
