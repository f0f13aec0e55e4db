"""
Task routes.

Every route requires the legacy "user" or "admin" role; per-task
ownership is checked in TaskService.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from taskboard.core.auth import Principal, Roles, require
from taskboard.models.task import TaskStatus
from taskboard.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from taskboard.services.task import TaskService
from taskboard.api.dependencies.services import get_task_service

router = APIRouter()

TaskUser = Annotated[Principal, require(Roles("user", "admin"))]
TaskId = Annotated[int, Path(gt=0)]


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    principal: TaskUser,
    task_status: TaskStatus | None = Query(None, alias="status"),
    project_id: int | None = Query(None, gt=0),
    task_service: TaskService = Depends(get_task_service),
):
    """List own tasks (admin: all tasks)."""
    tasks = await task_service.list_tasks(principal, status=task_status, project_id=project_id)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: TaskId,
    principal: TaskUser,
    task_service: TaskService = Depends(get_task_service),
):
    """Get a task by ID."""
    task = await task_service.get(task_id)
    return TaskResponse.model_validate(task)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    principal: TaskUser,
    task_service: TaskService = Depends(get_task_service),
):
    """Create a task owned by the caller."""
    task = await task_service.create(principal, data)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: TaskId,
    data: TaskUpdate,
    principal: TaskUser,
    task_service: TaskService = Depends(get_task_service),
):
    """Update a task (owner or admin)."""
    task = await task_service.update(principal, task_id, data)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: TaskId,
    principal: TaskUser,
    task_service: TaskService = Depends(get_task_service),
):
    """Delete a task (owner or admin)."""
    await task_service.delete(principal, task_id)
