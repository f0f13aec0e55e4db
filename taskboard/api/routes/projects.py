"""
Project routes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from taskboard.core.auth import Permissions, Principal, require
from taskboard.schemas.project import (
    ProjectCreate,
    ProjectMemberAdd,
    ProjectMemberResponse,
    ProjectResponse,
    ProjectUpdate,
)
from taskboard.services.project import ProjectService
from taskboard.api.dependencies.services import get_project_service

router = APIRouter()

ProjectId = Annotated[int, Path(gt=0)]


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    principal: Annotated[Principal, require(Permissions("project:create"))],
    project_service: ProjectService = Depends(get_project_service),
):
    """Create a project owned by the caller."""
    project = await project_service.create(principal, data)
    return ProjectResponse.model_validate(project)


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    principal: Annotated[Principal, require(Permissions("project:read"))],
    project_service: ProjectService = Depends(get_project_service),
):
    """List projects the caller owns or belongs to (admin: all)."""
    projects = await project_service.list_projects(principal)
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: ProjectId,
    principal: Annotated[Principal, require(Permissions("project:read"))],
    project_service: ProjectService = Depends(get_project_service),
):
    project = await project_service.get(principal, project_id)
    return ProjectResponse.model_validate(project)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: ProjectId,
    data: ProjectUpdate,
    principal: Annotated[Principal, require(Permissions("project:update"))],
    project_service: ProjectService = Depends(get_project_service),
):
    """Update a project (owner, project manager or admin)."""
    project = await project_service.update(principal, project_id, data)
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: ProjectId,
    principal: Annotated[Principal, require(Permissions("project:delete"))],
    project_service: ProjectService = Depends(get_project_service),
):
    """Delete a project (owner or admin)."""
    await project_service.delete(principal, project_id)


@router.get("/{project_id}/members", response_model=list[ProjectMemberResponse])
async def list_members(
    project_id: ProjectId,
    principal: Annotated[Principal, require(Permissions("project:read"))],
    project_service: ProjectService = Depends(get_project_service),
):
    members = await project_service.list_members(principal, project_id)
    return [ProjectMemberResponse.model_validate(m) for m in members]


@router.post(
    "/{project_id}/members",
    response_model=ProjectMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    project_id: ProjectId,
    data: ProjectMemberAdd,
    principal: Annotated[Principal, require(Permissions("project:manage_members"))],
    project_service: ProjectService = Depends(get_project_service),
):
    """Add a user to the project."""
    member = await project_service.add_member(principal, project_id, data)
    return ProjectMemberResponse.model_validate(member)


@router.delete("/{project_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    project_id: ProjectId,
    member_id: Annotated[int, Path(gt=0)],
    principal: Annotated[Principal, require(Permissions("project:manage_members"))],
    project_service: ProjectService = Depends(get_project_service),
):
    """Remove a membership row from the project."""
    await project_service.remove_member(principal, project_id, member_id)
