"""
Project service.

Access levels per operation:
    get / list members          READ   (owner, any member, admin)
    update / add / remove member MANAGE (owner, MANAGER member, admin)
    delete                      OWNER  (owner, admin)
"""

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import AccessLevel, Principal, ensure_access
from taskboard.core.auth.ownership import ProjectAccessProvider
from taskboard.core.exceptions import ConflictError, NotFoundError
from taskboard.models.project import Project, ProjectMember
from taskboard.repositories.project import ProjectMemberRepository, ProjectRepository
from taskboard.repositories.user import UserRepository
from taskboard.schemas.project import ProjectCreate, ProjectMemberAdd, ProjectUpdate

logger = structlog.get_logger()


class ProjectService:
    """Project CRUD and membership management with ownership checks."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.projects = ProjectRepository(db)
        self.members = ProjectMemberRepository(db)
        self.access = ProjectAccessProvider(db)

    async def _get(self, project_id: int) -> Project:
        project = await self.projects.get_by_id(project_id, refresh=True)
        if not project:
            raise NotFoundError(f"Project with ID {project_id} not found")
        return project

    async def _authorize(
        self,
        principal: Principal,
        project: Project,
        level: AccessLevel,
        message: str,
    ) -> None:
        ensure_access(principal, await self.access.get_access(project), level, message)

    async def create(self, principal: Principal, data: ProjectCreate) -> Project:
        if not await UserRepository(self.db).exists(id=principal.user_id):
            raise NotFoundError("Owner user does not exist")

        project = await self.projects.create(
            name=data.name,
            description=data.description,
            status=data.status,
            owner_id=principal.user_id,
        )
        logger.info("project.created", project_id=project.id, owner_id=principal.user_id)
        return await self._get(project.id)

    async def list_projects(self, principal: Principal) -> list[Project]:
        """Admin sees every project; others projects they own or belong to."""
        owner = None if principal.is_admin else principal.user_id
        return await self.projects.list_visible_to(owner)

    async def get(self, principal: Principal, project_id: int) -> Project:
        project = await self._get(project_id)
        await self._authorize(
            principal, project, AccessLevel.READ,
            "You do not have access to this project",
        )
        return project

    async def update(self, principal: Principal, project_id: int, data: ProjectUpdate) -> Project:
        project = await self._get(project_id)
        await self._authorize(
            principal, project, AccessLevel.MANAGE,
            "You do not have permission to update this project",
        )

        await self.projects.update(project, **data.model_dump(exclude_unset=True))
        logger.info("project.updated", project_id=project_id, user_id=principal.user_id)
        return await self._get(project_id)

    async def delete(self, principal: Principal, project_id: int) -> None:
        project = await self._get(project_id)
        await self._authorize(
            principal, project, AccessLevel.OWNER,
            "You do not have permission to delete this project",
        )

        # Memberships go with the project; tasks become personal
        await self.projects.delete(project)
        logger.info("project.deleted", project_id=project_id, user_id=principal.user_id)

    # ============================================================
    # MEMBERS
    # ============================================================

    async def list_members(self, principal: Principal, project_id: int) -> list[ProjectMember]:
        project = await self._get(project_id)
        await self._authorize(
            principal, project, AccessLevel.READ,
            "You do not have access to this project",
        )
        return await self.members.list_for_project(project_id)

    async def add_member(
        self,
        principal: Principal,
        project_id: int,
        data: ProjectMemberAdd,
    ) -> ProjectMember:
        project = await self._get(project_id)
        await self._authorize(
            principal, project, AccessLevel.MANAGE,
            "You do not have permission to manage project members",
        )

        if not await UserRepository(self.db).exists(id=data.user_id):
            raise NotFoundError(f"User with ID {data.user_id} not found")

        if await self.members.exists(project_id=project_id, user_id=data.user_id):
            raise ConflictError("User is already a member of this project")

        try:
            member = await self.members.create(
                project_id=project_id,
                user_id=data.user_id,
                role=data.role,
            )
        except IntegrityError:
            # Lost a race with a concurrent add of the same user
            raise ConflictError("User is already a member of this project")

        logger.info(
            "project.member_added",
            project_id=project_id,
            member_user_id=data.user_id,
            role=data.role.value,
            user_id=principal.user_id,
        )
        return await self.members.get_by_id(member.id, refresh=True)

    async def remove_member(self, principal: Principal, project_id: int, member_id: int) -> None:
        """member_id is the membership row id, not the user id."""
        project = await self._get(project_id)
        await self._authorize(
            principal, project, AccessLevel.MANAGE,
            "You do not have permission to manage project members",
        )

        member = await self.members.get_by_id(member_id)
        if not member or member.project_id != project_id:
            raise NotFoundError("Member not found in this project")

        await self.members.delete(member)
        logger.info(
            "project.member_removed",
            project_id=project_id,
            member_id=member_id,
            user_id=principal.user_id,
        )
