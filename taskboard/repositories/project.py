"""
Project and membership repositories.
"""

from sqlalchemy import Select, select, or_

from taskboard.models.project import Project, ProjectMember, ProjectRole
from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    def _base_query(self) -> Select:
        return select(Project).order_by(Project.updated_at.desc(), Project.id.desc())

    async def list_visible_to(self, user_id: int | None) -> list[Project]:
        """
        List projects. user_id=None lists every project; otherwise projects
        the user owns or is a member of (any role).
        """
        stmt = self._base_query().execution_options(populate_existing=True)
        if user_id is not None:
            member_of = select(ProjectMember.project_id).where(
                ProjectMember.user_id == user_id
            )
            stmt = stmt.where(
                or_(Project.owner_id == user_id, Project.id.in_(member_of))
            )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


class ProjectMemberRepository(BaseRepository[ProjectMember]):
    model = ProjectMember

    def _base_query(self) -> Select:
        return select(ProjectMember).order_by(ProjectMember.created_at, ProjectMember.id)

    async def member_roles(self, project_id: int) -> dict[int, ProjectRole]:
        """Map user_id -> per-project role, read fresh from storage."""
        stmt = select(ProjectMember.user_id, ProjectMember.role).where(
            ProjectMember.project_id == project_id
        )
        result = await self.db.execute(stmt)
        return {user_id: role for user_id, role in result.all()}

    async def list_for_project(self, project_id: int) -> list[ProjectMember]:
        return await self.all(project_id=project_id)
