"""
Task repository.
"""

from sqlalchemy import Select, select, func

from taskboard.models.task import Task, TaskStatus
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    model = Task

    def _base_query(self) -> Select:
        return select(Task).order_by(Task.created_at.desc(), Task.id.desc())

    async def list_filtered(
        self,
        user_id: int | None = None,
        status: TaskStatus | None = None,
        project_id: int | None = None,
    ) -> list[Task]:
        """
        List tasks. user_id=None means every user's tasks.
        """
        return await self.all(user_id=user_id, status=status, project_id=project_id)

    async def count_by_status(self) -> dict[str, int]:
        """Count tasks grouped by status."""
        stmt = select(Task.status, func.count()).group_by(Task.status)
        result = await self.db.execute(stmt)
        return {status.value: count for status, count in result.all()}
