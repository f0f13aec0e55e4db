"""
Task service.

Ownership rules:
    list          admin sees every task, others their own
    get one       no ownership check
    update/delete owner or admin
    create        optional project must exist and be readable by the creator
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import AccessLevel, Principal, ensure_access
from taskboard.core.auth.ownership import ProjectAccessProvider, TaskAccessProvider
from taskboard.core.exceptions import NotFoundError
from taskboard.models.task import Task, TaskStatus
from taskboard.repositories.project import ProjectRepository
from taskboard.repositories.task import TaskRepository
from taskboard.schemas.task import TaskCreate, TaskUpdate

logger = structlog.get_logger()


class TaskService:
    """Task CRUD with ownership checks."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tasks = TaskRepository(db)
        self.access = TaskAccessProvider(db)

    async def get(self, task_id: int) -> Task:
        task = await self.tasks.get_by_id(task_id)
        if not task:
            raise NotFoundError(f"Task with ID {task_id} not found")
        return task

    async def list_tasks(
        self,
        principal: Principal,
        status: TaskStatus | None = None,
        project_id: int | None = None,
    ) -> list[Task]:
        owner = None if principal.is_admin else principal.user_id
        return await self.tasks.list_filtered(
            user_id=owner,
            status=status,
            project_id=project_id,
        )

    async def create(self, principal: Principal, data: TaskCreate) -> Task:
        if data.project_id is not None:
            project = await ProjectRepository(self.db).get_by_id(data.project_id)
            if not project:
                raise NotFoundError(f"Project with ID {data.project_id} not found")
            access = await ProjectAccessProvider(self.db).get_access(project)
            ensure_access(
                principal,
                access,
                AccessLevel.READ,
                "You do not have access to this project",
            )

        task = await self.tasks.create(
            title=data.title,
            description=data.description,
            status=data.status,
            user_id=principal.user_id,
            project_id=data.project_id,
        )
        logger.info("task.created", task_id=task.id, user_id=principal.user_id)
        return task

    async def update(self, principal: Principal, task_id: int, data: TaskUpdate) -> Task:
        task = await self.get(task_id)
        ensure_access(
            principal,
            await self.access.get_access(task),
            AccessLevel.OWNER,
            "You can only update your own tasks",
        )

        task = await self.tasks.update(task, **data.model_dump(exclude_unset=True))
        logger.info("task.updated", task_id=task.id, user_id=principal.user_id)
        return task

    async def delete(self, principal: Principal, task_id: int) -> None:
        task = await self.get(task_id)
        ensure_access(
            principal,
            await self.access.get_access(task),
            AccessLevel.OWNER,
            "You can only delete your own tasks",
        )

        await self.tasks.delete(task)
        logger.info("task.deleted", task_id=task_id, user_id=principal.user_id)
