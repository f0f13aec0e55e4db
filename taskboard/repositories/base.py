"""
Generic repository shared by the user, task and project stores.

Subclasses set ``model`` and may override ``_base_query`` to add eager
loading or a default ordering. Keyword filters are plain equality matches;
``None`` means "don't filter on this column".
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Usage:
        class TaskRepository(BaseRepository[Task]):
            model = Task

        tasks = TaskRepository(db)
        task = await tasks.get_by_id(task_id)
        mine = await tasks.all(user_id=principal.user_id)
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        return select(self.model)

    def _where(self, stmt: Select, filters: dict[str, Any]) -> Select:
        conditions = [
            getattr(self.model, column) == value
            for column, value in filters.items()
            if value is not None
        ]
        return stmt.where(*conditions) if conditions else stmt

    async def get_by_id(self, id: int, *, refresh: bool = False) -> ModelT | None:
        """
        Load one row by primary key.

        refresh=True re-reads the row and its eager-loaded relationships even
        when the instance is already in the identity map.
        """
        stmt = self._base_query().where(self.model.id == id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_one(self, **filters) -> ModelT | None:
        stmt = self._where(self._base_query(), filters)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def exists(self, **filters) -> bool:
        stmt = self._where(select(self.model.id), filters).limit(1)
        return await self.db.scalar(stmt) is not None

    async def all(self, stmt: Select | None = None, **filters) -> list[ModelT]:
        stmt = self._where(self._base_query() if stmt is None else stmt, filters)
        return list((await self.db.scalars(stmt)).all())

    async def create(self, **data) -> ModelT:
        entity = self.model(**data)
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def update(self, entity: ModelT, **data) -> ModelT:
        """Copy known attributes onto a loaded entity and flush."""
        for column, value in data.items():
            if hasattr(entity, column):
                setattr(entity, column, value)
        await self.db.flush()
        return entity

    async def delete(self, entity: ModelT) -> None:
        # ORM-level delete so relationship cascades and SET NULLs apply
        await self.db.delete(entity)
        await self.db.flush()
