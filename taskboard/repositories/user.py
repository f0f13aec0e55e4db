"""
User repository.
"""

from sqlalchemy import Select, select, func
from sqlalchemy.exc import IntegrityError

from taskboard.models.user import User
from .base import BaseRepository


def is_email_conflict(exc: IntegrityError) -> bool:
    """True when the violation is the unique index on users.email."""
    # sqlite: "UNIQUE constraint failed: users.email"
    # postgresql: duplicate key value violates unique constraint "ix_users_email"
    message = str(exc.orig).lower()
    return "unique" in message and "email" in message


class UserRepository(BaseRepository[User]):
    model = User

    def _base_query(self) -> Select:
        return select(User).order_by(User.id)

    async def get_by_email(self, email: str) -> User | None:
        # Email comparison is case-sensitive, as stored
        return await self.get_one(email=email)

    async def search(
        self,
        search: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[User], int]:
        """List users, optionally matching email or name."""
        stmt = self._base_query()
        if search:
            stmt = stmt.where(
                User.email.ilike(f"%{search}%") |
                User.name.ilike(f"%{search}%")
            )

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = await self.db.scalar(count_stmt) or 0

        stmt = stmt.offset((page - 1) * per_page).limit(per_page)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def count_by_role(self) -> dict[str, int]:
        """Count users grouped by legacy role."""
        stmt = select(User.role, func.count()).group_by(User.role)
        result = await self.db.execute(stmt)
        return {role: count for role, count in result.all()}
