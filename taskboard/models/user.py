"""
User model.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, TimestampMixin


class LegacyRole:
    """Values of the single-string role column kept next to RBAC roles."""
    USER = "user"
    ADMIN = "admin"

    ALL = (USER, ADMIN)


class User(Base, IdMixin, TimestampMixin):
    """User account model."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Profile
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Legacy single role, retained for backward compatibility with RBAC
    role: Mapped[str] = mapped_column(
        String(50),
        default=LegacyRole.USER,
        server_default=LegacyRole.USER,
        nullable=False,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == LegacyRole.ADMIN

    def __repr__(self) -> str:
        return f"<User {self.email}>"
