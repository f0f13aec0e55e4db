"""
Project models.
"""

from enum import Enum
from sqlalchemy import String, ForeignKey, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdMixin, TimestampMixin


class ProjectStatus(str, Enum):
    """Project lifecycle status."""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


class ProjectRole(str, Enum):
    """Per-project member roles."""
    MEMBER = "MEMBER"
    MANAGER = "MANAGER"


class Project(Base, IdMixin, TimestampMixin):
    """Project model."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        SQLEnum(ProjectStatus),
        default=ProjectStatus.ACTIVE,
        nullable=False,
    )
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", lazy="selectin")
    members: Mapped[list["ProjectMember"]] = relationship(
        "ProjectMember",
        back_populates="project",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ProjectMember.id",
    )
    # Deleting a project detaches its tasks (project_id -> NULL)
    tasks: Mapped[list["Task"]] = relationship(
        "Task",
        lazy="selectin",
        order_by="Task.id",
    )

    def __repr__(self) -> str:
        return f"<Project {self.id} {self.name}>"


class ProjectMember(Base, IdMixin, TimestampMixin):
    """Project membership."""

    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_member"),
    )

    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[ProjectRole] = mapped_column(
        SQLEnum(ProjectRole),
        default=ProjectRole.MEMBER,
        nullable=False,
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="members")
    user: Mapped["User"] = relationship("User", lazy="selectin")

    def __repr__(self) -> str:
        return f"<ProjectMember project={self.project_id} user={self.user_id} role={self.role}>"


# Import at bottom to avoid circular imports
from .user import User
from .task import Task
