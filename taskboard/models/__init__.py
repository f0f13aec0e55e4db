"""
Database models.
"""

from .base import Base, IdMixin, TimestampMixin
from .user import User, LegacyRole
from .project import Project, ProjectMember, ProjectRole, ProjectStatus
from .task import Task, TaskStatus

from .rbac import Role, Permission, UserRole, role_permissions

__all__ = [
    # Base
    "Base",
    "IdMixin",
    "TimestampMixin",
    # Models
    "User",
    "LegacyRole",
    "Project",
    "ProjectMember",
    "ProjectRole",
    "ProjectStatus",
    "Task",
    "TaskStatus",
    "Role",
    "Permission",
    "UserRole",
    "role_permissions",
]
