"""
Repository pattern for data access.
"""

from taskboard.repositories.base import BaseRepository
from taskboard.repositories.user import UserRepository
from taskboard.repositories.task import TaskRepository
from taskboard.repositories.project import ProjectRepository, ProjectMemberRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "TaskRepository",
    "ProjectRepository",
    "ProjectMemberRepository",
]
