"""
Ownership policy - fine, per-instance access checks.

One predicate decides access for every resource type:

    READ    admin, owner, or any project member
    MANAGE  admin, owner, or project member with role MANAGER
    OWNER   admin or owner

Access providers build the ResourceAccess facts for a resource type from
persisted state:

    access = await ProjectAccessProvider(db).get_access(project)
    ensure_access(principal, access, AccessLevel.MANAGE, "...")
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Mapping, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.exceptions import ForbiddenError
from taskboard.models.project import Project, ProjectRole
from taskboard.models.task import Task
from taskboard.repositories.project import ProjectMemberRepository

from .interfaces import PolicyDecision
from .principal import Principal

ResourceT = TypeVar("ResourceT")


class AccessLevel(str, Enum):
    READ = "read"
    MANAGE = "manage"
    OWNER = "owner"


@dataclass(frozen=True)
class ResourceAccess:
    """Ownership facts about one resource."""
    owner_id: int
    member_roles: Mapping[int, ProjectRole] = field(default_factory=dict)


def check_access(
    principal: Principal,
    access: ResourceAccess,
    level: AccessLevel,
) -> PolicyDecision:
    if principal.is_admin:
        return PolicyDecision.allow("admin", level=level.value)
    if access.owner_id == principal.user_id:
        return PolicyDecision.allow("owner", level=level.value)

    member_role = access.member_roles.get(principal.user_id)
    if level is AccessLevel.READ and member_role is not None:
        return PolicyDecision.allow("member", level=level.value)
    if level is AccessLevel.MANAGE and member_role == ProjectRole.MANAGER:
        return PolicyDecision.allow("manager", level=level.value)

    return PolicyDecision.deny(f"{level.value} access denied", level=level.value)


def ensure_access(
    principal: Principal,
    access: ResourceAccess,
    level: AccessLevel,
    message: str,
) -> None:
    """Raise ForbiddenError(message) unless check_access allows."""
    if not check_access(principal, access, level).allowed:
        raise ForbiddenError(message)


class AccessProvider(ABC, Generic[ResourceT]):
    """Builds ResourceAccess for one resource type."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @abstractmethod
    async def get_access(self, resource: ResourceT) -> ResourceAccess:
        ...


class TaskAccessProvider(AccessProvider[Task]):
    """Tasks have an owner (creator) and no members."""

    async def get_access(self, resource: Task) -> ResourceAccess:
        return ResourceAccess(owner_id=resource.user_id)


class ProjectAccessProvider(AccessProvider[Project]):
    """Projects have an owner and per-project member roles, read fresh."""

    async def get_access(self, resource: Project) -> ResourceAccess:
        members = await ProjectMemberRepository(self.db).member_roles(resource.id)
        return ResourceAccess(owner_id=resource.owner_id, member_roles=members)

