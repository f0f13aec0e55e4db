"""
Requirement declarations for protected operations.

Routes declare what they need as values, evaluated by AuthorizationGuard:

    Roles("user", "admin")              legacy token role in the list
    Permissions("project:read")         has_any_permission (legacy form)
    AnyPermission("task:update", ...)   has_any_permission
    AllPermissions("a:b", "c:d")        has_all_permissions

Several requirements on one operation must ALL pass, evaluated in the
order above regardless of declaration order.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Iterable

from .interfaces import PolicyDecision
from .principal import Principal


class Requirement(ABC):
    """Base requirement: a non-empty tuple of names checked one way."""

    order: ClassVar[int] = 0
    kind: ClassVar[str] = "requirement"

    def __init__(self, *names: str | Iterable[str]):
        if len(names) == 1 and isinstance(names[0], (list, tuple, set, frozenset)):
            names = tuple(names[0])
        if not names:
            raise ValueError(f"{type(self).__name__}() needs at least one name")
        for name in names:
            if not isinstance(name, str) or not name.strip():
                raise ValueError(f"{type(self).__name__}() names must be non-empty strings")
        self.names: tuple[str, ...] = tuple(names)

    @abstractmethod
    async def evaluate(self, principal: Principal, resolver) -> PolicyDecision:
        ...

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.names == other.names

    def __hash__(self) -> int:
        return hash((type(self), self.names))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(map(repr, self.names))})"


class Roles(Requirement):
    """Legacy role check against the token claim. No store access."""

    order = 0
    kind = "roles"

    async def evaluate(self, principal: Principal, resolver) -> PolicyDecision:
        if not principal.roles:
            return PolicyDecision.deny("No user roles found", requirement=self.kind)
        if principal.has_legacy_role(*self.names):
            return PolicyDecision.allow(requirement=self.kind)
        return PolicyDecision.deny(
            f"Required role: one of {', '.join(self.names)}",
            requirement=self.kind,
        )


class Permissions(Requirement):
    """Legacy permission declaration; satisfied by any one of the names."""

    order = 1
    kind = "permissions"

    async def evaluate(self, principal: Principal, resolver) -> PolicyDecision:
        if await resolver.has_any_permission(principal.user_id, list(self.names)):
            return PolicyDecision.allow(requirement=self.kind)
        return PolicyDecision.deny(
            f"Insufficient permissions. Required: {', '.join(self.names)}",
            requirement=self.kind,
        )


class AnyPermission(Requirement):
    order = 2
    kind = "any_permission"

    async def evaluate(self, principal: Principal, resolver) -> PolicyDecision:
        if await resolver.has_any_permission(principal.user_id, list(self.names)):
            return PolicyDecision.allow(requirement=self.kind)
        return PolicyDecision.deny(
            f"Insufficient permissions. Required one of: {', '.join(self.names)}",
            requirement=self.kind,
        )


class AllPermissions(Requirement):
    order = 3
    kind = "all_permissions"

    async def evaluate(self, principal: Principal, resolver) -> PolicyDecision:
        if await resolver.has_all_permissions(principal.user_id, list(self.names)):
            return PolicyDecision.allow(requirement=self.kind)
        return PolicyDecision.deny(
            f"Insufficient permissions. Required all of: {', '.join(self.names)}",
            requirement=self.kind,
        )


def order_requirements(requirements: Iterable[Requirement]) -> tuple[Requirement, ...]:
    """Validate and sort requirements into evaluation order (stable)."""
    items = tuple(requirements)
    for item in items:
        if not isinstance(item, Requirement):
            raise TypeError(f"Expected a Requirement, got {item!r}")
    return tuple(sorted(items, key=lambda r: r.order))
