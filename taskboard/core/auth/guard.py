"""
Authorization Guard - coarse, per-operation checks.

Usage:
    guard = AuthorizationGuard(PermissionResolver(db))
    await guard.enforce(principal, [Roles("admin"), AnyPermission("user:read_all")])
"""

from typing import Iterable

import structlog

from taskboard.core.exceptions import AppError, ForbiddenError, InternalError, UnauthenticatedError
from taskboard.rbac.resolver import PermissionResolver

from .interfaces import PolicyDecision
from .principal import Principal
from .requirements import Requirement, order_requirements

logger = structlog.get_logger()


class AuthorizationGuard:
    """
    Evaluates requirement declarations against a principal.

    Every declared requirement must pass. The first failing one decides
    the denial reason. Errors while resolving are never turned into an
    allow or a deny: domain errors propagate, anything else becomes
    InternalError.
    """

    def __init__(self, resolver: PermissionResolver):
        self.resolver = resolver

    async def check(
        self,
        principal: Principal | None,
        requirements: Iterable[Requirement],
    ) -> PolicyDecision:
        """Evaluate requirements. Raises UnauthenticatedError without a valid principal."""
        ordered = order_requirements(requirements)
        if not ordered:
            return PolicyDecision.allow("No requirements declared")

        user_id = getattr(principal, "user_id", None)
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
            raise UnauthenticatedError("User not authenticated")

        for requirement in ordered:
            try:
                decision = await requirement.evaluate(principal, self.resolver)
            except AppError:
                raise
            except Exception as e:
                logger.error(
                    "authorization.check_failed",
                    user_id=user_id,
                    requirement=repr(requirement),
                    error=str(e),
                )
                raise InternalError("Permission check failed") from e

            if not decision.allowed:
                return decision

        return PolicyDecision.allow()

    async def enforce(
        self,
        principal: Principal | None,
        requirements: Iterable[Requirement],
    ) -> None:
        """Like check(), but a denial raises ForbiddenError."""
        decision = await self.check(principal, requirements)
        if not decision.allowed:
            logger.info(
                "authorization.denied",
                user_id=principal.user_id,
                reason=decision.reason,
                requirement=decision.metadata.get("requirement"),
            )
            raise ForbiddenError(decision.reason)
