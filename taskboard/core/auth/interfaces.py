"""
Authorization interfaces - Core abstractions.

Every check in the authorization layer (guard requirements, ownership
levels) produces a PolicyDecision. Callers either inspect it or let
enforce-style helpers turn a denial into ForbiddenError.
"""

from dataclasses import dataclass, field
from typing import Any


# ============================================================
# POLICY DECISION
# ============================================================

@dataclass
class PolicyDecision:
    """
    Result of a policy evaluation.

    Attributes:
        allowed: Whether the action is permitted
        reason: Human-readable explanation (for errors/logging)
        metadata: Additional data (requirement evaluated, level checked, ...)
    """
    allowed: bool
    reason: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def allow(cls, reason: str | None = None, **metadata: Any) -> "PolicyDecision":
        return cls(allowed=True, reason=reason, metadata=metadata)

    @classmethod
    def deny(cls, reason: str = "Permission denied", **metadata: Any) -> "PolicyDecision":
        return cls(allowed=False, reason=reason, metadata=metadata)

    def __bool__(self) -> bool:
        return self.allowed
