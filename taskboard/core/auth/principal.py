"""
The authenticated caller of a request.
"""

from dataclasses import dataclass
from typing import Any

from taskboard.models.user import LegacyRole

ADMIN_ROLE = "admin"


def normalize_roles(claim: Any) -> tuple[str, ...]:
    """
    Normalize the token "roles" claim.

    The claim may be a single role string or a list of them; anything else
    yields no roles.
    """
    if claim is None:
        return ()
    if isinstance(claim, str):
        return (claim,) if claim else ()
    if isinstance(claim, (list, tuple)):
        return tuple(r for r in claim if isinstance(r, str) and r)
    return ()


@dataclass(frozen=True)
class Principal:
    """
    Authenticated user as seen by authorization.

    roles holds the legacy role(s) carried by the access token; rbac_roles
    holds the RBAC role names read from the store for this request.
    """
    user_id: int
    roles: tuple[str, ...] = ()
    rbac_roles: tuple[str, ...] = ()

    @property
    def is_admin(self) -> bool:
        """Admin via the legacy role OR via the RBAC role named "admin"."""
        return LegacyRole.ADMIN in self.roles or ADMIN_ROLE in self.rbac_roles

    def has_legacy_role(self, *names: str) -> bool:
        return any(name in self.roles for name in names)
