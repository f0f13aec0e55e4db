"""
RBAC Models - Roles, Permissions, and Assignments.

- Role: named bundle of permissions
- Permission: "resource:action" capability, identified by its unique name
- role_permissions: grants a permission to a role (unique pair)
- UserRole: assigns a role to a user (unique pair)

Usage:
    role = Role(name="editor")
    perm = Permission(name="task:create", resource="task", action="create")
    role.permissions.append(perm)
    assignment = UserRole(user_id=user.id, role_id=role.id)
"""

from sqlalchemy import String, ForeignKey, UniqueConstraint, Table, Column, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdMixin, TimestampMixin


# Many-to-many relationship between Role and Permission.
# The composite primary key is the uniqueness guarantee for the pair.
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base, IdMixin, TimestampMixin):
    """
    Role definition.

    Roles group permissions together and can be assigned to users.
    The name "admin" is reserved as the ownership override.
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary=role_permissions,
        lazy="selectin",
        order_by="Permission.name",
    )

    @property
    def permission_names(self) -> list[str]:
        return [perm.name for perm in self.permissions]

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class Permission(Base, IdMixin, TimestampMixin):
    """
    Permission definition.

    The name ("task:create") is the sole identifier used in authorization
    checks; resource and action are its two halves kept for querying.
    """

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    resource: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Permission {self.name}>"


class UserRole(Base, IdMixin, TimestampMixin):
    """
    User role assignment.

    A user may hold zero, one or many roles. Assigning the same role twice
    leaves a single row.
    """

    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_role"),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    role: Mapped["Role"] = relationship("Role", lazy="selectin")

    def __repr__(self) -> str:
        return f"<UserRole user={self.user_id} role={self.role_id}>"
