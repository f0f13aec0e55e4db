"""
Tests for the permission resolver.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.exceptions import InvalidInputError
from taskboard.rbac import GRANTS, PermissionResolver, RBACService


@pytest.mark.asyncio
async def test_permissions_are_union_of_roles(db: AsyncSession, user_factory, catalog):
    """Effective permissions equal the union over all assigned roles."""
    user = await user_factory.create(rbac_roles=[catalog["user"], catalog["manager"]])
    resolver = PermissionResolver(db)

    permissions = await resolver.get_user_permissions(user.id)

    assert permissions == set(GRANTS["user"]) | set(GRANTS["manager"])


@pytest.mark.asyncio
async def test_user_without_roles_has_no_permissions(db: AsyncSession, user_factory, catalog):
    user = await user_factory.create()
    resolver = PermissionResolver(db)

    assert await resolver.get_user_permissions(user.id) == set()
    assert await resolver.get_user_roles(user.id) == []
    assert not await resolver.has_permission(user.id, "task:read")


@pytest.mark.asyncio
async def test_adding_role_only_grows_permissions(db: AsyncSession, user_factory, catalog):
    user = await user_factory.create(rbac_roles=[catalog["user"]])
    resolver = PermissionResolver(db)
    before = await resolver.get_user_permissions(user.id)

    await RBACService(db).assign_role_to_user(user.id, catalog["manager"].id)
    after = await resolver.get_user_permissions(user.id)

    assert before <= after
    assert "project:manage_members" in after


@pytest.mark.asyncio
async def test_removing_last_granting_role_removes_permission(
    db: AsyncSession, user_factory, catalog
):
    user = await user_factory.create(rbac_roles=[catalog["user"], catalog["manager"]])
    resolver = PermissionResolver(db)
    assert await resolver.has_permission(user.id, "project:delete")

    await RBACService(db).remove_role_from_user(user.id, catalog["manager"].id)

    assert not await resolver.has_permission(user.id, "project:delete")
    # Still granted by the remaining "user" role
    assert await resolver.has_permission(user.id, "task:create")


@pytest.mark.asyncio
async def test_any_of_single_equals_has_permission(db: AsyncSession, user_factory, catalog):
    user = await user_factory.create(rbac_roles=[catalog["user"]])
    resolver = PermissionResolver(db)

    for name in ["task:read", "user:manage_roles", "project:read", "project:delete"]:
        assert await resolver.has_any_permission(user.id, [name]) == await resolver.has_permission(
            user.id, name
        )


@pytest.mark.asyncio
async def test_all_of_requires_each(db: AsyncSession, user_factory, catalog):
    user = await user_factory.create(rbac_roles=[catalog["user"]])
    resolver = PermissionResolver(db)

    assert await resolver.has_all_permissions(user.id, ["task:read", "task:create"])
    assert not await resolver.has_all_permissions(user.id, ["task:read", "project:delete"])
    assert await resolver.has_any_permission(user.id, ["task:read", "project:delete"])


@pytest.mark.asyncio
async def test_seeded_manager_permissions(db: AsyncSession, user_factory, catalog):
    manager = await user_factory.create(rbac_roles=[catalog["manager"]])
    resolver = PermissionResolver(db)

    assert await resolver.has_permission(manager.id, "project:manage_members")
    assert not await resolver.has_permission(manager.id, "user:manage_roles")


@pytest.mark.asyncio
async def test_role_queries(db: AsyncSession, user_factory, catalog):
    user = await user_factory.create(rbac_roles=[catalog["user"], catalog["manager"]])
    resolver = PermissionResolver(db)

    assert await resolver.get_user_roles(user.id) == ["manager", "user"]
    assert await resolver.has_role(user.id, "manager")
    assert not await resolver.has_role(user.id, "admin")
    assert await resolver.has_any_role(user.id, ["admin", "user"])
    assert not await resolver.has_any_role(user.id, ["admin"])


@pytest.mark.asyncio
async def test_roles_with_permissions(db: AsyncSession, user_factory, catalog):
    user = await user_factory.create(rbac_roles=[catalog["manager"]])
    resolver = PermissionResolver(db)

    assignments = await resolver.get_user_roles_with_permissions(user.id)

    assert len(assignments) == 1
    assert assignments[0].role.name == "manager"
    assert set(assignments[0].role.permission_names) == set(GRANTS["manager"])


@pytest.mark.asyncio
async def test_grant_change_visible_to_next_check(db: AsyncSession, user_factory, catalog):
    user = await user_factory.create(rbac_roles=[catalog["user"]])
    resolver = PermissionResolver(db)
    assert not await resolver.has_permission(user.id, "user:read_all")

    await RBACService(db).add_permission_to_role(catalog["user"].id, "user:read_all")

    assert await resolver.has_permission(user.id, "user:read_all")


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", [0, -1, True, "1", 1.5, None])
async def test_invalid_user_id_rejected(db: AsyncSession, user_id):
    resolver = PermissionResolver(db)

    with pytest.raises(InvalidInputError):
        await resolver.get_user_permissions(user_id)


@pytest.mark.asyncio
async def test_empty_permission_list_rejected(db: AsyncSession, user_factory, catalog):
    """An empty list is a caller error, never a plain False."""
    user = await user_factory.create(rbac_roles=[catalog["admin"]])
    resolver = PermissionResolver(db)

    with pytest.raises(InvalidInputError):
        await resolver.has_any_permission(user.id, [])
    with pytest.raises(InvalidInputError):
        await resolver.has_all_permissions(user.id, [])
    with pytest.raises(InvalidInputError):
        await resolver.has_any_role(user.id, [])


@pytest.mark.asyncio
async def test_invalid_permission_names_rejected(db: AsyncSession, user_factory, catalog):
    user = await user_factory.create()
    resolver = PermissionResolver(db)

    with pytest.raises(InvalidInputError):
        await resolver.has_permission(user.id, "")
    with pytest.raises(InvalidInputError):
        await resolver.has_any_permission(user.id, ["task:read", ""])
    with pytest.raises(InvalidInputError):
        await resolver.has_any_permission(user.id, "task:read")
