"""
Tests for project endpoints, membership and project ownership.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import get_auth_headers


@pytest.fixture
def team(user_factory, catalog):
    """Owner, project manager, plain member and outsider.

    Everyone holds the RBAC "manager" role so that the guard passes and
    only per-project ownership decides.
    """

    async def build():
        manager_role = catalog["manager"]
        return {
            name: await user_factory.create(email=f"{name}@example.com", rbac_roles=[manager_role])
            for name in ("owner", "manager", "member", "outsider")
        }

    return build


async def create_project(client: AsyncClient, owner, **data) -> dict:
    response = await client.post(
        "/api/projects",
        json={"name": "Website", **data},
        headers=get_auth_headers(owner),
    )
    assert response.status_code == 201
    return response.json()


async def add_member(client: AsyncClient, actor, project_id: int, user_id: int, role: str = "MEMBER"):
    return await client.post(
        f"/api/projects/{project_id}/members",
        json={"user_id": user_id, "role": role},
        headers=get_auth_headers(actor),
    )


@pytest.mark.asyncio
async def test_create_project(client: AsyncClient, team):
    users = await team()

    project = await create_project(client, users["owner"], description="Redesign")

    assert project["owner_id"] == users["owner"].id
    assert project["status"] == "ACTIVE"
    assert project["description"] == "Redesign"
    assert project["members"] == []


@pytest.mark.asyncio
async def test_create_requires_permission(client: AsyncClient, test_user, auth_headers):
    """The seeded "user" role cannot create projects."""
    response = await client.post("/api/projects", json={"name": "Nope"}, headers=auth_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


@pytest.mark.asyncio
async def test_manager_member_rights(client: AsyncClient, team):
    """MANAGER may update and manage members but not delete."""
    users = await team()
    project = await create_project(client, users["owner"])
    pid = project["id"]
    assert (await add_member(client, users["owner"], pid, users["manager"].id, "MANAGER")).status_code == 201

    response = await client.put(
        f"/api/projects/{pid}",
        json={"name": "Website v2"},
        headers=get_auth_headers(users["manager"]),
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Website v2"

    response = await add_member(client, users["manager"], pid, users["member"].id)
    assert response.status_code == 201

    response = await client.delete(f"/api/projects/{pid}", headers=get_auth_headers(users["manager"]))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_plain_member_rights(client: AsyncClient, team):
    """MEMBER may read but not update, manage members or delete."""
    users = await team()
    project = await create_project(client, users["owner"])
    pid = project["id"]
    await add_member(client, users["owner"], pid, users["member"].id)
    member_headers = get_auth_headers(users["member"])

    assert (await client.get(f"/api/projects/{pid}", headers=member_headers)).status_code == 200
    assert (await client.get(f"/api/projects/{pid}/members", headers=member_headers)).status_code == 200

    response = await client.put(f"/api/projects/{pid}", json={"name": "x"}, headers=member_headers)
    assert response.status_code == 403
    assert (await add_member(client, users["member"], pid, users["outsider"].id)).status_code == 403
    assert (await client.delete(f"/api/projects/{pid}", headers=member_headers)).status_code == 403


@pytest.mark.asyncio
async def test_outsider_cannot_read(client: AsyncClient, team):
    users = await team()
    project = await create_project(client, users["owner"])

    response = await client.get(
        f"/api/projects/{project['id']}",
        headers=get_auth_headers(users["outsider"]),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_owner_can_delete(client: AsyncClient, team):
    users = await team()
    project = await create_project(client, users["owner"])
    pid = project["id"]
    await add_member(client, users["owner"], pid, users["member"].id)

    response = await client.delete(f"/api/projects/{pid}", headers=get_auth_headers(users["owner"]))
    assert response.status_code == 204

    response = await client.get(f"/api/projects/{pid}", headers=get_auth_headers(users["owner"]))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_overrides_ownership(client: AsyncClient, team, admin_user, admin_auth_headers):
    users = await team()
    project = await create_project(client, users["owner"])
    pid = project["id"]

    response = await client.put(f"/api/projects/{pid}", json={"status": "ARCHIVED"}, headers=admin_auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "ARCHIVED"

    response = await client.delete(f"/api/projects/{pid}", headers=admin_auth_headers)
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_add_existing_member_conflict(client: AsyncClient, team):
    users = await team()
    project = await create_project(client, users["owner"])
    pid = project["id"]

    assert (await add_member(client, users["owner"], pid, users["member"].id)).status_code == 201
    response = await add_member(client, users["owner"], pid, users["member"].id, "MANAGER")

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"

    response = await client.get(f"/api/projects/{pid}/members", headers=get_auth_headers(users["owner"]))
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_add_unknown_user_not_found(client: AsyncClient, team):
    users = await team()
    project = await create_project(client, users["owner"])

    response = await add_member(client, users["owner"], project["id"], 987654)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_add_member_to_missing_project(client: AsyncClient, team):
    users = await team()

    response = await add_member(client, users["owner"], 987654, users["member"].id)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_remove_member_of_other_project_not_found(client: AsyncClient, team):
    users = await team()
    first = await create_project(client, users["owner"], name="First")
    second = await create_project(client, users["owner"], name="Second")
    response = await add_member(client, users["owner"], second["id"], users["member"].id)
    member_row_id = response.json()["id"]

    response = await client.delete(
        f"/api/projects/{first['id']}/members/{member_row_id}",
        headers=get_auth_headers(users["owner"]),
    )
    assert response.status_code == 404

    response = await client.delete(
        f"/api/projects/{second['id']}/members/{member_row_id}",
        headers=get_auth_headers(users["owner"]),
    )
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_removed_member_loses_access(client: AsyncClient, team):
    users = await team()
    project = await create_project(client, users["owner"])
    pid = project["id"]
    response = await add_member(client, users["owner"], pid, users["member"].id)
    member_row_id = response.json()["id"]

    await client.delete(f"/api/projects/{pid}/members/{member_row_id}", headers=get_auth_headers(users["owner"]))

    response = await client.get(f"/api/projects/{pid}", headers=get_auth_headers(users["member"]))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_visible_projects(client: AsyncClient, team, admin_auth_headers):
    users = await team()
    own = await create_project(client, users["owner"], name="Own")
    shared = await create_project(client, users["outsider"], name="Shared")
    await create_project(client, users["outsider"], name="Private")
    await add_member(client, users["outsider"], shared["id"], users["owner"].id)

    response = await client.get("/api/projects", headers=get_auth_headers(users["owner"]))
    assert {p["id"] for p in response.json()} == {own["id"], shared["id"]}

    response = await client.get("/api/projects", headers=admin_auth_headers)
    assert {p["name"] for p in response.json()} == {"Own", "Shared", "Private"}


@pytest.mark.asyncio
async def test_delete_project_detaches_tasks(client: AsyncClient, team):
    users = await team()
    project = await create_project(client, users["owner"])
    pid = project["id"]
    await add_member(client, users["owner"], pid, users["member"].id)

    response = await client.post(
        "/api/tasks",
        json={"title": "member work", "project_id": pid},
        headers=get_auth_headers(users["member"]),
    )
    task_id = response.json()["id"]

    await client.delete(f"/api/projects/{pid}", headers=get_auth_headers(users["owner"]))

    response = await client.get(f"/api/tasks/{task_id}", headers=get_auth_headers(users["member"]))
    assert response.status_code == 200
    assert response.json()["project_id"] is None


@pytest.mark.asyncio
async def test_project_validation(client: AsyncClient, team):
    users = await team()
    headers = get_auth_headers(users["owner"])

    assert (await client.post("/api/projects", json={"name": ""}, headers=headers)).status_code == 422
    response = await client.post(
        "/api/projects",
        json={"name": "ok", "description": "x" * 1001},
        headers=headers,
    )
    assert response.status_code == 422
    response = await client.post(
        "/api/projects",
        json={"name": "ok", "status": "DONE"},
        headers=headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_rejects_null_for_required_fields(client: AsyncClient, team):
    users = await team()
    headers = get_auth_headers(users["owner"])
    project = await create_project(client, users["owner"], description="landing page")

    for body in ({"name": None}, {"status": None}):
        response = await client.put(f"/api/projects/{project['id']}", json=body, headers=headers)
        assert response.status_code == 422

    response = await client.put(
        f"/api/projects/{project['id']}",
        json={"description": None},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["description"] is None
    assert response.json()["status"] == "ACTIVE"
