"""Integration tests for the Munda Manager HTTP API."""

import pytest
from httpx import ASGITransport, AsyncClient

from mundamanager.api.app import create_app
from mundamanager.api.runtime import ApiState
from mundamanager.cache import TagCache
from mundamanager.config import Settings

ALICE = {"X-User-Id": "user-1"}
BOB = {"X-User-Id": "user-2"}


def _make_app(tmp_path):
    def factory() -> ApiState:
        settings = Settings(database_url=f"sqlite:///{tmp_path}/test.db")
        return ApiState(settings=settings, cache=TagCache())

    app = create_app(state_factory=factory)
    transport = ASGITransport(app=app)
    return app, transport


def _by_name(rows, key, name):
    return next(row["id"] for row in rows if row[key] == name)


async def _register(client: AsyncClient, headers: dict[str, str], username: str) -> None:
    response = await client.post(
        "/profiles", json={"id": headers["X-User-Id"], "username": username}, headers=headers
    )
    assert response.status_code == 201, response.text


async def _create_gang(client: AsyncClient) -> tuple[int, int]:
    gang_types = (await client.get("/catalog/gang-types")).json()
    gang_type_id = _by_name(gang_types, "name", "House Goliath")
    response = await client.post(
        "/gangs",
        json={"name": "Iron Fists", "gang_type_id": gang_type_id},
        headers=ALICE,
    )
    assert response.status_code == 201, response.text
    return response.json()["id"], gang_type_id


@pytest.mark.asyncio
async def test_gang_lifecycle_via_api(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

        await _register(client, ALICE, "Alice")
        gang_id, gang_type_id = await _create_gang(client)

        fighter_types = (
            await client.get("/catalog/fighter-types", params={"gang_type_id": gang_type_id})
        ).json()
        tyrant_type = _by_name(fighter_types, "name", "Forge Tyrant")
        response = await client.post(
            f"/gangs/{gang_id}/fighters",
            json={"fighter_type_id": tyrant_type, "fighter_name": "Brakk"},
            headers=ALICE,
        )
        assert response.status_code == 201, response.text
        body = response.json()
        fighter_id = body["fighter"]["id"]
        assert body["financials"]["new_values"] == {"credits": 865, "rating": 135, "wealth": 1000}

        equipment = (await client.get("/catalog/equipment")).json()
        response = await client.post(
            "/equipment",
            json={
                "gang_id": gang_id,
                "equipment_id": _by_name(equipment, "equipment_name", "Autogun"),
                "fighter_id": fighter_id,
            },
            headers=ALICE,
        )
        assert response.status_code == 201, response.text

        response = await client.get(f"/gangs/{gang_id}")
        assert response.status_code == 200
        detail = response.json()
        assert (detail["credits"], detail["rating"], detail["wealth"]) == (850, 150, 1000)
        assert [fighter["id"] for fighter in detail["fighters"]] == [fighter_id]

        response = await client.get(f"/fighters/{fighter_id}")
        assert response.json()["total_cost"] == 150

        response = await client.post(f"/gangs/{gang_id}/recalculate", headers=ALICE)
        assert response.status_code == 200
        assert response.json()["recalculated"] == response.json()["stored"]


@pytest.mark.asyncio
async def test_error_mapping(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        await _register(client, ALICE, "Alice")
        await _register(client, BOB, "Bob")
        gang_id, gang_type_id = await _create_gang(client)

        response = await client.post(
            "/gangs", json={"name": "Nobody", "gang_type_id": gang_type_id}
        )
        assert response.status_code == 401

        response = await client.get("/gangs/9999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Gang 9999 not found"

        response = await client.patch(f"/gangs/{gang_id}", json={"meat": 3}, headers=BOB)
        assert response.status_code == 403

        equipment = (await client.get("/catalog/equipment")).json()
        response = await client.post(
            "/equipment",
            json={
                "gang_id": gang_id,
                "equipment_id": _by_name(equipment, "equipment_name", "Boltgun"),
                "manual_cost": 5000,
            },
            headers=ALICE,
        )
        assert response.status_code == 400
        assert "insufficient credits" in response.json()["detail"]

        response = await client.post(
            "/profiles", json={"id": "user-1", "username": "Mallory"}, headers=BOB
        )
        assert response.status_code == 403


@pytest.mark.asyncio
async def test_campaign_battle_claims_territory(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        await _register(client, ALICE, "Alice")
        gang_id, _ = await _create_gang(client)

        response = await client.post(
            "/campaigns", json={"campaign_name": "Dust Falls"}, headers=ALICE
        )
        assert response.status_code == 201, response.text
        campaign_id = response.json()["id"]

        response = await client.post(
            f"/campaigns/{campaign_id}/gangs", json={"gang_id": gang_id}, headers=ALICE
        )
        assert response.status_code == 201, response.text
        response = await client.post(
            f"/campaigns/{campaign_id}/territories",
            json={"territory_name": "Sump Lake"},
            headers=ALICE,
        )
        assert response.status_code == 201, response.text
        territory_id = response.json()["id"]

        response = await client.post(
            f"/campaigns/{campaign_id}/battles",
            json={
                "scenario": "Raid",
                "attacker_id": gang_id,
                "winner_id": gang_id,
                "claimed_territories": [territory_id],
            },
            headers=ALICE,
        )
        assert response.status_code == 201, response.text
        battle = response.json()
        assert battle["campaign_id"] == campaign_id
        assert battle["claimed_territories"] == [territory_id]

        response = await client.get(f"/campaigns/{campaign_id}/battles")
        assert [row["id"] for row in response.json()] == [battle["id"]]

        detail = (await client.get(f"/campaigns/{campaign_id}")).json()
        assert [row["gang_id"] for row in detail["territories"]] == [gang_id]

        logs = (await client.get(f"/gangs/{gang_id}/logs")).json()
        actions = [row["action_type"] for row in logs]
        assert {"territory_claimed", "battle_won"} <= set(actions)

        response = await client.post(
            f"/campaigns/{campaign_id}/battles", json={"scenario": "Empty"}, headers=ALICE
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "A battle needs at least one gang"


@pytest.mark.asyncio
async def test_copy_fighter_and_gang(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        await _register(client, ALICE, "Alice")
        await _register(client, BOB, "Bob")
        gang_id, gang_type_id = await _create_gang(client)
        fighter_types = (
            await client.get("/catalog/fighter-types", params={"gang_type_id": gang_type_id})
        ).json()
        response = await client.post(
            f"/gangs/{gang_id}/fighters",
            json={
                "fighter_type_id": _by_name(fighter_types, "name", "Bully"),
                "fighter_name": "Grub",
            },
            headers=ALICE,
        )
        fighter_id = response.json()["fighter"]["id"]

        response = await client.post(
            f"/fighters/{fighter_id}/copy",
            json={"new_name": "Grub Two", "charge_credits": True},
            headers=ALICE,
        )
        assert response.status_code == 201, response.text
        body = response.json()
        assert body["fighter"]["fighter_name"] == "Grub Two"
        assert body["financials"]["new_values"] == {"credits": 880, "rating": 120, "wealth": 1000}

        response = await client.post(f"/fighters/{fighter_id}/copy", json={}, headers=BOB)
        assert response.status_code == 403

        response = await client.post(
            f"/gangs/{gang_id}/copy", json={"new_name": "Iron Fists II"}, headers=ALICE
        )
        assert response.status_code == 201, response.text
        copy = response.json()
        assert copy["name"] == "Iron Fists II"
        assert (copy["credits"], copy["rating"], copy["wealth"]) == (880, 120, 1000)

        detail = (await client.get(f"/gangs/{copy['id']}")).json()
        assert sorted(f["fighter_name"] for f in detail["fighters"]) == ["Grub", "Grub Two"]
