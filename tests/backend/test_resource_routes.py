"""
Tests for the animal, habitat, staff and visitor endpoints.

These tests drive the API end to end over ASGITransport with the
in-memory MongoDB and Redis, checking status codes, error bodies and
the occupancy numbers the API reports.
"""

import pytest

from bson import ObjectId


async def _create_habitat(client, headers, **overrides) -> dict:
    body = {"name": "Savanna", "type": "outdoor", "capacity": 2}
    body.update(overrides)
    response = await client.post("/habitats", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def _habitat(client, headers, habitat_id) -> dict:
    response = await client.get(f"/habitats/{habitat_id}", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestAnimalRoutes:
    """Tests for /animals."""

    @pytest.mark.asyncio
    async def test_create_in_habitat_updates_occupancy(self, async_client, keeper, animal_data):
        habitat = await _create_habitat(async_client, keeper["headers"])

        response = await async_client.post(
            "/animals",
            json={**animal_data, "habitat": habitat["id"], "assigned_keeper": keeper["id"]},
            headers=keeper["headers"],
        )

        assert response.status_code == 201
        data = response.json()
        assert data["habitat"] == {"id": habitat["id"], "name": "Savanna", "type": "outdoor"}
        assert data["assigned_keeper"]["username"] == keeper["doc"]["username"]
        refreshed = await _habitat(async_client, keeper["headers"], habitat["id"])
        assert refreshed["current_occupancy"] == 1
        assert refreshed["available_space"] == 1

    @pytest.mark.asyncio
    async def test_create_in_full_habitat_is_400(
        self, async_client, keeper, animal_data, assert_error_response
    ):
        habitat = await _create_habitat(async_client, keeper["headers"], capacity=1)
        body = {**animal_data, "habitat": habitat["id"]}
        await async_client.post("/animals", json=body, headers=keeper["headers"])

        response = await async_client.post("/animals", json=body, headers=keeper["headers"])

        assert_error_response(
            response, 400, "Habitat is at full capacity", code="capacity_exceeded"
        )
        assert (await _habitat(async_client, keeper["headers"], habitat["id"]))[
            "current_occupancy"
        ] == 1

    @pytest.mark.asyncio
    async def test_create_with_unknown_habitat_is_400(
        self, async_client, keeper, animal_data, assert_error_response
    ):
        response = await async_client.post(
            "/animals",
            json={**animal_data, "habitat": str(ObjectId())},
            headers=keeper["headers"],
        )

        assert_error_response(response, 400, "Habitat not found", code="reference_not_found")

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_category(
        self, async_client, keeper, animal_data, assert_error_response
    ):
        response = await async_client.post(
            "/animals", json={**animal_data, "category": "dragons"}, headers=keeper["headers"]
        )

        assert_error_response(response, 400, "category", code="validation_error")

    @pytest.mark.asyncio
    async def test_move_and_delete_adjust_both_habitats(self, async_client, keeper, animal_data):
        headers = keeper["headers"]
        a = await _create_habitat(async_client, headers, name="A")
        b = await _create_habitat(async_client, headers, name="B")
        animal = (await async_client.post(
            "/animals", json={**animal_data, "habitat": a["id"]}, headers=headers
        )).json()

        moved = await async_client.put(
            f"/animals/{animal['id']}", json={"habitat": b["id"]}, headers=headers
        )
        assert moved.status_code == 200
        assert (await _habitat(async_client, headers, a["id"]))["current_occupancy"] == 0
        assert (await _habitat(async_client, headers, b["id"]))["current_occupancy"] == 1

        deleted = await async_client.delete(f"/animals/{animal['id']}", headers=headers)
        assert deleted.json() == {"message": "Animal deleted successfully"}
        assert (await _habitat(async_client, headers, b["id"]))["current_occupancy"] == 0

    @pytest.mark.asyncio
    async def test_partial_update_without_habitat_keeps_it(self, async_client, keeper, animal_data):
        headers = keeper["headers"]
        a = await _create_habitat(async_client, headers)
        animal = (await async_client.post(
            "/animals", json={**animal_data, "habitat": a["id"]}, headers=headers
        )).json()

        response = await async_client.put(
            f"/animals/{animal['id']}", json={"health_status": "injured"}, headers=headers
        )

        assert response.json()["health_status"] == "injured"
        assert response.json()["habitat"]["id"] == a["id"]
        assert (await _habitat(async_client, headers, a["id"]))["current_occupancy"] == 1

    @pytest.mark.asyncio
    async def test_update_and_delete_missing_animal_is_404(
        self, async_client, keeper, assert_error_response
    ):
        missing = str(ObjectId())

        put = await async_client.put(
            f"/animals/{missing}", json={"name": "x"}, headers=keeper["headers"]
        )
        delete = await async_client.delete(f"/animals/{missing}", headers=keeper["headers"])
        malformed = await async_client.get("/animals/not-an-id", headers=keeper["headers"])

        assert_error_response(put, 404, "Animal not found", code="not_found")
        assert_error_response(delete, 404, "Animal not found")
        assert_error_response(malformed, 404, "Animal not found")

    @pytest.mark.asyncio
    async def test_list_filters_and_count(self, async_client, keeper, animal_data):
        headers = keeper["headers"]
        a = await _create_habitat(async_client, headers, capacity=5)
        await async_client.post("/animals", json={**animal_data, "habitat": a["id"]}, headers=headers)
        await async_client.post(
            "/animals",
            json={**animal_data, "name": "Polly", "category": "birds", "health_status": "sick"},
            headers=headers,
        )

        everything = await async_client.get("/animals", headers=headers)
        birds = await async_client.get("/animals", params={"category": "birds"}, headers=headers)
        sick = await async_client.get("/animals", params={"health_status": "sick"}, headers=headers)
        in_a = await async_client.get("/animals", params={"habitat": a["id"]}, headers=headers)
        count = await async_client.get("/animals/count", headers=headers)

        assert len(everything.json()) == 2
        assert [x["name"] for x in birds.json()] == ["Polly"]
        assert [x["name"] for x in sick.json()] == ["Polly"]
        assert [x["name"] for x in in_a.json()] == ["Simba"]
        assert count.json() == {"count": 2}


class TestHabitatRoutes:
    """Tests for /habitats."""

    @pytest.mark.asyncio
    async def test_create_ignores_client_occupancy(self, async_client, keeper):
        habitat = await _create_habitat(
            async_client, keeper["headers"], capacity=4, current_occupancy=3
        )

        assert habitat["current_occupancy"] == 0
        assert habitat["available_space"] == 4

    @pytest.mark.asyncio
    async def test_assigned_staff_expanded_and_validated(
        self, async_client, keeper, assert_error_response
    ):
        habitat = await _create_habitat(
            async_client, keeper["headers"], assigned_staff=[keeper["id"]]
        )
        assert habitat["assigned_staff"][0]["username"] == keeper["doc"]["username"]
        assert habitat["assigned_staff"][0]["role"] == "keeper"

        response = await async_client.post(
            "/habitats",
            json={"name": "X", "type": "indoor", "capacity": 1, "assigned_staff": [str(ObjectId())]},
            headers=keeper["headers"],
        )
        assert_error_response(response, 400, "Staff member not found")

    @pytest.mark.asyncio
    async def test_capacity_cannot_shrink_below_occupancy(
        self, async_client, keeper, animal_data, assert_error_response
    ):
        headers = keeper["headers"]
        habitat = await _create_habitat(async_client, headers, capacity=3)
        for _ in range(2):
            await async_client.post(
                "/animals", json={**animal_data, "habitat": habitat["id"]}, headers=headers
            )

        too_small = await async_client.put(
            f"/habitats/{habitat['id']}", json={"capacity": 1}, headers=headers
        )
        just_right = await async_client.put(
            f"/habitats/{habitat['id']}", json={"capacity": 2}, headers=headers
        )

        assert_error_response(too_small, 400, "current occupancy (2)")
        assert just_right.status_code == 200
        assert just_right.json()["available_space"] == 0

    @pytest.mark.asyncio
    async def test_delete_refused_while_animals_assigned(
        self, async_client, keeper, animal_data, assert_error_response
    ):
        headers = keeper["headers"]
        habitat = await _create_habitat(async_client, headers)
        animal = (await async_client.post(
            "/animals", json={**animal_data, "habitat": habitat["id"]}, headers=headers
        )).json()

        refused = await async_client.delete(f"/habitats/{habitat['id']}", headers=headers)
        assert_error_response(refused, 400, "still has animals")

        await async_client.delete(f"/animals/{animal['id']}", headers=headers)
        deleted = await async_client.delete(f"/habitats/{habitat['id']}", headers=headers)
        assert deleted.json() == {"message": "Habitat deleted successfully"}

        gone = await async_client.get(f"/habitats/{habitat['id']}", headers=headers)
        assert_error_response(gone, 404, "Habitat not found")

    @pytest.mark.asyncio
    async def test_reconcile_is_admin_only(
        self, async_client, keeper, admin, make_habitat, assert_error_response
    ):
        habitat_id = await make_habitat(capacity=5, current_occupancy=3)

        forbidden = await async_client.post("/habitats/reconcile", headers=keeper["headers"])
        allowed = await async_client.post("/habitats/reconcile", headers=admin["headers"])

        assert_error_response(forbidden, 403, code="forbidden")
        assert allowed.status_code == 200
        assert allowed.json()["corrected"] == 1
        assert (await _habitat(async_client, admin["headers"], habitat_id))[
            "current_occupancy"
        ] == 0

    @pytest.mark.asyncio
    async def test_count(self, async_client, keeper):
        await _create_habitat(async_client, keeper["headers"])

        response = await async_client.get("/habitats/count", headers=keeper["headers"])

        assert response.json() == {"count": 1}


class TestStaffRoutes:
    """Tests for /staff."""

    @pytest.mark.asyncio
    async def test_only_admin_creates_staff(self, async_client, admin, keeper, assert_error_response):
        body = {
            "username": "dr_smith",
            "email": "smith@zoo.com",
            "password": "password123",
            "role": "veterinarian",
        }

        forbidden = await async_client.post("/staff", json=body, headers=keeper["headers"])
        created = await async_client.post("/staff", json=body, headers=admin["headers"])

        assert_error_response(forbidden, 403)
        assert created.status_code == 201
        assert created.json()["role"] == "veterinarian"
        assert "hashed_password" not in created.json()

    @pytest.mark.asyncio
    async def test_list_and_count(self, async_client, admin, keeper):
        listing = await async_client.get("/staff", headers=keeper["headers"])
        count = await async_client.get("/staff/count", headers=keeper["headers"])

        assert {m["id"] for m in listing.json()} == {admin["id"], keeper["id"]}
        assert count.json() == {"count": 2}

    @pytest.mark.asyncio
    async def test_keeper_updates_self_but_not_role(self, async_client, keeper):
        response = await async_client.put(
            f"/staff/{keeper['id']}",
            json={"username": "renamed", "role": "admin"},
            headers=keeper["headers"],
        )

        assert response.status_code == 200
        assert response.json()["username"] == "renamed"
        assert response.json()["role"] == "keeper"

    @pytest.mark.asyncio
    async def test_keeper_cannot_update_others(
        self, async_client, admin, keeper, assert_error_response
    ):
        response = await async_client.put(
            f"/staff/{admin['id']}", json={"username": "hijack"}, headers=keeper["headers"]
        )

        assert_error_response(response, 403)

    @pytest.mark.asyncio
    async def test_admin_changes_role_and_password(self, async_client, admin, keeper):
        response = await async_client.put(
            f"/staff/{keeper['id']}",
            json={"role": "veterinarian", "password": "brand-new-pass"},
            headers=admin["headers"],
        )
        login = await async_client.post(
            "/auth/login",
            json={"email": keeper["doc"]["email"], "password": "brand-new-pass"},
        )

        assert response.json()["role"] == "veterinarian"
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_admin_cannot_delete_self(self, async_client, admin, assert_error_response):
        response = await async_client.delete(f"/staff/{admin['id']}", headers=admin["headers"])

        assert_error_response(response, 400, "Cannot delete your own account")

    @pytest.mark.asyncio
    async def test_delete_missing_staff_is_404(self, async_client, admin, assert_error_response):
        response = await async_client.delete(f"/staff/{ObjectId()}", headers=admin["headers"])

        assert_error_response(response, 404, "Staff member not found")


class TestVisitorRoutes:
    """Tests for /visitors."""

    @pytest.mark.asyncio
    async def test_crud_cycle(self, async_client, keeper, assert_error_response):
        headers = keeper["headers"]
        created = await async_client.post(
            "/visitors",
            json={"adult_tickets": 150, "child_tickets": 75, "total_revenue": 3375.0},
            headers=headers,
        )
        assert created.status_code == 201
        record = created.json()
        assert record["total_visitors"] == 225

        updated = await async_client.put(
            f"/visitors/{record['id']}", json={"notes": "Busy weekend day"}, headers=headers
        )
        assert updated.json()["notes"] == "Busy weekend day"

        deleted = await async_client.delete(f"/visitors/{record['id']}", headers=headers)
        assert deleted.json() == {"message": "Visitor record deleted successfully"}

        missing = await async_client.get(f"/visitors/{record['id']}", headers=headers)
        assert_error_response(missing, 404, "Visitor record not found")

    @pytest.mark.asyncio
    async def test_recent_count(self, async_client, keeper):
        await async_client.post(
            "/visitors", json={"adult_tickets": 10, "child_tickets": 5}, headers=keeper["headers"]
        )

        response = await async_client.get("/visitors/recent", headers=keeper["headers"])

        assert response.json() == {"count": 15}
