"""
AdoptMe Backend — Pet API Tests
=================================

What:  The /api/pets endpoints end to end through the ASGI app.

What we test:
    ✅ Status codes and bodies from the endpoint mapping table
    ✅ Full lifecycle: create → patch → delete → 404
    ✅ Malformed bodies and malformed ids
    ✅ available filter and adopt endpoint
    ✅ X-Request-ID on every response
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from adoptme.exceptions import DatabaseError

NOT_FOUND = {"message": "Pet not found"}


async def _create(client, **fields):
    body = {"name": "Bella", "type": "Dog", "age": 3, "breed": "Lab", **fields}
    response = await client.post("/api/pets", json=body)
    assert response.status_code == 201
    return response.json()


class TestListPets:

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client):
        response = await test_client.get("/api/pets")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_returns_all_pets(self, test_client):
        await _create(test_client, name="Shadow", type="Cat", breed="Persian")
        await _create(test_client, name="Buddy", breed="Golden Retriever", isAdopted=True)

        response = await test_client.get("/api/pets")

        assert response.status_code == 200
        assert [pet["name"] for pet in response.json()] == ["Shadow", "Buddy"]

    @pytest.mark.asyncio
    async def test_available_filter(self, test_client):
        await _create(test_client, name="Shadow")
        await _create(test_client, name="Buddy", isAdopted=True)

        response = await test_client.get("/api/pets", params={"available": "true"})

        assert response.status_code == 200
        assert [pet["name"] for pet in response.json()] == ["Shadow"]

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, test_client):
        with patch(
            "adoptme.services.pet_service.PetService.list_all",
            new=AsyncMock(side_effect=DatabaseError(context={"error_type": "OperationalError"})),
        ):
            response = await test_client.get("/api/pets")

        assert response.status_code == 500
        assert "OperationalError" not in response.text


class TestCreatePet:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_defaults(self, test_client):
        response = await test_client.post(
            "/api/pets",
            json={"name": "Testy", "type": "Dog", "age": 5, "breed": "TestBreed"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Testy"
        assert body["type"] == "Dog"
        assert body["age"] == 5
        assert body["breed"] == "TestBreed"
        assert body["isAdopted"] is False
        assert uuid.UUID(body["id"])

    @pytest.mark.asyncio
    async def test_create_with_is_adopted_true(self, test_client):
        body = await _create(test_client, name="AdoptedPet", isAdopted=True)

        assert body["isAdopted"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "Test"},
            {"name": "Rex", "type": "Dog", "age": "three", "breed": "Lab"},
            {"name": "Rex", "type": "Dog", "age": 3, "breed": "Lab", "owner": "me"},
        ],
    )
    async def test_invalid_payload_is_500(self, test_client, payload):
        response = await test_client.post("/api/pets", json=payload)

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to create pet"}

    @pytest.mark.asyncio
    async def test_malformed_json_is_500(self, test_client):
        response = await test_client.post(
            "/api/pets",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to create pet"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("age", [b"Infinity", b"-Infinity", b"NaN"])
    async def test_non_finite_age_is_rejected(self, test_client, age):
        response = await test_client.post(
            "/api/pets",
            content=b'{"name": "X", "type": "Dog", "breed": "Lab", "age": ' + age + b"}",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to create pet"}
        assert (await test_client.get("/api/pets")).json() == []

    @pytest.mark.asyncio
    async def test_whole_and_fractional_ages_round_trip(self, test_client):
        whole = await _create(test_client, age=3)
        fractional = await _create(test_client, name="Pip", age=2.5)

        assert whole["age"] == 3 and isinstance(whole["age"], int)
        assert fractional["age"] == 2.5
        listed = (await test_client.get("/api/pets")).json()
        assert [pet["age"] for pet in listed] == [3, 2.5]

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, test_client):
        with patch(
            "adoptme.services.pet_service.PetService.create",
            new=AsyncMock(side_effect=DatabaseError()),
        ):
            response = await test_client.post(
                "/api/pets",
                json={"name": "Testy", "type": "Dog", "age": 5, "breed": "TestBreed"},
            )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to create pet"


class TestGetPet:

    @pytest.mark.asyncio
    async def test_get_matches_created(self, test_client):
        created = await _create(test_client)

        response = await test_client.get(f"/api/pets/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        response = await test_client.get(f"/api/pets/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json() == NOT_FOUND

    @pytest.mark.asyncio
    async def test_malformed_id_is_server_error(self, test_client):
        response = await test_client.get("/api/pets/nonexistent")

        assert response.status_code == 500
        assert response.json()["message"] == "Malformed pet id"


class TestUpdatePet:

    @pytest.mark.asyncio
    async def test_patch_merges_fields(self, test_client):
        created = await _create(test_client)

        response = await test_client.patch(
            f"/api/pets/{created['id']}", json={"name": "UpdatedName", "age": 4}
        )

        assert response.status_code == 200
        assert response.json() == {**created, "name": "UpdatedName", "age": 4}

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        response = await test_client.patch(f"/api/pets/{uuid.uuid4()}", json={"name": "NewName"})

        assert response.status_code == 404
        assert response.json() == NOT_FOUND

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"age": "old"},
            {"name": None},
            {"colour": "brown"},
            ["not", "an", "object"],
        ],
    )
    async def test_malformed_body_is_400(self, test_client, payload):
        created = await _create(test_client)

        response = await test_client.patch(f"/api/pets/{created['id']}", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Failed to update pet"
        assert body["error"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("age", [b"NaN", b"Infinity"])
    async def test_non_finite_age_is_400(self, test_client, age):
        created = await _create(test_client)

        response = await test_client.patch(
            f"/api/pets/{created['id']}",
            content=b'{"age": ' + age + b"}",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Failed to update pet"
        assert body["error"]
        assert (await test_client.get(f"/api/pets/{created['id']}")).json() == created

    @pytest.mark.asyncio
    async def test_invalid_json_is_400(self, test_client):
        created = await _create(test_client)

        response = await test_client.patch(
            f"/api/pets/{created['id']}",
            content=b"age=4",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Failed to update pet"

    @pytest.mark.asyncio
    async def test_malformed_id_is_server_error(self, test_client):
        response = await test_client.patch("/api/pets/nonexistent", json={"name": "X"})

        assert response.status_code == 500


class TestDeletePet:

    @pytest.mark.asyncio
    async def test_delete_then_404(self, test_client):
        created = await _create(test_client)

        response = await test_client.delete(f"/api/pets/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Pet deleted successfully"}

        assert (await test_client.get(f"/api/pets/{created['id']}")).status_code == 404
        second = await test_client.delete(f"/api/pets/{created['id']}")
        assert second.status_code == 404
        assert second.json() == NOT_FOUND

    @pytest.mark.asyncio
    async def test_malformed_id_is_500(self, test_client):
        response = await test_client.delete("/api/pets/nonexistent")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Failed to delete pet"
        assert "nonexistent" in body["error"]


class TestAdoptPet:

    @pytest.mark.asyncio
    async def test_adopt(self, test_client):
        created = await _create(test_client)

        response = await test_client.post(f"/api/pets/{created['id']}/adopt")

        assert response.status_code == 200
        assert response.json() == {**created, "isAdopted": True}

    @pytest.mark.asyncio
    async def test_adopt_unknown_is_404(self, test_client):
        response = await test_client.post(f"/api/pets/{uuid.uuid4()}/adopt")

        assert response.status_code == 404
        assert response.json() == NOT_FOUND


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_bella_scenario(self, test_client):
        created = await _create(test_client, breed="Lab")
        assert created["isAdopted"] is False

        patched = await test_client.patch(f"/api/pets/{created['id']}", json={"isAdopted": True})
        assert patched.status_code == 200
        assert patched.json() == {**created, "isAdopted": True}

        assert (await test_client.delete(f"/api/pets/{created['id']}")).status_code == 200
        assert (await test_client.get(f"/api/pets/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/api/pets", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
