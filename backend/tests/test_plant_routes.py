"""
RootNote Backend — Plant Endpoint Tests
=======================================

What:  HTTP-level tests for /api/plants: status codes, payload shape,
       error envelope.
How:   HTTPX AsyncClient over ASGITransport against an app serving a
       per-test SQLite store (see conftest.test_client).
"""

import logging

import pytest
from unittest.mock import AsyncMock, patch

from rootnote.exceptions import StorageError


PLANT_KEYS = {
    "id",
    "commonName",
    "variety",
    "cultivar",
    "notes",
    "lastWateredOn",
    "seededDate",
    "sproutedDate",
    "transplantedDate",
    "firstFlowerDate",
    "firstFruitDate",
    "lastPrunedDate",
    "lastFertilizedDate",
    "lastHarvestedDate",
}


async def _create(client, **body):
    response = await client.post("/api/plants", json=body)
    assert response.status_code == 200, response.text
    return response.json()


class TestListPlants:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/api/plants")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_after_creates(self, test_client):
        for name in ("Basil", "Tomato", "Chili"):
            await _create(test_client, commonName=name)

        response = await test_client.get("/api/plants")

        body = response.json()
        assert [p["commonName"] for p in body] == ["Basil", "Tomato", "Chili"]
        for plant in body:
            detail = await test_client.get(f"/api/plants/{plant['id']}")
            assert detail.json() == plant


class TestCreatePlant:

    @pytest.mark.asyncio
    async def test_create_basil(self, test_client):
        """POST {commonName: Basil} → id 1 and every other field null."""
        response = await test_client.post("/api/plants", json={"commonName": "Basil"})

        assert response.status_code == 200
        body = response.json()
        assert set(body) == PLANT_KEYS
        assert body["id"] == 1
        assert body["commonName"] == "Basil"
        assert all(body[key] is None for key in PLANT_KEYS - {"id", "commonName"})

    @pytest.mark.asyncio
    async def test_create_with_every_field(self, test_client, sample_plant_data):
        response = await test_client.post("/api/plants", json=sample_plant_data)

        assert response.status_code == 200
        body = response.json()
        for key, value in sample_plant_data.items():
            assert body[key] == value

    @pytest.mark.asyncio
    async def test_create_accepts_snake_case(self, test_client):
        response = await test_client.post(
            "/api/plants", json={"common_name": "Sage", "last_watered_on": "2025-06-02"}
        )

        assert response.status_code == 200
        assert response.json()["lastWateredOn"] == "2025-06-02"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{}, {"commonName": ""}, {"commonName": "   "}, {"commonName": None}, {"variety": "Thai"}],
    )
    async def test_create_without_common_name_returns_400(self, test_client, body):
        response = await test_client.post("/api/plants", json=body)

        assert response.status_code == 400
        payload = response.json()
        assert payload["error"] == "validation_error"
        assert any("commonName" in err["loc"] for err in payload["details"]["errors"])

        listing = await test_client.get("/api/plants")
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_create_with_unknown_field_returns_400(self, test_client):
        response = await test_client.post(
            "/api/plants", json={"commonName": "Basil", "color": "green"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_create_with_non_string_field_returns_400(self, test_client):
        response = await test_client.post("/api/plants", json={"commonName": 12})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_without_body_returns_400(self, test_client):
        response = await test_client.post("/api/plants")

        assert response.status_code == 400


class TestGetPlant:

    @pytest.mark.asyncio
    async def test_get_existing(self, test_client):
        created = await _create(test_client, commonName="Mint", notes="in a pot")

        response = await test_client.get(f"/api/plants/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_missing_returns_404(self, test_client):
        response = await test_client.get("/api/plants/404")

        assert response.status_code == 404
        payload = response.json()
        assert payload["error"] == "not_found"
        assert "404" in payload["message"]

    @pytest.mark.asyncio
    async def test_get_non_integer_id_returns_400(self, test_client):
        response = await test_client.get("/api/plants/basil")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("plant_id", ["99999999999999999999", "0", "-3"])
    async def test_get_out_of_range_id_returns_400(self, test_client, plant_id):
        response = await test_client.get(f"/api/plants/{plant_id}")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestUpdatePlant:

    @pytest.mark.asyncio
    async def test_update_variety(self, test_client):
        """PATCH {variety: Genovese} leaves commonName as Basil."""
        created = await _create(test_client, commonName="Basil")

        response = await test_client.patch(
            f"/api/plants/{created['id']}", json={"variety": "Genovese"}
        )

        assert response.status_code == 200
        assert response.json() == {"status": "updated", "changes": 1}
        stored = (await test_client.get(f"/api/plants/{created['id']}")).json()
        assert stored["variety"] == "Genovese"
        assert stored["commonName"] == "Basil"

    @pytest.mark.asyncio
    async def test_update_notes_only(self, test_client, sample_plant_data):
        created = await _create(test_client, **sample_plant_data)

        await test_client.patch(f"/api/plants/{created['id']}", json={"notes": "x"})

        stored = (await test_client.get(f"/api/plants/{created['id']}")).json()
        assert stored == {**created, "notes": "x"}

    @pytest.mark.asyncio
    async def test_update_with_echoed_record(self, test_client):
        """The detail page PATCHes the whole record back, id included."""
        created = await _create(test_client, commonName="Basil")
        edited = {**created, "cultivar": "Napoletano", "notes": ""}

        response = await test_client.patch(f"/api/plants/{created['id']}", json=edited)

        assert response.status_code == 200
        stored = (await test_client.get(f"/api/plants/{created['id']}")).json()
        assert stored["cultivar"] == "Napoletano"
        assert stored["notes"] == ""

    @pytest.mark.asyncio
    async def test_update_with_different_id_returns_400(self, test_client):
        created = await _create(test_client, commonName="Basil")

        response = await test_client.patch(
            f"/api/plants/{created['id']}", json={"id": created["id"] + 1, "notes": "x"}
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "id"

    @pytest.mark.asyncio
    async def test_update_clears_field_with_null(self, test_client):
        created = await _create(test_client, commonName="Basil", notes="old")

        await test_client.patch(f"/api/plants/{created['id']}", json={"notes": None})

        stored = (await test_client.get(f"/api/plants/{created['id']}")).json()
        assert stored["notes"] is None

    @pytest.mark.asyncio
    async def test_update_empty_body_returns_400(self, test_client):
        created = await _create(test_client, commonName="Basil")

        response = await test_client.patch(f"/api/plants/{created['id']}", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "No fields to update"

    @pytest.mark.asyncio
    async def test_update_empty_body_does_not_touch_storage(self, test_client, store):
        with patch.object(store, "_session") as mock_session:
            response = await test_client.patch("/api/plants/1", json={})

        assert response.status_code == 400
        mock_session.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["", None])
    async def test_update_blank_common_name_returns_400(self, test_client, value):
        created = await _create(test_client, commonName="Basil")

        response = await test_client.patch(
            f"/api/plants/{created['id']}", json={"commonName": value}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_missing_returns_404(self, test_client):
        response = await test_client.patch("/api/plants/12", json={"notes": "x"})

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_update_with_unknown_field_returns_400(self, test_client):
        created = await _create(test_client, commonName="Basil")

        response = await test_client.patch(
            f"/api/plants/{created['id']}", json={"notes": "x", "colour": "green"}
        )

        assert response.status_code == 400
        stored = (await test_client.get(f"/api/plants/{created['id']}")).json()
        assert stored["notes"] is None

    @pytest.mark.asyncio
    async def test_update_out_of_range_id_returns_400(self, test_client):
        response = await test_client.patch(
            "/api/plants/99999999999999999999", json={"notes": "x"}
        )

        assert response.status_code == 400


class TestDeletePlant:

    @pytest.mark.asyncio
    async def test_delete_existing(self, test_client):
        created = await _create(test_client, commonName="Basil")

        response = await test_client.delete(f"/api/plants/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"status": "deleted", "changes": 1}
        missing = await test_client.get(f"/api/plants/{created['id']}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_returns_404_and_keeps_rows(self, test_client):
        await _create(test_client, commonName="Basil")

        response = await test_client.delete("/api/plants/77")

        assert response.status_code == 404
        assert len((await test_client.get("/api/plants")).json()) == 1

    @pytest.mark.asyncio
    async def test_delete_out_of_range_id_returns_400(self, test_client):
        await _create(test_client, commonName="Basil")

        response = await test_client.delete("/api/plants/99999999999999999999")

        assert response.status_code == 400
        assert len((await test_client.get("/api/plants")).json()) == 1


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_storage_error_returns_generic_500(self, test_client, store):
        failure = StorageError(context={"action": "list", "original_error": "OperationalError"})
        with patch.object(store, "list_plants", AsyncMock(side_effect=failure)):
            response = await test_client.get("/api/plants")

        assert response.status_code == 500
        payload = response.json()
        assert payload["error"] == "server_error"
        assert "OperationalError" not in response.text

    @pytest.mark.asyncio
    async def test_errors_carry_request_id(self, test_client):
        response = await test_client.get(
            "/api/plants/999", headers={"X-Request-ID": "trace-42"}
        )

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["request_id"] == "trace-42"

    @pytest.mark.asyncio
    async def test_request_id_generated_when_absent(self, test_client):
        response = await test_client.get("/api/plants")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id_and_access_log(
        self, test_client, store, caplog
    ):
        with patch.object(store, "list_plants", AsyncMock(side_effect=RuntimeError("boom"))):
            with caplog.at_level(logging.ERROR, logger="rootnote.access"):
                response = await test_client.get(
                    "/api/plants", headers={"X-Request-ID": "trace-500"}
                )

        assert response.status_code == 500
        payload = response.json()
        assert payload["error"] == "internal_server_error"
        assert payload["request_id"] == "trace-500"
        assert "boom" not in response.text
        assert response.headers["X-Request-ID"] == "trace-500"
        assert any(
            record.name == "rootnote.access" and "GET /api/plants 500" in record.getMessage()
            for record in caplog.records
        )
