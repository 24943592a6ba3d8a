"""
GardenGrid Backend — API Endpoint Tests
=========================================

What:  HTTP contract: query parameter names, status codes and the error body.
How:   HTTPX AsyncClient against the ASGI app; the database dependency is
       pointed at the per-test in-memory SQLite (see conftest.test_client).
"""

import pytest

OWNER = 21


async def _create_garden(client, name="Yard", width=10, height=10, owner=OWNER):
    response = await client.post(
        "/api/gardens",
        json={"userId": owner, "garden_name": name, "width": width, "height": height},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _create_bed(client, garden_id, **body):
    body.setdefault("name", "Bed")
    response = await client.post(
        "/api/beds", params={"userId": OWNER, "gardenId": garden_id}, json=body
    )
    return response


class TestGardenEndpoints:
    @pytest.mark.asyncio
    async def test_create_list_and_activate(self, test_client):
        first = await _create_garden(test_client, "First")
        second = await _create_garden(test_client, "Second")
        assert second["is_active"]

        listed = (await test_client.get("/api/gardens", params={"userId": OWNER})).json()
        assert {g["id"]: g["is_active"] for g in listed} == {first["id"]: False, second["id"]: True}

        response = await test_client.put(
            "/api/gardens",
            params={"userId": OWNER, "gardenId": first["id"]},
            json={"is_active": True},
        )
        assert response.status_code == 200
        assert response.json()["is_active"]

        one = (await test_client.get(
            "/api/gardens", params={"userId": OWNER, "gardenId": second["id"]}
        )).json()
        assert one["id"] == second["id"] and not one["is_active"]

    @pytest.mark.asyncio
    async def test_delete_active_garden_reactivates(self, test_client):
        older = await _create_garden(test_client, "Older")
        newer = await _create_garden(test_client, "Newer")

        response = await test_client.delete(
            "/api/gardens", params={"userId": OWNER, "gardenId": newer["id"]}
        )

        assert response.status_code == 200
        assert response.json()["activated_garden_id"] == older["id"]

    @pytest.mark.asyncio
    async def test_foreign_garden_is_404(self, test_client):
        theirs = await _create_garden(test_client, owner=OWNER + 1)
        response = await test_client.get(
            "/api/gardens", params={"userId": OWNER, "gardenId": theirs["id"]}
        )
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_schema_errors_are_400(self, test_client):
        response = await test_client.post(
            "/api/gardens", json={"userId": OWNER, "garden_name": "Flat", "width": 0, "height": 3}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

        missing = await test_client.get("/api/gardens")
        assert missing.status_code == 400


class TestBedEndpoints:
    @pytest.mark.asyncio
    async def test_overlap_is_400_with_reason(self, test_client):
        garden = await _create_garden(test_client)
        ok = await _create_bed(test_client, garden["id"], width=3, height=3, top_position=0, left_position=0)
        assert ok.status_code == 201

        clash = await _create_bed(test_client, garden["id"], width=3, height=3, top_position=2, left_position=2)

        assert clash.status_code == 400
        body = clash.json()
        assert body["details"]["reason"] == "overlap"
        assert body["details"]["conflict"] == {"x": 0, "y": 0, "w": 3, "h": 3}

    @pytest.mark.asyncio
    async def test_can_place_preview(self, test_client):
        garden = await _create_garden(test_client)
        await _create_bed(test_client, garden["id"], width=3, height=3, top_position=0, left_position=0)

        response = await test_client.get(
            "/api/beds/can-place",
            params={"userId": OWNER, "gardenId": garden["id"], "top": 3, "left": 0, "width": 3, "height": 3},
        )

        assert response.status_code == 200
        assert response.json() == {"valid": True, "x": 0, "y": 3, "w": 3, "h": 3}

    @pytest.mark.asyncio
    async def test_garden_shrink_reports_unplaced_beds(self, test_client):
        garden = await _create_garden(test_client)
        far = (await _create_bed(test_client, garden["id"], width=2, height=2, top_position=8, left_position=8)).json()

        response = await test_client.put(
            "/api/gardens", params={"userId": OWNER, "gardenId": garden["id"]}, json={"width": 5, "height": 5}
        )
        assert response.json()["unplaced_bed_ids"] == [far["id"]]

        unplaced = (await test_client.get(
            "/api/beds", params={"userId": OWNER, "gardenId": garden["id"], "placed": "false"}
        )).json()
        assert [b["id"] for b in unplaced] == [far["id"]]
        assert (unplaced[0]["top_position"], unplaced[0]["left_position"]) == (-1, -1)


class TestPlantEndpoints:
    @pytest.mark.asyncio
    async def test_save_list_and_resize_flow(self, test_client, make_catalog):
        (squash,) = await make_catalog(("Squash", 4))
        garden = await _create_garden(test_client)
        bed = (await _create_bed(test_client, garden["id"], width=5, height=5, top_position=0, left_position=0)).json()
        ids = {"userId": OWNER, "gardenId": garden["id"], "bedId": bed["id"]}

        saved = await test_client.post(
            "/api/plants/save-plants",
            params=ids,
            json=[{"plant_id": squash.id, "x_position": 0, "y_position": 0}],
        )
        assert saved.status_code == 200
        assert saved.json()["message"] == f"Successfully saved all plants to bed {bed['id']}."

        plants = (await test_client.get("/api/plants/all-plants", params=ids)).json()
        assert [(p["common_name"], p["footprint_size"]) for p in plants] == [("Squash", 2)]

        refused = await test_client.put("/api/beds", params=ids, json={"width": 1, "height": 1})
        assert refused.status_code == 409
        assert refused.json()["details"]["dropped_plant_ids"] == [plants[0]["plant_in_bed_id"]]

        confirmed = await test_client.put(
            "/api/beds", params={**ids, "confirmDrop": "true"}, json={"width": 1, "height": 1}
        )
        assert confirmed.status_code == 200
        assert len(confirmed.json()["dropped_plants"]) == 1
        assert (await test_client.get("/api/plants/all-plants", params=ids)).json() == []

    @pytest.mark.asyncio
    async def test_invalid_save_is_atomic(self, test_client, make_catalog):
        (basil,) = await make_catalog(("Basil", 1))
        garden = await _create_garden(test_client)
        bed = (await _create_bed(test_client, garden["id"], width=2, height=2)).json()
        ids = {"userId": OWNER, "gardenId": garden["id"], "bedId": bed["id"]}
        await test_client.post(
            "/api/plants/save-plants", params=ids,
            json=[{"plant_id": basil.id, "x_position": 1, "y_position": 1}],
        )

        response = await test_client.post(
            "/api/plants/save-plants", params=ids,
            json=[
                {"plant_id": basil.id, "x_position": 0, "y_position": 0},
                {"plant_id": basil.id, "x_position": 0, "y_position": 0},
            ],
        )

        assert response.status_code == 400
        assert response.json()["details"]["index"] == 1
        plants = (await test_client.get("/api/plants/all-plants", params=ids)).json()
        assert [(p["x_position"], p["y_position"]) for p in plants] == [(1, 1)]

    @pytest.mark.asyncio
    async def test_plant_can_place_and_catalog(self, test_client, make_catalog):
        pumpkin, = await make_catalog(("Pumpkin", 9))
        garden = await _create_garden(test_client)
        bed = (await _create_bed(test_client, garden["id"], width=3, height=3)).json()

        preview = await test_client.get(
            "/api/plants/can-place",
            params={"userId": OWNER, "gardenId": garden["id"], "bedId": bed["id"],
                    "plantId": pumpkin.id, "x": 1, "y": 0},
        )
        assert preview.json() == {"valid": False, "x": 1, "y": 0, "w": 3, "h": 3}

        catalog = (await test_client.get("/api/plants/catalog")).json()
        assert [p["common_name"] for p in catalog] == ["Pumpkin"]
        assert (await test_client.get(f"/api/plants/catalog/{pumpkin.id}")).status_code == 200
        assert (await test_client.get("/api/plants/catalog/9999")).status_code == 404


class TestHealthAndHeaders:
    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/gardens", params={"userId": OWNER}, headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
