"""locations procedures and the /api/locations mirror."""

import json

import pytest
from pydantic import ValidationError

from app.core.enums import MarkerVisualState
from app.schemas.locations import LocationCreate
from app.schemas.validators import LATITUDE_OUT_OF_RANGE, LOCATION_NAME_REQUIRED, LONGITUDE_OUT_OF_RANGE
from app.services import locations as location_service

RPC = "/api/rpc"


def location_body(user_id, **overrides):
    body = {
        "name": "Sensoji",
        "latitude": 35.7148,
        "longitude": 139.7967,
        "address": "東京都台東区浅草",
        "description": "temple",
        "created_by": user_id,
    }
    body.update(overrides)
    return body


async def test_create_and_get_by_id(client, user):
    res = await client.post(f"{RPC}/locations.create", json=location_body(user.id))
    assert res.status_code == 200
    payload = res.json()
    assert payload["status"] == 1
    assert payload["message"] == "success"
    created = payload["data"]
    assert created["name"] == "Sensoji"
    assert created["created_by"] == user.id
    assert created["updated_by"] == user.id

    res = await client.get(f"{RPC}/locations.getById", params={"id": created["id"]})
    detail = res.json()["data"]
    assert detail["creator_username"] == "taro"
    assert detail["visits"] == []


async def test_latitude_out_of_range_is_rejected(client, user):
    res = await client.post(f"{RPC}/locations.create", json=location_body(user.id, latitude=91))
    assert res.status_code == 422
    payload = res.json()
    assert payload["status"] == 0
    assert payload["message"] == LATITUDE_OUT_OF_RANGE == "緯度は-90から90の間で入力してください"

    res = await client.get(f"{RPC}/locations.getAll")
    assert res.json()["data"] == []


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"longitude": -180.5}, LONGITUDE_OUT_OF_RANGE),
        ({"name": ""}, LOCATION_NAME_REQUIRED),
    ],
)
async def test_invalid_location_fields(client, user, overrides, message):
    res = await client.post(f"{RPC}/locations.create", json=location_body(user.id, **overrides))
    assert res.status_code == 422
    assert res.json()["message"] == message


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("latitude", float("nan"), LATITUDE_OUT_OF_RANGE),
        ("latitude", float("inf"), LATITUDE_OUT_OF_RANGE),
        ("longitude", float("nan"), LONGITUDE_OUT_OF_RANGE),
        ("longitude", float("-inf"), LONGITUDE_OUT_OF_RANGE),
    ],
)
async def test_non_finite_coordinates_are_rejected(client, user, field, value, message):
    # json.dumps writes NaN/Infinity literals, which the request parser accepts
    body = json.dumps(location_body(user.id, **{field: value}))
    res = await client.post(
        f"{RPC}/locations.create", content=body, headers={"Content-Type": "application/json"}
    )
    assert res.status_code == 422
    assert res.json()["message"] == message

    res = await client.get(f"{RPC}/locations.getAll")
    assert res.json()["data"] == []


def test_location_schema_rejects_nan_latitude():
    with pytest.raises(ValidationError) as excinfo:
        LocationCreate(name="x", latitude="NaN", longitude=139.0, created_by=1)
    assert excinfo.value.errors()[0]["msg"] == LATITUDE_OUT_OF_RANGE


async def test_boundary_coordinates_are_accepted(client, user):
    res = await client.post(
        f"{RPC}/locations.create", json=location_body(user.id, latitude=-90, longitude=180)
    )
    assert res.status_code == 200


async def test_create_by_unknown_user_is_404(client, user):
    res = await client.post(f"{RPC}/locations.create", json=location_body(999))
    assert res.status_code == 404
    assert res.json() == {"status": 0, "message": "User 999 not found", "data": None}

    res = await client.get(f"{RPC}/locations.getAll")
    assert res.json()["data"] == []


async def test_update_by_unknown_user_is_404(client, user, location):
    body = location_body(user.id, id=location.id, name="Renamed", updated_by=999)
    body.pop("created_by")
    res = await client.post(f"{RPC}/locations.update", json=body)
    assert res.status_code == 404
    assert res.json()["message"] == "User 999 not found"

    res = await client.get(f"{RPC}/locations.getById", params={"id": location.id})
    assert res.json()["data"]["name"] == "Tokyo Tower"


async def test_unchecked_constraint_failure_returns_envelope(client, user, monkeypatch):
    async def skip_user_check(session, user_id):
        return None

    monkeypatch.setattr(location_service, "require_user", skip_user_check)
    res = await client.post(f"{RPC}/locations.create", json=location_body(999))
    assert res.status_code == 409
    assert res.json() == {"status": 0, "message": "Request conflicts with stored records", "data": None}


async def test_get_by_id_missing_returns_null(client):
    res = await client.get(f"{RPC}/locations.getById", params={"id": 999})
    assert res.status_code == 200
    assert res.json() == {"status": 1, "message": "success", "data": None}


async def test_get_all_includes_creator_and_visit_count(client, location, visit):
    res = await client.get(f"{RPC}/locations.getAll")
    items = res.json()["data"]
    assert len(items) == 1
    assert items[0]["creator_username"] == "taro"
    assert items[0]["visit_count"] == 1


async def test_get_all_newest_first(client, user):
    for name in ("first", "second", "third"):
        await client.post(f"{RPC}/locations.create", json=location_body(user.id, name=name))
    res = await client.get(f"{RPC}/locations.getAll")
    assert [loc["name"] for loc in res.json()["data"]] == ["third", "second", "first"]


async def test_get_by_id_includes_visit_history(client, location, visit):
    res = await client.get(f"{RPC}/locations.getById", params={"id": location.id})
    detail = res.json()["data"]
    assert [v["id"] for v in detail["visits"]] == [visit.id]
    assert detail["visits"][0]["location_name"] == "Tokyo Tower"


async def test_update_location(client, user, location):
    body = location_body(user.id, name="Tokyo Tower (renamed)")
    body.pop("created_by")
    body.update({"id": location.id, "updated_by": user.id})

    res = await client.post(f"{RPC}/locations.update", json=body)

    assert res.status_code == 200
    assert res.json()["data"]["name"] == "Tokyo Tower (renamed)"


async def test_update_missing_location_is_404(client, user):
    body = location_body(user.id)
    body.pop("created_by")
    body.update({"id": 404, "updated_by": user.id})
    res = await client.post(f"{RPC}/locations.update", json=body)
    assert res.status_code == 404
    assert res.json()["status"] == 0


async def test_delete_location(client, location):
    res = await client.post(f"{RPC}/locations.delete", json={"id": location.id})
    assert res.status_code == 200
    assert res.json()["data"]["id"] == location.id

    res = await client.get(f"{RPC}/locations.getById", params={"id": location.id})
    assert res.json()["data"] is None


async def test_delete_location_with_visits_is_blocked(client, location, visit):
    res = await client.post(f"{RPC}/locations.delete", json={"id": location.id})

    assert res.status_code == 409
    assert "may have related records" in res.json()["message"]
    res = await client.get(f"{RPC}/locations.getById", params={"id": location.id})
    assert res.json()["data"]["id"] == location.id


async def test_get_nearby(client, user, location):
    await client.post(
        f"{RPC}/locations.create",
        json=location_body(user.id, name="Osaka Castle", latitude=34.6873, longitude=135.5262),
    )

    res = await client.get(
        f"{RPC}/locations.getNearby",
        params={"latitude": 35.6586, "longitude": 139.7454, "radiusKm": 5},
    )

    assert [loc["name"] for loc in res.json()["data"]] == ["Tokyo Tower"]


async def test_search_matches_name_address_and_description(client, user, location):
    await client.post(f"{RPC}/locations.create", json=location_body(user.id))

    by_name = await client.get(f"{RPC}/locations.search", params={"query": "tower"})
    by_address = await client.get(f"{RPC}/locations.search", params={"query": "台東区"})
    by_description = await client.get(f"{RPC}/locations.search", params={"query": "TEMPLE"})

    assert [loc["name"] for loc in by_name.json()["data"]] == ["Tokyo Tower"]
    assert [loc["name"] for loc in by_address.json()["data"]] == ["Sensoji"]
    assert [loc["name"] for loc in by_description.json()["data"]] == ["Sensoji"]


async def test_search_requires_query(client):
    res = await client.get(f"{RPC}/locations.search", params={"query": ""})
    assert res.status_code == 422


async def test_markers_reflect_selection(client, user, location):
    other = await client.post(f"{RPC}/locations.create", json=location_body(user.id))
    other_id = str(other.json()["data"]["id"])

    res = await client.get(f"{RPC}/locations.markers", params={"selectedLocationId": other_id})
    data = res.json()["data"]

    states = {m["location_id"]: m["visual_state"] for m in data["markers"]}
    assert states == {
        other_id: MarkerVisualState.SELECTED.value,
        str(location.id): MarkerVisualState.UNSELECTED.value,
    }
    assert data["selected_location_id"] == other_id

    unselected = await client.get(f"{RPC}/locations.markers")
    assert unselected.json()["data"]["fingerprint"] == data["fingerprint"]


async def test_rest_mirror_lists_and_creates(client, user):
    res = await client.post("/api/locations", json={"name": "Kyoto", "latitude": 35.0116, "longitude": 135.7681})
    assert res.status_code == 201
    assert res.json()["data"]["created_by"] == 1

    res = await client.post("/api/locations", json={"name": "Nowhere", "latitude": 91, "longitude": 0})
    assert res.status_code == 422
    assert res.json()["message"] == LATITUDE_OUT_OF_RANGE

    res = await client.get("/api/locations")
    assert [loc["name"] for loc in res.json()["data"]] == ["Kyoto"]
