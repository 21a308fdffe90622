"""POST /api/visit-history (visit + photos in one transaction) and the history view."""

from datetime import datetime

import pytest
from sqlalchemy import func, select

from app.models import Visit, VisitPhoto
from app.schemas.uploads import VisitFileRef, VisitHistoryCreate
from app.services import visit_photos as photo_service
from app.services.visit_history import create_visit_with_photos


def history_body(location_id, user_id, files=()):
    return {
        "location_id": location_id,
        "visit_date": "2024-08-10T14:00:00",
        "notes": "festival",
        "rating": 4,
        "created_by": user_id,
        "files": list(files),
    }


async def count_rows(session_factory, model):
    async with session_factory() as s:
        return await s.scalar(select(func.count()).select_from(model))


async def test_visit_with_two_photos(client, user, location):
    files = [
        {"filePath": "/uploads/1_a_one.jpg", "description": "one"},
        {"filePath": "/uploads/2_b_two.jpg", "description": "two"},
    ]
    res = await client.post("/api/visit-history", json=history_body(location.id, user.id, files))

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["photos_count"] == 2
    assert data["visit"]["location_name"] == "Tokyo Tower"
    assert [p["file_path"] for p in data["visit"]["photos"]] == ["/uploads/1_a_one.jpg", "/uploads/2_b_two.jpg"]


async def test_visit_without_photos(client, user, location):
    res = await client.post("/api/visit-history", json=history_body(location.id, user.id))
    assert res.json()["data"]["photos_count"] == 0


async def test_failed_photo_insert_rolls_back_the_visit(session_factory, monkeypatch, user, location):
    real_build_photo = photo_service.build_photo
    calls = []

    def failing_build_photo(*args, **kwargs):
        calls.append(args)
        if len(calls) == 2:
            raise RuntimeError("disk full")
        return real_build_photo(*args, **kwargs)

    monkeypatch.setattr(photo_service, "build_photo", failing_build_photo)
    data = VisitHistoryCreate(
        location_id=location.id,
        visit_date=datetime(2024, 8, 10),
        rating=3,
        created_by=user.id,
        files=[VisitFileRef(file_path="/uploads/a.jpg"), VisitFileRef(file_path="/uploads/b.jpg")],
    )

    async with session_factory() as s:
        with pytest.raises(RuntimeError):
            await create_visit_with_photos(s, data)

    assert len(calls) == 2
    assert await count_rows(session_factory, Visit) == 0
    assert await count_rows(session_factory, VisitPhoto) == 0


async def test_unknown_location_stores_nothing(client, session_factory, user):
    res = await client.post(
        "/api/visit-history",
        json=history_body(999, user.id, [{"filePath": "/uploads/a.jpg"}]),
    )
    assert res.status_code == 404
    assert await count_rows(session_factory, Visit) == 0
    assert await count_rows(session_factory, VisitPhoto) == 0


async def test_empty_file_path_is_rejected(client, user, location):
    res = await client.post(
        "/api/visit-history",
        json=history_body(location.id, user.id, [{"filePath": ""}]),
    )
    assert res.status_code == 422
    assert res.json()["message"] == "ファイルパスは必須です"


async def add_visits(client, user_id, location_id, count, start_day=1, rating=3):
    for day in range(start_day, start_day + count):
        body = history_body(location_id, user_id)
        body.update({"visit_date": f"2024-01-{day:02d}T12:00:00", "rating": rating})
        await client.post("/api/visit-history", json=body)


async def test_history_view_paginates(client, user, location):
    await add_visits(client, user.id, location.id, 12)

    first = (await client.get("/api/visit-history", params={"page": 1})).json()["data"]
    second = (await client.get("/api/visit-history", params={"page": 2})).json()["data"]

    assert len(first["items"]) == 10
    assert len(second["items"]) == 2
    assert first["pagination"] == {"current_page": 1, "total_pages": 2, "total_items": 12, "items_per_page": 10}
    ids = [v["id"] for v in first["items"] + second["items"]]
    assert ids == sorted(ids, reverse=True)


async def test_history_view_filters(client, user, location):
    other = await client.post(
        "/api/rpc/locations.create",
        json={"name": "ABC Park", "latitude": 35.0, "longitude": 139.0, "created_by": user.id},
    )
    other_id = other.json()["data"]["id"]
    await add_visits(client, user.id, location.id, 3, start_day=1, rating=2)
    await add_visits(client, user.id, other_id, 2, start_day=10, rating=5)

    by_name = await client.get("/api/visit-history", params={"search_term": "abc"})
    by_rating = await client.get("/api/visit-history", params={"min_rating": 4})
    by_date = await client.get("/api/visit-history", params={"date_from": "2024-01-02", "date_to": "2024-01-10"})
    ascending = await client.get("/api/visit-history", params={"sort_order": "asc"})

    assert by_name.json()["data"]["pagination"]["total_items"] == 2
    assert by_rating.json()["data"]["pagination"]["total_items"] == 2
    assert by_date.json()["data"]["pagination"]["total_items"] == 3
    ids = [v["id"] for v in ascending.json()["data"]["items"]]
    assert ids == sorted(ids)


async def test_history_view_empty(client):
    res = await client.get("/api/visit-history")
    assert res.json()["data"] == {
        "items": [],
        "pagination": {"current_page": 1, "total_pages": 0, "total_items": 0, "items_per_page": 10},
    }
