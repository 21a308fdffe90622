"""POST /api/files/upload, stored file naming and the file list view."""

import base64
import re
from pathlib import Path

import pytest

from app.core.config import get_settings
from app.core.exceptions import UploadError
from app.schemas.uploads import UploadFileData
from app.services.uploads import save_uploaded_files, unique_file_name

NAME_PATTERN = re.compile(r"^(\d+)_([0-9a-z]+)_(.+)$")


def encoded(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setattr(get_settings(), "UPLOAD_DIR", str(target))
    return target


def test_unique_file_name_format():
    name = unique_file_name("photo.jpg", now_ms=1717200000000)
    match = NAME_PATTERN.match(name)
    assert match is not None
    assert match.group(1) == "1717200000000"
    assert match.group(3) == "photo.jpg"


def test_unique_file_names_differ_for_same_input():
    names = {unique_file_name("photo.jpg", now_ms=1) for _ in range(50)}
    assert len(names) == 50


@pytest.mark.parametrize("original", ["../../etc/passwd", "..\\..\\evil.png", "dir/photo.jpg"])
def test_directory_components_are_dropped(original):
    name = unique_file_name(original)
    assert "/" not in name
    assert "\\" not in name
    assert ".." not in NAME_PATTERN.match(name).group(3)


async def test_save_writes_decoded_content(tmp_path):
    files = [UploadFileData(name="a.txt", base64Data=encoded(b"hello"), size=5, type="text/plain")]

    stored = await save_uploaded_files(files, upload_dir=str(tmp_path), url_prefix="/uploads")

    assert len(stored) == 1
    assert stored[0].file_path == f"/uploads/{stored[0].file_name}"
    assert (tmp_path / stored[0].file_name).read_bytes() == b"hello"


async def test_invalid_base64_is_a_client_error(tmp_path):
    files = [UploadFileData(name="a.jpg", base64Data="not base64!!", size=3, type="image/jpeg")]
    with pytest.raises(UploadError) as exc_info:
        await save_uploaded_files(files, upload_dir=str(tmp_path))
    assert exc_info.value.status_code == 400
    assert list(tmp_path.iterdir()) == []


async def test_failed_write_removes_files_already_saved(tmp_path, monkeypatch):
    original_write = Path.write_bytes
    attempts = []

    def write_then_fail_on_second(self, data):
        attempts.append(self.name)
        if len(attempts) == 2:
            original_write(self, data[:1])
            raise OSError("No space left on device")
        return original_write(self, data)

    monkeypatch.setattr(Path, "write_bytes", write_then_fail_on_second)
    files = [
        UploadFileData(name="a.jpg", base64Data=encoded(b"first"), size=5, type="image/jpeg"),
        UploadFileData(name="b.jpg", base64Data=encoded(b"second"), size=6, type="image/jpeg"),
        UploadFileData(name="c.jpg", base64Data=encoded(b"third"), size=5, type="image/jpeg"),
    ]

    with pytest.raises(UploadError) as exc_info:
        await save_uploaded_files(files, upload_dir=str(tmp_path), url_prefix="/uploads")

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Failed to save file b.jpg"
    assert len(attempts) == 2
    assert list(tmp_path.iterdir()) == []


async def test_upload_endpoint(client, upload_dir):
    body = {
        "files": [
            {"name": "one.jpg", "base64Data": encoded(b"\xff\xd8one"), "size": 5, "type": "image/jpeg"},
            {"name": "two.png", "base64Data": encoded(b"\x89PNGtwo"), "size": 7, "type": "image/png", "description": "second"},
        ]
    }

    res = await client.post("/api/files/upload", json=body)

    assert res.status_code == 200
    files = res.json()["data"]["files"]
    assert [f["originalName"] for f in files] == ["one.jpg", "two.png"]
    assert files[1]["mimeType"] == "image/png"
    assert files[1]["description"] == "second"
    for f in files:
        assert f["filePath"] == f"/uploads/{f['fileName']}"
        assert (upload_dir / f["fileName"]).exists()


async def test_upload_endpoint_rejects_bad_base64(client, upload_dir):
    body = {"files": [{"name": "x.jpg", "base64Data": "%%%", "size": 1, "type": "image/jpeg"}]}
    res = await client.post("/api/files/upload", json=body)
    assert res.status_code == 400
    assert res.json()["status"] == 0


async def test_upload_requires_files(client, upload_dir):
    res = await client.post("/api/files/upload", json={"files": []})
    assert res.status_code == 422


async def test_uploaded_paths_feed_visit_history_and_file_list(client, upload_dir, user, location):
    upload = await client.post(
        "/api/files/upload",
        json={"files": [{"name": "tower.jpg", "base64Data": encoded(b"img"), "size": 3, "type": "image/jpeg"}]},
    )
    file_path = upload.json()["data"]["files"][0]["filePath"]
    await client.post(
        "/api/visit-history",
        json={
            "location_id": location.id,
            "visit_date": "2024-08-10T14:00:00",
            "created_by": user.id,
            "files": [{"filePath": file_path, "description": "view"}],
        },
    )

    by_file_name = await client.get("/api/files", params={"search_term": "TOWER.JPG"})
    by_location = await client.get("/api/files", params={"search_term": "tokyo"})
    out_of_range = await client.get("/api/files", params={"date_from": "2024-08-11"})

    items = by_file_name.json()["data"]["items"]
    assert [i["file_path"] for i in items] == [file_path]
    assert items[0]["location_name"] == "Tokyo Tower"
    assert by_location.json()["data"]["pagination"]["total_items"] == 1
    assert out_of_range.json()["data"]["pagination"]["total_items"] == 0
