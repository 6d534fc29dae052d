import io

import pytest

from students.models.file import file_type


@pytest.fixture
def ann(register):
    client, _ = register("ann@example.com")
    return client


def _upload(client, *files):
    data = {"files": [(io.BytesIO(content), name) for name, content in files]}
    return client.post("/api/files", data=data, content_type="multipart/form-data")


@pytest.mark.parametrize(
    "content_type, expected",
    [
        ("image/png", "image"),
        ("video/mp4", "video"),
        ("audio/mpeg", "audio"),
        ("application/msword", "word"),
        ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", "word"),
        ("application/vnd.ms-excel", "excel"),
        ("application/vnd.oasis.opendocument.text", "openoffice"),
        ("application/pdf", "pdf"),
        ("application/zip", "archive"),
        ("text/plain", ""),
    ],
)
def test_file_type(content_type, expected):
    assert file_type(content_type) == expected


def test_upload_and_list_newest_first(ann):
    response = _upload(ann, ("photo.png", b"\x89PNG"), ("notes.pdf", b"%PDF-1.4"))

    assert response.status_code == 201
    created = response.get_json()
    assert [file["filename"] for file in created] == ["photo.png", "notes.pdf"]
    assert created[0]["fileType"] == "image"
    assert created[1]["length"] == 8

    listed = ann.get("/api/files").get_json()
    assert [file["filename"] for file in listed] == ["notes.pdf", "photo.png"]
    assert [file["fileType"] for file in listed] == ["pdf", "image"]


def test_download_file(ann):
    created = _upload(ann, ("notes.txt", b"hello archive")).get_json()[0]

    response = ann.get(f"/api/files/{created['id']}")

    assert response.status_code == 200
    assert response.data == b"hello archive"
    assert "attachment" in response.headers["Content-Disposition"]
    assert "notes.txt" in response.headers["Content-Disposition"]


def test_download_missing_and_invalid(ann):
    assert ann.get(f"/api/files/{'e' * 24}").status_code == 404
    assert ann.get("/api/files/123").status_code == 400


def test_delete_is_idempotent(ann):
    created = _upload(ann, ("notes.txt", b"bye")).get_json()[0]

    assert ann.delete(f"/api/files/{created['id']}").status_code == 204
    assert ann.delete(f"/api/files/{created['id']}").status_code == 204
    assert ann.get("/api/files").get_json() == []
    assert ann.delete("/api/files/bogus").status_code == 400


def test_upload_limit(ann):
    files = [(f"file{index}.txt", b"x") for index in range(11)]

    response = _upload(ann, *files)

    assert response.status_code == 413
    assert response.get_json()["error"]["name"] == "LimitError"


def test_upload_without_files(ann):
    response = ann.post("/api/files", data={"note": "nothing"}, content_type="multipart/form-data")

    assert response.status_code == 204


def test_upload_requires_multipart(ann):
    response = ann.post("/api/files", json={"files": []})

    assert response.status_code == 400


def test_archive_requires_authentication(client):
    assert client.get("/api/files").status_code == 401
    assert client.post("/api/files").status_code == 401


def test_upload_under_unexpected_field(ann):
    data = {"file": [(io.BytesIO(b"x"), "a.txt")]}

    response = ann.post("/api/files", data=data, content_type="multipart/form-data")

    assert response.status_code == 413
    assert "file" in response.get_json()["error"]["message"]
    assert ann.get("/api/files").get_json() == []
