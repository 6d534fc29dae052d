import io
from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from bson import ObjectId
from gridfs.errors import NoFile

from students.app import create_app
from students.config import TestConfig
from students.db import ensure_indexes, mongo


class InMemoryArchive:
    """Test double for the GridFS archive storage."""

    chunk_size = 255 * 1024

    def __init__(self):
        self.files = {}
        self.blobs = {}
        self.clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def list_files(self):
        return sorted(self.files.values(), key=lambda doc: doc["uploadDate"], reverse=True)

    def find_file(self, file_id):
        return self.files.get(file_id)

    def upload(self, filename, stream, content_type):
        data = stream.read()
        file_id = ObjectId()
        # keep upload dates strictly increasing
        self.clock += timedelta(seconds=1)
        self.files[file_id] = {
            "_id": file_id,
            "filename": filename,
            "length": len(data),
            "chunkSize": self.chunk_size,
            "uploadDate": self.clock,
            "metadata": {"contentType": content_type},
        }
        self.blobs[file_id] = data
        return file_id

    def open_download_stream(self, file_id):
        if file_id not in self.blobs:
            raise NoFile(f"no file in gridfs with _id {file_id!r}")
        return io.BytesIO(self.blobs[file_id])

    def delete(self, file_id):
        if file_id not in self.files:
            raise NoFile(f"no file could be deleted because none matched {file_id!r}")
        del self.files[file_id]
        del self.blobs[file_id]


@pytest.fixture
def app():
    app = create_app(TestConfig)
    mongo.cx.close()
    mongo.cx = mongomock.MongoClient()
    mongo.db = mongo.cx["students_test"]
    app.extensions["archive"] = InMemoryArchive()
    with app.app_context():
        ensure_indexes()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(app):
    """Register a user and return a test client logged in as them."""

    def _register(email="ann@example.com", first="Ann", last="Lee", password="secret"):
        client = app.test_client()
        response = client.post(
            "/api/register",
            json={"email": email, "name": {"first": first, "last": last}, "password": password},
        )
        assert response.status_code == 200, response.get_json()
        return client, response.get_json()

    return _register


@pytest.fixture
def group_of_four(register):
    """A group created by ann with bob, cid and dee as members and one queue."""
    ann, ann_user = register("ann@example.com", "Ann", "Lee")
    bob, bob_user = register("bob@example.com", "Bob", "Ray")
    cid, cid_user = register("cid@example.com", "Cid", "Moe")
    dee, dee_user = register("dee@example.com", "Dee", "Fox")

    group = ann.post("/api/groups", json={"name": "Physics 101"}).get_json()
    for user in (bob_user, cid_user, dee_user):
        response = ann.put(f"/api/groups/{group['id']}/members/{user['id']}")
        assert response.status_code == 204
    queue = ann.post(f"/api/groups/{group['id']}/queues", json={"name": "Lab"}).get_json()

    return {
        "group": group,
        "queue": queue,
        "clients": {"ann": ann, "bob": bob, "cid": cid, "dee": dee},
        "users": {"ann": ann_user, "bob": bob_user, "cid": cid_user, "dee": dee_user},
    }
