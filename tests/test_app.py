import pytest

from students.app import create_app
from students.config import TestConfig
from students.db import mongo
from students.errors import AggregateError, ConfigurationError, ResourceNotFoundError
from students.validation import to_boolean, to_object_id


class IncompleteConfig(TestConfig):
    TESTING = False
    JWT_SECRET_KEY = None


def test_missing_settings_stop_startup():
    with pytest.raises(ConfigurationError, match="JWT_SECRET_KEY"):
        create_app(IncompleteConfig)


def test_unknown_route_is_json(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == 404


def test_wrong_method_is_json(client):
    response = client.put("/api/files")

    assert response.status_code == 405
    assert response.get_json()["error"]["name"] == "Method Not Allowed"


def test_unexpected_error_becomes_500(app, register, monkeypatch):
    ann, _ = register()

    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("students.models.group.Group.find_for_user", explode)
    response = ann.get("/api/groups")

    assert response.status_code == 500
    assert response.get_json()["error"] == {"code": 500, "name": "RuntimeError", "message": "boom"}


def test_error_json_shape():
    body = ResourceNotFoundError("Queue was not found").to_json()

    assert body == {
        "error": {"code": 404, "name": "ResourceNotFoundError", "message": "Queue was not found"}
    }


def test_aggregate_error_lists_fields():
    body = AggregateError([("name", "is required")]).to_json()

    assert body["error"]["code"] == 400
    assert body["error"]["errors"] == [{"field": "name", "message": "is required"}]


@pytest.mark.parametrize("value", [True, "true", "Yes", "on", "1", 1])
def test_truthy_values(value):
    assert to_boolean(value) is True


@pytest.mark.parametrize("value", [False, "false", "no", "off", "0", 0])
def test_falsy_values(value):
    assert to_boolean(value) is False


@pytest.mark.parametrize("value", [None, "maybe", 2, [], {}])
def test_non_boolean_values(value):
    with pytest.raises(ValueError):
        to_boolean(value)


def test_object_id_parsing():
    assert str(to_object_id("a" * 24)) == "a" * 24
    with pytest.raises(Exception, match="Invalid id: xyz"):
        to_object_id("xyz")


def test_purge_command(app, register):
    register("ann@example.com")
    register("bob@example.com")
    runner = app.test_cli_runner()

    result = runner.invoke(args=["purge", "users", "--yes"])

    assert "Deleted 2 documents" in result.output
    with app.app_context():
        assert mongo.db.users.count_documents({}) == 0


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=["init-db"])

    assert "Indexes created" in result.output
