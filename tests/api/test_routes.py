"""
Tests for the todos HTTP API.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(params=["sql", "template"])
def client(request, sqlite_config):
    from todos_api.app import create_app

    sqlite_config.store.backend = request.param
    with TestClient(create_app(sqlite_config)) as test_client:
        yield test_client


class FailingStore:
    """Store whose every operation faults, as if the database were down."""

    name = "failing"

    def __init__(self):
        self.closed = False

    async def connect(self):
        pass

    async def close(self):
        self.closed = True

    async def ensure_schema(self):
        return []

    async def _fail(self, message):
        from todos.errors import StoreError

        raise StoreError(message, details="connection refused")

    async def list_all(self):
        await self._fail("Failed to fetch todos")

    async def insert(self, title):
        await self._fail("Failed to create todo")

    async def update_done(self, todo_id, done):
        await self._fail("Failed to update todo")

    async def delete_by_id(self, todo_id):
        await self._fail("Failed to delete todo")


def _failing_client(config, expose=False):
    from todos_api.app import create_app

    config.api.expose_error_details = expose
    return TestClient(create_app(config, store=FailingStore()))


class TestList:

    def test_empty_list(self, client):
        response = client.get("/api/todos")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_shape(self, client):
        client.post("/api/todos", json={"title": "Shape"})

        [todo] = client.get("/api/todos").json()

        assert set(todo) == {"id", "title", "done", "createdAt"}

    def test_newest_first(self, client):
        for title in ("t0", "t1", "t2"):
            client.post("/api/todos", json={"title": title})

        titles = [todo["title"] for todo in client.get("/api/todos").json()]

        assert titles == ["t2", "t1", "t0"]


class TestCreate:

    def test_create(self, client):
        response = client.post("/api/todos", json={"title": "  Buy milk  "})

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Buy milk"
        assert body["done"] is False
        assert body["id"]
        assert body["createdAt"]

    @pytest.mark.parametrize("payload", [{"title": ""}, {"title": "   "}, {}])
    def test_blank_title(self, client, payload):
        response = client.post("/api/todos", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Title is required"}
        assert client.get("/api/todos").json() == []

    def test_malformed_body_is_bad_request(self, client):
        response = client.post(
            "/api/todos",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_round_trip(self, client):
        created = client.post("/api/todos", json={"title": "Round trip"}).json()

        [listed] = client.get("/api/todos").json()

        assert listed == created


class TestUpdate:

    def test_set_done(self, client):
        created = client.post("/api/todos", json={"title": "Finish"}).json()

        response = client.put("/api/todos", json={"id": created["id"], "done": True})

        assert response.status_code == 200
        assert response.json()["done"] is True
        assert client.get("/api/todos").json()[0]["done"] is True

    def test_missing_id(self, client):
        response = client.put("/api/todos", json={"done": True})

        assert response.status_code == 400
        assert response.json() == {"error": "ID is required"}

    def test_non_boolean_done(self, client):
        created = client.post("/api/todos", json={"title": "Strict"}).json()

        response = client.put("/api/todos", json={"id": created["id"], "done": "yes"})

        assert response.status_code == 400
        assert response.json() == {"error": "Done must be a boolean"}

    def test_unknown_id(self, client):
        created = client.post("/api/todos", json={"title": "Untouched"}).json()

        response = client.put("/api/todos", json={"id": "missing", "done": True})

        assert response.status_code == 404
        assert response.json() == {"error": "Todo not found"}
        assert client.get("/api/todos").json() == [created]


class TestDelete:

    def test_delete_twice(self, client):
        created = client.post("/api/todos", json={"title": "Once"}).json()

        first = client.request("DELETE", "/api/todos", json={"id": created["id"]})
        second = client.request("DELETE", "/api/todos", json={"id": created["id"]})

        assert first.status_code == 200
        assert first.json() == {"success": True}
        assert second.status_code == 404
        assert second.json() == {"error": "Todo not found"}

    def test_missing_id(self, client):
        response = client.request("DELETE", "/api/todos", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "ID is required"}


class TestStoreFaults:

    @pytest.mark.parametrize(
        "method, payload, message",
        [
            ("GET", None, "Failed to fetch todos"),
            ("POST", {"title": "x"}, "Failed to create todo"),
            ("PUT", {"id": "a", "done": True}, "Failed to update todo"),
            ("DELETE", {"id": "a"}, "Failed to delete todo"),
        ],
    )
    def test_fault_is_generic_server_error(self, sqlite_config, method, payload, message):
        with _failing_client(sqlite_config) as client:
            response = client.request(method, "/api/todos", json=payload)

        assert response.status_code == 500
        assert response.json() == {"error": message}

    def test_details_exposed_when_enabled(self, sqlite_config):
        with _failing_client(sqlite_config, expose=True) as client:
            response = client.get("/api/todos")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to fetch todos",
            "details": "connection refused",
        }

    def test_validation_still_wins_over_faults(self, sqlite_config):
        with _failing_client(sqlite_config) as client:
            response = client.post("/api/todos", json={"title": " "})

        assert response.status_code == 400


class TestLifespan:

    def test_store_closed_on_shutdown(self, sqlite_config):
        from todos_api.app import create_app

        store = FailingStore()
        with TestClient(create_app(sqlite_config, store=store)):
            assert store.closed is False

        assert store.closed is True

    def test_custom_prefix(self, sqlite_config):
        from todos_api.app import create_app

        sqlite_config.api.prefix = "/v1"
        with TestClient(create_app(sqlite_config)) as client:
            assert client.get("/v1/todos").status_code == 200
            assert client.get("/api/todos").status_code == 404
