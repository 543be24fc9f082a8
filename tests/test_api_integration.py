"""API integration tests for the Launchpad FastAPI application.

These tests use FastAPI TestClient against a temporary SQLite file.
The chat provider is replaced by an httpx.MockTransport.
"""

from typing import Any, Generator

import httpx
import pytest
from fastapi import status
from fastapi.testclient import TestClient

from launchpad.api.app import create_app
from launchpad.api.routes.chat import ERROR_REPLY, NOT_CONFIGURED_REPLY
from launchpad.config import LauncherConfig
from launchpad.core.exceptions import StorageError
from launchpad.llm.client import ChatClient, LLMConfig, LLMProvider
from launchpad.presentation.adapter import FIELD_MAP
from launchpad.presentation.icons import FALLBACK_ICON
from launchpad.registry.service import RegistryService
from launchpad.registry.storage import AppStore


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def client(config: LauncherConfig) -> Generator[TestClient, None, None]:
    """Test client with the admin guard disabled."""
    app = create_app(config)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(client: TestClient) -> TestClient:
    """Client whose registry holds A, B, C in that order."""
    for app_id in ("A", "B", "C"):
        response = client.post("/api/apps", json={"id": app_id, "name": f"App {app_id}"})
        assert response.status_code == status.HTTP_201_CREATED
    return client


def _ids(client: TestClient) -> list[str]:
    return [record["id"] for record in client.get("/api/apps").json()]


def _chat_client(handler: Any, api_key: str = "test-key") -> ChatClient:
    return ChatClient(
        config=LLMConfig(provider=LLMProvider.GEMINI, api_key=api_key, model="gemini-2.5-flash"),
        transport=httpx.MockTransport(handler),
    )


# =============================================================================
# Root and Health
# =============================================================================


class TestRootAndHealth:
    """Tests for root and health endpoints."""

    def test_root(self, client: TestClient) -> None:
        """Root returns API information."""
        response = client.get("/")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Launchpad API"

    def test_health_ok(self, client: TestClient) -> None:
        """Health reports a connected database."""
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "ok"
        assert response.json()["database"] == "connected"

    def test_ping(self, client: TestClient) -> None:
        """Liveness probe always answers."""
        assert "pong" in client.get("/health/ping").json()

    def test_request_id_header(self, client: TestClient) -> None:
        """Incoming request ids are echoed back."""
        response = client.get("/api/apps", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
        assert "X-Process-Time" in response.headers


# =============================================================================
# Apps
# =============================================================================


class TestListAndCreate:
    """Tests for GET/POST /api/apps."""

    def test_empty_list(self, client: TestClient) -> None:
        """A fresh registry lists nothing."""
        response = client.get("/api/apps")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_records_use_client_naming(self, client: TestClient) -> None:
        """Every client field is present, missing ones as null."""
        client.post("/api/apps", json={"id": "crm", "name": "CRM", "iconName": "Users", "swarmUrl": "https://s"})
        record = client.get("/api/apps").json()[0]
        assert set(record) == {c for _, c in FIELD_MAP}
        assert record["iconName"] == "Users"
        assert record["swarmUrl"] == "https://s"
        assert record["owner"] is None
        assert record["sortOrder"] == 0

    def test_create_appends(self, seeded_client: TestClient) -> None:
        """New records without sortOrder go last."""
        response = seeded_client.post("/api/apps", json={"id": "D", "name": "App D"})
        assert response.json()["sortOrder"] == 3
        assert _ids(seeded_client) == ["A", "B", "C", "D"]

    def test_create_generates_id(self, client: TestClient) -> None:
        """A missing id is generated server-side."""
        response = client.post("/api/apps", json={"name": "No Id"})
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["id"]

    def test_create_missing_name(self, client: TestClient) -> None:
        """Missing name is a 400 naming the field."""
        response = client.post("/api/apps", json={"id": "x"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()["error"]
        assert body["type"] == "validation_error"
        assert "name" in body["fields"]

    def test_create_unknown_field(self, client: TestClient) -> None:
        """Fields outside the client contract are rejected."""
        response = client.post("/api/apps", json={"id": "x", "name": "X", "colour": "red"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert _ids(client) == []

    def test_create_invalid_type(self, client: TestClient) -> None:
        """Unknown enum values are rejected with the client field name."""
        response = client.post("/api/apps", json={"id": "x", "name": "X", "type": "APPLET"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "type" in response.json()["error"]["fields"]

    def test_create_duplicate(self, seeded_client: TestClient) -> None:
        """Duplicate ids conflict and leave the stored record intact."""
        response = seeded_client.post("/api/apps", json={"id": "A", "name": "Impostor"})
        assert response.status_code == status.HTTP_409_CONFLICT
        assert seeded_client.get("/api/apps/A").json()["name"] == "App A"

    def test_non_object_body(self, client: TestClient) -> None:
        """Schema errors are 400, not 422."""
        response = client.post("/api/apps", json=["not", "an", "object"])
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_icon_is_stored_verbatim(self, client: TestClient) -> None:
        """Icon fallback is a display concern; storage keeps the name."""
        client.post("/api/apps", json={"id": "x", "name": "X", "iconName": "Sparkles"})
        assert client.get("/api/apps/x").json()["iconName"] == "Sparkles"
        assert client.get("/api/icons").json()["fallback"] == FALLBACK_ICON


class TestGetUpdateDelete:
    """Tests for /api/apps/{id}."""

    def test_get_missing(self, client: TestClient) -> None:
        """Unknown ids are 404."""
        response = client.get("/api/apps/ghost")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["type"] == "not_found"

    def test_update(self, seeded_client: TestClient) -> None:
        """Partial update changes only the given fields."""
        response = seeded_client.put("/api/apps/B", json={"status": "MAINTENANCE", "backendPort": 8080})
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["status"] == "MAINTENANCE"
        assert body["backendPort"] == "8080"
        assert body["name"] == "App B"

    def test_update_ignores_sort_order(self, seeded_client: TestClient) -> None:
        """sortOrder in an edit does not move the record."""
        seeded_client.put("/api/apps/A", json={"name": "Alpha", "sortOrder": 99})
        assert _ids(seeded_client) == ["A", "B", "C"]

    def test_update_missing(self, client: TestClient) -> None:
        """Editing an unknown id is 404."""
        response = client.put("/api/apps/ghost", json={"name": "Ghost"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_id_change_rejected(self, seeded_client: TestClient) -> None:
        """The id in the body must match the path."""
        response = seeded_client.put("/api/apps/A", json={"id": "Z"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_twice(self, seeded_client: TestClient) -> None:
        """Delete succeeds once, then 404."""
        response = seeded_client.delete("/api/apps/B")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "App deleted", "id": "B"}
        assert _ids(seeded_client) == ["A", "C"]
        assert seeded_client.delete("/api/apps/B").status_code == status.HTTP_404_NOT_FOUND


class TestReorder:
    """Tests for PUT /api/apps/reorder."""

    def test_reorder(self, seeded_client: TestClient) -> None:
        """A full permutation is applied."""
        response = seeded_client.put("/api/apps/reorder", json={"order": ["C", "A", "B"]})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Order updated"
        records = seeded_client.get("/api/apps").json()
        assert [r["id"] for r in records] == ["C", "A", "B"]
        assert [r["sortOrder"] for r in records] == [0, 1, 2]

    @pytest.mark.parametrize(
        "body",
        [
            {"order": ["A", "B"]},
            {"order": ["A", "B", "C", "D"]},
            {"order": ["A", "A", "B", "C"]},
            {"order": "A,B,C"},
            {"ids": ["A", "B", "C"]},
            {},
        ],
    )
    def test_reorder_rejected(self, seeded_client: TestClient, body: dict) -> None:
        """Anything but an exact permutation is 400 and changes nothing."""
        response = seeded_client.put("/api/apps/reorder", json=body)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert _ids(seeded_client) == ["A", "B", "C"]

    def test_reorder_error_lists_missing(self, seeded_client: TestClient) -> None:
        """The error names the ids that were left out."""
        response = seeded_client.put("/api/apps/reorder", json={"order": ["A", "B"]})
        assert response.json()["error"]["missing"] == ["C"]

    def test_reorder_route_not_shadowed(self, seeded_client: TestClient) -> None:
        """'reorder' is not treated as an application id."""
        response = seeded_client.get("/api/apps/reorder")
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Settings and Icons
# =============================================================================


class TestSettings:
    """Tests for /api/settings."""

    def test_round_trip(self, client: TestClient) -> None:
        """PUT returns and GET reads the full map."""
        response = client.put("/api/settings", json={"title": "Hub", "columns": 4, "beta": False})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"beta": "false", "columns": "4", "title": "Hub"}
        client.put("/api/settings", json={"beta": None})
        assert client.get("/api/settings").json() == {"columns": "4", "title": "Hub"}

    def test_invalid_value(self, client: TestClient) -> None:
        """Nested values are rejected."""
        response = client.put("/api/settings", json={"title": {"nested": True}})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestIcons:
    """Tests for /api/icons."""

    def test_icon_table(self, client: TestClient) -> None:
        """The table includes its fallback."""
        body = client.get("/api/icons").json()
        assert body["fallback"] in body["icons"]


# =============================================================================
# Chat
# =============================================================================


class TestChat:
    """Tests for POST /api/chat."""

    def _client_with(self, config: LauncherConfig, chat_client: ChatClient) -> TestClient:
        return TestClient(create_app(config, chat_client=chat_client))

    def test_reply(self, config: LauncherConfig) -> None:
        """The provider's text is returned as the reply."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"parts": [{"text": "Hard hats are in aisle 4."}]}}]},
            )

        with self._client_with(config, _chat_client(handler)) as client:
            response = client.post(
                "/api/chat",
                json={"message": "Where are the hard hats?", "history": [{"role": "model", "text": "Hi"}]},
            )
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"reply": "Hard hats are in aisle 4."}

    def test_not_configured(self, config: LauncherConfig) -> None:
        """Without an API key the reply explains the configuration gap."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("provider must not be called")

        with self._client_with(config, _chat_client(handler, api_key="")) as client:
            response = client.post("/api/chat", json={"message": "Hello"})
        assert response.json() == {"reply": NOT_CONFIGURED_REPLY}

    def test_provider_error(self, config: LauncherConfig) -> None:
        """Provider failures become a friendly reply, not an HTTP error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "bad request"})

        with self._client_with(config, _chat_client(handler)) as client:
            response = client.post("/api/chat", json={"message": "Hello"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"reply": ERROR_REPLY}

    def test_client_built_from_app_config(self, config: LauncherConfig, monkeypatch: pytest.MonkeyPatch) -> None:
        """The lazily built chat client follows the app's LLM settings."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        app = create_app(config.model_copy(update={"llm_provider": "openai", "llm_model": "gpt-test"}))
        with TestClient(app) as client:
            response = client.post("/api/chat", json={"message": "Hello"})
        assert response.json() == {"reply": NOT_CONFIGURED_REPLY}
        assert app.state.chat_client.provider == LLMProvider.OPENAI
        assert app.state.chat_client.model == "gpt-test"

    def test_empty_message(self, client: TestClient) -> None:
        """Blank messages are a 400."""
        response = client.post("/api/chat", json={"message": "   "})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Storage failures
# =============================================================================


class TestStorageFailure:
    """Tests for the storage error mapping."""

    def test_storage_error_is_generic_500(self, config: LauncherConfig) -> None:
        """Driver details never reach the response."""
        store = AppStore(config.db_path)
        store.initialize()

        class BrokenRegistry(RegistryService):
            def list(self):
                raise StorageError(operation="list", details={"secret": "disk path"})

        app = create_app(config, registry=BrokenRegistry(store))
        with TestClient(app) as client:
            response = client.get("/api/apps")
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"]["message"] == "Storage unavailable"
        assert "disk path" not in response.text


# =============================================================================
# Package surface
# =============================================================================


class TestSchemaExports:
    """Tests for the api.schemas package surface."""

    def test_exports_resolve(self) -> None:
        """Every exported name exists and the error classes map to 401/403."""
        from launchpad.api import schemas

        for name in schemas.__all__:
            assert hasattr(schemas, name), name
        errors = {cls.status_code for cls in (schemas.AuthRequiredError, schemas.ForbiddenError)}
        assert errors == {401, 403}
