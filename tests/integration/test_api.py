"""Integration tests for the hook, tool and health routes."""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.exceptions import BaseAPIException, unified_api_exception_handler
from core.memory_adapter import MemoryOrchestrator, parse_memory_config
from dependencies.providers import get_orchestrator, reset_tool_service
from infrastructure.db.hindsight_client import HindsightClient
from routers import health, hooks, tools
from tests.fakes import BASE_URL, FakeHindsight


@pytest.fixture
def fake():
    return FakeHindsight()


@pytest.fixture
def api_orchestrator(fake: FakeHindsight) -> MemoryOrchestrator:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
    client = HindsightClient(BASE_URL, "default", http_client=http_client)
    settings = parse_memory_config({"baseUrl": BASE_URL, "bankId": "test-bank"})
    return MemoryOrchestrator(settings, client)


@pytest.fixture
def app(api_orchestrator: MemoryOrchestrator):
    """App with the memory routers wired to the fake service."""
    application = FastAPI()
    application.exception_handler(BaseAPIException)(unified_api_exception_handler)
    application.include_router(health.router)
    application.include_router(hooks.router)
    application.include_router(tools.router)
    application.dependency_overrides[get_orchestrator] = lambda: api_orchestrator
    yield application
    application.dependency_overrides.clear()
    reset_tool_service()


@pytest.fixture
def api(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestHealthRoutes:
    def test_liveness(self, api: TestClient) -> None:
        response = api.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_memory_health(self, api: TestClient) -> None:
        response = api.get("/health/memory")

        body = response.json()
        assert body["status"] == "ok"
        assert body["base_url"] == BASE_URL
        assert body["bank_id"] == "test-bank"
        assert body["bank_ready"] is False

    def test_memory_health_unreachable(self, api: TestClient, fake: FakeHindsight) -> None:
        fake.fail["GET /health"] = httpx.ConnectError("connection refused")

        assert api.get("/health/memory").json()["status"] == "unreachable"


class TestHookRoutes:
    def test_before_agent_start_injects_memories(self, api: TestClient, fake: FakeHindsight) -> None:
        fake.add_memory("test-bank", "m-1", "User prefers oatmeal")

        response = api.post("/hooks/before_agent_start", json={"prompt": "What should I eat?"})

        assert response.status_code == 200
        body = response.json()
        assert body["memoriesCount"] == 1
        assert body["prependContext"].startswith("<relevant-memories>")
        assert "1. [world] User prefers oatmeal" in body["prependContext"]

    def test_before_agent_start_short_prompt(self, api: TestClient, fake: FakeHindsight) -> None:
        response = api.post("/hooks/before_agent_start", json={"prompt": "hi"})

        assert response.json() == {"prependContext": None, "memoriesCount": 0}
        assert fake.requests == []

    def test_agent_end_captures(self, api: TestClient, fake: FakeHindsight) -> None:
        payload = {
            "success": True,
            "messages": [
                {"role": "user", "content": "I moved to Lisbon last month"},
                {"role": "assistant", "content": [{"type": "text", "text": "Noted, welcome to Lisbon!"}]},
            ],
        }

        response = api.post("/hooks/agent_end", json=payload)

        assert response.json() == {"itemsSubmitted": 2, "itemsAccepted": 2}
        assert [m["text"] for m in fake.memories["test-bank"]] == [
            "[user]: I moved to Lisbon last month",
            "[assistant]: Noted, welcome to Lisbon!",
        ]

    def test_agent_end_failed_turn(self, api: TestClient, fake: FakeHindsight) -> None:
        response = api.post("/hooks/agent_end", json={"success": False, "messages": []})

        assert response.json() == {"itemsSubmitted": 0, "itemsAccepted": 0}
        assert fake.requests == []

    def test_unknown_event(self, api: TestClient) -> None:
        response = api.post("/hooks/session_start", json={})

        assert response.status_code == 404
        assert response.json()["code"] == "UNKNOWN_EVENT"
        assert response.json()["detail"] == "session_start"


class TestToolRoutes:
    def test_definitions(self, api: TestClient) -> None:
        response = api.get("/tools")

        names = [tool["name"] for tool in response.json()]
        assert len(names) == 5
        assert "memoryId" in response.json()[2]["parameters"]["properties"]

    def test_execute_store(self, api: TestClient, fake: FakeHindsight) -> None:
        response = api.post("/tools/memory_store", json={"text": "Prefers window seats"})

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == [{"type": "text", "text": "Stored 1 item(s) in memory."}]
        assert body["details"] == {"success": True, "items_count": 1}

    def test_remote_failure_is_a_result(self, api: TestClient, fake: FakeHindsight) -> None:
        fake.fail["/memories/list"] = 500

        response = api.post("/tools/memory_list", json={})

        assert response.status_code == 200
        assert response.json()["content"][0]["text"].startswith("Memory list failed:")

    def test_invalid_params(self, api: TestClient) -> None:
        response = api.post("/tools/memory_get", json={})

        assert response.status_code == 200
        assert response.json()["details"]["error"] == "invalid_params"

    def test_unknown_tool(self, api: TestClient) -> None:
        response = api.post("/tools/memory_teleport", json={})

        assert response.status_code == 404
        assert response.json()["code"] == "UNKNOWN_TOOL"
