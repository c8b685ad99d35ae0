"""Shared fixtures: Hindsight client, orchestrator and tool service over the fake API."""

from typing import Callable

import httpx
import pytest

from core.logger import configure_structlog
from core.memory_adapter import MemoryOrchestrator, MemorySettings, parse_memory_config
from infrastructure.db.hindsight_client import HindsightClient
from services.basic.memory_tools import MemoryToolService
from tests.fakes import BASE_URL, FakeHindsight


@pytest.fixture
def fake_hindsight() -> FakeHindsight:
    return FakeHindsight()


@pytest.fixture
def make_client(fake_hindsight: FakeHindsight) -> Callable[..., HindsightClient]:
    def _make(base_url: str = BASE_URL, namespace: str = "default") -> HindsightClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_hindsight))
        return HindsightClient(base_url, namespace, http_client=http_client)

    return _make


@pytest.fixture
async def client(make_client: Callable[..., HindsightClient]):
    hindsight = make_client()
    yield hindsight
    await hindsight.aclose()


@pytest.fixture
def memory_settings() -> MemorySettings:
    return parse_memory_config({"baseUrl": BASE_URL, "bankId": "test-bank"})


@pytest.fixture
def orchestrator(memory_settings: MemorySettings, client: HindsightClient) -> MemoryOrchestrator:
    return MemoryOrchestrator(memory_settings, client)


@pytest.fixture
def tool_service(orchestrator: MemoryOrchestrator) -> MemoryToolService:
    return MemoryToolService(orchestrator)


@pytest.fixture(autouse=True, scope="session")
def structlog_to_stdlib() -> None:
    """Key/value log events go to stdlib logging, never to captured stdout."""
    configure_structlog()
