"""Unit tests for lazy bank initialization."""

import httpx
import pytest

from core.memory_adapter import BankLifecycle, MemoryOrchestrator
from tests.fakes import FakeHindsight


class TestBankLifecycle:
    """Tests for the ready flag."""

    @pytest.mark.asyncio
    async def test_ensures_once_then_cached(self, client, fake_hindsight: FakeHindsight) -> None:
        bank = BankLifecycle(client, "alpha", "mission")

        assert bank.ready is False
        assert await bank.ensure() is True
        assert await bank.ensure() is True

        assert bank.ready is True
        assert fake_hindsight.calls("PUT") == ["PUT /v1/default/banks/alpha"]
        assert fake_hindsight.banks["alpha"]["mission"] == "mission"

    @pytest.mark.asyncio
    async def test_failure_is_advisory_and_retried_next_time(self, client, fake_hindsight: FakeHindsight) -> None:
        fake_hindsight.fail["/banks/alpha"] = httpx.ConnectError("connection refused")
        bank = BankLifecycle(client, "alpha", "mission")

        assert await bank.ensure() is False
        assert bank.ready is False

        fake_hindsight.fail.clear()
        assert await bank.ensure() is True
        assert bank.ready is True
        assert len(fake_hindsight.calls("PUT")) == 2

    def test_state_is_per_orchestrator(self, memory_settings, client) -> None:
        first = MemoryOrchestrator(memory_settings, client)
        second = MemoryOrchestrator(memory_settings, client)

        assert first.bank is not second.bank
