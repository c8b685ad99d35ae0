# infrastructure/db/hindsight_client.py
"""
Async client for the Hindsight memory service.

Every bank-scoped call goes to `{base_url}/v1/{namespace}/banks/...`; only
`/health` lives outside the namespace. Any non-2xx response or transport
failure raises `MemoryServiceError` carrying method, path, status and a
truncated body snippet.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence
from urllib.parse import quote

import httpx
import structlog

from core.exceptions import MemoryServiceError
from infrastructure.models.memory import (
    BankInfo,
    CaptureItem,
    EntityList,
    Memory,
    MemoryList,
    RecallResult,
    ReflectResult,
    RetainResult,
)

logger = structlog.get_logger(__name__)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class HindsightClient:
    """Typed request/response wrapper over the Hindsight HTTP API."""

    def __init__(
        self,
        base_url: str,
        namespace: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.namespace = namespace
        # Timeouts are left to the transport defaults.
        self._client = http_client or httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "HindsightClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/v1/{_segment(self.namespace)}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._client.request(method, self._url(path), json=body)
        except httpx.HTTPError as exc:
            raise MemoryServiceError(method, path, None, str(exc)) from exc

        if not response.is_success:
            raise MemoryServiceError(method, path, response.status_code, response.text)

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise MemoryServiceError(method, path, response.status_code, response.text) from exc

    # ------------------------------------------------------------------
    # Bank management
    # ------------------------------------------------------------------

    async def ensure_bank(self, bank_id: str, mission: Optional[str] = None) -> BankInfo:
        """Create-or-get a bank. The mission is best-effort metadata.

        When the service rejects the request carrying the mission, the call is
        repeated once without it. A transport failure is not retried: the
        service is unreachable and dropping the field cannot help.
        """

        path = f"/banks/{_segment(bank_id)}"
        if mission:
            try:
                data = await self._request("PUT", path, {"mission": mission})
            except MemoryServiceError as exc:
                if exc.is_transport_error:
                    raise
                logger.debug("Bank ensure with mission rejected, retrying bare", error=str(exc))
            else:
                return self._bank_info(bank_id, data)

        data = await self._request("PUT", path, {})
        return self._bank_info(bank_id, data)

    @staticmethod
    def _bank_info(bank_id: str, data: Any) -> BankInfo:
        payload = dict(data) if isinstance(data, dict) else {}
        payload.setdefault("bank_id", bank_id)
        return BankInfo.model_validate(payload)

    # ------------------------------------------------------------------
    # Memory operations
    # ------------------------------------------------------------------

    async def retain(self, bank_id: str, items: Sequence[CaptureItem]) -> RetainResult:
        """Submit raw text for extraction. The accepted count may be lower than len(items)."""

        payload = [item.model_dump(exclude_none=True) for item in items]
        data = await self._request(
            "POST", f"/banks/{_segment(bank_id)}/memories", {"items": payload}
        )
        return RetainResult.model_validate(data)

    async def recall(self, bank_id: str, query: str, limit: int = 5) -> RecallResult:
        if not query or not query.strip():
            raise ValueError("Recall query must be non-empty.")
        data = await self._request(
            "POST",
            f"/banks/{_segment(bank_id)}/memories/recall",
            {"query": query, "limit": limit},
        )
        return RecallResult.model_validate(data)

    async def reflect(self, bank_id: str, query: str) -> ReflectResult:
        data = await self._request("POST", f"/banks/{_segment(bank_id)}/reflect", {"query": query})
        return ReflectResult.model_validate(data)

    async def list_memories(self, bank_id: str, limit: int = 50) -> MemoryList:
        data = await self._request(
            "GET", f"/banks/{_segment(bank_id)}/memories/list?limit={int(limit)}"
        )
        return MemoryList.model_validate(data)

    async def get_memory(self, bank_id: str, memory_id: str) -> Memory:
        data = await self._request(
            "GET", f"/banks/{_segment(bank_id)}/memories/{_segment(memory_id)}"
        )
        return Memory.model_validate(data)

    async def delete_memory(self, bank_id: str, memory_id: str) -> None:
        await self._request(
            "DELETE", f"/banks/{_segment(bank_id)}/memories/{_segment(memory_id)}"
        )

    async def list_entities(self, bank_id: str) -> EntityList:
        data = await self._request("GET", f"/banks/{_segment(bank_id)}/entities")
        return EntityList.model_validate(data)

    async def health(self) -> bool:
        """Liveness of the service. Never raises."""

        try:
            response = await self._client.get(f"{self.base_url}/health")
        except httpx.HTTPError as exc:
            logger.debug("Hindsight health check failed", error=str(exc))
            return False
        return response.is_success


# Process-wide client instance, opened by the application lifespan.
hindsight_client: Optional[HindsightClient] = None


async def connect_to_hindsight(base_url: str, namespace: str) -> HindsightClient:
    """Called at application startup: create the shared client and probe the service."""

    global hindsight_client
    hindsight_client = HindsightClient(base_url, namespace)
    if await hindsight_client.health():
        logger.info("Hindsight reachable", base_url=base_url, namespace=namespace)
    else:
        # The bank is ensured lazily, so an unreachable service is not fatal here.
        logger.warning("Hindsight unreachable at startup", base_url=base_url)
    return hindsight_client


async def close_hindsight_connection() -> None:
    """Called at application shutdown."""

    global hindsight_client
    if hindsight_client is not None:
        await hindsight_client.aclose()
        hindsight_client = None
