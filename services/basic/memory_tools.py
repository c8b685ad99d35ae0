"""
Memory tools exposed to the agent.

Five tools (memory_search, memory_store, memory_get, memory_list,
memory_forget) map structured tool calls onto Hindsight operations. Every tool
ensures the bank first, then answers with a readable summary plus a structured
`details` payload. Remote failures become failure results, never exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Type

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.exceptions import UnknownToolError
from core.memory_adapter import MemoryOrchestrator
from infrastructure.models.memory import CaptureItem, ToolResult

logger = structlog.get_logger(__name__)

FORGET_CANDIDATE_LIMIT = 5
DEFAULT_LIST_LIMIT = 20


# -------------------------------------------------------------------------
# Tool parameters
# -------------------------------------------------------------------------

class MemorySearchParams(BaseModel):
    query: str = Field(..., min_length=1, description="Search query")
    limit: Optional[int] = Field(None, gt=0, description="Max results (default: 5)")


class MemoryStoreParams(BaseModel):
    text: str = Field(..., min_length=1, description="Information to remember")
    context: Optional[str] = Field(None, description="Optional context/category")


class MemoryGetParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    memory_id: str = Field(..., alias="memoryId", min_length=1, description="Memory ID")


class MemoryListParams(BaseModel):
    limit: int = Field(DEFAULT_LIST_LIMIT, gt=0, description="Max memories to list (default: 20)")


class MemoryForgetParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    memory_id: Optional[str] = Field(None, alias="memoryId", description="Specific memory ID to delete")
    query: Optional[str] = Field(None, description="Search query to find memory to delete")


@dataclass(frozen=True)
class ToolSpec:
    name: str
    label: str
    description: str
    params: Type[BaseModel]

    def definition(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "description": self.description,
            "parameters": self.params.model_json_schema(by_alias=True),
        }


TOOL_SPECS: List[ToolSpec] = [
    ToolSpec(
        name="memory_search",
        label="Memory Search (Hindsight)",
        description=(
            "Search through long-term memories. Use when you need context about user "
            "preferences, past decisions, or previously discussed topics."
        ),
        params=MemorySearchParams,
    ),
    ToolSpec(
        name="memory_store",
        label="Memory Store (Hindsight)",
        description=(
            "Save information in long-term memory. Facts, entities and relationships are "
            "extracted automatically. Use for preferences, decisions, facts worth remembering."
        ),
        params=MemoryStoreParams,
    ),
    ToolSpec(
        name="memory_get",
        label="Memory Get (Hindsight)",
        description="Retrieve a specific memory by ID.",
        params=MemoryGetParams,
    ),
    ToolSpec(
        name="memory_list",
        label="Memory List (Hindsight)",
        description="List stored memories.",
        params=MemoryListParams,
    ),
    ToolSpec(
        name="memory_forget",
        label="Memory Forget (Hindsight)",
        description="Delete a specific memory by ID, or search and delete.",
        params=MemoryForgetParams,
    ),
]


def _failure(operation: str, exc: Exception) -> ToolResult:
    logger.warning(f"memory_{operation} failed", error=str(exc))
    return ToolResult.text(f"Memory {operation} failed: {exc}", error=str(exc))


class MemoryToolService:
    """Tool dispatch over the orchestrator's client and bank lifecycle."""

    def __init__(self, orchestrator: MemoryOrchestrator) -> None:
        self._orchestrator = orchestrator
        self._client = orchestrator.client
        self._settings = orchestrator.settings
        self._handlers: Dict[str, Callable[[Any], Awaitable[ToolResult]]] = {
            "memory_search": self.memory_search,
            "memory_store": self.memory_store,
            "memory_get": self.memory_get,
            "memory_list": self.memory_list,
            "memory_forget": self.memory_forget,
        }
        self._specs = {spec.name: spec for spec in TOOL_SPECS}

    @property
    def orchestrator(self) -> MemoryOrchestrator:
        return self._orchestrator

    @property
    def bank_id(self) -> str:
        return self._settings.bank_id

    def definitions(self) -> List[Dict[str, Any]]:
        return [spec.definition() for spec in TOOL_SPECS]

    async def execute(self, name: str, params: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """Validate a structured tool call and run it."""

        spec = self._specs.get(name)
        if spec is None:
            raise UnknownToolError(detail=name)
        try:
            parsed = spec.params.model_validate(dict(params or {}))
        except ValidationError as exc:
            return ToolResult.text(
                f"Invalid parameters for {name}: {exc.error_count()} error(s).",
                error="invalid_params",
                errors=exc.errors(include_url=False, include_context=False),
            )
        return await self._handlers[name](parsed)

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    async def memory_search(self, params: MemorySearchParams) -> ToolResult:
        await self._orchestrator.ensure_bank()
        try:
            result = await self._client.recall(
                self.bank_id, params.query, params.limit or self._settings.recall_limit
            )
        except Exception as exc:
            return _failure("search", exc)

        if not result.results:
            return ToolResult.text("No relevant memories found.", count=0)

        lines = "\n".join(
            f"{index}. [{memory.type}] {memory.text} (id: {memory.short_id})"
            for index, memory in enumerate(result.results, start=1)
        )
        return ToolResult.text(
            f"Found {len(result.results)} memories:\n\n{lines}",
            count=len(result.results),
            memories=[
                {"id": m.id, "text": m.text, "type": m.type, "entities": m.entities}
                for m in result.results
            ],
        )

    async def memory_store(self, params: MemoryStoreParams) -> ToolResult:
        await self._orchestrator.ensure_bank()
        try:
            result = await self._client.retain(
                self.bank_id, [CaptureItem(content=params.text, context=params.context)]
            )
        except Exception as exc:
            return _failure("store", exc)

        return ToolResult.text(
            f"Stored {result.items_count} item(s) in memory.",
            success=True,
            items_count=result.items_count,
        )

    async def memory_get(self, params: MemoryGetParams) -> ToolResult:
        await self._orchestrator.ensure_bank()
        try:
            memory = await self._client.get_memory(self.bank_id, params.memory_id)
        except Exception as exc:
            return _failure("get", exc)

        entities = ", ".join(memory.entities) if memory.entities else "none"
        return ToolResult.text(
            f"Memory {memory.id}:\n[{memory.type}] {memory.text}\n"
            f"Entities: {entities}\nStored: {memory.mentioned_at or 'unknown'}",
            memory=memory.model_dump(),
        )

    async def memory_list(self, params: MemoryListParams) -> ToolResult:
        await self._orchestrator.ensure_bank()
        try:
            result = await self._client.list_memories(self.bank_id, params.limit)
        except Exception as exc:
            return _failure("list", exc)

        if not result.items:
            return ToolResult.text("No memories stored yet.", count=0)

        lines = "\n".join(
            f"{index}. [{memory.type}] {memory.text[:100]} (id: {memory.short_id})"
            for index, memory in enumerate(result.items, start=1)
        )
        return ToolResult.text(f"{len(result.items)} memories:\n\n{lines}", count=len(result.items))

    async def memory_forget(self, params: MemoryForgetParams) -> ToolResult:
        """Delete by id, or by query when exactly one memory matches.

        Two or more matches return a candidate list and delete nothing.
        """

        await self._orchestrator.ensure_bank()
        try:
            if params.memory_id:
                await self._client.delete_memory(self.bank_id, params.memory_id)
                return ToolResult.text(
                    f"Memory {params.memory_id} forgotten.", action="deleted", id=params.memory_id
                )

            if params.query:
                result = await self._client.recall(
                    self.bank_id, params.query, FORGET_CANDIDATE_LIMIT
                )
                matches = result.results
                if not matches:
                    return ToolResult.text("No matching memories found.", found=0)

                if len(matches) == 1:
                    target = matches[0]
                    await self._client.delete_memory(self.bank_id, target.id)
                    return ToolResult.text(
                        f'Forgotten: "{target.text}"', action="deleted", id=target.id
                    )

                candidates = "\n".join(f"- [{m.short_id}] {m.text[:80]}" for m in matches)
                return ToolResult.text(
                    f"Found {len(matches)} candidates. Specify memoryId:\n{candidates}",
                    action="candidates",
                    candidates=[{"id": m.id, "text": m.text} for m in matches],
                )
        except Exception as exc:
            return _failure("forget", exc)

        return ToolResult.text("Provide a memoryId or query.", error="missing_param")
