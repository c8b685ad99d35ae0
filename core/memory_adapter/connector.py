"""
Memory adapter façade.

`MemoryOrchestrator` wires the Hindsight client, the bank lifecycle, the
sanitizer and the capture extractor into two lifecycle handlers:

- before_agent_start: recall memories for the prompt and return a context block.
- agent_end: retain the tail of a successful conversation.

Handlers never raise; remote failures are logged and the turn proceeds without
memory. Each orchestrator owns its own bank-readiness state.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import structlog

from core.exceptions import UnknownLifecycleEventError
from infrastructure.db.hindsight_client import HindsightClient
from infrastructure.models.memory import (
    AgentEndEvent,
    BeforeAgentStartEvent,
    CaptureSummary,
    PrependContext,
)

from .bank import BankLifecycle
from .capture import extract_capture_items
from .config import MemorySettings, get_memory_settings
from .sanitizer import format_memories_context

logger = structlog.get_logger(__name__)

BEFORE_AGENT_START = "before_agent_start"
AGENT_END = "agent_end"
LIFECYCLE_EVENTS = (BEFORE_AGENT_START, AGENT_END)

MIN_PROMPT_CHARS = 5

HookEffect = Optional[PrependContext | CaptureSummary]
HookHandler = Callable[[Mapping[str, Any]], Awaitable[HookEffect]]


class MemoryOrchestrator:
    """Auto-recall / auto-capture over one configured memory bank."""

    def __init__(self, settings: MemorySettings, client: HindsightClient) -> None:
        self.settings = settings
        self.client = client
        self.bank = BankLifecycle(client, settings.bank_id, settings.bank_mission)
        logger.info(
            "memory-hindsight: registered",
            url=settings.base_url,
            bank=settings.bank_id,
            auto_recall=settings.auto_recall,
            auto_capture=settings.auto_capture,
        )

    async def ensure_bank(self) -> bool:
        return await self.bank.ensure()

    # ------------------------------------------------------------------
    # Lifecycle handlers
    # ------------------------------------------------------------------

    async def before_agent_start(self, event: BeforeAgentStartEvent) -> Optional[PrependContext]:
        """Recall memories relevant to the prompt. None means the turn runs without memory."""

        if not self.settings.auto_recall:
            return None
        prompt = event.prompt
        if not prompt or len(prompt) < MIN_PROMPT_CHARS:
            return None

        try:
            await self.ensure_bank()
            result = await self.client.recall(
                self.settings.bank_id, prompt, self.settings.recall_limit
            )
        except Exception as exc:
            logger.warning("memory-hindsight: recall failed", error=str(exc))
            return None

        if not result.results:
            return None

        logger.info("memory-hindsight: injecting memories", count=len(result.results))
        return PrependContext(
            prepend_context=format_memories_context(result.results),
            memories_count=len(result.results),
        )

    async def agent_end(self, event: AgentEndEvent) -> Optional[CaptureSummary]:
        """Retain durable text from a successful turn. None means nothing was sent."""

        if not self.settings.auto_capture:
            return None
        if not event.success or not event.messages:
            return None

        try:
            await self.ensure_bank()
            items = extract_capture_items(event.messages, self.settings.capture_max_messages)
            if not items:
                return None
            result = await self.client.retain(self.settings.bank_id, items)
        except Exception as exc:
            logger.warning("memory-hindsight: capture failed", error=str(exc))
            return None

        if result.items_count > 0:
            logger.info("memory-hindsight: auto-captured items", count=result.items_count)
        return CaptureSummary(items_submitted=len(items), items_accepted=result.items_count)

    # ------------------------------------------------------------------
    # Event registry
    # ------------------------------------------------------------------

    def handlers(self) -> Dict[str, HookHandler]:
        """Handlers for the enabled features, keyed by lifecycle event name."""

        registry: Dict[str, HookHandler] = {}
        if self.settings.auto_recall:
            registry[BEFORE_AGENT_START] = self._on_before_agent_start
        if self.settings.auto_capture:
            registry[AGENT_END] = self._on_agent_end
        return registry

    async def handle_event(self, name: str, payload: Optional[Mapping[str, Any]]) -> HookEffect:
        if name not in LIFECYCLE_EVENTS:
            raise UnknownLifecycleEventError(detail=name)
        handler = self.handlers().get(name)
        if handler is None:
            return None
        return await handler(payload or {})

    async def _on_before_agent_start(self, payload: Mapping[str, Any]) -> Optional[PrependContext]:
        return await self.before_agent_start(_parse_event(BeforeAgentStartEvent, payload))

    async def _on_agent_end(self, payload: Mapping[str, Any]) -> Optional[CaptureSummary]:
        return await self.agent_end(_parse_event(AgentEndEvent, payload))


def _parse_event(model, payload: Mapping[str, Any]):
    try:
        return model.model_validate(dict(payload))
    except ValueError as exc:
        logger.warning("memory-hindsight: malformed lifecycle event", error=str(exc))
        return model()


_orchestrator: Optional[MemoryOrchestrator] = None


def init_memory_adapter(
    settings: Optional[MemorySettings] = None,
    client: Optional[HindsightClient] = None,
) -> MemoryOrchestrator:
    """Initialize the shared orchestrator (idempotent)."""

    global _orchestrator
    if _orchestrator is not None:
        return _orchestrator

    effective_settings = settings or get_memory_settings()
    effective_client = client or HindsightClient(
        effective_settings.base_url, effective_settings.namespace
    )
    _orchestrator = MemoryOrchestrator(effective_settings, effective_client)
    return _orchestrator


def get_memory_orchestrator() -> MemoryOrchestrator:
    if _orchestrator is None:
        return init_memory_adapter()
    return _orchestrator


def reset_memory_adapter() -> None:
    """Drop the shared orchestrator; the caller owns closing its client."""

    global _orchestrator
    _orchestrator = None
