"""Lifecycle hook router: the host runtime posts pre-turn and post-turn events here."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body

from core.memory_adapter import AGENT_END, BEFORE_AGENT_START
from dependencies.providers import OrchestratorDep
from infrastructure.models.memory import CaptureSummary, PrependContext

router = APIRouter(prefix="/hooks", tags=["hooks"])


@router.post(
    f"/{BEFORE_AGENT_START}",
    response_model=PrependContext,
    summary="Recall memories before the agent turn",
)
async def before_agent_start(
    orchestrator: OrchestratorDep,
    payload: Optional[Dict[str, Any]] = Body(None),
) -> PrependContext:
    """Return the context block to prepend; `prependContext` is null when nothing was recalled."""

    effect = await orchestrator.handle_event(BEFORE_AGENT_START, payload)
    return effect if isinstance(effect, PrependContext) else PrependContext()


@router.post(
    f"/{AGENT_END}",
    response_model=CaptureSummary,
    summary="Capture the finished conversation",
)
async def agent_end(
    orchestrator: OrchestratorDep,
    payload: Optional[Dict[str, Any]] = Body(None),
) -> CaptureSummary:
    effect = await orchestrator.handle_event(AGENT_END, payload)
    return effect if isinstance(effect, CaptureSummary) else CaptureSummary()


@router.post("/{event_name}", summary="Deliver any other lifecycle event")
async def other_event(
    event_name: str,
    orchestrator: OrchestratorDep,
    payload: Optional[Dict[str, Any]] = Body(None),
) -> None:
    # Known events are routed above, so this raises UnknownLifecycleEventError.
    await orchestrator.handle_event(event_name, payload)
