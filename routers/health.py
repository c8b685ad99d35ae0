"""Health check router: local liveness plus the memory service behind it."""

from typing import Any

from fastapi import APIRouter

from dependencies.providers import OrchestratorDep

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", summary="Health check")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/memory", summary="Memory service health")
async def memory_health(orchestrator: OrchestratorDep) -> dict[str, Any]:
    cfg = orchestrator.settings
    healthy = await orchestrator.client.health()
    return {
        "status": "ok" if healthy else "unreachable",
        "base_url": cfg.base_url,
        "namespace": cfg.namespace,
        "bank_id": cfg.bank_id,
        "bank_ready": orchestrator.bank.ready,
        "auto_recall": cfg.auto_recall,
        "auto_capture": cfg.auto_capture,
    }
