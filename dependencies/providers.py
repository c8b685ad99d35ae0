"""Core dependency providers (memory orchestrator / tool service)."""

from typing import Annotated, Optional

from fastapi import Depends

from core.memory_adapter import MemoryOrchestrator, get_memory_orchestrator
from services.basic.memory_tools import MemoryToolService


# -----------------------------------------------------------------
# Shared services
# -----------------------------------------------------------------

def get_orchestrator() -> MemoryOrchestrator:
    """Provide the process-wide memory orchestrator."""

    return get_memory_orchestrator()


_tool_service: Optional[MemoryToolService] = None


def get_tool_service(
    orchestrator: Annotated[MemoryOrchestrator, Depends(get_orchestrator)],
) -> MemoryToolService:
    """Provide a singleton MemoryToolService bound to the shared orchestrator."""

    global _tool_service
    if _tool_service is None or _tool_service.orchestrator is not orchestrator:
        _tool_service = MemoryToolService(orchestrator)
    return _tool_service


def reset_tool_service() -> None:
    global _tool_service
    _tool_service = None


# -----------------------------------------------------------------
# Type aliases for FastAPI Depends
# -----------------------------------------------------------------

OrchestratorDep = Annotated[MemoryOrchestrator, Depends(get_orchestrator)]
ToolServiceDep = Annotated[MemoryToolService, Depends(get_tool_service)]
