from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.logger import get_logger, setup_logging
from core.memory_adapter import get_memory_settings, init_memory_adapter, reset_memory_adapter
from infrastructure.db.hindsight_client import close_hindsight_connection, connect_to_hindsight
from dependencies.providers import reset_tool_service
from routers import health as health_router
from routers import hooks as hooks_router
from routers import tools as tools_router

from core.exceptions import BaseAPIException, unified_api_exception_handler, generic_exception_handler

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, shared Hindsight client, memory orchestrator.
    Shutdown: drop the orchestrator and close the client.
    """

    setup_logging(level=settings.LOG_LEVEL, include_timestamp=True)

    memory_settings = get_memory_settings()
    client = await connect_to_hindsight(memory_settings.base_url, memory_settings.namespace)
    init_memory_adapter(memory_settings, client)
    logger.info("memory-hindsight: initialized (bank: %s)", memory_settings.bank_id)

    yield

    reset_tool_service()
    reset_memory_adapter()
    await close_hindsight_connection()
    logger.info("memory-hindsight: stopped")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
Hindsight-backed long-term memory for a conversational agent runtime.

- Hooks: /hooks/before_agent_start (auto-recall), /hooks/agent_end (auto-capture)
- Tools: /tools (definitions), /tools/{name} (memory_search/store/get/list/forget)
- Health: /health, /health/memory
""",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


app.exception_handler(BaseAPIException)(unified_api_exception_handler)
app.exception_handler(Exception)(generic_exception_handler)

app.include_router(health_router.router)
app.include_router(hooks_router.router)
app.include_router(tools_router.router)


@app.get("/")
def read_root():
    return {"message": f"Welcome to {settings.APP_NAME} API. Check /docs for endpoints."}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
