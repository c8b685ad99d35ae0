"""
Exception definitions and FastAPI handlers.

Usage:
- Raise subclasses of `BaseAPIException` from services/routers.
- Register `unified_api_exception_handler` + `generic_exception_handler` in FastAPI.
- Extend by creating new subclasses with `status_code`, `code`, `message`.
"""
from __future__ import annotations

import traceback
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

# Upper bound for the remote response body carried inside an error message.
BODY_SNIPPET_LIMIT = 200


class BaseAPIException(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error."
    detail: str = ""

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None) -> None:
        if message:
            self.message = message
        if detail:
            self.detail = detail
        super().__init__(self.message)


# Service-level errors
class ServiceError(BaseAPIException):
    pass


class MemoryServiceError(ServiceError):
    """A request to the Hindsight memory service failed.

    Raised for every non-2xx response and for transport failures. Carries the
    request method, the namespaced path, the upstream status (``None`` when no
    response arrived) and at most ``BODY_SNIPPET_LIMIT`` characters of the body.
    """

    status_code = 502
    code = "MEMORY_SERVICE_ERROR"
    message = "Memory service request failed."

    def __init__(
        self,
        method: str,
        path: str,
        upstream_status: Optional[int] = None,
        body: str = "",
    ) -> None:
        self.method = method
        self.path = path
        self.upstream_status = upstream_status
        self.body_snippet = (body or "")[:BODY_SNIPPET_LIMIT]
        status = upstream_status if upstream_status is not None else "unreachable"
        super().__init__(
            message=f"Hindsight {method} {path}: {status} {self.body_snippet}".rstrip(),
            detail=self.body_snippet or None,
        )

    @property
    def is_transport_error(self) -> bool:
        return self.upstream_status is None


class UnknownToolError(BaseAPIException):
    status_code = 404
    code = "UNKNOWN_TOOL"
    message = "Unknown memory tool."


class UnknownLifecycleEventError(BaseAPIException):
    status_code = 404
    code = "UNKNOWN_EVENT"
    message = "Unknown lifecycle event."


# FastAPI handlers
async def unified_api_exception_handler(request: Request, exc: BaseAPIException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.code,
            "message": exc.message,
            "detail": getattr(exc, "detail", None),
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    traceback.print_exc()
    return JSONResponse(
        status_code=500,
        content={
            "code": "INTERNAL_SERVER_ERROR",
            "message": "Server error.",
            "detail": str(exc),
        },
    )


__all__ = [
    "BODY_SNIPPET_LIMIT",
    "BaseAPIException",
    "ServiceError",
    "MemoryServiceError",
    "UnknownToolError",
    "UnknownLifecycleEventError",
    "unified_api_exception_handler",
    "generic_exception_handler",
]
