"""Global exception handlers.

    - RegistryError -> its own http_status with {"error": {code, message, category}}
    - Exception (catch-all) -> 500 that never leaks internal details

Registry rejections are expected traffic (duplicate submissions, stale
attestations), so they log at WARNING, not ERROR.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from anchor_registry.core.errors import RegistryError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
        logger.warning(
            "Registry rejected %s %s: %s %s",
            request.method,
            request.url.path,
            exc.code,
            exc.message,
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception on %s: %s",
            request.url.path,
            exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                }
            },
        )
