"""Exception handlers mapping service errors to JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.services.errors import MatchResultError

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain and storage errors."""

    @app.exception_handler(MatchResultError)
    async def match_result_error_handler(
        request: Request, exc: MatchResultError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "kind": exc.kind},
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "kind": "internal"},
        )
