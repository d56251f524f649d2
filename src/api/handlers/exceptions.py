from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.responses import PlainTextResponse

from core.exceptions import InternalError, ServiceException, map_exception_to_http

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register application-wide exception handlers."""

    @app.exception_handler(ServiceException)
    async def service_exception_handler(request: Request, exc: ServiceException) -> PlainTextResponse:  # noqa: D401
        http_exc = map_exception_to_http(exc)
        if isinstance(exc, InternalError):
            logger.info(
                "Internal error on %s %s request_id=%s",
                request.method,
                request.url.path,
                getattr(request.state, "request_id", None),
            )
        return PlainTextResponse(content=http_exc.detail, status_code=http_exc.status_code)
