"""HTTP error mapping: every failure body is ``{success: false, error}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from obex.api.schemas import APIResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(APIError):
    status_code = 400


class NotFoundError(APIError):
    status_code = 404


def _error_body(message: str) -> dict[str, object]:
    return APIResponse(success=False, error=message).model_dump(
        exclude={"data", "metadata"}
    )


async def _api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.info(
        "event=request_rejected path=%s status=%d error=%s",
        request.url.path,
        exc.status_code,
        exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code, content=_error_body(exc.message)
    )


async def _unhandled_error_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    logger.error(
        "event=unhandled_error path=%s error=%s",
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content=_error_body(str(exc) or "Internal server error"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(
        APIError, _api_error_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, _unhandled_error_handler)
