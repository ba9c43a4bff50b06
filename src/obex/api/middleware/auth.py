"""Optional API key authentication middleware."""

from __future__ import annotations

import hmac

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.responses import JSONResponse

from obex.constants import (
    AUTH_EXEMPT_PATHS,
    AUTH_EXEMPT_PREFIXES,
)

_BEARER = "Bearer "


def is_exempt(path: str) -> bool:
    return path in AUTH_EXEMPT_PATHS or path.startswith(AUTH_EXEMPT_PREFIXES)


def provided_key(request: Request) -> str:
    """Key from ``X-API-Key``, falling back to a bearer token."""
    key = request.headers.get("X-API-Key")
    if key:
        return key
    auth = request.headers.get("Authorization", "")
    return auth[len(_BEARER):] if auth.startswith(_BEARER) else ""


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require the configured API key on every non-exempt route.

    An empty ``Settings.api_key`` disables the check entirely.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        expected: str = request.app.state.settings.api_key
        if not expected or is_exempt(request.url.path):
            return await call_next(request)

        if hmac.compare_digest(
            provided_key(request).encode(), expected.encode()
        ):
            return await call_next(request)

        return JSONResponse(
            status_code=401,
            content={"success": False, "error": "Invalid or missing API key"},
        )
