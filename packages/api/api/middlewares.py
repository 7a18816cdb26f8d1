"""Request-id middleware."""

import logging
from typing import Any
from uuid import uuid4

from starlette.types import ASGIApp, Receive, Scope, Send

from common.logging_config import clear_request_id, set_request_id

logger = logging.getLogger("cellid")


class RequestContextMiddleware:
    """Pure ASGI middleware for HTTP requests.

    Takes ``X-Request-ID`` from the request (or generates one), exposes it
    to log records through a ContextVar, echoes it on the response and
    logs one line per completed request.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        headers = {
            k.decode("latin-1").lower(): v.decode("latin-1")
            for k, v in scope.get("headers", [])
        }
        req_id = headers.get("x-request-id") or uuid4().hex
        set_request_id(req_id)

        method = scope.get("method", "-")
        path = scope.get("path", "-")
        status_code: int | None = None

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status")
                hdrs = list(message.get("headers") or [])
                hdrs.append((b"x-request-id", req_id.encode("latin-1")))
                message["headers"] = hdrs
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
            logger.info("%s %s -> %s", method, path, status_code if status_code is not None else "-")
        except Exception:
            logger.exception("Unhandled exception on %s %s", method, path)
            raise
        finally:
            clear_request_id()
