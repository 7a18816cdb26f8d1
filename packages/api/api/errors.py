"""Map application exceptions to JSON error responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.exceptions import (
    AppBaseError,
    KeyCollisionError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger("cellid")

_STATUS_BY_ERROR: list[tuple[type[AppBaseError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (KeyCollisionError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def _status_for(exc: AppBaseError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def app_error_handler(request: Request, exc: AppBaseError) -> JSONResponse:
    code = _status_for(exc)
    if code >= 500:
        logger.error("event=request_failed path=%s error=%s", request.url.path, exc)
        message = exc.message if isinstance(exc, KeyCollisionError) else "Internal server error"
        headers = {"Retry-After": "1"} if isinstance(exc, KeyCollisionError) else None
        return JSONResponse({"message": message}, status_code=code, headers=headers)

    body: dict[str, str] = {"message": exc.message}
    if isinstance(exc, ValidationError) and exc.field:
        body["field"] = exc.field
    return JSONResponse(body, status_code=code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report only the first failing parameter, in the same shape as ValidationError."""
    errors = exc.errors()
    first = errors[0] if errors else {"msg": "Invalid request", "loc": ()}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("path", "query", "body", "header")]
    body = {"message": first.get("msg", "Invalid request")}
    if loc:
        body["field"] = ".".join(loc)
    return JSONResponse(body, status_code=status.HTTP_400_BAD_REQUEST)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("event=unhandled_exception path=%s", request.url.path)
    return JSONResponse(
        {"message": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppBaseError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
