"""API key authentication dependency."""

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, APIKeyQuery

from apikeys.ApiKeyService import ApiKeyService
from common.exceptions import UnauthorizedError

MISSING_KEY_MESSAGE = "Missing X-API-Key header"
INVALID_KEY_MESSAGE = "Invalid or inactive API Key"

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
_api_key_query = APIKeyQuery(name="api_key", auto_error=False)


def get_key_service(request: Request) -> ApiKeyService:
    """Retrieve the shared ApiKeyService from app state."""
    return request.app.state.key_service


async def require_api_key(
    header_key: str | None = Depends(_api_key_header),
    query_key: str | None = Depends(_api_key_query),
    key_service: ApiKeyService = Depends(get_key_service),
) -> str:
    """Validate the key sent in ``X-API-Key`` (or the ``api_key`` query param).

    Returns:
        The validated API key string.

    Raises:
        UnauthorizedError: If no key was sent, or it is unknown or inactive.
    """
    token = header_key or query_key
    if not token:
        raise UnauthorizedError(MISSING_KEY_MESSAGE)

    if not key_service.validate(token):
        raise UnauthorizedError(INVALID_KEY_MESSAGE)

    return token
