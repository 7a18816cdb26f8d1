"""API route definitions."""

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError as PydanticValidationError

from api.auth import get_key_service, require_api_key
from api.schemas import (
    ApiKeyCreated,
    CellTowerSchema,
    ErrorResponse,
    HealthStatus,
    TowerSearchParams,
)
from apikeys.ApiKeyService import ApiKeyService
from common.exceptions import NotFoundError, ValidationError
from database.RecordStore import RecordStore
from towers.TowerSearchEngine import TowerSearchEngine

router = APIRouter()

GENERATED_KEY_MESSAGE = (
    "API Key generated successfully. Use this key in the 'X-API-Key' header."
)

_AUTH_ERRORS = {status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _store_dependency(request: Request) -> RecordStore:
    """Retrieve the shared RecordStore from app state."""
    return request.app.state.store


def _engine_dependency(request: Request) -> TowerSearchEngine:
    return request.app.state.search_engine


def tower_search_params(request: Request) -> TowerSearchParams:
    """Coerce the query string, failing on the first bad parameter."""
    try:
        return TowerSearchParams.model_validate(dict(request.query_params))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ValidationError(first["msg"], field=field) from None


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check(store: RecordStore = Depends(_store_dependency)):
    """Liveness probe with the tower count -- no auth required."""
    return HealthStatus(status="ok", towers=store.count_towers())


# ---------------------------------------------------------------------------
# API keys (public)
# ---------------------------------------------------------------------------


@router.post(
    "/keys/generate",
    response_model=ApiKeyCreated,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse}},
    tags=["API Keys"],
)
async def generate_key(key_service: ApiKeyService = Depends(get_key_service)):
    """Mint a new active API key. No authentication required."""
    api_key = key_service.generate()
    return ApiKeyCreated(
        key=api_key.key,
        created_at=api_key.created_at.isoformat(),
        message=GENERATED_KEY_MESSAGE,
    )


# ---------------------------------------------------------------------------
# Towers (protected)
# ---------------------------------------------------------------------------


@router.get(
    "/towers",
    response_model=list[CellTowerSchema],
    responses={**_AUTH_ERRORS, status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
    tags=["Towers"],
)
async def search_towers(
    api_key: str = Depends(require_api_key),
    params: TowerSearchParams = Depends(tower_search_params),
    engine: TowerSearchEngine = Depends(_engine_dependency),
):
    """Search towers by MCC/MNC/LAC/CellID and/or proximity to lat/lon.

    Query parameters: ``mcc``, ``mnc``, ``lac``, ``cellId``, ``lat``,
    ``lon``, ``radius`` (meters, default 1000).
    """
    towers = engine.search(params.to_filter())
    return [CellTowerSchema.model_validate(t) for t in towers]


@router.get(
    "/towers/{id}",
    response_model=CellTowerSchema,
    responses={**_AUTH_ERRORS, status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
    tags=["Towers"],
)
async def get_tower(
    id: int,  # noqa: A002
    api_key: str = Depends(require_api_key),
    store: RecordStore = Depends(_store_dependency),
):
    """Fetch a single tower by id."""
    tower = store.get_tower(id)
    if tower is None:
        raise NotFoundError("Cell tower not found")
    return CellTowerSchema.model_validate(tower)
