"""FastAPI application entry point."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apikeys.ApiKeyService import ApiKeyService
from common.logging_config import setup_logging
from database.DatabaseProvider import DatabaseProvider
from database.RecordStore import RecordStore
from towers.seed import seed_if_empty
from towers.TowerSearchEngine import TowerSearchEngine

from api.errors import register_exception_handlers
from api.middlewares import RequestContextMiddleware
from api.routes import router

API_V1_STR = "/api/v1"
DEFAULT_DB_PATH = "data/towers.db"

logger = logging.getLogger("cellid")


def env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Set up and tear down application-wide resources."""
    load_dotenv()
    setup_logging(
        os.environ.get("LOG_LEVEL", "INFO"),
        json_format=os.environ.get("LOG_FORMAT", "text").lower() == "json",
    )

    db_path = os.environ.get("DB_PATH", DEFAULT_DB_PATH)
    db_provider = DatabaseProvider(db_path)
    store = RecordStore(db_provider.get_connection())
    search_engine = TowerSearchEngine(store)
    key_service = ApiKeyService(store)

    if env_flag("SEED_ON_STARTUP", True):
        seed_if_empty(search_engine, store)

    app.state.store = store
    app.state.search_engine = search_engine
    app.state.key_service = key_service
    logger.info("Startup complete. db=%s api_base=%s", db_provider.path, API_V1_STR)

    yield

    key_service.close()
    db_provider.close()
    logger.info("Shutdown complete.")


app = FastAPI(
    title="Cell Tower Lookup API",
    description="Query Indonesian BTS records by MCC/MNC/LAC/CellID or proximity.",
    version="0.1.0",
    openapi_url=f"{API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

register_exception_handlers(app)

app.include_router(router, prefix=API_V1_STR)


def serve() -> None:
    """Start the uvicorn server using environment configuration."""
    load_dotenv()
    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "3000"))
    uvicorn.run("api.main:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    serve()
