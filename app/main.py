"""FastAPI application for catalog-search.

create_app() wires logging, the lifespan (stores, index, service
container), exception handlers, CORS and the v1 routes. Business logic
lives in app.application; see app.core.lifespan for startup and shutdown.

Settings are resolved inside create_app(), so tests can set env before
the module is imported.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import api_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.shared.telemetry.logging import setup_logging

API_V1_PREFIX = "/api/v1"

OPENAPI_TAGS = [
    {"name": "items", "description": "Create, delete, list and search catalog items"},
    {"name": "health", "description": "Liveness and readiness checks"},
]


def _cors_origins(settings: Settings) -> list[str]:
    return [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]


def create_app() -> FastAPI:
    """Build the catalog-search application."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Product catalog with full-text search over an index kept in sync on commit.",
        debug=settings.debug,
        openapi_tags=OPENAPI_TAGS,
        lifespan=create_lifespan,
    )
    register_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix=API_V1_PREFIX)
    return app


app = create_app()
