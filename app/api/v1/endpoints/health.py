"""Health check endpoints: liveness and readiness checks."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import get_container
from app.infrastructure.container import CatalogContainer
from app.infrastructure.persistence.database import ping_database
from app.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database or search index unreachable", "model": ReadinessResponse}},
)
async def readiness_check(
    container: Annotated[CatalogContainer, Depends(get_container)],
) -> ReadinessResponse | JSONResponse:
    """Return 200 when both stores answer; 503 otherwise."""
    checks = {
        "database": await ping_database(container.session_factory),
        "search_index": await container.index_store.ping(),
    }
    if all(checks.values()):
        return ReadinessResponse(checks=checks)
    return JSONResponse(
        status_code=503,
        content=ReadinessResponse(status="not_ready", checks=checks).model_dump(),
    )
