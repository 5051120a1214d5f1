"""Health check response schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """GET /health: the process is up."""

    status: Literal["ok"] = "ok"


class ReadinessResponse(BaseModel):
    """GET /health/ready: reachability of the catalog database and the search index."""

    status: Literal["ok", "not_ready"] = "ok"
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Dependency name ('database', 'search_index') to reachable",
    )
