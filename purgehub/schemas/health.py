"""Health check payload."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = "ok"
    environment: str = Field(description="dev or prod")
    database: Literal["connected", "disconnected"]
    auth_service: Literal["reachable", "unreachable"] = Field(
        description="Whether the auth admin API answered its health endpoint",
    )
