"""Response body of GET /api/health."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = Field(
        default="ok", description="'degraded' when the user store is unreachable"
    )
    service: str = Field(default="jobmonitor", description="Service name")
    version: str = Field(description="API version")
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="User and refresh-token store connectivity",
    )
