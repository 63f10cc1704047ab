"""Health check payload."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    service: str = Field(default="user-service", description="Service identifier")
    environment: str = Field(description="APP_ENV the process was started with")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 against the configured database",
    )
