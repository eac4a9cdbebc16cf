"""Error and health response schemas."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format"""

    error_code: str
    message: str
    details: dict[str, Any] | None = None
    status_code: int


class HealthResponse(BaseModel):
    status: str = "ok"
    forecasts_enabled: bool
