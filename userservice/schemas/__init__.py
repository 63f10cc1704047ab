"""Pydantic request/response schemas."""

from userservice.schemas.auth import (
    AuthenticationRequest,
    AuthenticationResponse,
    RegisterRequest,
)
from userservice.schemas.health import HealthResponse

__all__ = [
    "AuthenticationRequest",
    "AuthenticationResponse",
    "HealthResponse",
    "RegisterRequest",
]
