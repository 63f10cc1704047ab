"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """
    New account details. Constraints are checked by validate_registration so
    that every violation is reported together.
    """

    username: str = Field(default="", description="Username (5-50 chars)", examples=["jondoe"])
    email: str = Field(default="", description="Email address", examples=["jondoe@gmail.com"])
    password: str = Field(default="", description="Password (8 chars to 72 UTF-8 bytes)", examples=["my_1secret1_password"])
    role: str | None = Field(default=None, description="USER or ADMIN (default USER)")


class AuthenticationRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class AuthenticationResponse(BaseModel):
    """Access and refresh token pair."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="Access token", description="JWT access token")
    refresh_token: str = Field(..., alias="Refresh token", description="JWT refresh token")
