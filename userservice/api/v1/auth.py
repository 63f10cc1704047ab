"""Register, authenticate and refresh-token endpoints."""

from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from userservice.core.config import get_settings
from userservice.core.database import get_db
from userservice.core.security import PasswordEncoder, TokenCodec
from userservice.repositories.tokens import TokenRepository
from userservice.repositories.users import UserRepository
from userservice.schemas.auth import (
    AuthenticationRequest,
    AuthenticationResponse,
    RegisterRequest,
)
from userservice.services.authentication import AuthenticationService

router = APIRouter()


@lru_cache
def get_token_codec() -> TokenCodec:
    """Codec keyed by the secret and lifetimes loaded at startup."""
    return TokenCodec.from_settings(get_settings())


@lru_cache
def get_password_encoder() -> PasswordEncoder:
    return PasswordEncoder()


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    encoder: Annotated[PasswordEncoder, Depends(get_password_encoder)],
) -> AuthenticationService:
    return AuthenticationService(
        users=UserRepository(db),
        tokens=TokenRepository(db),
        codec=codec,
        password_encoder=encoder,
    )


@router.post(
    "/register",
    response_model=AuthenticationResponse,
    responses={400: {"description": "Invalid input"}},
)
def register(
    body: RegisterRequest,
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthenticationResponse:
    """Register a new user and return an access/refresh token pair."""
    result = service.register(body)
    db.commit()
    return result


@router.post(
    "/authenticate",
    response_model=AuthenticationResponse,
    responses={401: {"description": "Invalid credentials"}},
)
def authenticate(
    body: AuthenticationRequest,
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthenticationResponse:
    """Log in with email and password; previously issued access tokens are revoked."""
    result = service.authenticate(body)
    db.commit()
    return result


@router.post(
    "/refresh-token",
    response_model=None,
    responses={
        200: {"model": AuthenticationResponse, "description": "Token refreshed"},
        204: {"description": "Nothing refreshed"},
    },
)
def refresh_token(
    service: Annotated[AuthenticationService, Depends(get_auth_service)],
    db: Annotated[Session, Depends(get_db)],
    authorization: Annotated[str | None, Header()] = None,
) -> Response:
    """
    Exchange the refresh token in `Authorization: Bearer <token>` for a new access token.
    Responds 204 with no body when the header or token is unusable.
    """
    result = service.refresh_token(authorization)
    if result is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    db.commit()
    return JSONResponse(content=result.model_dump(by_alias=True))
