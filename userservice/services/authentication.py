"""Registration, login and token refresh over the user and token stores."""

import logging

from userservice.core.exceptions import AuthenticationError, InvalidTokenError, NotFoundError
from userservice.core.security import PasswordEncoder, TokenCodec
from userservice.models.token import Token, TokenType
from userservice.models.user import User
from userservice.repositories.tokens import TokenStore
from userservice.repositories.users import CredentialStore
from userservice.schemas.auth import (
    AuthenticationRequest,
    AuthenticationResponse,
    RegisterRequest,
)
from userservice.services.validation import validate_registration

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthenticationService:
    """
    Drives a user's token set through register, authenticate and refresh.

    Every flow that issues an access token persists it as the user's only live
    token: previously valid rows are marked revoked and expired first. There is
    no locking, so two concurrent logins for one user may both leave a live row.
    Committing is left to the caller that owns the session.
    """

    def __init__(
        self,
        users: CredentialStore,
        tokens: TokenStore,
        codec: TokenCodec,
        password_encoder: PasswordEncoder,
    ) -> None:
        self.users = users
        self.tokens = tokens
        self.codec = codec
        self.password_encoder = password_encoder

    def register(self, request: RegisterRequest) -> AuthenticationResponse:
        """Create the user and return a fresh token pair. Raises ValidationError."""
        role = validate_registration(request, self.users)
        user = User(
            username=request.username,
            email=request.email,
            password=self.password_encoder.encode(request.password),
            role=role.value,
        )
        saved_user = self.users.save(user)
        access_token = self.codec.generate_token(saved_user)
        refresh_token = self.codec.generate_refresh_token(saved_user)
        self._save_user_token(saved_user, access_token)
        logger.info("User registered", extra={"user_id": saved_user.id, "role": role.value})
        return AuthenticationResponse(access_token=access_token, refresh_token=refresh_token)

    def authenticate(self, request: AuthenticationRequest) -> AuthenticationResponse:
        """
        Check email/password and return a new token pair, revoking older tokens.

        Raises AuthenticationError on any credential mismatch without saying
        whether the email exists.
        """
        self._verify_credentials(request.email, request.password)
        user = self.users.find_by_email(request.email)
        if user is None:
            raise NotFoundError(f"User with email {request.email} not found")
        access_token = self.codec.generate_token(user)
        refresh_token = self.codec.generate_refresh_token(user)
        self._revoke_all_user_tokens(user)
        self._save_user_token(user, access_token)
        logger.info("User authenticated", extra={"user_id": user.id})
        return AuthenticationResponse(access_token=access_token, refresh_token=refresh_token)

    def refresh_token(self, authorization_header: str | None) -> AuthenticationResponse | None:
        """
        Exchange a refresh token from an Authorization header for a new access token.

        Returns None, changing nothing, when the header is missing or not a
        Bearer header, or the token is undecodable, has no subject, or is not
        valid for its user. The refresh token itself is returned unchanged.
        """
        if not authorization_header or not authorization_header.startswith(BEARER_PREFIX):
            return None
        refresh_token = authorization_header[len(BEARER_PREFIX):]
        try:
            username = self.codec.extract_subject(refresh_token)
        except InvalidTokenError as e:
            logger.debug("Refresh ignored: %s", e.message)
            return None
        if not username:
            return None
        user = self.users.find_by_username(username)
        if user is None:
            raise NotFoundError(f"User {username} not found")
        if not self.codec.is_valid(refresh_token, user):
            logger.debug("Refresh ignored: token not valid for user", extra={"user_id": user.id})
            return None
        access_token = self.codec.generate_token(user)
        self._revoke_all_user_tokens(user)
        self._save_user_token(user, access_token)
        logger.info("Access token refreshed", extra={"user_id": user.id})
        return AuthenticationResponse(access_token=access_token, refresh_token=refresh_token)

    def _verify_credentials(self, email: str, password: str) -> None:
        user = self.users.find_by_email(email)
        if user is None or not self.password_encoder.matches(password, user.password):
            logger.warning("Authentication failed")
            raise AuthenticationError()

    def _save_user_token(self, user: User, access_token: str) -> None:
        token = Token(
            user=user,
            user_id=user.id,
            token=access_token,
            token_type=TokenType.BEARER.value,
            expired=False,
            revoked=False,
        )
        self.tokens.save(token)

    def _revoke_all_user_tokens(self, user: User) -> None:
        valid_tokens = self.tokens.find_all_valid_by_user(user.id)
        if not valid_tokens:
            return
        for token in valid_tokens:
            token.expired = True
            token.revoked = True
        self.tokens.save_all(valid_tokens)
