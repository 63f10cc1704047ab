"""Password hashing and JWT creation/verification for authentication."""

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, TypeVar

import bcrypt
import jwt

from userservice.core.exceptions import InvalidTokenError

if TYPE_CHECKING:
    from userservice.core.config import Settings
    from userservice.models.user import User

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12
# bcrypt ignores input beyond this many bytes.
BCRYPT_MAX_PASSWORD_BYTES = 72

JWT_ALGORITHM = "HS256"
USER_ID_CLAIM = "userId"

T = TypeVar("T")


class PasswordEncoder:
    """One-way salted bcrypt hashing of user passwords."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def encode(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        # Longer passwords are rejected at registration; bcrypt would ignore the excess.
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def matches(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenCodec:
    """
    Encode, decode and validate HS256-signed bearer tokens.

    Access and refresh tokens share one encoding and differ only in lifetime.
    Expiry is checked here rather than by PyJWT so that a signed but expired
    token still decodes; the signature is always verified.
    """

    def __init__(
        self,
        signing_key: bytes,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._signing_key = signing_key
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenCodec":
        return cls(
            signing_key=settings.jwt_signing_key,
            access_ttl=timedelta(milliseconds=settings.JWT_EXPIRATION_MS),
            refresh_ttl=timedelta(milliseconds=settings.JWT_REFRESH_EXPIRATION_MS),
        )

    def issue(
        self,
        subject: str,
        user_id: int | None,
        extra_claims: dict[str, Any] | None,
        ttl: timedelta,
    ) -> str:
        """Create a signed token carrying sub, userId, iat and exp (iat + ttl)."""
        # Claims carry whole seconds; issue on a second boundary so exp is exactly iat + ttl.
        now = self._clock().replace(microsecond=0)
        payload: dict[str, Any] = dict(extra_claims or {})
        payload[USER_ID_CLAIM] = user_id
        payload["sub"] = subject
        payload["iat"] = now
        payload["exp"] = now + ttl
        # jti keeps tokens issued within the same second distinct.
        payload["jti"] = uuid.uuid4().hex
        return jwt.encode(payload, self._signing_key, algorithm=JWT_ALGORITHM)

    def generate_token(self, user: "User", extra_claims: dict[str, Any] | None = None) -> str:
        """Access token for user (short lifetime)."""
        return self.issue(user.username, user.id, extra_claims, self.access_ttl)

    def generate_refresh_token(self, user: "User") -> str:
        """Refresh token for user (long lifetime)."""
        return self.issue(user.username, user.id, None, self.refresh_ttl)

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._signing_key,
                algorithms=[JWT_ALGORITHM],
                options={
                    "require": ["exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

    def extract_claim(self, token: str, selector: Callable[[dict[str, Any]], T]) -> T:
        """Apply selector to the verified claims of token. Raises InvalidTokenError."""
        return selector(self._decode(token))

    def extract_subject(self, token: str) -> str | None:
        """Return the sub claim (username). Raises InvalidTokenError."""
        return self.extract_claim(token, lambda claims: claims.get("sub"))

    def extract_expiration(self, token: str) -> datetime:
        exp = self.extract_claim(token, lambda claims: claims["exp"])
        return datetime.fromtimestamp(exp, UTC)

    def is_expired(self, token: str) -> bool:
        # Strict, at the one-second resolution of exp: valid through its expiry second.
        return self.extract_expiration(token) < self._clock().replace(microsecond=0)

    def is_valid(self, token: str, user: "User") -> bool:
        """True iff the subject equals user.username and the token has not expired."""
        subject = self.extract_subject(token)
        return subject == user.username and not self.is_expired(token)
