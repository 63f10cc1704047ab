"""Shared helpers for tests: in-memory stores, a fixed clock and an SQLite-backed app."""

import base64
import itertools
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from userservice.api.v1.auth import get_password_encoder, get_token_codec
from userservice.core.database import get_db
from userservice.core.security import PasswordEncoder, TokenCodec
from userservice.main import app
from userservice.models import Base, Token, User

SIGNING_KEY = base64.b64decode("c2VjcmV0LWtleS1mb3ItdGVzdHMtb25seS0xMjM0NTY3ODkwYWJjZGVm")
ACCESS_TTL = timedelta(days=1)
REFRESH_TTL = timedelta(days=7)
FAST_ENCODER = PasswordEncoder(rounds=4)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


def make_codec(clock=None, key: bytes = SIGNING_KEY) -> TokenCodec:
    if clock is None:
        return TokenCodec(key, ACCESS_TTL, REFRESH_TTL)
    return TokenCodec(key, ACCESS_TTL, REFRESH_TTL, clock=clock)


class InMemoryUserStore:
    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self._ids = itertools.count(1)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def save(self, user: User) -> User:
        if user.id is None:
            user.id = next(self._ids)
        self.users[user.id] = user
        return user


class InMemoryTokenStore:
    def __init__(self) -> None:
        self.tokens: list[Token] = []
        self._ids = itertools.count(1)
        self.save_all_calls = 0

    def find_all_valid_by_user(self, user_id: int) -> list[Token]:
        return [
            t for t in self.tokens
            if t.user_id == user_id and not (t.expired and t.revoked)
        ]

    def save(self, token: Token) -> Token:
        if token.id is None:
            token.id = next(self._ids)
            self.tokens.append(token)
        return token

    def save_all(self, tokens: Iterable[Token]) -> list[Token]:
        self.save_all_calls += 1
        return [self.save(t) for t in tokens]

    def live_tokens(self, user_id: int) -> list[Token]:
        return [t for t in self.tokens if t.user_id == user_id and not t.revoked and not t.expired]


def make_sqlite_sessionmaker() -> sessionmaker:
    """In-memory SQLite shared across threads, with the schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_client(session_factory: sessionmaker, codec: TokenCodec | None = None, **kwargs) -> TestClient:
    """TestClient for the app with DB, codec and password encoder overridden."""
    codec = codec or make_codec()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_codec] = lambda: codec
    app.dependency_overrides[get_password_encoder] = lambda: FAST_ENCODER
    return TestClient(app, **kwargs)


def clear_overrides() -> None:
    app.dependency_overrides.clear()
