"""Token store: persistence of issued access tokens."""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import or_
from sqlalchemy.orm import Session

from userservice.models.token import Token


class TokenStore(Protocol):
    """Anything that can list a user's live tokens and persist token rows."""

    def find_all_valid_by_user(self, user_id: int) -> list[Token]: ...

    def save(self, token: Token) -> Token: ...

    def save_all(self, tokens: Iterable[Token]) -> list[Token]: ...


class TokenRepository:
    """TokenStore backed by a SQLAlchemy session. The caller owns commit."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_all_valid_by_user(self, user_id: int) -> list[Token]:
        """Tokens of user_id that are not both expired and revoked."""
        return (
            self.session.query(Token)
            .filter(
                Token.user_id == user_id,
                or_(Token.expired.is_(False), Token.revoked.is_(False)),
            )
            .order_by(Token.id)
            .all()
        )

    def save(self, token: Token) -> Token:
        self.session.add(token)
        self.session.flush()
        return token

    def save_all(self, tokens: Iterable[Token]) -> list[Token]:
        saved = list(tokens)
        self.session.add_all(saved)
        self.session.flush()
        return saved
