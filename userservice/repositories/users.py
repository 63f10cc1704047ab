"""Credential store: persistence of user accounts."""

from typing import Protocol

from sqlalchemy.orm import Session

from userservice.models.user import User


class CredentialStore(Protocol):
    """Anything that can look up and persist users."""

    def find_by_username(self, username: str) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def save(self, user: User) -> User: ...


class UserRepository:
    """CredentialStore backed by a SQLAlchemy session. The caller owns commit."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def find_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def save(self, user: User) -> User:
        """Add user to the session and flush so the generated id is available."""
        self.session.add(user)
        self.session.flush()
        return user
