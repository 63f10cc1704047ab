"""SQLAlchemy ORM models."""

from userservice.models.base import Base
from userservice.models.token import Token, TokenType
from userservice.models.user import Role, User

__all__ = ["Base", "Role", "Token", "TokenType", "User"]
