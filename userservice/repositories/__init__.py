"""Persistence collaborators for users and tokens."""

from userservice.repositories.tokens import TokenRepository, TokenStore
from userservice.repositories.users import CredentialStore, UserRepository

__all__ = ["CredentialStore", "TokenRepository", "TokenStore", "UserRepository"]
