"""ORM model for issued access tokens."""

import enum

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from userservice.models.base import Base


class TokenType(str, enum.Enum):
    BEARER = "BEARER"


class Token(Base):
    """
    Issued access token and its lifecycle flags.

    Rows are never deleted; a superseded token gets revoked=expired=True.
    """

    __tablename__ = "tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(Text, nullable=False, unique=True)
    token_type = Column(String(16), nullable=False, default=TokenType.BEARER.value)
    revoked = Column(Boolean, nullable=False, default=False)
    expired = Column(Boolean, nullable=False, default=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", back_populates="tokens", lazy="select")
