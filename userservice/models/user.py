"""ORM model for user accounts."""

import enum

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from userservice.models.base import Base


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """
    User account owned by the credential store.

    password holds the bcrypt hash only; role is a Role value.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.USER.value)

    tokens = relationship("Token", back_populates="user", lazy="select")
