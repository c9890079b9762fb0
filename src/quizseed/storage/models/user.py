"""
User Model

Only the default account seeded by the base fixture lives here.
"""

from typing import List
from sqlalchemy import String, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from quizseed.core.database import Base
from .mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Application account identified by email."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(180), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    roles: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
