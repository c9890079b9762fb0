"""
Category and Subcategory Models

Shared reference data that questions point to. Neither is owned by a
question, so deleting a question never touches them.
"""

from typing import List, Optional
from sqlalchemy import String, Text, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quizseed.core.database import Base
from .mixins import TimestampMixin


class Category(Base, TimestampMixin):
    """Top-level topic (e.g. Symfony, PHP). Name is globally unique."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    subcategories: Mapped[List["Subcategory"]] = relationship(
        "Subcategory",
        back_populates="category",
        order_by="Subcategory.name",
    )
    questions: Mapped[List["Question"]] = relationship("Question", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class Subcategory(Base, TimestampMixin):
    """Topic within a category. Name is unique only inside its category."""

    __tablename__ = "subcategories"
    __table_args__ = (
        UniqueConstraint('category_id', 'name', name='uq_subcategory_category_name'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    documentation_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)

    category: Mapped["Category"] = relationship("Category", back_populates="subcategories")
    questions: Mapped[List["Question"]] = relationship("Question", back_populates="subcategory")

    def __repr__(self) -> str:
        return f"<Subcategory(id={self.id}, name='{self.name}')>"
