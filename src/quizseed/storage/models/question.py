"""
Question and Answer Models

A question exclusively owns its answers: they are created, reordered and
deleted together with it. Answer order is the display order and is kept in
the ``position`` column.
"""

from typing import List, Optional
from sqlalchemy import String, Text, Integer, Boolean, ForeignKey
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quizseed.core.database import Base
from .enums import QuestionType
from .mixins import TimestampMixin


class Question(Base, TimestampMixin):
    """Quiz question identified by its text."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identifier: Mapped[Optional[str]] = mapped_column(String(64), index=True, nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    difficulty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    explanation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resource_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    symfony_version: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    is_certification: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)
    subcategory_id: Mapped[int] = mapped_column(ForeignKey("subcategories.id"), nullable=False, index=True)

    category: Mapped["Category"] = relationship("Category", back_populates="questions")
    subcategory: Mapped["Subcategory"] = relationship("Subcategory", back_populates="questions")
    answers: Mapped[List["Answer"]] = relationship(
        "Answer",
        back_populates="question",
        order_by="Answer.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    @property
    def question_type(self) -> QuestionType:
        return QuestionType(self.type)

    @property
    def correct_answers(self) -> List["Answer"]:
        return [answer for answer in self.answers if answer.is_correct]

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, type='{self.type}', identifier='{self.identifier}')>"


class Answer(Base):
    """One answer option of a question."""

    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    question: Mapped["Question"] = relationship("Question", back_populates="answers")

    def __repr__(self) -> str:
        return f"<Answer(id={self.id}, position={self.position}, is_correct={self.is_correct})>"
