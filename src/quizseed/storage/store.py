"""
Persistence Store Boundary

The seeder talks to persistence only through the small ``Store`` protocol:
find rows by field values, stage new objects, flush, commit, roll back.
``SessionStore`` implements it on top of a SQLAlchemy session.
"""

import logging
from typing import Any, List, Optional, Protocol, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quizseed.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Store(Protocol):
    """Operations the seeder needs from a persistence backend."""

    def find_one_by(self, model: Type[T], **criteria: Any) -> Optional[T]:
        ...

    def find_all_by(self, model: Type[T], **criteria: Any) -> List[T]:
        ...

    def stage(self, entity: Any) -> None:
        ...

    def flush(self) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class SessionStore:
    """Store backed by a SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session

    def find_one_by(self, model: Type[T], **criteria: Any) -> Optional[T]:
        """Return the first row of ``model`` matching ``criteria`` or None."""
        try:
            # Pending objects are found through the in-run cache, not autoflush
            with self.session.no_autoflush:
                return self.session.query(model).filter_by(**criteria).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to look up {model.__name__}: {str(e)}",
                operation="query",
                table=getattr(model, "__tablename__", None),
                criteria=repr(criteria)
            ) from e

    def find_all_by(self, model: Type[T], **criteria: Any) -> List[T]:
        try:
            with self.session.no_autoflush:
                return self.session.query(model).filter_by(**criteria).all()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to list {model.__name__}: {str(e)}",
                operation="query",
                table=getattr(model, "__tablename__", None)
            ) from e

    def stage(self, entity: Any) -> None:
        self.session.add(entity)

    def flush(self) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to flush staged entities: {str(e)}",
                operation="flush"
            ) from e

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DatabaseError(
                f"Failed to commit staged entities: {str(e)}",
                operation="commit"
            ) from e

    def rollback(self) -> None:
        logger.debug("Rolling back uncommitted changes")
        self.session.rollback()
