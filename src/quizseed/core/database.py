"""
Database Connection and Session Management

SQLAlchemy database connection, session management, and schema creation
for the quiz database with SQLite support.
"""

import logging
from pathlib import Path
from typing import Optional, Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, Engine, text, inspect
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .config import get_config
from .exceptions import DatabaseError, QuizSeedException

logger = logging.getLogger(__name__)

# SQLAlchemy declarative base for ORM models
Base = declarative_base()

# Global engine and session factory
_engine: Optional[Engine] = None
SessionFactory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Get or create the SQLAlchemy engine."""
    global _engine

    if _engine is None:
        config = get_config()
        logger.info(f"Creating database engine with URL: {config.database.url}")

        try:
            if config.database.url.startswith('sqlite:'):
                logger.info("Using SQLite engine configuration")
                _engine = _create_sqlite_engine(config)
            else:
                logger.info("Using generic engine configuration")
                _engine = _create_generic_engine(config)
        except Exception as e:
            raise DatabaseError(
                f"Failed to create database engine: {str(e)}",
                operation="create_engine",
                url=config.database.url
            ) from e

    return _engine


def _create_sqlite_engine(config) -> Engine:
    """Create a SQLAlchemy engine for SQLite databases."""
    database = make_url(config.database.url).database
    if database and database != ':memory:':
        # SQLite creates the file but not its directory
        Path(database).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(
        config.database.url,
        echo=config.database.echo,
        poolclass=StaticPool,
        connect_args={
            'check_same_thread': False,
            'timeout': 20,
        }
    )


def _create_generic_engine(config) -> Engine:
    """Create a SQLAlchemy engine for generic databases (PostgreSQL, etc.)."""
    return create_engine(
        config.database.url,
        echo=config.database.echo,
        pool_size=config.database.pool_size,
    )


def get_session_factory() -> sessionmaker:
    """Get or create the SQLAlchemy session factory."""
    global SessionFactory

    if SessionFactory is None:
        SessionFactory = sessionmaker(bind=get_engine())

    return SessionFactory


def _register_models() -> None:
    # Importing the models package registers every table with Base.metadata
    from quizseed.storage import models  # noqa: F401


def create_tables() -> None:
    """Create all database tables."""
    try:
        _register_models()
        engine = get_engine()

        Base.metadata.create_all(engine)

        table_names = list(Base.metadata.tables.keys())
        tables = inspect(engine).get_table_names()
        missing_tables = [t for t in table_names if t not in tables]

        if missing_tables:
            raise DatabaseError(f"Failed to create required tables: {missing_tables}")

        logger.info(f"All required tables created successfully: {table_names}")

    except DatabaseError:
        raise
    except Exception as e:
        raise DatabaseError(
            f"Failed to create database tables: {str(e)}",
            operation="create_tables"
        ) from e


def drop_tables() -> None:
    """Drop all database tables."""
    try:
        _register_models()
        Base.metadata.drop_all(get_engine())
    except Exception as e:
        raise DatabaseError(
            f"Failed to drop database tables: {str(e)}",
            operation="drop_tables"
        ) from e


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup."""
    session = get_session_factory()()

    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        if isinstance(e, QuizSeedException):
            raise
        raise DatabaseError(
            f"Database session error: {str(e)}",
            operation="session_transaction"
        ) from e
    finally:
        session.close()


def init_database() -> None:
    """Initialize the database schema."""
    create_tables()


def reset_database() -> None:
    """Reset the database by dropping and recreating all tables."""
    drop_tables()
    create_tables()


def check_database_connection() -> bool:
    """Check if database connection is working."""
    try:
        with get_engine().connect() as conn:
            row = conn.execute(text("SELECT 1")).fetchone()
            return row is not None and row[0] == 1
    except Exception as e:
        raise DatabaseError(
            f"Database connection check failed: {str(e)}",
            operation="connection_check"
        ) from e


def close_connections() -> None:
    """Close all database connections (useful for testing and cleanup)."""
    global _engine, SessionFactory

    if _engine:
        _engine.dispose()
        _engine = None

    SessionFactory = None
