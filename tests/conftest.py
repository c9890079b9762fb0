"""
Pytest Configuration

Global test configuration, fixtures, and utilities for the quiz-seed
test suite.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Any, Dict, List
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add src to Python path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quizseed.core import config as config_module
from quizseed.core.config import AppConfig, DatabaseConfig, LoggingConfig, SeedingConfig
from quizseed.core.database import Base, close_connections
from quizseed.seeding import (
    Batch,
    CategoryRecord,
    SubcategoryRecord,
    QuestionRecord,
    UserRecord,
    UpsertOrchestrator,
)
from quizseed.storage import models  # noqa: F401  (registers tables)
from quizseed.storage.store import SessionStore


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_config(temp_dir):
    """Provide test configuration backed by a temporary SQLite file."""
    return AppConfig(
        name="Test Quiz Seed",
        version="test",
        environment="test",
        debug=True,
        database=DatabaseConfig(
            url=f"sqlite:///{temp_dir}/test.db",
            echo=False
        ),
        logging=LoggingConfig(
            level="DEBUG",
            file=str(temp_dir / "test.log")
        ),
        seeding=SeedingConfig(),
    )


@pytest.fixture
def test_engine(test_config):
    """Engine with every table created."""
    engine = create_engine(test_config.database.url, echo=False)
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def test_db_session(test_engine):
    """Provide a test database session."""
    SessionLocal = sessionmaker(bind=test_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(test_db_session):
    """SessionStore over the test session."""
    return SessionStore(test_db_session)


@pytest.fixture
def orchestrator(store):
    """Upsert orchestrator with default policies."""
    return UpsertOrchestrator(store)


@pytest.fixture
def make_question():
    """Factory for question records with sensible defaults."""
    def create(**overrides) -> QuestionRecord:
        data: Dict[str, Any] = {
            "category": "PHP",
            "subcategory": "OOP",
            "text": "PHP supports multiple inheritance through classes.",
            "type": "true_false",
            "difficulty": 1,
            "explanation": "A class can only extend one parent class.",
            "answers": [
                {"text": "True", "correct": False},
                {"text": "False", "correct": True},
            ],
        }
        data.update(overrides)
        return QuestionRecord.from_dict(data)
    return create


@pytest.fixture
def reference_batch():
    """Batch creating the PHP and Symfony categories with a few subcategories."""
    def load(context):
        context.upsert_category(CategoryRecord(name="PHP", description="PHP language", icon="terminal", color="#777BB4"))
        context.upsert_category(CategoryRecord(name="Symfony", description="Symfony framework"))
        for category, name in [("PHP", "OOP"), ("PHP", "Functions"), ("Symfony", "Console"), ("Symfony", "OOP")]:
            context.upsert_subcategory(SubcategoryRecord(category=category, name=name))
        context.upsert_user(UserRecord(email="user@quiz.local", username="Quiz User", password_hash="hash"))

    return Batch(name="reference", groups=["base"], load=load)


@pytest.fixture
def question_batch(make_question):
    """Factory for a batch of question records depending on the reference batch."""
    def create(name: str = "questions", records: List[QuestionRecord] = None,
               depends_on: List[str] = None, groups: List[str] = None) -> Batch:
        return Batch(
            name=name,
            depends_on=["reference"] if depends_on is None else depends_on,
            groups=groups or ["questions"],
            records=records if records is not None else [make_question()],
        )
    return create


# Pytest markers for test categorization
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external dependencies"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests against a temporary database"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests that take more than a few seconds"
    )


# Test environment setup

@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Isolate tests from the caller's environment and global state."""
    for name in ("DATABASE_URL", "QUIZSEED_VALIDATION_MODE", "ENVIRONMENT", "DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    config_module._config = None
    close_connections()
    yield
    config_module._config = None
    close_connections()
