"""
Unit tests for logging utilities.
"""

import json
import logging
import logging.handlers
from pathlib import Path

import pytest
from unittest.mock import Mock

from quizseed.utils.logging import (
    JSONFormatter,
    PerformanceTimer,
    get_batch_logger,
    setup_logging,
    _parse_size,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Test cases for JSONFormatter."""

    def test_includes_batch_context(self):
        """Test that batch extras end up in the JSON document."""
        record = logging.LogRecord("quizseed.batch", logging.INFO, __file__, 10, "[base] seeded", None, None)
        record.batch = "base"
        record.entity_kind = "question"

        entry = json.loads(JSONFormatter().format(record))

        assert entry['level'] == "INFO"
        assert entry['message'] == "[base] seeded"
        assert entry['batch'] == "base"
        assert entry['entity_kind'] == "question"

    def test_plain_record(self):
        """Test a record without seeding context."""
        record = logging.LogRecord("quizseed", logging.WARNING, __file__, 1, "plain", None, None)
        entry = json.loads(JSONFormatter().format(record))
        assert 'batch' not in entry


class TestBatchLogger:
    """Test cases for the batch logger adapter."""

    def test_prefixes_batch_name(self, caplog):
        """Test that messages carry the batch name."""
        logger = get_batch_logger("certification_exam", entity_kind="question")

        with caplog.at_level(logging.INFO, logger="quizseed.batch"):
            logger.info("11 questions")

        assert caplog.records[-1].getMessage() == "[certification_exam] 11 questions"
        assert caplog.records[-1].batch == "certification_exam"
        assert caplog.records[-1].entity_kind == "question"


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_creates_log_file(self, test_config, restore_root_logger):
        """Test console and rotating file handlers."""
        setup_logging(test_config)

        handlers = restore_root_logger.handlers
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in handlers)
        logging.getLogger("quizseed.test").debug("written to file")
        for handler in handlers:
            handler.flush()
        assert "written to file" in Path(test_config.logging.file).read_text(encoding="utf-8")

    def test_json_output(self, test_config, restore_root_logger):
        """Test that enable_json installs the JSON formatter."""
        setup_logging(test_config, enable_json=True)
        assert all(isinstance(h.formatter, JSONFormatter) for h in restore_root_logger.handlers)

    def test_sqlalchemy_quieted(self, test_config, restore_root_logger):
        """Test that SQLAlchemy engine logging is raised to WARNING."""
        setup_logging(test_config)
        assert logging.getLogger('sqlalchemy.engine').level == logging.WARNING


class TestHelpers:
    """Test cases for size parsing and timing."""

    @pytest.mark.parametrize("value,expected", [
        ("10MB", 10 * 1024 ** 2),
        ("512KB", 512 * 1024),
        ("1GB", 1024 ** 3),
        ("100B", 100),
        ("huge", 10 * 1024 ** 2),
    ])
    def test_parse_size(self, value, expected):
        """Test size strings."""
        assert _parse_size(value) == expected

    def test_performance_timer(self):
        """Test that the timer records a duration and logs completion."""
        logger = Mock()
        with PerformanceTimer("batch 'base'", logger) as timer:
            pass

        assert timer.duration >= 0
        logger.info.assert_called_once()
        assert "Completed batch 'base'" in logger.info.call_args[0][0]

    def test_performance_timer_logs_failure(self):
        """Test that a failing block is logged as an error and not swallowed."""
        logger = Mock()
        with pytest.raises(ValueError):
            with PerformanceTimer("batch 'broken'", logger):
                raise ValueError("bad")

        assert "Failed batch 'broken'" in logger.error.call_args[0][0]
