"""Tests for logging setup."""
import logging
from logging.handlers import RotatingFileHandler

import pytest

from patternkit.config.schemas import LoggingConfig
from patternkit.infrastructure.logging.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test handler configuration."""

    def test_console_destination(self):
        setup_logging(LoggingConfig(level="info", destination="console"))

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_file_destination_creates_directory(self, tmp_path):
        log_file = tmp_path / "logs" / "pk.log"

        setup_logging(LoggingConfig(destination="file", file_path=str(log_file)))

        root = logging.getLogger()
        assert isinstance(root.handlers[0], RotatingFileHandler)
        assert log_file.parent.is_dir()

    def test_both_destinations(self, tmp_path):
        setup_logging(LoggingConfig(destination="both", file_path=str(tmp_path / "pk.log")))
        assert len(logging.getLogger().handlers) == 2

    def test_records_include_caller_info(self, tmp_path):
        # Arrange
        log_file = tmp_path / "pk.log"
        setup_logging(
            LoggingConfig(level="WARNING", destination="file", file_path=str(log_file))
        )

        # Act
        logging.getLogger("patternkit.test").warning("disk almost full")
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Assert
        contents = log_file.read_text(encoding="utf-8")
        assert "disk almost full" in contents
        assert "test_logger.test_records_include_caller_info" in contents


def test_get_logger_returns_bound_logger():
    logger = get_logger("patternkit.example")
    assert hasattr(logger, "info")
    assert hasattr(logger, "bind")
