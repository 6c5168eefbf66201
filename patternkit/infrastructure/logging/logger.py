import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

import structlog

from patternkit.config.schemas.logging_schema import LogDestination, LoggingConfig


def setup_logging(config: Optional[LoggingConfig] = None) -> structlog.stdlib.BoundLogger:
    """
    Set up structured logging for the application using structlog.

    Args:
        config: Logging configuration. If None, defaults are used.
    Returns:
        Configured structlog logger instance.
    """
    if config is None:
        config = LoggingConfig()

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    # Create custom formatter that includes caller information
    class DetailedFormatter(logging.Formatter):
        def format(self, record):
            # Add method name and line number to the record
            record.caller_info = f"{record.module}.{record.funcName}:{record.lineno}"
            return super().format(record)

    # Configure handlers
    handlers = []

    if config.destination in (LogDestination.FILE, LogDestination.BOTH):
        log_path = os.path.expandvars(config.file_path)
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(DetailedFormatter(config.format))
        handlers.append(file_handler)

    if config.destination in (LogDestination.CONSOLE, LogDestination.BOTH):
        # Command output goes to stdout, so logs stay on stderr
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(DetailedFormatter(config.format))
        handlers.append(console_handler)

    # Remove any existing handlers and add new ones
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    _configure_structlog(config.renderer)

    logger = structlog.get_logger("patternkit")
    logger.debug(
        "Logging configured",
        log_level=config.level,
        log_destination=config.destination.value,
    )
    return logger


def _configure_structlog(renderer: str) -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(renderer),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _renderer(name: str):
    if name == "json":
        return structlog.processors.JSONRenderer()
    if name == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.KeyValueRenderer(key_order=["event"])


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger.

    Only the structlog processor chain is configured on first use; stdlib
    handlers are left alone until setup_logging is called.
    """
    if not structlog.is_configured():
        _configure_structlog(LoggingConfig().renderer)
    return structlog.get_logger(name)
