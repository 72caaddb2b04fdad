"""Logging setup: rich console output plus optional JSON log files."""

from logging import Logger, basicConfig
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter
from rich.logging import RichHandler

from blogcms.configs.settings import settings

LOG_FILE_NAME = "blogcms.log"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3


def file_logger(logger: Logger) -> Logger:
    """
    Attach a rotating JSON file handler to the logger.

    Does nothing when ``LOG_TO_FILE`` is disabled or the logger already
    writes to a file.

    Args:
        logger: Logger to extend

    Returns:
        Logger: The same logger instance
    """
    if not settings.LOG_TO_FILE:
        return logger
    if any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers):
        return logger

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"),
    )
    logger.addHandler(handler)
    return logger


def configure_logging() -> None:
    """Route root logging through rich; called once at application start."""
    basicConfig(
        level="DEBUG" if settings.DEBUG else "INFO",
        format="%(message)s",
        datefmt="%X",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
