"""
Centralized logging configuration.

Console output at the configured level, plus a daily file under LOG_DIR
that always captures DEBUG (full provider fallback traces end up there).

Provider SDKs (groq, openai) and the HTTP stacks underneath them are
chatty at DEBUG, so they are capped at WARNING.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "openai", "groq")

_logging_configured = False


def _default_log_dir() -> Path:
    return Path(__file__).resolve().parents[2] / "logs"


def setup_logging(
    log_level: str = "DEBUG",
    log_dir: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Configure the root logger once; later calls return it unchanged.

    Args:
        log_level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the daily log file, defaults to ./logs

    Example:
        >>> from channelsite.core.logging_config import setup_logging
        >>> setup_logging("INFO").info("Builder API starting")
    """
    global _logging_configured

    root_logger = logging.getLogger()
    if _logging_configured:
        return root_logger

    log_dir = Path(log_dir) if log_dir else _default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"channelsite_{datetime.now():%Y%m%d}.log"

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)

    root_logger.setLevel(logging.DEBUG)
    for handler in (console_handler, file_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True
    root_logger.debug(f"Logging configured: level={log_level}, file={log_file}")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass __name__ so names follow the package tree."""
    return logging.getLogger(name)


class LoggerMixin:
    """
    Gives a class a self.logger named after the class.

    Example:
        >>> class GitHubSync(LoggerMixin):
        ...     def push(self):
        ...         self.logger.info("Pushing files...")
    """

    @property
    def logger(self) -> logging.Logger:
        return get_logger(self.__class__.__name__)
