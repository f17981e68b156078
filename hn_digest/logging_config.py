"""
Logging configuration for HN Digest.

Every module logs through ``hn_digest.<name>`` loggers. The command-line
level applies to that namespace only; third-party libraries stay at WARNING.
"""

import logging
import sys
import time
from functools import wraps
from typing import Optional


PACKAGE_LOGGER = "hn_digest"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
QUIET_LOGGERS = ("requests", "urllib3", "charset_normalizer")


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """
    Send HN Digest logs to stderr and, optionally, a file.

    Args:
        level: One of LOG_LEVELS; unknown names fall back to WARNING
        log_file: Optional log file path, written in addition to stderr

    Returns:
        The package logger
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # stderr keeps log lines out of piped Markdown/JSON output
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=logging.WARNING, handlers=handlers, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under the package."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def log_performance(logger: logging.Logger, operation: str):
    """Decorator that logs how long the wrapped call took, and how many items a list result holds."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            logger.debug(f"Starting {operation}")

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Failed {operation} after {time.time() - start_time:.2f}s: {e}")
                raise

            duration = time.time() - start_time
            if isinstance(result, list):
                logger.info(f"Completed {operation} in {duration:.2f}s ({len(result)} items)")
            else:
                logger.info(f"Completed {operation} in {duration:.2f}s")
            return result
        return wrapper
    return decorator
