"""Logging configuration."""

import logging
import sys

from legal_rag.config import get_settings

# Third-party loggers that emit one line per HTTP round trip at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "qdrant_client")


def setup_logging() -> None:
    """Configure application logging."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.debug:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        logging.Logger: Configured logger instance.
    """
    return logging.getLogger(name)
