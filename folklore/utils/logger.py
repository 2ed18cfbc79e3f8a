"""Logger factory for the folklore browser.

Both packages log through here:
    from folklore.utils.logger import get_logger
    logger = get_logger(__name__)

The root handler is configured on first use, at FOLKLORE_LOG_LEVEL, unless
the entry point (``browse.py --log-level``) or the test runner already did.
"""
import logging
import os

DEFAULT_LEVEL = os.getenv("FOLKLORE_LOG_LEVEL", "INFO").upper()


def setup_logging(level: str = DEFAULT_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
