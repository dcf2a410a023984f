"""Logging setup for the Lacework CLI."""
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the ``lacework_cli`` logger.

    Logs go to stderr so they never mix with table or JSON output on stdout.

    Args:
        debug: Log at DEBUG level instead of WARNING

    Returns:
        logging.Logger: The configured package logger
    """
    logger = logging.getLogger("lacework_cli")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
