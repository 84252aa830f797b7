import logging
import sys


def setup_logging(level=logging.INFO):
    """
    Sets up the global logging configuration for the application.
    Logs to stdout with a single handler.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("imgproc")
    logger.setLevel(level)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def get_logger(name=None):
    """Helper to get a sub-logger for a specific module."""
    if name:
        return logging.getLogger(f"imgproc.{name}")
    return logging.getLogger("imgproc")
