"""
Logging configuration for the application.

``setup_logging`` configures the root logger with a console handler.
Calling it again is a no-op, so ``create_app`` can run repeatedly in tests.
"""
import logging


def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logger

    Args:
        level: Logging level name (e.g. "debug", "INFO"), case insensitive.
            Unknown names fall back to INFO.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
