import logging
from typing import Optional

DEFAULT_FORMAT = "[%(asctime)s] %(levelname).1s | %(name)s | %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a named logger for the pxevidence commands.

    Args:
        name: Logger name, usually the dotted module or command path
        level: Optional level applied to the logger

    Returns:
        The configured logger. Records propagate to the root handler set up by
        the command line group, a stream handler is only attached when nothing
        else is configured.
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)

    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATEFMT))
        logger.addHandler(handler)

    return logger
