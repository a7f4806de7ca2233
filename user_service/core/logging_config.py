"""Root logger configuration."""

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO") -> logging.Handler:
    """Configure the root logger to write to stdout.

    The stdout handler is created once; later calls only adjust the level.

    Args:
        level: Log level name, e.g. ``INFO`` or ``DEBUG``

    Returns:
        The handler attached to the root logger
    """
    global _handler

    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    if _handler not in root.handlers:
        root.addHandler(_handler)

    return _handler
