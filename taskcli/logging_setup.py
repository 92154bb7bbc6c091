from __future__ import annotations

import logging
import sys

LOGGER_NAME = "taskcli"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# handler installed by the last setup_logging call
_handler: logging.Handler | None = None


def setup_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """
    Configure the `taskcli` logger with a single stderr handler.

    Called once per CLI invocation; the handler from a previous call is replaced,
    so it always writes to the current `sys.stderr`.
    """
    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(_FORMAT)
    logger.addHandler(_handler)
    logger.propagate = False
    return logger
