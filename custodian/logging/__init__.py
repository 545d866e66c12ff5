"""Logging setup for custodian."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from custodian.constants import DEFAULT_LOG_LEVEL, LOGGER_NAME
from custodian.logging.formatters import DisposalFormatter

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_installed_handler: logging.Handler | None = None


def configure_logging(
    level: str | int = DEFAULT_LOG_LEVEL, stream: TextIO | None = None
) -> logging.Handler:
    """Attach a stream handler to the custodian logger.

    Calling this again replaces the handler installed by the previous call.

    Parameters
    ----------
    level : str | int
        Level name or number for the custodian logger
    stream : TextIO | None
        Output stream, stderr if None

    Returns
    -------
    logging.Handler
        The installed handler
    """
    global _installed_handler

    logger = logging.getLogger(LOGGER_NAME)

    if _installed_handler is not None:
        logger.removeHandler(_installed_handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(DisposalFormatter(DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    _installed_handler = handler

    return handler


__all__ = ["DisposalFormatter", "configure_logging"]
