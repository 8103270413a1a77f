"""Load error type and the bounded set of errors a load may recover from."""

from __future__ import annotations

import logging


class LoadFailure(Exception):
    """A session could not be fetched, decoded or played."""


# Anything outside this tuple is a bug and propagates out of ReplayController.load.
RECOVERABLE_LOAD_ERRORS: tuple[type[BaseException], ...] = (
    LoadFailure,
    OSError,
    ValueError,
    KeyError,
    TypeError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.DEBUG,
    **fields: object,
) -> None:
    """Log the exception being handled, with traceback and optional extra fields."""
    logger.log(level, message, exc_info=True, extra=fields or None)
