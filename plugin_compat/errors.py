"""Error types and the delegate-call error policy."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)

_DUPLICATE_SQLSTATE = "23505"
_DUPLICATE_MARKERS = ("already exists", "duplicate key", "unique constraint failed")


class CompatError(Exception):
    """Base class for errors raised by the compatibility layer."""


class InitializationError(CompatError):
    """A component needed by the runtime could not be brought up."""


class DuplicateResourceError(CompatError):
    """The engine refused to create something that already exists."""


class UnknownServiceTypeError(InitializationError):
    """A service implementation does not declare its capability type."""


class PluginVersionError(CompatError):
    """A plugin bundle's API generation could not be determined."""


def is_duplicate_error(exc: BaseException) -> bool:
    """True if ``exc`` means "this record already exists"."""
    if isinstance(exc, DuplicateResourceError):
        return True
    for attr in ("code", "pgcode", "sqlstate"):
        if str(getattr(exc, attr, "")) == _DUPLICATE_SQLSTATE:
            return True
    text = str(exc).lower()
    return any(marker in text for marker in _DUPLICATE_MARKERS)


@contextmanager
def forwarding(operation: str, *, tolerate_duplicates: bool = False) -> Iterator[None]:
    """Run a delegate call on behalf of the legacy ``operation``.

    Failures are logged with the operation name and re-raised unchanged.
    With ``tolerate_duplicates`` a duplicate-record failure is logged and
    swallowed so the caller sees success.
    """
    try:
        yield
    except Exception as exc:
        if tolerate_duplicates and is_duplicate_error(exc):
            logger.debug("%s: record already exists, treating as success", operation)
            return
        logger.exception("%s failed", operation)
        raise
