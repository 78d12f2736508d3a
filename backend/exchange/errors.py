"""Exceptions raised by the exchange store.

Filesystem failures are not wrapped: they surface as ``OSError`` straight
from the Directory Store.
"""


class ExchangeError(Exception):
    """Base class for exchange store errors."""


class EmptyMessageError(ExchangeError, ValueError):
    """A text submission had no content."""


class InvalidFileName(ExchangeError, ValueError):
    """A client-supplied file name has no usable basename."""


class SharedFileNotFound(ExchangeError, LookupError):
    """The requested name does not resolve to a shared file."""
