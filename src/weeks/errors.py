"""Exceptions raised by Weeks."""


class WeeksError(Exception):
    """Base class for Weeks errors."""


class StorageError(WeeksError):
    """Raised when durable storage cannot be read or written."""
