"""Exceptions raised by the SMS import pipeline."""

from __future__ import annotations


class SMSImportError(Exception):
    """Base exception for SMS import errors."""
    pass


class PermissionDeniedError(SMSImportError):
    """Raised when the user has not granted access to the message inbox."""
    pass


class SourceUnavailableError(SMSImportError):
    """Raised when the message source cannot be reached on this platform."""
    pass


class MalformedMessageError(SMSImportError):
    """Raised when a raw record from the message source fails validation."""

    def __init__(self, message: str, record_id: str | None = None):
        super().__init__(message)
        self.record_id = record_id


class PersistenceError(SMSImportError):
    """Raised when the transaction store cannot save a record."""
    pass
