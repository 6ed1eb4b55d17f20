"""Core models and utilities."""

from .confidence import ConfidenceThresholds, calculate_confidence
from .errors import (
    MalformedMessageError,
    PermissionDeniedError,
    PersistenceError,
    SMSImportError,
    SourceUnavailableError,
)
from .metrics import MetricsCollector, get_metrics
from .models import (
    ExtractedExpense,
    ImportOptions,
    ImportResult,
    MessageDirection,
    RawMessage,
    StoredTransaction,
    TransactionRecord,
    TransactionType,
)

__all__ = [
    "RawMessage",
    "MessageDirection",
    "ExtractedExpense",
    "TransactionType",
    "TransactionRecord",
    "StoredTransaction",
    "ImportOptions",
    "ImportResult",
    "calculate_confidence",
    "ConfidenceThresholds",
    "MetricsCollector",
    "get_metrics",
    "SMSImportError",
    "PermissionDeniedError",
    "SourceUnavailableError",
    "MalformedMessageError",
    "PersistenceError",
]
