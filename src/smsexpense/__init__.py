"""Extract expense and income transactions from bank SMS messages."""

__version__ = "0.1.0"

from .core.models import (
    ExtractedExpense,
    ImportOptions,
    ImportResult,
    RawMessage,
    TransactionType,
)
from .importer.batch_importer import SMSImporter
from .importer.sms_parser import SMSParser, parse_transaction_sms

__all__ = [
    "ExtractedExpense",
    "ImportOptions",
    "ImportResult",
    "RawMessage",
    "TransactionType",
    "SMSImporter",
    "SMSParser",
    "parse_transaction_sms",
]
