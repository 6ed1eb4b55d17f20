"""Message classifiers."""

from __future__ import annotations

from .category_mapper import categorize_transaction
from .transaction_classifier import (
    determine_transaction_type,
    is_bank_sms,
    is_transaction_sms,
)

__all__ = [
    "categorize_transaction",
    "determine_transaction_type",
    "is_bank_sms",
    "is_transaction_sms",
]
