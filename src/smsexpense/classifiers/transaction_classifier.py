"""Transaction detection and income/expense classification."""

from __future__ import annotations

import re

from ..core.models import TransactionType
from ..core.patterns import (
    BANK_BODY_KEYWORDS,
    BANK_SENDER_CODES,
    INCOME_KEYWORDS,
    RE_OTP,
    TRANSACTION_KEYWORDS,
    contains_any,
)


def is_transaction_sms(message: str) -> bool:
    """Whether the body reads like a money movement notification."""
    if not message:
        return False
    if RE_OTP.search(message):
        return False
    return contains_any(message, TRANSACTION_KEYWORDS)


def determine_transaction_type(message: str) -> TransactionType:
    """Income if any income keyword appears, expense otherwise."""
    if contains_any(message, INCOME_KEYWORDS):
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def is_bank_sms(sender: str, message: str) -> bool:
    """
    Auxiliary signal: known bank/payment sender code or bank vocabulary.

    Sender IDs often come prefixed with an operator route (``VM-HDFCBK``), so
    codes are matched as substrings of the alphanumeric sender.
    """
    upper_sender = (sender or "").upper()
    compact_sender = re.sub(r"[^A-Z0-9]", "", upper_sender)
    if any(code in upper_sender or code in compact_sender for code in BANK_SENDER_CODES):
        return True

    upper_message = (message or "").upper()
    return any(keyword in upper_message for keyword in BANK_BODY_KEYWORDS)
