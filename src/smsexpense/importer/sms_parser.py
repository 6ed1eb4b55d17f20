"""Single-message parse: classify, extract, categorize, score."""

from __future__ import annotations

import logging
from typing import Optional

from ..classifiers.category_mapper import categorize_transaction
from ..classifiers.transaction_classifier import (
    determine_transaction_type,
    is_transaction_sms,
)
from ..core.confidence import calculate_confidence
from ..core.models import (
    DESCRIPTION_LIMIT,
    UNKNOWN_VENDOR,
    ExtractedExpense,
    RawMessage,
)
from ..extractors.amount_extractor import extract_amount
from ..extractors.vendor_extractor import extract_vendor

logger = logging.getLogger(__name__)


def truncate_description(body: str, limit: int = DESCRIPTION_LIMIT) -> str:
    """First ``limit`` characters, with an ellipsis marker when cut."""
    body = body or ""
    return body[:limit] + ("..." if len(body) > limit else "")


class SMSParser:
    """Turns one raw message into zero or one expense candidate."""

    def parse(self, message: RawMessage) -> Optional[ExtractedExpense]:
        """
        Parse a message into an ExtractedExpense.

        Returns None for messages that are not transactions or carry no
        amount; those are expected outcomes, not errors.
        """
        body = message.body or ""

        if not is_transaction_sms(body):
            return None

        amount = extract_amount(body)
        if amount is None:
            logger.debug(f"Message {message.id}: transaction keywords but no amount")
            return None

        vendor = extract_vendor(body)
        transaction_type = determine_transaction_type(body)
        category = categorize_transaction(vendor, body)

        return ExtractedExpense(
            amount=amount,
            vendor=vendor or UNKNOWN_VENDOR,
            category=category,
            type=transaction_type,
            description=truncate_description(body),
            confidence=calculate_confidence(amount, vendor, category, transaction_type),
            raw_message=body,
            sender=message.address or UNKNOWN_VENDOR,
            timestamp=message.date,
        )


def parse_transaction_sms(message: RawMessage) -> Optional[ExtractedExpense]:
    """Module-level convenience around SMSParser.parse."""
    return SMSParser().parse(message)
