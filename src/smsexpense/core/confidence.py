"""Confidence scoring for extracted SMS transactions."""

from __future__ import annotations

from decimal import Decimal
from typing import Final, Optional

from .models import DEFAULT_CATEGORY, UNKNOWN_VENDOR, TransactionType

# Additive completeness weights; Decimal keeps the sums exact
CONFIDENCE_WEIGHTS: Final[dict[str, Decimal]] = {
    "amount": Decimal("0.4"),
    "vendor": Decimal("0.3"),
    "category": Decimal("0.2"),
    "type": Decimal("0.1"),
}

MIN_VENDOR_LENGTH: Final[int] = 3


def calculate_confidence(
    amount: Optional[Decimal],
    vendor: Optional[str],
    category: Optional[str],
    transaction_type: Optional[TransactionType],
) -> float:
    """Score how completely a message was extracted, in [0, 1]."""
    score = Decimal("0")

    if amount is not None and amount > 0:
        score += CONFIDENCE_WEIGHTS["amount"]

    if vendor and vendor != UNKNOWN_VENDOR and len(vendor) >= MIN_VENDOR_LENGTH:
        score += CONFIDENCE_WEIGHTS["vendor"]

    if category and category != DEFAULT_CATEGORY:
        score += CONFIDENCE_WEIGHTS["category"]

    if transaction_type is not None:
        score += CONFIDENCE_WEIGHTS["type"]

    return float(min(score, Decimal("1")))


class ConfidenceThresholds:
    """Thresholds for confidence-based import decisions."""

    IMPORT_THRESHOLD = 0.3  # Strictly above this counts as high confidence

    @classmethod
    def is_high_confidence(cls, confidence: float, threshold: float | None = None) -> bool:
        """Whether a candidate is eligible for import."""
        limit = cls.IMPORT_THRESHOLD if threshold is None else threshold
        return confidence > limit
