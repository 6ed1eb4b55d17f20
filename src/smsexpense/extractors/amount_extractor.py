"""Monetary amount extraction from SMS text."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.patterns import AMOUNT_PATTERNS

logger = logging.getLogger(__name__)


def normalize_amount(amount_str: str) -> Optional[Decimal]:
    """Strip thousands separators and parse; None unless the value is positive."""
    cleaned = (amount_str or "").replace(",", "").strip()
    if not cleaned:
        return None
    try:
        amount = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def extract_amount(message: str) -> Optional[Decimal]:
    """Return the first amount matched by the ordered currency patterns."""
    if not message:
        return None

    for name, pattern in AMOUNT_PATTERNS:
        match = pattern.search(message)
        if not match:
            continue
        amount = normalize_amount(match.group(1))
        if amount is not None:
            return amount
        logger.debug(f"Pattern {name} matched unparsable amount {match.group(1)!r}")

    return None
