"""Keyword-based spending category lookup."""

from __future__ import annotations

from typing import Optional

from ..core.models import DEFAULT_CATEGORY
from ..core.patterns import CATEGORY_KEYWORDS


def categorize_transaction(vendor: Optional[str], message: str) -> str:
    """First category (table order) with a keyword in the vendor or body."""
    lower_vendor = (vendor or "").lower()
    lower_message = (message or "").lower()

    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(k in lower_message or k in lower_vendor for k in keywords):
            return category

    return DEFAULT_CATEGORY
