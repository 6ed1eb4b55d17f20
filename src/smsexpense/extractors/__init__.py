"""Field extractors for transaction SMS text."""

from __future__ import annotations

from .amount_extractor import extract_amount, normalize_amount
from .vendor_extractor import extract_vendor

__all__ = [
    "extract_amount",
    "normalize_amount",
    "extract_vendor",
]
