"""Merchant/vendor extraction from SMS text."""

from __future__ import annotations

from typing import Optional

from ..core.patterns import VENDOR_PATTERNS


def extract_vendor(message: str) -> Optional[str]:
    """Return the first vendor phrase matched by the ordered context patterns."""
    if not message:
        return None

    for _name, pattern in VENDOR_PATTERNS:
        match = pattern.search(message)
        if match and match.group(1):
            return match.group(1).strip()

    return None
