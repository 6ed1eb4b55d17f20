"""Pattern and keyword catalogue for bank/payment SMS recognition."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Final, Mapping

# Amount number: digits with comma thousands separators, optional 2-digit cents
_NUMBER: Final[str] = r"(\d[\d,]*(?:\.\d{2})?)"
_RUPEE: Final[str] = r"(?:\brs\.?|\binr|₹)"
# After a number there is no word boundary before the currency; guard its end instead
_RUPEE_SUFFIX: Final[str] = r"(?:rs\b\.?|inr\b|₹)"

# Ordered: the first pattern yielding a positive amount wins
AMOUNT_PATTERNS: Final[tuple[tuple[str, re.Pattern[str]], ...]] = (
    ("rupee_prefix", re.compile(_RUPEE + r"\s*" + _NUMBER, re.IGNORECASE)),
    ("rupee_suffix", re.compile(_NUMBER + r"\s*" + _RUPEE_SUFFIX, re.IGNORECASE)),
    ("dollar_prefix", re.compile(r"\$\s*" + _NUMBER)),
    ("dollar_suffix", re.compile(_NUMBER + r"\s*\$")),
    ("currency_code_suffix", re.compile(_NUMBER + r"\s*(?:usd|eur|gbp)\b", re.IGNORECASE)),
)

# Vendor phrases: a run of words, later words must be capitalized
_CAPITALIZED_PHRASE: Final[str] = r"([A-Z][A-Za-z0-9&\-]+(?: [A-Z][A-Za-z0-9&\-]+)*)"
_ANY_CASE_PHRASE: Final[str] = r"([A-Za-z][A-Za-z0-9&\-]+(?: [A-Z][A-Za-z0-9&\-]+)*)"

# Ordered: the first matching pattern wins
VENDOR_PATTERNS: Final[tuple[tuple[str, re.Pattern[str]], ...]] = (
    ("at_to_from", re.compile(r"\b(?i:at|to|from)\s+" + _CAPITALIZED_PHRASE)),
    ("merchant_label", re.compile(r"\b(?i:merchant)\s*:?\s*" + _ANY_CASE_PHRASE)),
    ("paid_to", re.compile(r"\b(?i:paid|payment)\s+(?i:to)\s+" + _ANY_CASE_PHRASE)),
    ("sent_to", re.compile(r"\b(?i:sent|transferred)\s+(?i:to)\s+" + _ANY_CASE_PHRASE)),
)

TRANSACTION_KEYWORDS: Final[tuple[str, ...]] = (
    "debited", "credited", "paid", "received", "transaction", "purchase",
    "spent", "withdrawn", "deposit", "transfer", "upi", "card", "atm",
    "payment", "bill", "recharge", "refund", "cashback", "charged",
)

INCOME_KEYWORDS: Final[tuple[str, ...]] = (
    "credited", "received", "deposit", "refund", "cashback", "salary",
)

# One-time passwords carry amounts and keywords but never describe money movement
RE_OTP: Final[re.Pattern[str]] = re.compile(
    r"\botp\b|one[\s-]*time[\s-]*password|verification code", re.IGNORECASE
)

BANK_SENDER_CODES: Final[tuple[str, ...]] = (
    "SBI", "SBICARD", "HDFC", "HDFCBANK", "ICICI", "KOTAK", "AXIS", "PNB",
    "BOI", "CANARA", "UPI", "PAYTM", "PHONEPE", "GOOGLEPAY", "GPAY", "BHIM",
    "AMAZONPAY", "CRED", "YESBANK", "RBL", "IDFC", "INDUSIND", "FEDERAL",
    "RUPAY", "MASTERCARD", "VISA", "AMEX", "BANK", "BANKING", "BANKSMS",
    "BANKALERT", "WALLET", "PAY",
)

BANK_BODY_KEYWORDS: Final[tuple[str, ...]] = (
    "BANK", "BANKING", "ACCOUNT", "BALANCE", "TRANSACTION", "DEBIT", "CREDIT",
    "UPI", "CARD", "ATM", "PAYMENT", "TRANSFER", "DEPOSIT", "WITHDRAWAL",
    "RS.", "INR", "₹",
)

# Insertion order is the lookup order: the first category with a hit wins
CATEGORY_KEYWORDS: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType({
    "food": (
        "restaurant", "hotel", "cafe", "pizza", "dominos", "swiggy", "zomato",
        "uber eats", "food",
    ),
    "transportation": (
        "uber", "ola", "taxi", "metro", "bus", "petrol", "fuel", "parking",
    ),
    "shopping": (
        "amazon", "flipkart", "mall", "store", "shop", "market", "clothing",
        "fashion",
    ),
    "entertainment": ("movie", "cinema", "netflix", "spotify", "game", "youtube"),
    "utilities": (
        "electricity", "water", "gas", "internet", "mobile", "recharge", "bill",
    ),
    "healthcare": ("hospital", "medical", "pharmacy", "doctor", "clinic", "medicine"),
    "education": ("school", "college", "university", "course", "books"),
    "groceries": ("grocery", "supermarket", "vegetables", "fruits", "milk", "bread"),
})

CATEGORIES: Final[tuple[str, ...]] = (*CATEGORY_KEYWORDS.keys(), "other")


def contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    """Case-insensitive substring test against a keyword list."""
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in keywords)
