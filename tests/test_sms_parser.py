"""Tests for single-message parsing."""

from decimal import Decimal

from smsexpense.core.models import RawMessage, TransactionType
from smsexpense.importer.sms_parser import (
    SMSParser,
    parse_transaction_sms,
    truncate_description,
)

from .conftest import CARD_AMAZON, CHATTER, CREDIT_ICICI, DEBIT_SBI, NOW_MS, OTP, UPI_SWIGGY


def _message(body, address="VM-SBIINB"):
    return RawMessage(id="1", address=address, body=body, date=NOW_MS)


class TestSMSParser:
    """End-to-end parsing of bank messages."""

    def test_debit_without_vendor(self):
        """Scenario A: plain debit alert."""
        expense = SMSParser().parse(_message(DEBIT_SBI))

        assert expense.amount == Decimal("500.00")
        assert expense.type == TransactionType.EXPENSE
        assert expense.vendor == "Unknown"
        assert expense.category == "other"
        assert expense.confidence == 0.5

    def test_credit_is_income(self):
        """Scenario B: credit alert."""
        expense = SMSParser().parse(_message(CREDIT_ICICI))

        assert expense.amount == Decimal("2500.00")
        assert expense.type == TransactionType.INCOME

    def test_upi_payment_with_vendor(self):
        """Scenario C: vendor and category both resolved."""
        expense = SMSParser().parse(_message(UPI_SWIGGY))

        assert expense.amount == Decimal("750.00")
        assert expense.type == TransactionType.EXPENSE
        assert expense.vendor == "SWIGGY"
        assert expense.category == "food"
        assert expense.confidence == 1.0

    def test_card_purchase(self):
        expense = parse_transaction_sms(_message(CARD_AMAZON))

        assert expense.vendor == "Amazon"
        assert expense.category == "shopping"

    def test_sender_and_timestamp_carried(self):
        expense = SMSParser().parse(_message(UPI_SWIGGY, address="VM-SBIUPI"))

        assert expense.sender == "VM-SBIUPI"
        assert expense.timestamp == NOW_MS
        assert expense.raw_message == UPI_SWIGGY

    def test_missing_sender(self):
        assert SMSParser().parse(_message(UPI_SWIGGY, address="")).sender == "Unknown"

    def test_non_transactions_yield_nothing(self):
        assert SMSParser().parse(_message(CHATTER)) is None
        assert SMSParser().parse(_message(OTP)) is None

    def test_transaction_without_amount(self):
        assert SMSParser().parse(_message("Your card ending 1234 was used")) is None


class TestTruncateDescription:
    """Test description shortening."""

    def test_short_body_unchanged(self):
        assert truncate_description("Rs.50 paid") == "Rs.50 paid"

    def test_long_body_cut_with_marker(self):
        body = "x" * 150
        assert truncate_description(body) == "x" * 100 + "..."

    def test_exact_limit_not_marked(self):
        assert truncate_description("y" * 100) == "y" * 100
