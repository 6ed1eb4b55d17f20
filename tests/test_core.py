"""Tests for core models, confidence scoring and metrics."""

from decimal import Decimal

import pytest

from smsexpense.core.confidence import ConfidenceThresholds, calculate_confidence
from smsexpense.core.errors import MalformedMessageError
from smsexpense.core.metrics import MetricsCollector
from smsexpense.core.models import (
    ExtractedExpense,
    ImportOptions,
    ImportResult,
    MessageDirection,
    RawMessage,
    StoredTransaction,
    TransactionRecord,
    TransactionType,
)


def _expense(**overrides):
    fields = dict(
        amount=Decimal("750.00"),
        type=TransactionType.EXPENSE,
        description="Rs.750.00 debited",
        confidence=1.0,
        raw_message="Rs.750.00 debited for UPI payment to SWIGGY",
        vendor="SWIGGY",
        category="food",
        sender="VM-SBIUPI",
        timestamp=1705300000000,
    )
    fields.update(overrides)
    return ExtractedExpense(**fields)


class TestRawMessage:
    """Test boundary validation of inbox records."""

    def test_from_android_record(self):
        """Android field names are mapped onto the model."""
        message = RawMessage.from_record(
            {"_id": 42, "address": "VM-HDFCBK", "body": "hi", "date": 1000, "type": 1}
        )

        assert message.id == "42"
        assert message.address == "VM-HDFCBK"
        assert message.direction == MessageDirection.RECEIVED

    def test_sent_box_type(self):
        """Box type 2 marks a sent message."""
        message = RawMessage.from_record({"id": "a", "body": "x", "date": 0, "type": 2})
        assert message.direction == MessageDirection.SENT

    def test_missing_address_defaults_to_empty(self):
        message = RawMessage.from_record({"id": "a", "address": None, "body": "x", "date": 5})
        assert message.address == ""

    def test_missing_body_is_malformed(self):
        """A record without a text body is rejected with its id attached."""
        with pytest.raises(MalformedMessageError) as exc_info:
            RawMessage.from_record({"_id": 7, "body": None, "date": 5})

        assert exc_info.value.record_id == "7"
        assert "body" in str(exc_info.value)

    def test_date_beyond_calendar_is_malformed(self):
        with pytest.raises(MalformedMessageError):
            RawMessage.from_record({"id": "a", "body": "x", "date": 10**17})

    def test_negative_date_is_malformed(self):
        with pytest.raises(MalformedMessageError):
            RawMessage.from_record({"id": "a", "body": "x", "date": -1})

    def test_non_mapping_is_malformed(self):
        with pytest.raises(MalformedMessageError):
            RawMessage.from_record(["not", "a", "record"])

    def test_existing_message_passes_through(self):
        message = RawMessage(id="1", body="x", date=0)
        assert RawMessage.from_record(message) is message


class TestExtractedExpense:
    """Test ExtractedExpense invariants."""

    def test_amount_coerced_to_decimal(self):
        expense = _expense(amount="12.50", type="income")

        assert expense.amount == Decimal("12.50")
        assert expense.type == TransactionType.INCOME

    def test_non_positive_amount_rejected(self):
        with pytest.raises(ValueError):
            _expense(amount=Decimal("0"))

    def test_confidence_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            _expense(confidence=1.2)

    def test_confidence_percent(self):
        assert _expense(confidence=0.5).confidence_percent == 50


class TestTransactionRecord:
    """Test the payload built for the transaction store."""

    def test_from_expense_tags_and_audit_block(self):
        record = TransactionRecord.from_expense(_expense(confidence=0.9))

        assert record.tags == ["sms-import", "confidence:90%"]
        assert record.description == "SMS Import: Rs.750.00 debited"
        assert record.sms_data == {
            "raw_message": "Rs.750.00 debited for UPI payment to SWIGGY",
            "sender": "VM-SBIUPI",
            "timestamp": 1705300000000,
        }

    def test_stored_transaction_from_dict(self):
        """A persisted row rebuilds the same record."""
        record = TransactionRecord.from_expense(_expense())
        row = {"id": "t1", "created_at": "2024-01-15T12:00:00", **record.to_dict()}

        stored = StoredTransaction.from_dict(row)

        assert stored.id == "t1"
        assert stored.record.amount == Decimal("750.0")
        assert stored.tags == ["sms-import", "confidence:100%"]


class TestImportOptions:
    """Test option validation."""

    def test_defaults(self):
        options = ImportOptions()

        assert options.max_count == 200
        assert options.auto_save is True
        assert options.filter is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_count": 0},
            {"days_back": -1},
            {"min_date": 10, "max_date": 5},
        ],
    )
    def test_invalid_options(self, kwargs):
        with pytest.raises(ValueError):
            ImportOptions(**kwargs)


class TestImportResult:
    """Test result helpers."""

    def test_failed(self):
        result = ImportResult.failed("SMS permission is required to import expenses")

        assert result.success is False
        assert result.expenses == []
        assert result.total_processed == 0
        assert result.errors == ["SMS permission is required to import expenses"]
        assert result.to_summary() == "Import failed: SMS permission is required to import expenses"

    def test_summary_and_total(self):
        result = ImportResult(
            success=True,
            expenses=[_expense(), _expense(amount=Decimal("250.00"))],
            total_processed=4,
        )

        assert result.total_amount == Decimal("1000.00")
        assert result.to_summary() == "Imported 2 expenses"
        assert ImportResult(success=True).to_summary() == "No expenses found"


class TestConfidence:
    """Test confidence scoring."""

    def test_amount_and_type_only(self):
        """Amount plus type is the floor for any parsed candidate."""
        score = calculate_confidence(Decimal("500"), None, "other", TransactionType.EXPENSE)
        assert score == 0.5

    def test_all_fields(self):
        score = calculate_confidence(Decimal("750"), "SWIGGY", "food", TransactionType.EXPENSE)
        assert score == 1.0

    def test_short_or_unknown_vendor_not_counted(self):
        assert calculate_confidence(Decimal("1"), "AB", "other", TransactionType.INCOME) == 0.5
        assert calculate_confidence(Decimal("1"), "Unknown", "other", TransactionType.INCOME) == 0.5

    def test_nothing_extracted(self):
        assert calculate_confidence(None, None, None, None) == 0.0

    def test_threshold_is_strict(self):
        assert ConfidenceThresholds.is_high_confidence(0.31)
        assert not ConfidenceThresholds.is_high_confidence(0.3)
        assert not ConfidenceThresholds.is_high_confidence(0.5, threshold=0.5)


class TestMetrics:
    """Test the Prometheus collector."""

    def test_counts_outcomes(self):
        metrics = MetricsCollector()
        metrics.record_candidate(_expense())
        metrics.record_rejected()
        metrics.record_save(success=False)

        registry = metrics.registry
        assert registry.get_sample_value("sms_import_messages_total", {"outcome": "candidate"}) == 1
        assert registry.get_sample_value("sms_import_messages_total", {"outcome": "rejected"}) == 1
        assert registry.get_sample_value("sms_import_saves_total", {"status": "failed"}) == 1
        assert registry.get_sample_value("sms_import_confidence_score_count") == 1
        assert b"sms_import_runs_total" in metrics.export()


if __name__ == "__main__":
    pytest.main([__file__])
