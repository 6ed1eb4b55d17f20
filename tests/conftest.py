"""Pytest configuration and fixtures."""

from datetime import datetime
from decimal import Decimal

import pytest

from smsexpense.core.errors import PersistenceError
from smsexpense.core.metrics import MetricsCollector
from smsexpense.sources.memory_source import InMemoryMessageSource
from smsexpense.storage.kv_store import KeyValueStore
from smsexpense.storage.sync_state import SyncStateStore, to_millis
from smsexpense.storage.transaction_store import InMemoryTransactionStore

NOW = datetime(2024, 1, 15, 12, 0, 0)
NOW_MS = to_millis(NOW)
MINUTE_MS = 60 * 1000

DEBIT_SBI = (
    "Dear Customer, Rs.500.00 debited from A/c **1234 on 15-Jan-24. "
    "Avl Bal Rs.10,000.00 - SBI"
)
CREDIT_ICICI = (
    "Rs.2,500.00 credited to your ICICI Bank A/c **9876 on 15-Jan-24 by NEFT. "
    "Avl Bal Rs.12,500.00"
)
UPI_SWIGGY = (
    "Rs.750.00 debited from A/c **1234 for UPI payment to SWIGGY on 15-Jan-24. "
    "UPI Ref 401512345678"
)
CARD_AMAZON = "Rs.999.00 spent on your card at Amazon. Avl limit Rs.45,001.00"
CHATTER = "Hey, are we still on for lunch tomorrow?"
OTP = "Your OTP for the transaction of Rs.1,200.00 is 482910. Do not share it."


class FlakyStore(InMemoryTransactionStore):
    """In-memory store that refuses to save the given amounts."""

    def __init__(self, fail_amounts=()):
        super().__init__()
        self.fail_amounts = {Decimal(str(a)) for a in fail_amounts}

    async def create(self, record):
        if record.amount in self.fail_amounts:
            raise PersistenceError("disk full")
        return await super().create(record)


@pytest.fixture
def make_record():
    """Factory for raw inbox records as the Android bridge returns them."""

    def _make(record_id, body, minutes_ago=0, address="VM-HDFCBK", box_type=1):
        return {
            "_id": record_id,
            "address": address,
            "body": body,
            "date": NOW_MS - minutes_ago * MINUTE_MS,
            "type": box_type,
        }

    return _make


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def metrics():
    """Collector with its own registry so tests do not share counts."""
    return MetricsCollector()


@pytest.fixture
def store():
    return InMemoryTransactionStore()


@pytest.fixture
def sync_state():
    return SyncStateStore(KeyValueStore())


@pytest.fixture
def inbox(make_record):
    """Source holding the three bank transactions plus chatter."""
    return InMemoryMessageSource(
        [
            make_record(1, DEBIT_SBI, minutes_ago=30, address="VM-SBIINB"),
            make_record(2, CREDIT_ICICI, minutes_ago=20, address="AD-ICICIB"),
            make_record(3, CHATTER, minutes_ago=15, address="+919812345678"),
            make_record(4, UPI_SWIGGY, minutes_ago=10, address="VM-SBIUPI"),
        ]
    )
