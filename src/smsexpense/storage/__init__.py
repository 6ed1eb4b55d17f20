"""Local persistence for imported transactions and sync cursors."""

from __future__ import annotations

from .kv_store import KeyValueStore
from .sync_state import SyncStateStore
from .transaction_store import (
    InMemoryTransactionStore,
    KeyValueTransactionStore,
    TransactionStore,
)

__all__ = [
    "KeyValueStore",
    "SyncStateStore",
    "TransactionStore",
    "InMemoryTransactionStore",
    "KeyValueTransactionStore",
]
