"""Transaction persistence used by the batch importer."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Final, Optional

from ..core.errors import PersistenceError
from ..core.models import StoredTransaction, TransactionRecord
from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY: Final[str] = "transactions"


class TransactionStore(ABC):
    """Abstract transaction store."""

    @abstractmethod
    async def create(self, record: TransactionRecord) -> StoredTransaction:
        """Persist a record and return it with its assigned id."""
        pass

    @abstractmethod
    async def list_transactions(self) -> list[StoredTransaction]:
        pass

    @staticmethod
    def _new_transaction(record: TransactionRecord) -> StoredTransaction:
        return StoredTransaction(
            id=str(uuid.uuid4()),
            created_at=datetime.now(),
            record=record,
        )


class InMemoryTransactionStore(TransactionStore):
    """Keeps transactions in a list."""

    def __init__(self):
        self.transactions: list[StoredTransaction] = []

    async def create(self, record: TransactionRecord) -> StoredTransaction:
        transaction = self._new_transaction(record)
        self.transactions.append(transaction)
        return transaction

    async def list_transactions(self) -> list[StoredTransaction]:
        return list(self.transactions)


class KeyValueTransactionStore(TransactionStore):
    """Stores transactions as one JSON list under a single key."""

    def __init__(self, kv: Optional[KeyValueStore] = None):
        self.kv = kv or KeyValueStore()

    async def create(self, record: TransactionRecord) -> StoredTransaction:
        if record.amount <= 0:
            raise PersistenceError(f"Refusing to save non-positive amount {record.amount}")

        transaction = self._new_transaction(record)
        existing = await self.kv.read_json(TRANSACTIONS_KEY) or []
        # newest first, as the app lists them
        await self.kv.write_json(TRANSACTIONS_KEY, [transaction.to_dict(), *existing])
        logger.debug(f"Saved transaction {transaction.id} ({record.vendor} {record.amount})")
        return transaction

    async def list_transactions(self) -> list[StoredTransaction]:
        rows = await self.kv.read_json(TRANSACTIONS_KEY) or []
        return [StoredTransaction.from_dict(row) for row in rows]
