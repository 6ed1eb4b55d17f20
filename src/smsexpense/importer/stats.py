"""Summary statistics over previously imported transactions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.models import SMS_IMPORT_TAG
from ..storage.sync_state import SyncStateStore
from ..storage.transaction_store import TransactionStore


@dataclass
class ImportStats:
    total_imported: int = 0
    last_import_date: Optional[datetime] = None
    average_confidence: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_imported": self.total_imported,
            "last_import_date": self.last_import_date.isoformat() if self.last_import_date else None,
            "average_confidence": self.average_confidence,
        }


def _confidence_from_tags(tags: list[str]) -> Optional[float]:
    for tag in tags:
        if tag.startswith("confidence:") and tag.endswith("%"):
            try:
                return int(tag[len("confidence:"):-1]) / 100
            except ValueError:
                return None
    return None


async def get_import_stats(
    store: TransactionStore, sync_state: Optional[SyncStateStore] = None
) -> ImportStats:
    """Count SMS-imported transactions and average their tagged confidence."""
    imported = [
        t for t in await store.list_transactions() if SMS_IMPORT_TAG in t.tags
    ]
    scores = [s for s in (_confidence_from_tags(t.tags) for t in imported) if s is not None]

    last_import: Optional[datetime] = None
    if sync_state is not None:
        latest = await sync_state.latest_sync()
        if latest is not None:
            last_import = datetime.fromtimestamp(latest / 1000)
    if last_import is None and imported:
        last_import = max(t.created_at for t in imported)

    return ImportStats(
        total_imported=len(imported),
        last_import_date=last_import,
        average_confidence=round(sum(scores) / len(scores), 2) if scores else 0.0,
    )
