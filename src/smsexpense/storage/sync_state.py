"""Per-day last-sync cursor so repeated imports resume where they stopped."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Final, Optional

from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

LAST_SYNC_KEY_PREFIX: Final[str] = "smsImport:lastSync:"
DAY_MS: Final[int] = 24 * 60 * 60 * 1000


def to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def start_of_day(timestamp_ms: int) -> int:
    """Local midnight of the day containing ``timestamp_ms``."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000)
    return to_millis(moment.replace(hour=0, minute=0, second=0, microsecond=0))


def end_of_day(timestamp_ms: int) -> int:
    """Last millisecond of the local day containing ``timestamp_ms``."""
    midnight = datetime.fromtimestamp(start_of_day(timestamp_ms) / 1000)
    return to_millis(midnight + timedelta(days=1)) - 1


def last_sync_key(timestamp_ms: int) -> str:
    day = datetime.fromtimestamp(timestamp_ms / 1000)
    return f"{LAST_SYNC_KEY_PREFIX}{day:%Y-%m-%d}"


class SyncStateStore:
    """Newest imported message timestamp, tracked per local calendar day."""

    def __init__(self, kv: Optional[KeyValueStore] = None):
        self.kv = kv or KeyValueStore()

    async def get_last_sync(self, timestamp_ms: int) -> Optional[int]:
        value = await self.kv.read_json(last_sync_key(timestamp_ms))
        return int(value) if value is not None else None

    async def set_last_sync(self, timestamp_ms: int, value_ms: int) -> None:
        """Advance the cursor for a day; never moves it backwards."""
        current = await self.get_last_sync(timestamp_ms)
        if current is not None and current >= value_ms:
            return
        await self.kv.write_json(last_sync_key(timestamp_ms), value_ms)
        logger.debug(f"Advanced {last_sync_key(timestamp_ms)} to {value_ms}")

    async def latest_sync(self) -> Optional[int]:
        """Most recent cursor across all days."""
        values = [
            await self.kv.read_json(key)
            for key in await self.kv.keys(LAST_SYNC_KEY_PREFIX)
        ]
        values = [int(v) for v in values if v is not None]
        return max(values) if values else None
