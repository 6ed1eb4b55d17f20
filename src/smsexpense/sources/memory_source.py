"""In-memory message source for tests and embedding hosts."""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.errors import PermissionDeniedError, SourceUnavailableError
from .base_source import INBOX, MessageSource, RawRecord, select_window


class InMemoryMessageSource(MessageSource):
    """Serves a fixed list of records in the order given."""

    def __init__(
        self,
        records: Iterable[RawRecord] = (),
        available: bool = True,
        permission_denied: bool = False,
    ):
        self.records: list[RawRecord] = list(records)
        self.available = available
        self.permission_denied = permission_denied
        self.calls: list[dict] = []

    def is_available(self) -> bool:
        return self.available

    def add(self, record: RawRecord) -> None:
        self.records.append(record)

    async def list_messages(
        self,
        box: str = INBOX,
        max_count: int = 200,
        index_from: int = 0,
        min_date: Optional[int] = None,
        max_date: Optional[int] = None,
    ) -> list[RawRecord]:
        self.calls.append({
            "box": box,
            "max_count": max_count,
            "index_from": index_from,
            "min_date": min_date,
            "max_date": max_date,
        })
        if not self.available:
            raise SourceUnavailableError("SMS reading is not supported on this platform")
        if self.permission_denied:
            raise PermissionDeniedError("SMS permission is required to import expenses")

        return select_window(self.records, box, max_count, index_from, min_date, max_date)
