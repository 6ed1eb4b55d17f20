"""Base classes for message sources and permission gates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Union

from ..core.models import MessageDirection, RawMessage

# What a source hands back before boundary validation
RawRecord = Union[RawMessage, Mapping[str, Any]]

INBOX: str = "inbox"


class MessageSource(ABC):
    """Abstract base class for SMS inbox readers."""

    @abstractmethod
    async def list_messages(
        self,
        box: str = INBOX,
        max_count: int = 200,
        index_from: int = 0,
        min_date: Optional[int] = None,
        max_date: Optional[int] = None,
    ) -> list[RawRecord]:
        """
        List messages in source order within the optional date bounds.

        Raises:
            PermissionDeniedError: inbox access was refused
            SourceUnavailableError: the inbox cannot be read on this platform
        """
        pass

    def is_available(self) -> bool:
        """Whether this source can be read at all."""
        return True


class PermissionGate(ABC):
    """Runtime permission check for reading the inbox."""

    @abstractmethod
    async def check_permission(self) -> bool:
        pass

    @abstractmethod
    async def request_permission(self) -> bool:
        pass


class StaticPermissionGate(PermissionGate):
    """Permission gate with a fixed answer, for hosts without runtime prompts."""

    def __init__(self, granted: bool = True, grant_on_request: bool | None = None):
        self.granted = granted
        self.grant_on_request = granted if grant_on_request is None else grant_on_request
        self.requests = 0

    async def check_permission(self) -> bool:
        return self.granted

    async def request_permission(self) -> bool:
        self.requests += 1
        if self.grant_on_request:
            self.granted = True
        return self.granted


def _in_window(date: Any, min_date: Optional[int], max_date: Optional[int]) -> bool:
    """Whether an epoch-millis timestamp falls within inclusive bounds."""
    if isinstance(date, str) and date.strip().isdigit():
        date = int(date)
    if not isinstance(date, int) or isinstance(date, bool):
        return True  # leave malformed dates to boundary validation
    if min_date is not None and date < min_date:
        return False
    if max_date is not None and date > max_date:
        return False
    return True


def record_date(record: RawRecord) -> Any:
    """Read the timestamp of a record without validating it."""
    if isinstance(record, RawMessage):
        return record.date
    if isinstance(record, Mapping):
        return record.get("date")
    return None


def in_box(record: RawRecord, box: str) -> bool:
    """Whether a record belongs to the requested box; unknown types stay in."""
    if box != INBOX:
        return True
    if isinstance(record, RawMessage):
        return record.direction == MessageDirection.RECEIVED
    if isinstance(record, Mapping):
        kind = record.get("direction", record.get("type"))
        return kind not in (2, MessageDirection.SENT, MessageDirection.SENT.value)
    return True


def select_window(
    records: list[RawRecord],
    box: str,
    max_count: int,
    index_from: int,
    min_date: Optional[int],
    max_date: Optional[int],
) -> list[RawRecord]:
    """Apply box, date bounds and paging to raw records."""
    selected = [
        r for r in records
        if in_box(r, box) and _in_window(record_date(r), min_date, max_date)
    ]
    return selected[index_from:index_from + max_count]
