"""Build ImportOptions from the import screen's range and type choices."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, Final, Optional

from ..core.models import ExtractedExpense, ImportOptions, TransactionType
from ..storage.sync_state import to_millis

RANGE_KINDS: Final[tuple[str, ...]] = ("today", "7d", "30d", "days", "range")
TYPE_FILTERS: Final[tuple[str, ...]] = ("all", "expense", "income")

_PRESET_DAYS: Final[dict[str, int]] = {"7d": 7, "30d": 30}


def type_filter_predicate(kind: str) -> Optional[Callable[[ExtractedExpense], bool]]:
    """Predicate keeping only one transaction type, or None for ``all``."""
    if kind not in TYPE_FILTERS:
        raise ValueError(f"Unknown type filter '{kind}', expected one of {', '.join(TYPE_FILTERS)}")
    if kind == "all":
        return None
    wanted = TransactionType(kind)
    return lambda expense: expense.type == wanted


def build_import_options(
    range_kind: str = "30d",
    days: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    type_filter: str = "all",
    max_count: int = 200,
    auto_save: bool = True,
) -> ImportOptions:
    """
    Translate a range selection into ImportOptions.

    ``range`` takes inclusive calendar dates; ``start`` runs from local
    midnight and ``end`` to the last millisecond of that day.
    """
    if range_kind not in RANGE_KINDS:
        raise ValueError(f"Unknown range '{range_kind}', expected one of {', '.join(RANGE_KINDS)}")

    predicate = type_filter_predicate(type_filter)
    common = dict(max_count=max_count, auto_save=auto_save, filter=predicate)

    if range_kind == "today":
        return ImportOptions(only_today=True, **common)

    if range_kind in _PRESET_DAYS:
        return ImportOptions(days_back=_PRESET_DAYS[range_kind], **common)

    if range_kind == "days":
        if days is None or days <= 0:
            raise ValueError("A positive number of days is required for range 'days'")
        return ImportOptions(days_back=days, **common)

    if start is None or end is None:
        raise ValueError("Both start and end dates are required for range 'range'")
    if start > end:
        raise ValueError(f"Start date {start} is after end date {end}")

    return ImportOptions(
        min_date=to_millis(datetime.combine(start, time.min)),
        max_date=to_millis(datetime.combine(end, time.max)),
        **common,
    )
