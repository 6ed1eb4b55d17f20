"""Batch import of expenses from the SMS inbox."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from ..classifiers.transaction_classifier import is_bank_sms, is_transaction_sms
from ..core.confidence import ConfidenceThresholds
from ..core.errors import (
    MalformedMessageError,
    PermissionDeniedError,
    SMSImportError,
    SourceUnavailableError,
)
from ..core.metrics import MetricsCollector, get_metrics
from ..core.models import (
    ExtractedExpense,
    ImportOptions,
    ImportResult,
    RawMessage,
    TransactionRecord,
)
from ..sources.base_source import INBOX, MessageSource, PermissionGate, RawRecord
from ..storage.sync_state import (
    DAY_MS,
    SyncStateStore,
    end_of_day,
    start_of_day,
    to_millis,
)
from ..storage.transaction_store import TransactionStore
from .sms_parser import SMSParser

logger = logging.getLogger(__name__)

DEFAULT_DAYS_BACK = 30


@dataclass(frozen=True)
class ImportWindow:
    """Resolved fetch bounds in epoch millis."""

    min_date: int
    max_date: int
    mode: str  # "today", "relative" or "range"

    @property
    def is_empty(self) -> bool:
        return self.min_date > self.max_date

    @property
    def day_by_day(self) -> bool:
        """Whether the window is fetched per calendar day against the sync cursor."""
        return self.mode in ("today", "range")

    def describe(self) -> str:
        start = datetime.fromtimestamp(self.min_date / 1000).isoformat(timespec="seconds")
        end = datetime.fromtimestamp(self.max_date / 1000).isoformat(timespec="seconds")
        return f"{self.mode} window {start} to {end}"


def resolve_window(
    options: ImportOptions,
    now: datetime,
    default_days_back: int = DEFAULT_DAYS_BACK,
) -> ImportWindow:
    """
    Resolve the effective fetch window.

    The relative window comes from ``only_today``, else ``days_back``, else the
    default look-back. Explicit ``min_date``/``max_date`` are applied last and
    replace the matching bound.
    """
    now_ms = to_millis(now)

    if options.only_today:
        min_date, max_date, mode = start_of_day(now_ms), end_of_day(now_ms), "today"
    else:
        days_back = options.days_back if options.days_back is not None else default_days_back
        min_date, max_date, mode = now_ms - days_back * DAY_MS, now_ms, "relative"

    if options.min_date is not None or options.max_date is not None:
        mode = "range"
        if options.min_date is not None:
            min_date = options.min_date
        if options.max_date is not None:
            max_date = options.max_date

    return ImportWindow(min_date=min_date, max_date=max_date, mode=mode)


def _record_id(record: Any) -> str:
    if isinstance(record, RawMessage):
        return record.id
    if isinstance(record, Mapping):
        value = record.get("id", record.get("_id"))
        if value is not None:
            return str(value)
    return "<unknown>"


class SMSImporter:
    """Reads a window of messages, extracts expenses and optionally saves them."""

    def __init__(
        self,
        source: MessageSource,
        store: Optional[TransactionStore] = None,
        permission_gate: Optional[PermissionGate] = None,
        sync_state: Optional[SyncStateStore] = None,
        parser: Optional[SMSParser] = None,
        metrics: Optional[MetricsCollector] = None,
        confidence_threshold: float = ConfidenceThresholds.IMPORT_THRESHOLD,
        default_days_back: int = DEFAULT_DAYS_BACK,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.source = source
        self.store = store
        self.permission_gate = permission_gate
        self.sync_state = sync_state
        self.parser = parser or SMSParser()
        self.metrics = metrics or get_metrics()
        self.confidence_threshold = confidence_threshold
        self.default_days_back = default_days_back
        self.clock = clock

    async def import_expenses(self, options: Optional[ImportOptions] = None) -> ImportResult:
        """
        Run one batch import.

        Never raises: failures before any message is read come back as
        ``success=False``; per-message and per-save failures are collected in
        ``errors`` while the batch carries on.
        """
        options = options or ImportOptions()

        try:
            if options.auto_save and self.store is None:
                raise SMSImportError("No transaction store configured for auto-save")
            await self._ensure_access()
            window = resolve_window(options, self.clock(), self.default_days_back)
            logger.info(f"Importing SMS for {window.describe()}")
            records, fetched_days = await self._fetch(window, options.max_count)
        except SMSImportError as e:
            logger.error(f"SMS import could not start: {e}")
            self.metrics.record_run(success=False)
            return ImportResult.failed(str(e))
        except Exception as e:
            logger.exception(f"Failed to read SMS messages: {e}")
            self.metrics.record_run(success=False)
            return ImportResult.failed(f"Failed to read SMS messages: {e}")

        result = ImportResult(success=True, total_processed=len(records))
        newest_per_day: dict[int, int] = {}

        for record in records:
            await self._process_record(record, options, result, newest_per_day)

        if self.sync_state is not None and window.day_by_day:
            result.last_sync = await self._advance_sync(fetched_days, newest_per_day, result)

        logger.info(
            f"Found {result.bank_sms_count} bank SMS, "
            f"{result.transaction_sms_count} transaction SMS, "
            f"extracted {len(result.expenses)} expenses "
            f"({result.saved_count} saved, {len(result.errors)} errors)"
        )
        self.metrics.record_run(success=True)
        return result

    async def import_message(
        self, record: RawRecord, options: Optional[ImportOptions] = None
    ) -> ImportResult:
        """Import a single incoming message, as delivered by a live SMS listener."""
        options = options or ImportOptions()
        if options.auto_save and self.store is None:
            return ImportResult.failed("No transaction store configured for auto-save")

        result = ImportResult(success=True, total_processed=1)
        await self._process_record(record, options, result)
        return result

    async def _ensure_access(self) -> None:
        if not self.source.is_available():
            raise SourceUnavailableError("SMS reading is not supported on this platform")

        if self.permission_gate is None:
            return
        if await self.permission_gate.check_permission():
            return
        if not await self.permission_gate.request_permission():
            raise PermissionDeniedError("SMS permission is required to import expenses")

    async def _fetch(
        self, window: ImportWindow, max_count: int
    ) -> tuple[list[RawRecord], list[int]]:
        """Fetch raw records; returns them with the day starts that were read."""
        if window.is_empty:
            logger.warning(f"Empty import window: {window.describe()}")
            return [], []

        if self.sync_state is None or not window.day_by_day:
            records = await self.source.list_messages(
                box=INBOX,
                max_count=max_count,
                index_from=0,
                min_date=window.min_date,
                max_date=window.max_date,
            )
            return list(records), []

        records: list[RawRecord] = []
        fetched_days: list[int] = []
        day = start_of_day(window.min_date)
        last_day = start_of_day(window.max_date)

        while day <= last_day and len(records) < max_count:
            fetch_min = max(window.min_date, day)
            fetch_max = min(window.max_date, end_of_day(day))

            last_sync = await self.sync_state.get_last_sync(day)
            if last_sync is not None and last_sync >= fetch_min:
                fetch_min = last_sync + 1
                logger.debug(f"Resuming {day} after last sync {last_sync}")

            if fetch_min <= fetch_max:
                day_records = await self.source.list_messages(
                    box=INBOX,
                    max_count=max_count - len(records),
                    index_from=0,
                    min_date=fetch_min,
                    max_date=fetch_max,
                )
                records.extend(day_records)
            fetched_days.append(day)
            day = end_of_day(day) + 1

        return records, fetched_days

    async def _process_record(
        self,
        record: RawRecord,
        options: ImportOptions,
        result: ImportResult,
        newest_per_day: Optional[dict[int, int]] = None,
    ) -> Optional[RawMessage]:
        """Validate, parse, filter and save one record into ``result``."""
        try:
            message = RawMessage.from_record(record)
            if newest_per_day is not None:
                day = start_of_day(message.date)
                newest_per_day[day] = max(newest_per_day.get(day, 0), message.date)
            if is_bank_sms(message.address, message.body):
                result.bank_sms_count += 1
            if is_transaction_sms(message.body):
                result.transaction_sms_count += 1

            expense = self.parser.parse(message)
            accepted = expense is not None and self._accept(expense, options)
        except MalformedMessageError as e:
            self._record_fault(e.record_id or _record_id(record), e, result)
            return None
        except Exception as e:
            self._record_fault(_record_id(record), e, result)
            return None

        if expense is None:
            self.metrics.record_rejected()
            return message

        self.metrics.record_candidate(expense)
        if not accepted:
            return message

        result.expenses.append(expense)
        if options.auto_save:
            await self._save(expense, result)
        return message

    def _accept(self, expense: ExtractedExpense, options: ImportOptions) -> bool:
        if not ConfidenceThresholds.is_high_confidence(
            expense.confidence, self.confidence_threshold
        ):
            return False
        if options.filter is not None and not options.filter(expense):
            return False
        return True

    def _record_fault(self, record_id: str, error: Exception, result: ImportResult) -> None:
        logger.warning(f"Error processing message {record_id}: {error}")
        result.errors.append(f"Error processing message {record_id}: {error}")
        self.metrics.record_error()

    async def _save(self, expense: ExtractedExpense, result: ImportResult) -> None:
        # A failed save keeps the expense in the result; callers see it in errors
        try:
            await self.store.create(TransactionRecord.from_expense(expense))
        except Exception as e:
            logger.warning(f"Failed to save transaction: {e}")
            result.errors.append(f"Failed to save transaction: {e}")
            self.metrics.record_save(success=False)
            return
        result.saved_count += 1
        self.metrics.record_save(success=True)

    async def _advance_sync(
        self,
        fetched_days: list[int],
        newest_per_day: dict[int, int],
        result: ImportResult,
    ) -> Optional[int]:
        """Move each fetched day's cursor to its newest message; return the latest cursor."""
        cursors: list[int] = []
        for day in fetched_days:
            try:
                newest = newest_per_day.get(day)
                if newest is not None:
                    await self.sync_state.set_last_sync(day, newest)
                current = await self.sync_state.get_last_sync(day)
            except SMSImportError as e:
                logger.warning(f"Failed to update sync state: {e}")
                result.errors.append(f"Failed to update sync state: {e}")
                continue
            if current is not None:
                cursors.append(current)
        return max(cursors) if cursors else None
