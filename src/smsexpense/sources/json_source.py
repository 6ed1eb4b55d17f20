"""Message source backed by an exported inbox JSON dump."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from ..core.errors import SourceUnavailableError
from .base_source import INBOX, MessageSource, RawRecord, select_window

logger = logging.getLogger(__name__)


class JsonFileMessageSource(MessageSource):
    """
    Reads messages from a JSON array of SMS records.

    The file holds the same list the Android inbox bridge returns: objects
    with ``_id``/``id``, ``address``, ``body``, ``date`` (epoch millis) and
    ``type`` (1 = received, 2 = sent). Records are passed through unvalidated;
    the importer validates each one at the pipeline boundary.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def is_available(self) -> bool:
        return self.path.is_file()

    def _load(self) -> list[RawRecord]:
        if not self.is_available():
            raise SourceUnavailableError(f"SMS export not found: {self.path}")

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SourceUnavailableError(f"Failed to parse SMS list: {e}") from e
        except OSError as e:
            raise SourceUnavailableError(f"Failed to read SMS export: {e}") from e

        # Accept both a bare list and {"messages": [...]}
        if isinstance(data, dict):
            data = data.get("messages")
        if not isinstance(data, list):
            raise SourceUnavailableError(
                f"SMS export must contain a list of messages: {self.path}"
            )

        logger.debug(f"Loaded {len(data)} records from {self.path}")
        return data

    async def list_messages(
        self,
        box: str = INBOX,
        max_count: int = 200,
        index_from: int = 0,
        min_date: Optional[int] = None,
        max_date: Optional[int] = None,
    ) -> list[RawRecord]:
        records = self._load()
        return select_window(records, box, max_count, index_from, min_date, max_date)
