"""Runtime settings read from the environment (and a local .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

from dotenv import load_dotenv

T = TypeVar("T")


def _env(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from e


@dataclass(frozen=True)
class ImportSettings:
    """Defaults for import runs and where local state is kept."""

    max_count: int = 200
    days_back: int = 30
    confidence_threshold: float = 0.3
    store_path: Path = Path("data/transactions.json")
    sync_path: Path = Path("data/sync_state.json")
    log_level: str = "INFO"

    def __post_init__(self):
        if self.max_count <= 0:
            raise ValueError(f"Invalid value for SMS_IMPORT_MAX_COUNT: {self.max_count}")
        if self.days_back < 0:
            raise ValueError(f"Invalid value for SMS_IMPORT_DAYS_BACK: {self.days_back}")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError(
                f"Invalid value for SMS_IMPORT_CONFIDENCE_THRESHOLD: {self.confidence_threshold}"
            )

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> ImportSettings:
        """Build settings from ``SMS_IMPORT_*`` variables."""
        if load_env_file:
            load_dotenv()

        return cls(
            max_count=_env("SMS_IMPORT_MAX_COUNT", cls.max_count, int),
            days_back=_env("SMS_IMPORT_DAYS_BACK", cls.days_back, int),
            confidence_threshold=_env(
                "SMS_IMPORT_CONFIDENCE_THRESHOLD", cls.confidence_threshold, float
            ),
            store_path=_env("SMS_IMPORT_STORE_PATH", cls.store_path, Path),
            sync_path=_env("SMS_IMPORT_SYNC_PATH", cls.sync_path, Path),
            log_level=_env("SMS_IMPORT_LOG_LEVEL", cls.log_level, str.upper),
        )
