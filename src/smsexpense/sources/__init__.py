"""Message sources and permission gates."""

from __future__ import annotations

from .base_source import INBOX, MessageSource, PermissionGate, RawRecord, StaticPermissionGate
from .json_source import JsonFileMessageSource
from .memory_source import InMemoryMessageSource

__all__ = [
    "INBOX",
    "MessageSource",
    "PermissionGate",
    "RawRecord",
    "StaticPermissionGate",
    "InMemoryMessageSource",
    "JsonFileMessageSource",
]
