"""SMS parsing and batch import."""

from __future__ import annotations

from .batch_importer import ImportWindow, SMSImporter, resolve_window
from .options import build_import_options, type_filter_predicate
from .sms_parser import SMSParser, parse_transaction_sms, truncate_description
from .stats import ImportStats, get_import_stats

__all__ = [
    "SMSImporter",
    "ImportWindow",
    "resolve_window",
    "SMSParser",
    "parse_transaction_sms",
    "truncate_description",
    "build_import_options",
    "type_filter_predicate",
    "ImportStats",
    "get_import_stats",
]
