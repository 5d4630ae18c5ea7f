"""Public SDK surface for Iplog.

This module provides a stable import path for library users.
It re-exports the parser, the ingest entry point, and typed option models.
"""

from __future__ import annotations

from core.config import IplogConfig
from core.option_builders import build_ingest_options
from core.types import (
    IngestOptions,
    IngestSummary,
    LogRecord,
    ParseFailure,
    ParseFailureKind,
    RecordOutcome,
    StopReason,
    StoreSettings,
    StoredRecord,
    Verbosity,
)
from ingest.line_parser import parse_log_line
from ingest.log_reader import LogReader
from ingest.pipeline import IngestRunner, ingest_log_file
from store.record_store import RecordStore

__all__ = [
    "IngestOptions",
    "IngestRunner",
    "IngestSummary",
    "IplogConfig",
    "LogReader",
    "LogRecord",
    "ParseFailure",
    "ParseFailureKind",
    "RecordOutcome",
    "RecordStore",
    "StopReason",
    "StoreSettings",
    "StoredRecord",
    "Verbosity",
    "build_ingest_options",
    "ingest_log_file",
    "parse_log_line",
]
