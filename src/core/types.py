"""Shared typed models.

This module defines the immutable record models and tagged results used
by the ingest, store, and CLI layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Tuple, Union

from core.constants import DEFAULT_DB_PORT, EVENT_NUMBER_PLACEHOLDER


@dataclass(frozen=True)
class LogRecord:
    """One validated access-log line.

    Attributes:
        ip_address: Client IPv4 address in dotted-quad form.
        log_date_time: Bracketed timestamp text, verbatim.
        method_uri: Request line, or ``-`` when unavailable.
        status: HTTP status code.
        page_size: Response size in bytes, ``-1`` when logged as ``-``.
        referer: Quoted referer text, may be ``-``.
        agent: Quoted user-agent text, may be ``-``.
    """

    ip_address: str
    log_date_time: str
    method_uri: str
    status: int
    page_size: int
    referer: str
    agent: str


DedupKey = Tuple[str, str, str, int, int, str, str, str]


@dataclass(frozen=True)
class StoredRecord:
    """Log record plus the fields assigned at write time.

    Attributes:
        record: Parsed log fields.
        origin_host: Domain or IP of the server that wrote the log.
        insertion_time: Sortable write timestamp, ``YYYY.MMDD.HHmm.ss``.
        event_number: Identifier placeholder; the store assigns the real key.
    """

    record: LogRecord
    origin_host: str
    insertion_time: str
    event_number: int = EVENT_NUMBER_PLACEHOLDER

    def dedup_key(self) -> DedupKey:
        """Return the fields that identify a stored row for duplicate checks."""
        return build_dedup_key(self.record, self.origin_host)


def build_dedup_key(record: LogRecord, origin_host: str) -> DedupKey:
    """Return the uniqueness key of a record written for one origin host.

    The identifier and insertion time are not part of the key.
    """
    return (
        record.ip_address,
        record.log_date_time,
        record.method_uri,
        record.status,
        record.page_size,
        record.referer,
        record.agent,
        origin_host,
    )


class ParseFailureKind(Enum):
    """Which field rejected an access-log line."""

    INVALID_IP_ADDRESS = "invalid_ip_address"
    MALFORMED_DATE_TIME = "malformed_date_time"
    INVALID_METHOD = "invalid_method"
    INVALID_STATUS = "invalid_status"
    INVALID_PAGE_SIZE = "invalid_page_size"
    MALFORMED_REFERER = "malformed_referer"
    MALFORMED_AGENT = "malformed_agent"


@dataclass(frozen=True)
class ParseFailure:
    """Whole-line rejection with the failing field kind."""

    kind: ParseFailureKind
    detail: str


ParseResult = Union[LogRecord, ParseFailure]


@dataclass(frozen=True)
class ProbeFailed:
    """Duplicate lookup could not be answered by the store."""

    message: str


@dataclass(frozen=True)
class InsertFailed:
    """Row append was rejected by the store."""

    message: str


class Verbosity(IntEnum):
    """Console verbosity tiers, ordered from quiet to detailed."""

    SILENT = 0
    LOG = 40
    GENERAL = 70
    ALL = 100

    @classmethod
    def from_name(cls, name: str) -> "Verbosity":
        """Resolve a lower-case tier name such as ``general``."""
        return cls[name.strip().upper()]


class RecordOutcome(Enum):
    """Classified result of handing one parsed record to the store."""

    INSERTED = "inserted"
    DUPLICATE = "duplicate"
    INSERT_FAILED = "insert_failed"
    NOT_INSERTED = "not_inserted"


class StopReason(Enum):
    """Why an ingest run stopped reading."""

    END_OF_INPUT = "end_of_input"
    MAX_LINES = "max_lines"
    MAX_DUPLICATES = "max_duplicates"
    PARSE_FAILURE = "parse_failure"
    INSERT_FAILURE = "insert_failure"


@dataclass(frozen=True)
class StoreSettings:
    """Connection parameters for the record store.

    Attributes:
        host: Database server host name.
        user: Database user name.
        password: Database user password, may be empty.
        database: Database (schema) name.
        table: Table that receives log records.
        port: Database server TCP port.
    """

    host: str
    user: str
    password: str
    database: str
    table: str
    port: int = DEFAULT_DB_PORT

    def describe(self) -> dict[str, object]:
        """Return loggable settings with the password masked."""
        return {
            "db_host": self.host,
            "db_port": self.port,
            "db_user": self.user,
            "db_password": "***" if self.password else None,
            "db_name": self.database,
            "db_table": self.table,
        }


@dataclass(frozen=True)
class IngestOptions:
    """Validated options for one ingest run.

    Attributes:
        log_path: Access-log file to read.
        origin_host: Host label stored with every record.
        store: Record store connection settings.
        insert: Write records; when False the run only parses and counts.
        max_lines: Stop after this many lines; None reads to end of file.
        max_duplicates: Stop once this many duplicates were skipped.
        recent_first: Probe and insert newest lines first.
        stop_on_parse_failure: Halt the run on the first rejected line.
        stop_on_insert_failure: Halt the run on the first failed append.
        verbosity: Console verbosity tier.
        items_of_interest: Surface invalid-method rejections in every non-silent tier.
    """

    log_path: Path
    origin_host: str
    store: StoreSettings
    insert: bool = False
    max_lines: int | None = None
    max_duplicates: int | None = None
    recent_first: bool = False
    stop_on_parse_failure: bool = False
    stop_on_insert_failure: bool = False
    verbosity: Verbosity = Verbosity.GENERAL
    items_of_interest: bool = False


@dataclass
class IngestSummary:
    """Counters accumulated over one ingest run."""

    lines_read: int = 0
    records_parsed: int = 0
    parse_failures: int = 0
    records_inserted: int = 0
    duplicates_skipped: int = 0
    probe_failures: int = 0
    insert_failures: int = 0
    stop_reason: StopReason = StopReason.END_OF_INPUT
    elapsed_seconds: float = 0.0
