"""Ingest orchestration for access-log loads.

This module drives LogReader -> parse_log_line -> RecordStore, applies
the configured stop policies, and accumulates the run counters.
"""

from __future__ import annotations

import time
from contextlib import ExitStack
from datetime import datetime
from typing import Any, Callable, Iterable

from core.constants import INSERTION_TIME_FORMAT
from core.logging_config import get_logger
from core.types import (
    IngestOptions,
    IngestSummary,
    InsertFailed,
    LogRecord,
    ParseFailure,
    ParseFailureKind,
    ProbeFailed,
    RecordOutcome,
    StopReason,
    StoredRecord,
)
from ingest.line_parser import parse_log_line
from ingest.log_reader import LogReader
from store.record_store import RecordStore

Clock = Callable[[], datetime]
OutcomeCallback = Callable[[LogRecord, RecordOutcome], None]

_OUTCOME_EVENTS = {
    RecordOutcome.INSERTED: "record_inserted",
    RecordOutcome.DUPLICATE: "record_duplicate",
    RecordOutcome.NOT_INSERTED: "record_not_inserted",
}


class _StopIngest(Exception):
    """Internal signal that a stop condition ended the run."""

    def __init__(self, reason: StopReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


class IngestRunner:
    """Single-pass runner for one access-log ingest.

    Records reach the store strictly one probe/append pair at a time,
    in file order or, with ``recent_first``, newest line first.
    """

    def __init__(
        self,
        options: IngestOptions,
        reader: LogReader,
        store: RecordStore | None,
        logger: Any | None = None,
        clock: Clock = datetime.now,
        on_outcome: OutcomeCallback | None = None,
    ) -> None:
        """Create a runner over already constructed resources.

        Args:
            options: Validated run options.
            reader: Source of raw lines.
            store: Record store, None for a dry run.
            logger: Structured logger filtered to the run verbosity.
            clock: Wall clock used for insertion timestamps.
            on_outcome: Called with each parsed record and its classified
                outcome, in the order records reach the store.
        """
        self._options = options
        self._reader = reader
        self._store = store
        self._logger = logger or get_logger(__name__, options.verbosity)
        self._clock = clock
        self._on_outcome = on_outcome
        self._summary = IngestSummary()

    def run(self) -> IngestSummary:
        """Execute the run and return its counters.

        Raises:
            IplogInputError: If the log file cannot be opened.
            IplogStoreError: If the store connection cannot be established.
        """
        started_at = time.monotonic()
        try:
            if self._options.recent_first:
                self._run_recent_first()
            else:
                self._run_in_file_order()
        except _StopIngest as stop:
            self._summary.stop_reason = stop.reason
            self._logger.warning("ingest_stopped", reason=stop.reason.value)
        self._summary.elapsed_seconds = time.monotonic() - started_at
        _log_ingest_completion(self._logger, self._options, self._summary)
        return self._summary

    def _run_in_file_order(self) -> None:
        for record in self._parsed_records():
            self._process_record(record)

    def _run_recent_first(self) -> None:
        accepted_records = list(self._parsed_records())
        accepted_records.reverse()
        for record in accepted_records:
            self._process_record(record)

    def _parsed_records(self) -> Iterable[LogRecord]:
        """Yield accepted records, counting rejections."""
        for line in self._limited_lines():
            result = parse_log_line(line)
            if isinstance(result, ParseFailure):
                self._handle_parse_failure(line, result)
                continue
            self._summary.records_parsed += 1
            yield result

    def _limited_lines(self) -> Iterable[str]:
        """Yield raw lines until end of input or the line limit."""
        max_lines = self._options.max_lines
        while max_lines is None or self._summary.lines_read < max_lines:
            line = self._reader.next_line()
            if line is None:
                return
            self._summary.lines_read += 1
            yield line
        self._summary.stop_reason = StopReason.MAX_LINES
        self._logger.info("max_lines_reached", max_lines=max_lines)

    def _handle_parse_failure(self, line: str, failure: ParseFailure) -> None:
        self._summary.parse_failures += 1
        log_method = self._logger.info
        if self._options.items_of_interest and failure.kind is ParseFailureKind.INVALID_METHOD:
            log_method = self._logger.warning
        log_method(
            "line_rejected",
            line_number=self._summary.lines_read,
            kind=failure.kind.value,
            detail=failure.detail,
            line=line.rstrip("\r\n"),
        )
        if self._options.stop_on_parse_failure:
            raise _StopIngest(StopReason.PARSE_FAILURE)

    def _process_record(self, record: LogRecord) -> None:
        """Hand one record to the store, report its outcome, then apply stop limits."""
        outcome = self._handle_record(record)
        if self._on_outcome is not None:
            self._on_outcome(record, outcome)
        if outcome is RecordOutcome.DUPLICATE:
            max_duplicates = self._options.max_duplicates
            if max_duplicates is not None and self._summary.duplicates_skipped >= max_duplicates:
                raise _StopIngest(StopReason.MAX_DUPLICATES)
        elif outcome is RecordOutcome.INSERT_FAILED and self._options.stop_on_insert_failure:
            raise _StopIngest(StopReason.INSERT_FAILURE)

    def _handle_record(self, record: LogRecord) -> RecordOutcome:
        """Probe then append one record and classify the outcome."""
        store = self._store
        if store is None:
            self._log_outcome(RecordOutcome.NOT_INSERTED, record)
            return RecordOutcome.NOT_INSERTED
        probe_result = store.probe(record, self._options.origin_host)
        if isinstance(probe_result, ProbeFailed):
            self._summary.probe_failures += 1
            self._logger.warning(
                "probe_failed", error=probe_result.message, **_record_fields(record)
            )
        elif probe_result:
            self._summary.duplicates_skipped += 1
            self._log_outcome(RecordOutcome.DUPLICATE, record)
            return RecordOutcome.DUPLICATE
        return self._append(store, record)

    def _append(self, store: RecordStore, record: LogRecord) -> RecordOutcome:
        stored_record = StoredRecord(
            record=record,
            origin_host=self._options.origin_host,
            insertion_time=self._clock().strftime(INSERTION_TIME_FORMAT),
        )
        append_result = store.append(stored_record)
        if isinstance(append_result, InsertFailed):
            self._summary.insert_failures += 1
            self._logger.warning(
                "insert_failed",
                outcome=RecordOutcome.INSERT_FAILED.value,
                error=append_result.message,
                insert_failures=self._summary.insert_failures,
                **_record_fields(record),
                insertion_time=stored_record.insertion_time,
            )
            return RecordOutcome.INSERT_FAILED
        self._summary.records_inserted += 1
        self._log_outcome(RecordOutcome.INSERTED, record)
        return RecordOutcome.INSERTED

    def _log_outcome(self, outcome: RecordOutcome, record: LogRecord) -> None:
        self._logger.debug(_OUTCOME_EVENTS[outcome], outcome=outcome.value, **_record_fields(record))


def ingest_log_file(
    options: IngestOptions,
    logger: Any | None = None,
    clock: Clock = datetime.now,
    on_outcome: OutcomeCallback | None = None,
) -> IngestSummary:
    """Load one access-log file into the record store.

    The reader, and the store when inserting, are released on every exit
    path, including stop conditions and fatal errors.

    Args:
        options: Validated run options.
        logger: Structured logger, built from options verbosity when omitted.
        clock: Wall clock used for insertion timestamps.
        on_outcome: Optional per-record outcome callback.

    Returns:
        Run counters.

    Raises:
        IplogInputError: If the log file cannot be opened.
        IplogStoreError: If the store connection cannot be established.
    """
    run_logger = logger or get_logger(__name__, options.verbosity)
    _log_ingest_start(run_logger, options)
    with ExitStack() as stack:
        reader = stack.enter_context(LogReader(options.log_path, run_logger))
        store = None
        if options.insert:
            store = stack.enter_context(RecordStore(options.store, run_logger))
        runner = IngestRunner(options, reader, store, run_logger, clock, on_outcome)
        return runner.run()


def _record_fields(record: LogRecord) -> dict[str, object]:
    return {
        "ip_address": record.ip_address,
        "log_date_time": record.log_date_time,
        "method_uri": record.method_uri,
        "status": record.status,
    }


def _log_ingest_start(logger: Any, options: IngestOptions) -> None:
    logger.info(
        "ingest_started",
        log_path=str(options.log_path),
        origin_host=options.origin_host,
        insert=options.insert,
        max_lines=options.max_lines,
        max_duplicates=options.max_duplicates,
        recent_first=options.recent_first,
        stop_on_parse_failure=options.stop_on_parse_failure,
        stop_on_insert_failure=options.stop_on_insert_failure,
        items_of_interest=options.items_of_interest,
        **options.store.describe(),
    )
    if not options.insert:
        logger.warning("insert_disabled", detail="records are parsed and counted only")


def _log_ingest_completion(logger: Any, options: IngestOptions, summary: IngestSummary) -> None:
    """Log run completion with the final counters."""
    logger.info(
        "ingest_completed",
        log_path=str(options.log_path),
        stop_reason=summary.stop_reason.value,
        lines_read=summary.lines_read,
        records_parsed=summary.records_parsed,
        parse_failures=summary.parse_failures,
        records_inserted=summary.records_inserted,
        duplicates_skipped=summary.duplicates_skipped,
        probe_failures=summary.probe_failures,
        insert_failures=summary.insert_failures,
        elapsed_seconds=round(summary.elapsed_seconds, 3),
    )
