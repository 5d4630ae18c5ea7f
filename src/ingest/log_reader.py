"""Access-log file reader.

This module owns the input stream for one ingest run. Lines come out
lazily and forward-only; the file is opened once and closed on exit.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any

from core.constants import LOG_FILE_ENCODING
from core.errors import IplogInputError
from core.logging_config import get_logger


class LogReader:
    """Line-oriented reader over a single access-log file."""

    def __init__(self, log_path: Path, logger: Any | None = None) -> None:
        """Create a reader; the file is not touched until ``open``.

        Args:
            log_path: Access-log file to read.
            logger: Structured logger, module default when omitted.
        """
        self._log_path = log_path
        self._logger = logger or get_logger(__name__)
        self._handle: IO[str] | None = None
        self._closed = False

    def open(self) -> None:
        """Open the underlying file; later calls are no-ops.

        Raises:
            IplogInputError: If the file is missing or unreadable.
        """
        if self._handle is not None or self._closed:
            return
        try:
            self._handle = self._log_path.open(
                "r", encoding=LOG_FILE_ENCODING, errors="replace", newline=""
            )
        except OSError as error:
            self._logger.error("log_file_open_failed", path=str(self._log_path), error=str(error))
            raise IplogInputError(
                f"Failed to open access log at {self._log_path}: {error.strerror or error}. "
                "Provide an existing, readable file path."
            ) from error
        self._logger.info("log_file_opened", path=str(self._log_path))

    def next_line(self) -> str | None:
        """Return the next raw line with its newline, or None at end of input."""
        self.open()
        if self._handle is None:
            return None
        line = self._handle.readline()
        return line if line else None

    def close(self) -> None:
        """Close the file; safe to call more than once."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            self._logger.info("log_file_closed", path=str(self._log_path))
        self._closed = True

    def __enter__(self) -> "LogReader":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
