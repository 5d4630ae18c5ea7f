"""Record store backed by a MySQL table.

This module owns the database connection for one ingest run and exposes
the two calls of the duplicate-avoiding insert protocol: ``probe`` for an
existing equivalent row, then ``append`` for a new one. The pair is not
wrapped in a transaction, so two runs writing the same table at once can
both append the same record; run ingests serially per table.
"""

from __future__ import annotations

from typing import Any, Callable

import pymysql

from core.constants import DEFAULT_DB_CHARSET
from core.errors import IplogStoreError
from core.logging_config import get_logger
from core.types import (
    InsertFailed,
    LogRecord,
    ProbeFailed,
    StoreSettings,
    StoredRecord,
    build_dedup_key,
)
from store.sql_statements import create_table_sql, insert_params, insert_sql, probe_sql

ConnectionFactory = Callable[..., Any]


class RecordStore:
    """Duplicate-aware writer for stored log records.

    The connection is opened lazily on the first probe or append, so a
    run that never writes never connects. Schema creation runs once,
    right after the connection is established.
    """

    def __init__(
        self,
        settings: StoreSettings,
        logger: Any | None = None,
        connect: ConnectionFactory | None = None,
    ) -> None:
        """Initialize the store without connecting.

        Args:
            settings: Connection parameters and target table.
            logger: Structured logger, module default when omitted.
            connect: DB-API connection factory taking PyMySQL keywords,
                ``pymysql.connect`` when omitted.
        """
        self._settings = settings
        self._logger = logger or get_logger(__name__)
        self._connect = connect or pymysql.connect
        self._connection: Any | None = None
        self._probe_sql = probe_sql(settings.table)
        self._insert_sql = insert_sql(settings.table)

    def ensure_schema(self) -> None:
        """Create the record table if it does not exist.

        Failures are logged and otherwise ignored; an existing table of a
        compatible shape is assumed in that case.

        Raises:
            IplogStoreError: If the connection cannot be established.
        """
        self._get_connection()

    def probe(self, record: LogRecord, origin_host: str) -> bool | ProbeFailed:
        """Check whether an equivalent record is already stored.

        Args:
            record: Parsed record to look up.
            origin_host: Host label the record would be stored under.

        Returns:
            True when a matching row exists, False when none does, or
            ProbeFailed with the driver message when the query fails.

        Raises:
            IplogStoreError: If the connection cannot be established.
        """
        connection = self._get_connection()
        try:
            with connection.cursor() as cursor:
                cursor.execute(self._probe_sql, build_dedup_key(record, origin_host))
                row = cursor.fetchone()
        except pymysql.MySQLError as error:
            return ProbeFailed(message=_error_message(error))
        return row is not None

    def append(self, stored_record: StoredRecord) -> InsertFailed | None:
        """Write one new row; the table assigns the identifier.

        Args:
            stored_record: Record with origin host and insertion time.

        Returns:
            None on success, InsertFailed with the driver message otherwise.

        Raises:
            IplogStoreError: If the connection cannot be established.
        """
        connection = self._get_connection()
        try:
            with connection.cursor() as cursor:
                cursor.execute(self._insert_sql, insert_params(stored_record))
        except pymysql.MySQLError as error:
            return InsertFailed(message=_error_message(error))
        return None

    def close(self) -> None:
        """Close the connection if one was opened; safe to repeat."""
        if self._connection is None:
            return
        try:
            self._connection.close()
        except pymysql.MySQLError as error:
            self._logger.warning("store_close_failed", error=_error_message(error))
        finally:
            self._connection = None
        self._logger.info("store_disconnected", db_host=self._settings.host)

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get_connection(self) -> Any:
        if self._connection is None:
            self._connection = self._open_connection()
            self._create_table(self._connection)
        return self._connection

    def _open_connection(self) -> Any:
        """Open the database connection.

        Returns:
            Live DB-API connection in autocommit mode.

        Raises:
            IplogStoreError: If the server refuses or cannot be reached.
        """
        settings = self._settings
        try:
            connection = self._connect(
                host=settings.host,
                port=settings.port,
                user=settings.user,
                password=settings.password,
                database=settings.database,
                charset=DEFAULT_DB_CHARSET,
                autocommit=True,
            )
        except pymysql.MySQLError as error:
            self._logger.error(
                "store_connect_failed", **settings.describe(), error=_error_message(error)
            )
            raise IplogStoreError(
                f"Failed to connect to MySQL at {settings.host}:{settings.port} "
                f"as '{settings.user}': {_error_message(error)}. "
                "Check the database host, credentials, and database name."
            ) from error
        self._logger.info("store_connected", **settings.describe())
        return connection

    def _create_table(self, connection: Any) -> None:
        table = self._settings.table
        try:
            with connection.cursor() as cursor:
                cursor.execute(create_table_sql(table))
        except pymysql.MySQLError as error:
            self._logger.warning(
                "schema_create_failed", db_table=table, error=_error_message(error)
            )
            return
        self._logger.info("schema_ensured", db_table=table)


def _error_message(error: Exception) -> str:
    """Render a PyMySQL error as ``(code) message`` or plain text."""
    if len(error.args) >= 2:
        return f"({error.args[0]}) {error.args[1]}"
    return str(error)
