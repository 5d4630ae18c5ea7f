"""SQL statement text for the record table.

This module isolates statement building from connection handling.
Only the table name is spliced into the text, after validation
against a plain-identifier pattern; every value is bound by the driver.
"""

from __future__ import annotations

from core.config import validate_table_name
from core.types import StoredRecord

RECORD_COLUMNS = (
    "IPEventNumber",
    "IPaddress",
    "DateTime",
    "MethodURI",
    "Status",
    "PageSize",
    "Referer",
    "Agent",
    "ThisHost",
    "InsertionTime",
)
DEDUP_COLUMNS = RECORD_COLUMNS[1:9]
INTEGER_COLUMNS = frozenset({"IPEventNumber", "Status", "PageSize"})


def create_table_sql(table: str) -> str:
    """Return the statement that creates the record table when absent."""
    return (
        f"CREATE TABLE IF NOT EXISTS `{validate_table_name(table)}` ("
        "IPEventNumber INT NOT NULL AUTO_INCREMENT, "
        "IPaddress TEXT, "
        "DateTime TEXT, "
        "MethodURI TEXT, "
        "Status INT, "
        "PageSize INT, "
        "Referer TEXT, "
        "Agent TEXT, "
        "ThisHost TEXT, "
        "InsertionTime TEXT, "
        "PRIMARY KEY (IPEventNumber)"
        ") DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_bin"
    )


def probe_sql(table: str) -> str:
    """Return the point lookup used to detect an already stored record.

    Text columns are compared as binary strings, so trailing spaces and
    letter case both count.
    """
    conditions = " AND ".join(_equality(column) for column in DEDUP_COLUMNS)
    return f"SELECT 1 FROM `{validate_table_name(table)}` WHERE {conditions} LIMIT 1"


def insert_sql(table: str) -> str:
    """Return the single-row append statement."""
    columns = ", ".join(RECORD_COLUMNS)
    placeholders = ", ".join("%s" for _ in RECORD_COLUMNS)
    return f"INSERT INTO `{validate_table_name(table)}` ({columns}) VALUES ({placeholders})"


def insert_params(stored_record: StoredRecord) -> tuple[object, ...]:
    """Return append parameters in RECORD_COLUMNS order."""
    return (
        stored_record.event_number,
        *stored_record.dedup_key(),
        stored_record.insertion_time,
    )


def _equality(column: str) -> str:
    if column in INTEGER_COLUMNS:
        return f"{column} = %s"
    return f"CAST({column} AS BINARY) = %s"