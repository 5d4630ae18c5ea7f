"""Runtime configuration model for Iplog.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads,
and share its port and table-name validators.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
import re

from core.constants import DEFAULT_DB_PORT, TABLE_NAME_PATTERN
from core.errors import IplogConfigError

_TABLE_NAME_RE = re.compile(TABLE_NAME_PATTERN)


@dataclass(frozen=True)
class IplogConfig:
    """Environment-provided defaults for ingest runs.

    Attributes:
        db_host: Default database server host.
        db_port: Default database server port.
        db_user: Default database user.
        db_password: Default database password, kept off the command line.
        db_name: Default database name.
        db_table: Default table name.
        origin_host: Default origin host label for stored records.
    """

    db_host: str | None
    db_port: int
    db_user: str | None
    db_password: str | None
    db_name: str | None
    db_table: str | None
    origin_host: str | None

    @classmethod
    def from_env(cls) -> "IplogConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            IplogConfigError: If environment values are invalid.
        """
        db_port_value = os.getenv("IPLOG_DB_PORT", str(DEFAULT_DB_PORT))
        return cls(
            db_host=_non_empty(os.getenv("IPLOG_DB_HOST")),
            db_port=_parse_db_port(db_port_value),
            db_user=_non_empty(os.getenv("IPLOG_DB_USER")),
            db_password=os.getenv("IPLOG_DB_PASSWORD"),
            db_name=_non_empty(os.getenv("IPLOG_DB_NAME")),
            db_table=_non_empty(os.getenv("IPLOG_DB_TABLE")),
            origin_host=_non_empty(os.getenv("IPLOG_ORIGIN_HOST")),
        )


def _non_empty(raw_value: str | None) -> str | None:
    if raw_value is None:
        return None
    stripped = raw_value.strip()
    return stripped if stripped else None


def _parse_db_port(raw_value: str) -> int:
    """Parse the database port environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed TCP port.

    Raises:
        IplogConfigError: If value is not a valid port number.
    """
    try:
        port = int(raw_value)
    except ValueError as error:
        raise IplogConfigError(
            "Invalid IPLOG_DB_PORT value: "
            f"expected integer, got '{raw_value}'. "
            "Set IPLOG_DB_PORT to a numeric value."
        ) from error
    return validate_db_port(port, "IPLOG_DB_PORT")


def validate_db_port(port: int, source: str) -> int:
    """Check that a database port is a TCP port number.

    Args:
        port: Candidate port.
        source: Setting name shown in the error.

    Returns:
        The unchanged port.

    Raises:
        IplogConfigError: If the port is outside 1-65535.
    """
    if not 0 < port < 65536:
        raise IplogConfigError(
            f"Invalid {source} value: {port} is outside 1-65535. "
            f"Set {source} to a valid TCP port."
        )
    return port


def validate_table_name(table: str) -> str:
    """Check that a table name is a plain SQL identifier.

    Identifiers cannot be bound as query parameters, so only names made
    of letters, digits, '_' and '$' are spliced into statements.

    Raises:
        IplogConfigError: If the name has any other character or is empty.
    """
    if not _TABLE_NAME_RE.fullmatch(table):
        raise IplogConfigError(
            f"Invalid table name '{table}': only letters, digits, '_' and '$' are allowed. "
            "Choose a plain SQL identifier."
        )
    return table
