"""Ingest option object builders.

This module converts raw settings from CLI flags or a run spec into a
validated IngestOptions object, filling gaps from the environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from core.config import IplogConfig, validate_db_port, validate_table_name
from core.constants import DEFAULT_VERBOSITY
from core.errors import IplogConfigError
from core.types import IngestOptions, StoreSettings, Verbosity


def build_ingest_options(settings: Mapping[str, object], config: IplogConfig) -> IngestOptions:
    """Build ingest options from raw settings.

    Args:
        settings: Raw values keyed like the CLI destinations; None means unset.
        config: Environment defaults used for unset store fields.

    Returns:
        Validated ingest options.

    Raises:
        IplogConfigError: If a required value is missing or invalid.
    """
    log_file = _required(settings.get("log_file"), "log_file", "the access log file path")
    origin_host = _required(
        _first(settings.get("origin_host"), config.origin_host),
        "origin_host",
        "--origin-host or IPLOG_ORIGIN_HOST",
    )
    return IngestOptions(
        log_path=Path(str(log_file)).expanduser(),
        origin_host=str(origin_host),
        store=_build_store_settings(settings, config),
        insert=bool(settings.get("insert") or False),
        max_lines=_non_negative(settings.get("max_lines"), "max_lines"),
        max_duplicates=_non_negative(settings.get("max_duplicates"), "max_duplicates"),
        recent_first=bool(settings.get("recent_first") or False),
        stop_on_parse_failure=bool(settings.get("stop_on_parse_failure") or False),
        stop_on_insert_failure=bool(settings.get("stop_on_insert_failure") or False),
        verbosity=_parse_verbosity(settings.get("verbosity")),
        items_of_interest=bool(settings.get("items_of_interest") or False),
    )


def _build_store_settings(settings: Mapping[str, object], config: IplogConfig) -> StoreSettings:
    host = _required(
        _first(settings.get("db_host"), config.db_host), "db_host", "--db-host or IPLOG_DB_HOST"
    )
    user = _required(
        _first(settings.get("db_user"), config.db_user), "db_user", "--db-user or IPLOG_DB_USER"
    )
    database = _required(
        _first(settings.get("db_name"), config.db_name), "db_name", "--db-name or IPLOG_DB_NAME"
    )
    table = _required(
        _first(settings.get("db_table"), config.db_table),
        "db_table",
        "--db-table or IPLOG_DB_TABLE",
    )
    password = _first(settings.get("db_password"), config.db_password)
    port = _first(settings.get("db_port"), config.db_port)
    if isinstance(port, bool) or not isinstance(port, int):
        raise IplogConfigError(f"Setting 'db_port' must be an integer, got '{port}'.")
    return StoreSettings(
        host=str(host),
        user=str(user),
        password=str(password) if password is not None else "",
        database=str(database),
        table=validate_table_name(str(table)),
        port=validate_db_port(port, "db_port"),
    )


def _first(*values: object) -> object:
    for value in values:
        if value is not None:
            return value
    return None


def _required(value: object, field_name: str, hint: str) -> object:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise IplogConfigError(f"Missing required setting '{field_name}'. Provide {hint}.")
    return value


def _non_negative(value: object, field_name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise IplogConfigError(f"Setting '{field_name}' must be an integer, got '{value}'.")
    if value < 0:
        raise IplogConfigError(
            f"Setting '{field_name}' must be zero or greater, got {value}. "
            "Omit it to read without a limit."
        )
    return value


def _parse_verbosity(value: object) -> Verbosity:
    if value is None:
        return Verbosity.from_name(DEFAULT_VERBOSITY)
    try:
        return Verbosity.from_name(str(value))
    except KeyError as error:
        raise IplogConfigError(
            f"Invalid verbosity '{value}'. Use one of: silent, log, general, all."
        ) from error
