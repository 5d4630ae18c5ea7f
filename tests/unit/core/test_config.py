"""Unit tests for runtime config loading."""

from __future__ import annotations

import pytest

from core.config import IplogConfig, validate_db_port, validate_table_name
from core.errors import IplogConfigError

_ENV_NAMES = (
    "IPLOG_DB_HOST",
    "IPLOG_DB_PORT",
    "IPLOG_DB_USER",
    "IPLOG_DB_PASSWORD",
    "IPLOG_DB_NAME",
    "IPLOG_DB_TABLE",
    "IPLOG_ORIGIN_HOST",
)


@pytest.fixture(autouse=True)
def _clear_iplog_env(monkeypatch) -> None:
    for env_name in _ENV_NAMES:
        monkeypatch.delenv(env_name, raising=False)


def test_config_defaults_without_environment() -> None:
    """Unset variables should leave store fields empty and port at default."""
    config = IplogConfig.from_env()

    assert config.db_port == 3306
    assert config.db_host is None and config.origin_host is None


def test_config_reads_environment_values(monkeypatch) -> None:
    """Environment values should populate the config."""
    monkeypatch.setenv("IPLOG_DB_HOST", " db.example.com ")
    monkeypatch.setenv("IPLOG_DB_PORT", "3307")
    monkeypatch.setenv("IPLOG_DB_PASSWORD", " keep spaces ")
    monkeypatch.setenv("IPLOG_DB_TABLE", "")

    config = IplogConfig.from_env()

    assert config.db_host == "db.example.com" and config.db_port == 3307
    assert config.db_password == " keep spaces "
    assert config.db_table is None


def test_config_invalid_port_raises_error(monkeypatch) -> None:
    """Non-numeric port should fail fast."""
    monkeypatch.setenv("IPLOG_DB_PORT", "mysql")

    with pytest.raises(IplogConfigError, match="IPLOG_DB_PORT"):
        IplogConfig.from_env()


def test_config_out_of_range_port_raises_error(monkeypatch) -> None:
    """Port outside the TCP range should fail fast."""
    monkeypatch.setenv("IPLOG_DB_PORT", "70000")

    with pytest.raises(IplogConfigError):
        IplogConfig.from_env()


def test_validate_db_port_names_the_setting() -> None:
    """Range errors should name the setting that supplied the port."""
    with pytest.raises(IplogConfigError, match="db_port"):
        validate_db_port(0, "db_port")

    assert validate_db_port(3306, "db_port") == 3306


@pytest.mark.parametrize("table", ["access_log", "logs$2014", "A1"])
def test_validate_table_name_accepts_plain_identifiers(table: str) -> None:
    """Letters, digits, underscore and dollar are allowed."""
    assert validate_table_name(table) == table


@pytest.mark.parametrize("table", ["", "access log", "logs`x", "db.table"])
def test_validate_table_name_rejects_other_characters(table: str) -> None:
    """Anything that would need quoting is rejected."""
    with pytest.raises(IplogConfigError, match="table name"):
        validate_table_name(table)
