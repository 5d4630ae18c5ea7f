"""Type-safe field parsing helpers for run-spec files.

This module centralizes primitive parsing so run-spec loading produces
consistent validation errors for every section.
"""

from __future__ import annotations

from typing import Mapping

from core.errors import IplogRunSpecError


def optional_string(args: Mapping[str, object], field_name: str) -> str | None:
    """Read an optional string field from a run-spec section."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    raise IplogRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")


def optional_int(args: Mapping[str, object], field_name: str) -> int | None:
    """Read an optional integer field from a run-spec section."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, bool):
        raise IplogRunSpecError(f"Run-spec field '{field_name}' must be an integer.")
    if isinstance(value, int):
        return value
    raise IplogRunSpecError(f"Run-spec field '{field_name}' must be an integer.")


def optional_bool(args: Mapping[str, object], field_name: str) -> bool | None:
    """Read an optional boolean field from a run-spec section."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise IplogRunSpecError(f"Run-spec field '{field_name}' must be true/false.")


def optional_secret(args: Mapping[str, object], field_name: str) -> str | None:
    """Read a password-like field, preserving surrounding whitespace."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    raise IplogRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")
