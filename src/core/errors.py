"""Iplog exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Only run-fatal conditions are exceptions; per-line and per-record
failures travel as tagged values from core.types.
"""

from __future__ import annotations


class IplogError(Exception):
    """Base exception for all Iplog failures."""


class IplogConfigError(IplogError):
    """Raised for invalid or missing runtime configuration."""


class IplogInputError(IplogError):
    """Raised when the access log cannot be opened or read."""


class IplogStoreError(IplogError):
    """Raised when the record store connection cannot be established."""


class IplogRunSpecError(IplogError):
    """Raised for invalid or unsupported run-spec files."""
