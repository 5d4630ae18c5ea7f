"""Combined Log Format line parser.

This module turns one Apache access-log line into a LogRecord. Fields
are taken left to right. Each step consumes the fixed delimiter that opens
the field, the value, and the terminator that closes it, so the next field
is only searched for after the current one. The first invalid field
rejects the whole line.

Expected layout::

    66.249.74.134 - - [15/Jul/2014:05:44:40 -0700] "GET /robots.txt HTTP/1.1" 200 60 "http://referer.example.com/" "+http://www.google.com/bot.html"
"""

from __future__ import annotations

import ipaddress
import re

from core.constants import (
    AGENT_START,
    BROADCAST_IPV4,
    DATE_TIME_END,
    DATE_TIME_START,
    HTTP_METHODS,
    IP_FIELD_END,
    PAGE_SIZE_ABSENT,
    PAGE_SIZE_END,
    QUOTED_FIELD_END,
    REFERER_START,
    REQUEST_END,
    REQUEST_START,
    STATUS_END,
    STATUS_START,
    UNAVAILABLE_FIELD,
)
from core.types import LogRecord, ParseFailure, ParseFailureKind, ParseResult

_NUMERIC_RE = re.compile(r"[0-9]+")


def parse_log_line(line: str) -> ParseResult:
    """Parse and validate one access-log line.

    Args:
        line: Raw line, trailing newline allowed.

    Returns:
        A fully populated LogRecord, or a ParseFailure naming the first
        field that failed validation.
    """
    ip_address, remainder = _cut_field(line, "", IP_FIELD_END)
    if ip_address is None or not is_valid_ipv4(ip_address):
        return _failure(ParseFailureKind.INVALID_IP_ADDRESS, "IP address", ip_address)

    log_date_time, remainder = _cut_field(remainder, DATE_TIME_START, DATE_TIME_END)
    if log_date_time is None:
        return _failure(ParseFailureKind.MALFORMED_DATE_TIME, "date-time", remainder)

    method_uri, remainder = _cut_field(remainder, REQUEST_START, REQUEST_END)
    if method_uri is None or not is_valid_method_uri(method_uri):
        return _failure(ParseFailureKind.INVALID_METHOD, "method", method_uri)

    status, remainder = _cut_field(remainder, STATUS_START, STATUS_END)
    if status is None or not _is_numeric(status):
        return _failure(ParseFailureKind.INVALID_STATUS, "status", status)

    page_size_text, remainder = _cut_field(remainder, "", PAGE_SIZE_END)
    page_size = _parse_page_size(page_size_text)
    if page_size is None:
        return _failure(ParseFailureKind.INVALID_PAGE_SIZE, "page size", page_size_text)

    referer, remainder = _cut_field(remainder, REFERER_START, QUOTED_FIELD_END)
    if referer is None:
        return _failure(ParseFailureKind.MALFORMED_REFERER, "referer", remainder)

    agent, remainder = _cut_field(remainder, AGENT_START, QUOTED_FIELD_END)
    if agent is None:
        return _failure(ParseFailureKind.MALFORMED_AGENT, "agent", remainder)

    return LogRecord(
        ip_address=ip_address,
        log_date_time=log_date_time,
        method_uri=method_uri,
        status=int(status),
        page_size=page_size,
        referer=referer,
        agent=agent,
    )


def is_valid_ipv4(candidate: str) -> bool:
    """Return whether text is a dotted-quad IPv4 address other than broadcast."""
    try:
        address = ipaddress.IPv4Address(candidate)
    except ValueError:
        return False
    return str(address) != BROADCAST_IPV4


def is_valid_method_uri(method_uri: str) -> bool:
    """Return whether a request field is ``-`` or starts with a known HTTP method.

    Args:
        method_uri: Text between the request quotes.

    Returns:
        True when the line may be kept.
    """
    if method_uri == UNAVAILABLE_FIELD:
        return True
    tokens = method_uri.split(maxsplit=1)
    return bool(tokens) and tokens[0] in HTTP_METHODS


def _cut_field(text: str, opening: str, terminator: str) -> tuple[str | None, str]:
    """Consume an opening delimiter, a value, and its terminator.

    Returns:
        The value and the text after its terminator, or None and the
        unconsumed text when either delimiter is missing.
    """
    if not text.startswith(opening):
        return None, text
    value, found, remainder = text[len(opening) :].partition(terminator)
    if not found:
        return None, text
    return value, remainder


def _is_numeric(text: str) -> bool:
    return _NUMERIC_RE.fullmatch(text) is not None


def _parse_page_size(text: str | None) -> int | None:
    if text == UNAVAILABLE_FIELD:
        return PAGE_SIZE_ABSENT
    if text is None or not _is_numeric(text):
        return None
    return int(text)


def _failure(kind: ParseFailureKind, field_label: str, value: str | None) -> ParseFailure:
    shown_value = "<missing>" if value is None else repr(value.rstrip("\r\n"))
    return ParseFailure(kind=kind, detail=f"{field_label} field is invalid: {shown_value}")
