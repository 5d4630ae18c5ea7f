"""Core constants used across Iplog modules.

This module centralizes delimiters, defaults, and exit codes.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

# Most frequent methods first, then the remaining IANA registry alphabetically.
HTTP_METHODS = (
    "HEAD",
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "TRACE",
    "OPTIONS",
    "CONNECT",
    "ACL",
    "BASELINE-CONTROL",
    "BIND",
    "CHECKIN",
    "CHECKOUT",
    "COPY",
    "LABEL",
    "LINK",
    "LOCK",
    "MERGE",
    "MKACTIVITY",
    "MKCALENDAR",
    "MKCOL",
    "MKREDIRECTREF",
    "MKWORKSPACE",
    "MOVE",
    "ORDERPATCH",
    "PATCH",
    "PROPFIND",
    "PROPPATCH",
    "REBIND",
    "REPORT",
    "SEARCH",
    "UNBIND",
    "UNCHECKOUT",
    "UNLINK",
    "UNLOCK",
    "UPDATE",
    "UPDATEREDIRECTREF",
    "VERSION-CONTROL",
)

UNAVAILABLE_FIELD = "-"
PAGE_SIZE_ABSENT = -1
BROADCAST_IPV4 = "255.255.255.255"

# Each field is an opening delimiter, the value, then a terminator that is consumed with it.
IP_FIELD_END = " "
DATE_TIME_START = "- - ["
DATE_TIME_END = "]"
REQUEST_START = ' "'
REQUEST_END = '"'
STATUS_START = " "
STATUS_END = " "
PAGE_SIZE_END = " "
REFERER_START = '"'
AGENT_START = ' "'
QUOTED_FIELD_END = '"'

DEFAULT_DB_PORT = 3306
DEFAULT_DB_CHARSET = "utf8mb4"
EVENT_NUMBER_PLACEHOLDER = 0
INSERTION_TIME_FORMAT = "%Y.%m%d.%H%M.%S"
TABLE_NAME_PATTERN = r"[A-Za-z0-9_$]+"
LOG_FILE_ENCODING = "utf-8"

IPLOG_VERSION = "1.0.0"
RUN_SPEC_VERSION = 1
VERBOSITY_CHOICES = ("silent", "log", "general", "all")
DEFAULT_VERBOSITY = "general"

EXIT_OK = 0
EXIT_CONFIG_ERROR = 101
EXIT_INPUT_ERROR = 102
EXIT_STORE_ERROR = 103
