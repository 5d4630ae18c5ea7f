"""Access-log ingestion.

This package reads access-log lines, parses them into typed records,
and drives the duplicate-aware load into the record store.
"""
