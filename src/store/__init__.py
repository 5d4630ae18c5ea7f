"""Record storage layer.

This package writes parsed access-log records to a MySQL table and
answers the duplicate probe that keeps repeated loads idempotent.
"""
