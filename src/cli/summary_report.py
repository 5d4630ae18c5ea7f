"""Final run summary rendering for the CLI."""

from __future__ import annotations

from core.types import IngestSummary


def format_summary(summary: IngestSummary) -> str:
    """Render run counters as the end-of-run SUMMARY block.

    Args:
        summary: Counters of a finished run.

    Returns:
        Multi-line report text without a trailing newline.
    """
    rows = [
        "SUMMARY",
        f"  Stop reason : {summary.stop_reason.value}",
        f"  Elapsed time, (hr:min:sec) : {format_elapsed(summary.elapsed_seconds)}",
        "  Totals",
        f"    Log file lines read : {summary.lines_read}",
        f"    Log line parse or validation errors : {summary.parse_failures}",
        f"    Records parsed : {summary.records_parsed}",
        f"    Records inserted : {summary.records_inserted}",
        f"    Duplicate records skipped : {summary.duplicates_skipped}",
        f"    Duplicate probe errors : {summary.probe_failures}",
        f"    Insertion errors : {summary.insert_failures}",
    ]
    return "\n".join(rows)


def format_elapsed(elapsed_seconds: float) -> str:
    """Format seconds as ``H:MM:SS``."""
    total_seconds = int(elapsed_seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"
