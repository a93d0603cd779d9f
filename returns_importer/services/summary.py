from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for the batch runner."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line of a batch run.

    Format:
    SUMMARY files={n}/{n} accepted={a} rejected={r} failed={f}
    customers={valid}/{total} returns={valid}/{total} row_errors={e}
    committed={c} elapsed_sec={s}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     accepted_files=1, rejected_files=0, failed_files=0, committed_files=0,
        ...     customers_valid=19, customers_total=20, returns_valid=28, returns_total=30,
        ...     row_errors=4, start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)  # doctest: +ELLIPSIS
        'SUMMARY files=1/1 accepted=1 rejected=0 failed=0 customers=19/20 returns=28/30 ...'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"accepted={result.accepted_files} "
        f"rejected={result.rejected_files} "
        f"failed={result.failed_files} "
        f"customers={result.customers_valid}/{result.customers_total} "
        f"returns={result.returns_valid}/{result.returns_total} "
        f"row_errors={result.row_errors} "
        f"committed={result.committed_files} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
