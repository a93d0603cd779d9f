from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..excel.reader import WorkbookReadError, read_workbook
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import DEFAULT_SCHEMA, ImportConfig, WorkbookSchema
from ..models.error_record import STRUCTURAL_ERROR, ErrorRecord
from ..models.import_outcome import ImportOutcome, TableCounts
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from ..models.sheet_data import SheetData
from .commit import CommitError, commit_outcome
from .customer_validator import new_customer_registry, validate_customers
from .progress import ProgressTracker
from .return_validator import new_return_registry, validate_returns
from .structural import check_structure

"""Import orchestration.

run_import() is the validation engine: a synchronous, deterministic transform
from decoded tables to an ImportOutcome.

    structural-check --(no diagnostics)--> row-validation (terminal)
           |
           +--(diagnostics)--> rejected outcome

Row validation runs customers first, then returns against the customers
accepted in the same pass. Uniqueness registries live only for one call.

process_all() is the batch runner used by the CLI: it scans the configured
directory, decodes and validates each workbook, records every diagnostic in
the error log and optionally commits accepted records.
"""

logger = logging.getLogger(__name__)

FILE_LEVEL = "<FILE_LEVEL>"


class ProcessingError(Exception):
    """Fatal error that prevents a batch run (e.g. missing directory)."""


def _counts(total: int, valid: int) -> TableCounts:
    return TableCounts(total=total, valid=valid, invalid=total - valid)


def run_import(
    tables: Mapping[str, SheetData],
    schema: WorkbookSchema = DEFAULT_SCHEMA,
    preview_rows: int = 10,
) -> ImportOutcome:
    """Validate a decoded two-table workbook.

    Args:
        tables: SheetData keyed by sheet name
        schema: sheet names, required columns and enum alias tables
        preview_rows: size of the raw preview kept per table

    Returns:
        ImportOutcome. ``accepted`` is False only for structural failures, in
        which case no row was looked at.
    """
    structural = check_structure(tables, schema)
    if structural:
        logger.debug("structural check failed: %s", structural)
        return ImportOutcome.rejected(structural)

    customer_rows = tables[schema.customers.sheet_name].rows
    return_rows = tables[schema.returns.sheet_name].rows

    customers, customer_diags = validate_customers(customer_rows, new_customer_registry())
    accepted_ids = frozenset(c.id for c in customers)
    returns, return_diags = validate_returns(
        return_rows, accepted_ids, new_return_registry(), schema=schema
    )

    return ImportOutcome(
        accepted=True,
        customer_counts=_counts(len(customer_rows), len(customers)),
        return_counts=_counts(len(return_rows), len(returns)),
        customer_preview=[r.as_dict() for r in customer_rows[:preview_rows]],
        return_preview=[r.as_dict() for r in return_rows[:preview_rows]],
        customers=customers,
        returns=returns,
        row_diagnostics=customer_diags + return_diags,
        structural_diagnostics=[],
    )


def scan_excel_files(directory: Path) -> list[Path]:
    """Scan directory for .xlsx files (non-recursive, sorted by name).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".xlsx")
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _outcome_records(file_name: str, outcome: ImportOutcome, schema: WorkbookSchema) -> list[ErrorRecord]:
    """Error log records for every diagnostic of one workbook, structural first."""
    records = [
        ErrorRecord.create(file_name, FILE_LEVEL, -1, STRUCTURAL_ERROR, message)
        for message in outcome.structural_diagnostics
    ]
    sheets = {t.table: t.sheet_name for t in schema.tables}
    records.extend(
        ErrorRecord.from_diagnostic(file_name, sheets[diag.table], diag) for diag in outcome.row_diagnostics
    )
    return records


def _process_single_file(
    file_path: Path,
    config: ImportConfig,
    cursor: Any,
    commit: bool,
    error_log: ErrorLogBuffer,
) -> FileStat:
    """Decode, validate and (optionally) commit one workbook."""
    schema = config.schema
    start = datetime.now(UTC)

    def elapsed() -> float:
        return (datetime.now(UTC) - start).total_seconds()

    try:
        tables = read_workbook(
            file_path,
            target_sheets=schema.sheet_names,
            keep_na_strings=config.keep_na_strings,
            null_sentinels=config.null_sentinels,
            text_columns={t.sheet_name: t.text_columns for t in schema.tables},
        )
    except WorkbookReadError as e:
        logger.error("file=%s %s", file_path.name, e)
        error_log.append(ErrorRecord.create(file_path.name, FILE_LEVEL, -1, "WORKBOOK_READ_ERROR", str(e)))
        return FileStat(file_name=file_path.name, status=FileStatus.FAILED, elapsed_seconds=elapsed(), error=str(e))

    outcome = run_import(tables, schema=schema, preview_rows=config.preview_rows)
    error_log.extend(_outcome_records(file_path.name, outcome, schema))

    if not outcome.accepted:
        for message in outcome.structural_diagnostics:
            logger.error("file=%s %s", file_path.name, message)
        return FileStat(
            file_name=file_path.name,
            status=FileStatus.REJECTED,
            elapsed_seconds=elapsed(),
            error="; ".join(outcome.structural_diagnostics),
        )

    cc, rc = outcome.customer_counts, outcome.return_counts
    logger.info(
        "file=%s customers=%d/%d returns=%d/%d row_errors=%d",
        file_path.name,
        cc.valid,
        cc.total,
        rc.valid,
        rc.total,
        len(outcome.row_diagnostics),
    )

    committed = False
    if commit:
        if not outcome.can_commit:
            logger.warning("file=%s nothing to commit (no accepted records)", file_path.name)
        elif cursor is None:
            logger.info(
                "file=%s mock mode: would commit customers=%d returns=%d",
                file_path.name,
                len(outcome.customers),
                len(outcome.returns),
            )
        else:
            try:
                result = commit_outcome(outcome, cursor)
            except CommitError as e:
                logger.error("file=%s commit failed: %s", file_path.name, e)
                error_log.append(ErrorRecord.create(file_path.name, FILE_LEVEL, -1, "COMMIT_ERROR", str(e)))
                return FileStat(
                    file_name=file_path.name,
                    status=FileStatus.FAILED,
                    customers_valid=cc.valid,
                    customers_total=cc.total,
                    returns_valid=rc.valid,
                    returns_total=rc.total,
                    row_errors=len(outcome.row_diagnostics),
                    elapsed_seconds=elapsed(),
                    error=f"commit failed: {e}",
                )
            committed = True
            logger.info(
                "file=%s committed customers=%d returns=%d",
                file_path.name,
                result.customers,
                result.returns,
            )

    return FileStat(
        file_name=file_path.name,
        status=FileStatus.ACCEPTED,
        customers_valid=cc.valid,
        customers_total=cc.total,
        returns_valid=rc.valid,
        returns_total=rc.total,
        row_errors=len(outcome.row_diagnostics),
        committed=committed,
        elapsed_seconds=elapsed(),
    )


def process_all(config: ImportConfig, cursor: Any = None, commit: bool = False) -> ProcessingResult:
    """Process all workbooks in the configured directory.

    1. Scans the directory for .xlsx files
    2. Runs the validation engine on each one
    3. Commits accepted records when ``commit`` is set (cursor None = mock mode)
    4. Flushes the error log once and returns aggregated metrics

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer()

    file_paths = scan_excel_files(Path(config.source_directory))

    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths), description="Validating workbooks") as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat = _process_single_file(file_path, config, cursor, commit, error_log)
            file_stats.append(stat)
            progress.set_postfix(
                accepted=sum(1 for s in file_stats if s.status is FileStatus.ACCEPTED),
                row_errors=sum(s.row_errors for s in file_stats),
            )
            progress.finish_file(success=(stat.status is FileStatus.ACCEPTED))

    if len(error_log):
        try:
            path = error_log.flush()
            logger.info("diagnostics written to %s", path)
        except OSError as e:
            logger.warning("failed to write error log: %s", e)

    end_time = datetime.now(UTC)
    return ProcessingResult(
        accepted_files=sum(1 for s in file_stats if s.status is FileStatus.ACCEPTED),
        rejected_files=sum(1 for s in file_stats if s.status is FileStatus.REJECTED),
        failed_files=sum(1 for s in file_stats if s.status is FileStatus.FAILED),
        committed_files=sum(1 for s in file_stats if s.committed),
        customers_valid=sum(s.customers_valid for s in file_stats),
        customers_total=sum(s.customers_total for s in file_stats),
        returns_valid=sum(s.returns_valid for s in file_stats),
        returns_total=sum(s.returns_total for s in file_stats),
        row_errors=sum(s.row_errors for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
