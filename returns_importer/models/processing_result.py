from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models for the batch runner (services.orchestrator.process_all).

This module defines the per-workbook statistics and the aggregated result used
to render the SUMMARY line and to pick the CLI exit code.
"""


class FileStatus(Enum):
    """Outcome of one workbook in a batch run.

    - ACCEPTED: structurally valid, engine produced an outcome
    - REJECTED: structural diagnostics (missing sheet / column)
    - FAILED: the workbook could not be read or committed
    """
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-workbook processing statistics."""
    file_name: str
    status: FileStatus
    customers_valid: int = 0
    customers_total: int = 0
    returns_valid: int = 0
    returns_total: int = 0
    row_errors: int = 0  # number of row diagnostics
    committed: bool = False
    elapsed_seconds: float = 0.0
    error: str | None = None  # failure reason summary (FAILED / REJECTED)


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for a batch run."""
    accepted_files: int
    rejected_files: int
    failed_files: int
    committed_files: int
    customers_valid: int
    customers_total: int
    returns_valid: int
    returns_total: int
    row_errors: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.accepted_files + self.rejected_files + self.failed_files

    @property
    def clean(self) -> bool:
        """True when every workbook was accepted without row diagnostics."""
        return self.rejected_files == 0 and self.failed_files == 0 and self.row_errors == 0
