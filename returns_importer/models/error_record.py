from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .diagnostic import RowDiagnostic

"""ErrorRecord model for the JSON Lines diagnostics log.

Each row diagnostic, structural diagnostic or file-level failure of a batch run
becomes one ErrorRecord. row=-1 is the sentinel for problems that are not tied
to a spreadsheet row (missing sheet, unreadable file, commit failure).

The key set is fixed (see contracts test): timestamp, file, sheet, row, column,
error_type, message.
"""

__all__ = [
    "ErrorRecord",
    "ROW_VALIDATION_ERROR",
    "STRUCTURAL_ERROR",
]

ROW_VALIDATION_ERROR = "ROW_VALIDATION_ERROR"
STRUCTURAL_ERROR = "STRUCTURAL_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook filename being processed
        sheet: sheet name within the workbook ('<FILE_LEVEL>' when unknown)
        row: 1-based row number. -1 for file-level errors where row is unknown
        column: column name or None
        error_type: error classification in UPPER_SNAKE_CASE format
        message: human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int
    column: str | None
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(
        file: str,
        sheet: str,
        row: int,
        error_type: str,
        message: str,
        column: str | None = None,
    ) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            column=column,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_diagnostic(file: str, sheet: str, diagnostic: RowDiagnostic) -> ErrorRecord:
        return ErrorRecord.create(
            file=file,
            sheet=sheet,
            row=diagnostic.row_number,
            error_type=ROW_VALIDATION_ERROR,
            message=diagnostic.message,
            column=diagnostic.column,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
