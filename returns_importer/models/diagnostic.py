from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

"""RowDiagnostic model: a validation failure scoped to one row (and column).

Row diagnostics are recoverable. A row carrying one or more diagnostics is
left out of the accepted records without affecting its siblings.
"""

__all__ = [
    "RowDiagnostic",
    "CUSTOMERS_TABLE",
    "RETURNS_TABLE",
]

CUSTOMERS_TABLE = "customers"
RETURNS_TABLE = "returns"


@dataclass(frozen=True)
class RowDiagnostic:
    """Attributes:
        table: 'customers' or 'returns'
        row_number: 1-based spreadsheet row (header = row 1)
        column: spreadsheet column name, None when the problem is not tied to one
        message: human readable description
    """
    table: str
    row_number: int
    column: str | None
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
