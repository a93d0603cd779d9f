from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""RowData model for the returns workbook importer.

RowData is the untyped boundary representation of a single spreadsheet row
(RawRow). Values are exactly what the decoder produced; nothing in the
validation engine mutates them. Typed entities are only materialized after a
row passes validation (see models/entities.py).
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Logical representation of a single data row as decoded from the workbook.

    The row_number refers to the original spreadsheet row number
    (row 1 = header, row 2 = first data row).
    """
    row_number: int  # 1-based spreadsheet row number
    values: dict[str, Any] = field(default_factory=dict)  # Column name -> raw cell value

    def get(self, column: str, default: Any = None) -> Any:
        return self.values.get(column, default)

    def as_dict(self) -> dict[str, Any]:
        """Shallow copy of the raw values (used for previews)."""
        return dict(self.values)
