from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .row_data import RowData

"""SheetData model: one named table of the two-table workbook.

This is the input shape of the validation engine: a header row plus the
ordered data rows. The workbook decoder (excel/reader.py) produces it from an
.xlsx file; tests and other callers can build it from plain dicts.
"""

__all__ = [
    "SheetData",
    "FIRST_DATA_ROW",
]

# Header occupies row 1
FIRST_DATA_ROW = 2


@dataclass(frozen=True)
class SheetData:
    """Decoded table: header columns and rows in spreadsheet order."""
    sheet_name: str
    columns: list[str]
    rows: list[RowData] = field(default_factory=list)

    @classmethod
    def from_records(
        cls,
        sheet_name: str,
        records: Iterable[Mapping[str, Any]],
        columns: Iterable[str] | None = None,
    ) -> SheetData:
        """Build a table from in-memory records.

        Rows are numbered consecutively from the first data row. When
        ``columns`` is omitted the header is the union of record keys in
        first-seen order.
        """
        records = [dict(r) for r in records]
        if columns is None:
            header: list[str] = []
            for r in records:
                for key in r:
                    if key not in header:
                        header.append(key)
        else:
            header = [str(c).strip() for c in columns]
        rows = [RowData(row_number=FIRST_DATA_ROW + i, values=r) for i, r in enumerate(records)]
        return cls(sheet_name=sheet_name, columns=header, rows=rows)

    def __len__(self) -> int:
        return len(self.rows)
