from __future__ import annotations

import numbers
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.row_data import RowData
from ..models.sheet_data import SheetData

"""Workbook decoder: .xlsx file -> named tables for the validation engine.

- Row 1 is the header, row 2 the first data row; RowData.row_number keeps the
  real spreadsheet row even when fully blank rows are skipped.
- Date-formatted cells come back as datetime/Timestamp (date-aware typing);
  numeric cells as int/float.
- Columns listed in ``text_columns`` are turned back into text so ids and phone
  numbers typed as numbers still read as strings.
- No business validation happens here.

pandas (openpyxl engine) does the actual reading.
"""

__all__ = [
    "WorkbookReadError",
    "read_excel_file",
    "normalize_sheet",
    "read_workbook",
]


class WorkbookReadError(Exception):
    """Raised when a workbook cannot be opened or parsed."""


def read_excel_file(
    path: Path, target_sheets: Iterable[str] | None = None, keep_na_strings: list[str] | None = None
) -> dict[str, pd.DataFrame]:
    """Read a workbook returning raw DataFrames keyed by sheet name.

    Parameters
    ----------
    path: workbook path
    target_sheets: sheets to read (None = all sheets)
    keep_na_strings: strings excluded from pandas' default NaN conversion (e.g. ['NA'])
    """
    import pandas._libs.parsers as parsers

    if keep_na_strings:
        na_values = list(parsers.STR_NA_VALUES - set(keep_na_strings))
        keep_default_na = False
    else:
        na_values = None
        keep_default_na = True

    targets = set(target_sheets) if target_sheets is not None else None
    dfs: dict[str, pd.DataFrame] = {}
    try:
        with pd.ExcelFile(path) as xls:
            for name in xls.sheet_names:
                if targets is not None and str(name) not in targets:
                    continue
                # Raw read without header; row 1 is applied as header afterwards
                df = xls.parse(
                    name, header=None, dtype=object, keep_default_na=keep_default_na, na_values=na_values
                )
                dfs[str(name)] = df
    except Exception as e:
        raise WorkbookReadError(f"cannot read workbook {path.name}: {e}") from e
    return dfs


def _header_cell(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def _as_text(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        number = float(value)
        return str(int(number)) if number.is_integer() else str(number)
    return value


def normalize_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    null_sentinels: set[str] | None = None,
    text_columns: set[str] | frozenset[str] | None = None,
) -> SheetData:
    """Turn a raw DataFrame into SheetData using the first row as header.

    Steps:
    1. Header from the first row (blank header cells drop their column)
    2. Remaining rows become RowData with their spreadsheet row number
    3. Fully blank rows are skipped; NaN cells become None
    4. Strings matching a null sentinel (case-insensitive) become None
    """
    if df.shape[0] == 0:
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])

    header = [_header_cell(c) for c in df.iloc[0].tolist()]
    columns = [c for c in header if c]
    rows: list[RowData] = []
    # Positional index i of the raw frame = spreadsheet row i + 1
    for position in range(1, df.shape[0]):
        raw = df.iloc[position]
        if raw.isna().all():
            continue
        values: dict[str, Any] = {}
        for col, val in zip(header, raw.tolist(), strict=False):
            if not col:
                continue
            if val is None or (not isinstance(val, str) and pd.isna(val)):
                values[col] = None
                continue
            if isinstance(val, str):
                stripped = val.strip()
                if null_sentinels and stripped.upper() in null_sentinels:
                    values[col] = None
                    continue
            if text_columns and col in text_columns:
                val = _as_text(val)
            values[col] = val
        rows.append(RowData(row_number=position + 1, values=values))

    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)


def read_workbook(
    path: Path,
    target_sheets: Iterable[str] | None = None,
    keep_na_strings: list[str] | None = None,
    null_sentinels: set[str] | None = None,
    text_columns: dict[str, frozenset[str]] | None = None,
) -> dict[str, SheetData]:
    """Decode a workbook into SheetData keyed by sheet name.

    ``text_columns`` maps sheet name -> columns to read as text.
    """
    raw = read_excel_file(path, target_sheets=target_sheets, keep_na_strings=keep_na_strings)
    return {
        name: normalize_sheet(
            df,
            name,
            null_sentinels=null_sentinels,
            text_columns=(text_columns or {}).get(name),
        )
        for name, df in raw.items()
    }
