from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

"""DB batch insert via psycopg2.extras.execute_values.

Used by services/commit.py to write accepted records. Records are mappings
(``Customer.to_dict()`` / ``ReturnRequest.to_dict()``) and ``columns`` fixes
both the INSERT column list and the value order. The table name is trusted
(it comes from code, never from the workbook); column names are quoted.
"""

__all__ = [
    "BatchInsertError",
    "InsertResult",
    "batch_insert",
]

try:  # pragma: no cover - optional until psycopg2 present at runtime
    from psycopg2.extras import execute_values
except ImportError:  # pragma: no cover
    execute_values = None  # type: ignore


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class InsertResult:
    table: str
    inserted_rows: int


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    records: Iterable[Mapping[str, Any]],
    page_size: int = 1000,
) -> InsertResult:
    """Insert ``records`` into ``table`` in pages of ``page_size`` rows.

    Raises:
        BatchInsertError: driver missing, a record lacks a column, or the
            database rejected the statement
    """
    if execute_values is None:
        raise BatchInsertError("psycopg2 not available")

    try:
        values = [tuple(rec[c] for c in columns) for rec in records]
    except KeyError as e:
        raise BatchInsertError(f"record for {table} has no column {e}") from e
    if not values:
        return InsertResult(table=table, inserted_rows=0)

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    try:
        execute_values(cursor, sql, values, page_size=page_size)
    except Exception as e:
        raise BatchInsertError(f"{table}: {e}") from e
    return InsertResult(table=table, inserted_rows=len(values))
