from __future__ import annotations

from collections.abc import Mapping

from ..models.config_models import DEFAULT_SCHEMA, WorkbookSchema
from ..models.sheet_data import SheetData

"""Structural validation of a decoded workbook.

Checks that both required tables exist and that each header contains every
required column. Any message returned here is fatal for the whole import: the
orchestrator does not look at a single row.
"""

__all__ = [
    "check_structure",
]


def check_structure(
    tables: Mapping[str, SheetData], schema: WorkbookSchema = DEFAULT_SCHEMA
) -> list[str]:
    """Return the structural diagnostics for ``tables`` (empty list = OK).

    Missing tables are reported first and, when any table is missing, column
    checks are skipped. Missing columns follow the required-column order.
    """
    missing_tables = [
        f'missing required table: "{t.sheet_name}"' for t in schema.tables if t.sheet_name not in tables
    ]
    if missing_tables:
        return missing_tables

    diagnostics: list[str] = []
    for table_schema in schema.tables:
        header = {c.strip() for c in tables[table_schema.sheet_name].columns if c and c.strip()}
        for column in table_schema.required_columns:
            if column not in header:
                diagnostics.append(f'table "{table_schema.sheet_name}" is missing column: {column}')
    return diagnostics
