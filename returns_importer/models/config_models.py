from __future__ import annotations

from dataclasses import dataclass, field

from .diagnostic import CUSTOMERS_TABLE, RETURNS_TABLE
from .entities import (
    REASON_ALIASES,
    RESOLUTION_ALIASES,
    STATUS_ALIASES,
    Reason,
    Resolution,
    Status,
)

"""Config dataclasses for the returns workbook importer.

WorkbookSchema describes what the engine expects from a workbook (sheet names,
required columns, enum alias tables). ImportConfig is the root object built by
config/loader.py from config/import.yml.
"""

CUSTOMER_COLUMNS: tuple[str, ...] = (
    "id_cliente",
    "nombres",
    "celular",
    "email",
    "zona",
    "fecha_registro",
)

RETURN_COLUMNS: tuple[str, ...] = (
    "id_devolucion",
    "id_cliente",
    "producto",
    "categoria",
    "motivo",
    "estado",
    "fecha_solicitud",
    "fecha_cierre",
    "costo",
    "resolucion",
)


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class TableSchema:
    """Structural expectations for one table of the workbook."""
    table: str  # logical name used in diagnostics ('customers' / 'returns')
    sheet_name: str  # sheet name inside the workbook
    required_columns: tuple[str, ...]
    text_columns: frozenset[str] = frozenset()  # read as text by the decoder


@dataclass(frozen=True)
class WorkbookSchema:
    """Both tables plus the per-enum canonicalization tables."""
    customers: TableSchema = field(
        default_factory=lambda: TableSchema(
            table=CUSTOMERS_TABLE,
            sheet_name="clientes",
            required_columns=CUSTOMER_COLUMNS,
            text_columns=frozenset({"id_cliente", "celular"}),
        )
    )
    returns: TableSchema = field(
        default_factory=lambda: TableSchema(
            table=RETURNS_TABLE,
            sheet_name="devoluciones",
            required_columns=RETURN_COLUMNS,
            text_columns=frozenset({"id_devolucion", "id_cliente"}),
        )
    )
    reason_aliases: dict[str, Reason] = field(default_factory=lambda: dict(REASON_ALIASES))
    status_aliases: dict[str, Status] = field(default_factory=lambda: dict(STATUS_ALIASES))
    resolution_aliases: dict[str, Resolution] = field(default_factory=lambda: dict(RESOLUTION_ALIASES))

    @property
    def tables(self) -> tuple[TableSchema, TableSchema]:
        """Tables in validation order (customers first)."""
        return (self.customers, self.returns)

    @property
    def sheet_names(self) -> list[str]:
        return [t.sheet_name for t in self.tables]


DEFAULT_SCHEMA = WorkbookSchema()


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for the import process."""
    source_directory: str  # Directory to scan for .xlsx workbooks
    schema: WorkbookSchema = DEFAULT_SCHEMA
    preview_rows: int = 10
    null_sentinels: set[str] | None = None  # upper-cased strings decoded as empty cells
    keep_na_strings: list[str] | None = None  # strings pandas must not turn into NaN
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
