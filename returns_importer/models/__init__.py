"""Domain models for the returns workbook importer.

This package contains the boundary (RowData, SheetData), entity (Customer,
ReturnRequest), diagnostic and outcome models used throughout the application.
"""

from .config_models import DatabaseConfig, ImportConfig, TableSchema, WorkbookSchema
from .diagnostic import RowDiagnostic
from .entities import Customer, Reason, Resolution, ReturnRequest, Status
from .import_outcome import ImportOutcome, TableCounts
from .row_data import RowData
from .sheet_data import SheetData

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    "TableSchema",
    "WorkbookSchema",
    # Boundary models
    "RowData",
    "SheetData",
    # Accepted entities
    "Customer",
    "ReturnRequest",
    "Reason",
    "Status",
    "Resolution",
    # Results
    "RowDiagnostic",
    "ImportOutcome",
    "TableCounts",
]
