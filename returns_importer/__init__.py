"""Customers / returns workbook importer.

The validation engine is ``run_import``: decoded tables in, ImportOutcome out.
"""

from .models import ImportOutcome, RowDiagnostic, SheetData
from .services.orchestrator import run_import

__version__ = "0.1.0"

__all__ = [
    "ImportOutcome",
    "RowDiagnostic",
    "SheetData",
    "run_import",
]
