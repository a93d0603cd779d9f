from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .diagnostic import RowDiagnostic
from .entities import Customer, ReturnRequest

"""Import outcome models: the single return value of the validation engine.

``accepted`` only says that a well-formed result was produced (no structural
diagnostics). Whether anything may be committed is ``can_commit``: structural
diagnostics empty AND at least one accepted record.
"""

__all__ = [
    "TableCounts",
    "ImportOutcome",
]


@dataclass(frozen=True)
class TableCounts:
    """Per-table row tally."""
    total: int = 0
    valid: int = 0
    invalid: int = 0  # rows with one or more diagnostics (total - valid)

    def to_dict(self) -> dict[str, int]:
        return {"total": self.total, "valid": self.valid, "invalid": self.invalid}


def _json_safe(value: Any) -> Any:
    # dates/Timestamps from the decoder are rendered ISO
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class ImportOutcome:
    """Result of one run of the import engine; ownership passes to the caller."""
    accepted: bool
    customer_counts: TableCounts = field(default_factory=TableCounts)
    return_counts: TableCounts = field(default_factory=TableCounts)
    customer_preview: list[dict[str, Any]] = field(default_factory=list)  # <= preview_rows raw rows
    return_preview: list[dict[str, Any]] = field(default_factory=list)
    customers: list[Customer] = field(default_factory=list)  # accepted records
    returns: list[ReturnRequest] = field(default_factory=list)
    row_diagnostics: list[RowDiagnostic] = field(default_factory=list)
    structural_diagnostics: list[str] = field(default_factory=list)

    @classmethod
    def rejected(cls, structural_diagnostics: list[str]) -> ImportOutcome:
        """Outcome for a workbook that failed the structural check."""
        return cls(accepted=False, structural_diagnostics=list(structural_diagnostics))

    @property
    def accepted_count(self) -> int:
        return len(self.customers) + len(self.returns)

    @property
    def can_commit(self) -> bool:
        """Commit gate used by the persistence collaborator."""
        return not self.structural_diagnostics and self.accepted_count > 0

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation (enum members rendered as their values)."""
        return {
            "accepted": self.accepted,
            "can_commit": self.can_commit,
            "counts": {
                "customers": self.customer_counts.to_dict(),
                "returns": self.return_counts.to_dict(),
            },
            "sample_preview": {
                "customers": [{k: _json_safe(v) for k, v in r.items()} for r in self.customer_preview],
                "returns": [{k: _json_safe(v) for k, v in r.items()} for r in self.return_preview],
            },
            "accepted_records": {
                "customers": [c.to_dict() for c in self.customers],
                "returns": [r.to_dict() for r in self.returns],
            },
            "row_diagnostics": [d.to_dict() for d in self.row_diagnostics],
            "structural_diagnostics": list(self.structural_diagnostics),
        }
