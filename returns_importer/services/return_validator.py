from __future__ import annotations

import logging
from collections.abc import Iterable, Set

from ..models.config_models import DEFAULT_SCHEMA, WorkbookSchema
from ..models.diagnostic import RETURNS_TABLE, RowDiagnostic
from ..models.entities import ReturnRequest, Status
from ..models.row_data import RowData
from .normalizer import (
    canonicalize,
    normalize_cost,
    normalize_date,
    normalize_enum_token,
    normalize_text,
)
from .registry import UniquenessRegistry

"""Return request row validation (sheet ``devoluciones``).

Must run after customer validation: ``customer_ids`` is the set of customers
accepted in the same import pass, and a return pointing anywhere else
(unknown id, or a customer row that was itself rejected) is rejected.

Closure fields follow the status:
- resolved: fecha_cierre must be a date, resolucion a known resolution
- any other status: both are ignored and stored as None
"""

__all__ = [
    "validate_returns",
    "new_return_registry",
]

logger = logging.getLogger(__name__)


def new_return_registry() -> UniquenessRegistry:
    return UniquenessRegistry("id")


def validate_returns(
    rows: Iterable[RowData],
    customer_ids: Set[str],
    registry: UniquenessRegistry,
    schema: WorkbookSchema = DEFAULT_SCHEMA,
) -> tuple[list[ReturnRequest], list[RowDiagnostic]]:
    """Validate return rows in spreadsheet order.

    Args:
        rows: decoded rows of the returns table
        customer_ids: ids of customers accepted in this run
        registry: call-scoped registry with key id
        schema: supplies the enum alias tables

    Returns:
        (accepted return requests, diagnostics in row order)
    """
    accepted: list[ReturnRequest] = []
    diagnostics: list[RowDiagnostic] = []

    for row in rows:
        row_errors: list[RowDiagnostic] = []

        def fail(column: str, message: str) -> None:
            row_errors.append(RowDiagnostic(RETURNS_TABLE, row.row_number, column, message))

        return_id = normalize_text(row.get("id_devolucion"))
        customer_id = normalize_text(row.get("id_cliente"))
        product = normalize_text(row.get("producto"))
        category = normalize_text(row.get("categoria"))
        reason_token = normalize_enum_token(row.get("motivo"))
        status_token = normalize_enum_token(row.get("estado"))
        reason = canonicalize(reason_token, schema.reason_aliases)
        status = canonicalize(status_token, schema.status_aliases)
        requested_on = normalize_date(row.get("fecha_solicitud"))
        cost = normalize_cost(row.get("costo"))

        if not return_id:
            fail("id_devolucion", "missing id")
        elif registry.seen("id", return_id):
            fail("id_devolucion", "duplicate id")

        if not customer_id:
            fail("id_cliente", "missing customer id")
        elif customer_id not in customer_ids:
            fail("id_cliente", f"customer {customer_id} does not exist")

        if not product:
            fail("producto", "missing product")
        if not category:
            fail("categoria", "missing category")

        if reason is None:
            fail("motivo", f"invalid reason: {reason_token}" if reason_token else "missing reason")
        if status is None:
            fail("estado", f"invalid status: {status_token}" if status_token else "missing status")

        if requested_on is None:
            fail("fecha_solicitud", "invalid request date")

        if cost is None:
            fail("costo", "invalid cost")

        closed_on = None
        resolution = None
        if status is Status.RESOLVED:
            closed_on = normalize_date(row.get("fecha_cierre"))
            resolution = canonicalize(
                normalize_enum_token(row.get("resolucion")), schema.resolution_aliases
            )
            if closed_on is None:
                fail("fecha_cierre", "closing date required when resolved")
            if resolution is None:
                fail("resolucion", "invalid resolution")

        if row_errors:
            diagnostics.extend(row_errors)
            continue

        registry.register(id=return_id)
        accepted.append(
            ReturnRequest(
                id=return_id,
                customer_id=customer_id,
                product=product,
                category=category,
                reason=reason,  # type: ignore[arg-type]
                status=status,  # type: ignore[arg-type]
                requested_on=requested_on,  # type: ignore[arg-type]
                closed_on=closed_on,
                cost=cost,  # type: ignore[arg-type]
                resolution=resolution,
            )
        )

    logger.debug("returns accepted=%d diagnostics=%d", len(accepted), len(diagnostics))
    return accepted, diagnostics
