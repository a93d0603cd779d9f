from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..models.diagnostic import CUSTOMERS_TABLE, RowDiagnostic
from ..models.entities import Customer
from ..models.row_data import RowData
from .normalizer import normalize_date, normalize_text
from .registry import UniquenessRegistry

"""Customer row validation (sheet ``clientes``).

Every check of a row runs even when a sibling check failed, so a single pass
over the spreadsheet reports everything wrong with a row. A row is accepted
only with zero diagnostics; its id, email and phone are then registered and
any later row reusing one of them is rejected (first-seen-wins).
"""

__all__ = [
    "validate_customers",
    "new_customer_registry",
    "PHONE_RE",
    "EMAIL_RE",
]

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^[+]?[\d\s-]{9,15}$", re.ASCII)
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def new_customer_registry() -> UniquenessRegistry:
    return UniquenessRegistry("id", "email", "phone")


def validate_customers(
    rows: Iterable[RowData], registry: UniquenessRegistry
) -> tuple[list[Customer], list[RowDiagnostic]]:
    """Validate customer rows in spreadsheet order.

    Args:
        rows: decoded rows of the customers table
        registry: call-scoped registry with keys id/email/phone

    Returns:
        (accepted customers, diagnostics in row order)
    """
    accepted: list[Customer] = []
    diagnostics: list[RowDiagnostic] = []

    for row in rows:
        row_errors: list[RowDiagnostic] = []

        def fail(column: str, message: str) -> None:
            row_errors.append(RowDiagnostic(CUSTOMERS_TABLE, row.row_number, column, message))

        customer_id = normalize_text(row.get("id_cliente"))
        name = normalize_text(row.get("nombres"))
        phone = normalize_text(row.get("celular"))
        email = normalize_text(row.get("email"))
        zone = normalize_text(row.get("zona"))
        registered_on = normalize_date(row.get("fecha_registro"))

        if not customer_id:
            fail("id_cliente", "missing id")
        elif registry.seen("id", customer_id):
            fail("id_cliente", "duplicate id")

        if not name:
            fail("nombres", "missing name")

        if not phone:
            fail("celular", "missing phone")
        elif not PHONE_RE.match(phone):
            fail("celular", "invalid phone")
        elif registry.seen("phone", phone):
            fail("celular", "duplicate phone")

        if not email:
            fail("email", "missing email")
        elif not EMAIL_RE.match(email):
            fail("email", "invalid email")
        elif registry.seen("email", email):
            fail("email", "duplicate email")

        if not zone:
            fail("zona", "missing zone")

        if registered_on is None:
            fail("fecha_registro", "invalid registration date")

        if row_errors:
            diagnostics.extend(row_errors)
            continue

        registry.register(id=customer_id, email=email, phone=phone)
        accepted.append(
            Customer(
                id=customer_id,
                name=name,
                phone=phone,
                email=email,
                zone=zone,
                registered_on=registered_on,  # type: ignore[arg-type]
            )
        )

    logger.debug("customers accepted=%d diagnostics=%d", len(accepted), len(diagnostics))
    return accepted, diagnostics
