from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..db.batch_insert import BatchInsertError, batch_insert
from ..models.import_outcome import ImportOutcome

"""Commit collaborator: persist the accepted records of one ImportOutcome.

The store only ever holds the last accepted import, so a commit replaces the
previous content of both tables inside one transaction (returns are deleted
before customers and inserted after them).

Gate: ``outcome.can_commit`` (no structural diagnostics and at least one
accepted record). The engine's ``accepted`` flag alone is not enough.
"""

__all__ = [
    "CommitError",
    "CommitRefusedError",
    "CommitResult",
    "commit_outcome",
    "CUSTOMER_COLUMNS",
    "RETURN_COLUMNS",
]

logger = logging.getLogger(__name__)

CUSTOMER_COLUMNS = ["id", "name", "phone", "email", "zone", "registered_on"]
RETURN_COLUMNS = [
    "id",
    "customer_id",
    "product",
    "category",
    "reason",
    "status",
    "requested_on",
    "closed_on",
    "cost",
    "resolution",
]


class CommitError(Exception):
    """Raised when accepted records could not be persisted (transaction rolled back)."""


class CommitRefusedError(CommitError):
    """Raised when the outcome does not pass the commit gate."""


@dataclass(frozen=True)
class CommitResult:
    customers: int
    returns: int


def commit_outcome(
    outcome: ImportOutcome,
    cursor: Any,
    customers_table: str = "customers",
    returns_table: str = "return_requests",
) -> CommitResult:
    """Replace the stored import with ``outcome``'s accepted records.

    Args:
        outcome: engine result
        cursor: psycopg2 cursor on a connection with autocommit disabled
        customers_table / returns_table: target tables

    Raises:
        CommitRefusedError: outcome has structural diagnostics or nothing accepted
        CommitError: any database failure (after ROLLBACK)
    """
    if not outcome.can_commit:
        if outcome.structural_diagnostics:
            raise CommitRefusedError("import has structural errors")
        raise CommitRefusedError("import has no accepted records")

    try:
        cursor.execute("BEGIN")
        cursor.execute(f"DELETE FROM {returns_table}")
        cursor.execute(f"DELETE FROM {customers_table}")
        inserted_customers = batch_insert(
            cursor, customers_table, CUSTOMER_COLUMNS, (c.to_dict() for c in outcome.customers)
        )
        inserted_returns = batch_insert(
            cursor, returns_table, RETURN_COLUMNS, (r.to_dict() for r in outcome.returns)
        )
        cursor.execute("COMMIT")
    except Exception as e:
        try:
            cursor.execute("ROLLBACK")
        except Exception as rollback_e:
            logger.error("rollback failed: %s", rollback_e)
        if isinstance(e, BatchInsertError):
            raise CommitError(f"insert failed: {e}") from e
        raise CommitError(str(e)) from e

    logger.debug(
        "committed customers=%d returns=%d", inserted_customers.inserted_rows, inserted_returns.inserted_rows
    )
    return CommitResult(customers=inserted_customers.inserted_rows, returns=inserted_returns.inserted_rows)
