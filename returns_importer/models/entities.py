from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Accepted entity models for the returns workbook importer.

Customer and ReturnRequest are only constructed by the row validators once a
row has zero diagnostics, so every field here is trusted.

The *_ALIASES tables map a tokenized cell value (see
services.normalizer.normalize_enum_token) to its canonical enum member. New
spellings are added here (or through the ``enum_aliases`` config section), never
as branches in the validators.
"""

__all__ = [
    "Reason",
    "Status",
    "Resolution",
    "REASON_ALIASES",
    "STATUS_ALIASES",
    "RESOLUTION_ALIASES",
    "Customer",
    "ReturnRequest",
]


class Reason(Enum):
    """Why the customer returned the product."""
    DEFECT = "defect"
    DAMAGE = "damage"
    BUYER_REMORSE = "buyer-remorse"
    OTHER = "other"


class Status(Enum):
    """Return request lifecycle.

    State transitions: pending → in-progress → resolved
    Only resolved requests carry closing data (closed_on, resolution).
    """
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class Resolution(Enum):
    """How a resolved return was settled."""
    REPAIR = "repair"
    EXCHANGE = "exchange"
    REFUND = "refund"
    VOUCHER = "voucher"


REASON_ALIASES: dict[str, Reason] = {
    "defecto": Reason.DEFECT,
    "defect": Reason.DEFECT,
    "daño": Reason.DAMAGE,
    "dano": Reason.DAMAGE,
    "damage": Reason.DAMAGE,
    "arrepentimiento": Reason.BUYER_REMORSE,
    "buyer-remorse": Reason.BUYER_REMORSE,
    "buyer_remorse": Reason.BUYER_REMORSE,
    "otro": Reason.OTHER,
    "other": Reason.OTHER,
}

STATUS_ALIASES: dict[str, Status] = {
    "pendiente": Status.PENDING,
    "pending": Status.PENDING,
    "en_proceso": Status.IN_PROGRESS,
    "in-progress": Status.IN_PROGRESS,
    "in_progress": Status.IN_PROGRESS,
    "resuelto": Status.RESOLVED,
    "resolved": Status.RESOLVED,
}

RESOLUTION_ALIASES: dict[str, Resolution] = {
    "reparación": Resolution.REPAIR,
    "reparacion": Resolution.REPAIR,
    "repair": Resolution.REPAIR,
    "cambio": Resolution.EXCHANGE,
    "exchange": Resolution.EXCHANGE,
    "reembolso": Resolution.REFUND,
    "refund": Resolution.REFUND,
    "cupón": Resolution.VOUCHER,
    "cupon": Resolution.VOUCHER,
    "voucher": Resolution.VOUCHER,
}


@dataclass(frozen=True)
class Customer:
    """Accepted customer (sheet ``clientes``)."""
    id: str  # id_cliente
    name: str  # nombres
    phone: str  # celular
    email: str
    zone: str  # zona
    registered_on: str  # fecha_registro, YYYY-MM-DD

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "zone": self.zone,
            "registered_on": self.registered_on,
        }


@dataclass(frozen=True)
class ReturnRequest:
    """Accepted return request (sheet ``devoluciones``).

    closed_on and resolution are set only when status is RESOLVED; for every
    other status they are None even if the spreadsheet had values.
    """
    id: str  # id_devolucion
    customer_id: str  # id_cliente, references an accepted Customer
    product: str
    category: str
    reason: Reason
    status: Status
    requested_on: str  # YYYY-MM-DD
    closed_on: str | None
    cost: float
    resolution: Resolution | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "product": self.product,
            "category": self.category,
            "reason": self.reason.value,
            "status": self.status.value,
            "requested_on": self.requested_on,
            "closed_on": self.closed_on,
            "cost": self.cost,
            "resolution": self.resolution.value if self.resolution is not None else None,
        }
