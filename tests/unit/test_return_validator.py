from __future__ import annotations

from dataclasses import replace

from returns_importer.config.loader import _merge_aliases
from returns_importer.models.config_models import DEFAULT_SCHEMA
from returns_importer.models.entities import Reason, Resolution, Status
from returns_importer.models.sheet_data import SheetData
from returns_importer.services.return_validator import new_return_registry, validate_returns

from conftest import return_record

KNOWN = frozenset({"C-001", "C-002"})


def _validate(records, customer_ids=KNOWN, schema=DEFAULT_SCHEMA):
    rows = SheetData.from_records("devoluciones", records).rows
    return validate_returns(rows, customer_ids, new_return_registry(), schema=schema)


def _messages(diags):
    return [(d.row_number, d.column, d.message) for d in diags]


def test_pending_return_is_accepted_with_canonical_enums():
    accepted, diags = _validate([return_record(1, motivo="Daño", costo="45.5")])
    assert diags == []
    (r,) = accepted
    assert r.reason is Reason.DAMAGE
    assert r.status is Status.PENDING
    assert r.requested_on == "2023-02-01"
    assert r.cost == 45.5
    assert r.closed_on is None
    assert r.resolution is None


def test_unknown_customer_is_rejected():
    accepted, diags = _validate([return_record(1, customer="C-404")])
    assert accepted == []
    assert _messages(diags) == [(2, "id_cliente", "customer C-404 does not exist")]
    assert diags[0].table == "returns"


def test_resolved_without_closing_date_is_rejected():
    accepted, diags = _validate(
        [return_record(1, estado="resuelto", fecha_cierre=None, resolucion="reembolso")]
    )
    assert accepted == []
    assert _messages(diags) == [(2, "fecha_cierre", "closing date required when resolved")]


def test_resolved_requires_known_resolution():
    accepted, diags = _validate(
        [
            return_record(1, estado="Resuelto", fecha_cierre="2023-02-05", resolucion="trueque"),
            return_record(2, estado="resolved", fecha_cierre=44962, resolucion="Cupón"),
        ]
    )
    assert _messages(diags) == [(2, "resolucion", "invalid resolution")]
    (r,) = accepted
    assert r.id == "D-002"
    assert r.closed_on == "2023-02-05"
    assert r.resolution is Resolution.VOUCHER


def test_closure_fields_ignored_unless_resolved():
    accepted, diags = _validate(
        [
            return_record(1, estado="pendiente", fecha_cierre="not a date", resolucion="nonsense"),
            return_record(2, estado="En Proceso", fecha_cierre="2023-02-05", resolucion="reembolso"),
        ]
    )
    assert diags == []
    assert [(r.status, r.closed_on, r.resolution) for r in accepted] == [
        (Status.PENDING, None, None),
        (Status.IN_PROGRESS, None, None),
    ]


def test_duplicate_return_id():
    accepted, diags = _validate([return_record(1), return_record(1, customer="C-002")])
    assert [r.customer_id for r in accepted] == ["C-001"]
    assert _messages(diags) == [(3, "id_devolucion", "duplicate id")]


def test_enum_errors_carry_the_token():
    accepted, diags = _validate(
        [
            return_record(1, motivo="Capricho", estado="Archivado"),
            return_record(2, motivo=None, estado="  "),
        ]
    )
    assert accepted == []
    assert _messages(diags) == [
        (2, "motivo", "invalid reason: capricho"),
        (2, "estado", "invalid status: archivado"),
        (3, "motivo", "missing reason"),
        (3, "estado", "missing status"),
    ]


def test_every_check_reports():
    accepted, diags = _validate(
        [
            {
                "id_devolucion": None,
                "id_cliente": None,
                "producto": "",
                "categoria": None,
                "motivo": "otro",
                "estado": "pendiente",
                "fecha_solicitud": "31/02/2023",
                "fecha_cierre": None,
                "costo": -1,
                "resolucion": None,
            }
        ]
    )
    assert accepted == []
    assert [d.message for d in diags] == [
        "missing id",
        "missing customer id",
        "missing product",
        "missing category",
        "invalid request date",
        "invalid cost",
    ]


def test_cost_values():
    accepted, diags = _validate(
        [
            return_record(1, costo=0),
            return_record(2, costo=" 12.50 "),
            return_record(3, costo="gratis"),
            return_record(4, costo=True),
            return_record(5, costo=None),
        ]
    )
    assert [r.cost for r in accepted] == [0.0, 12.5]
    assert [(d.row_number, d.message) for d in diags] == [
        (4, "invalid cost"),
        (5, "invalid cost"),
        (6, "invalid cost"),
    ]


def test_configured_aliases_are_honoured():
    schema = replace(
        DEFAULT_SCHEMA,
        status_aliases=_merge_aliases(DEFAULT_SCHEMA.status_aliases, {"Abierto": "pending"}, Status, "status"),
    )
    accepted, diags = _validate([return_record(1, estado="ABIERTO")], schema=schema)
    assert diags == []
    assert accepted[0].status is Status.PENDING
