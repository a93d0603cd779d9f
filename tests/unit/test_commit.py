from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from returns_importer import run_import
from returns_importer.models.import_outcome import ImportOutcome
from returns_importer.services import commit as commit_mod
from returns_importer.services.commit import CommitError, CommitRefusedError, commit_outcome

from conftest import customer_record, make_tables, return_record


@pytest.fixture()
def inserted(monkeypatch):
    calls: list[tuple[str, list]] = []

    def fake_execute_values(cursor, sql, rows, page_size=1000):
        calls.append((sql, rows))

    monkeypatch.setattr("returns_importer.db.batch_insert.execute_values", fake_execute_values)
    return calls


def _outcome() -> ImportOutcome:
    return run_import(
        make_tables(
            [customer_record(1), customer_record(2)],
            [return_record(1, "C-002", estado="resuelto", fecha_cierre="2023-02-05", resolucion="refund")],
        )
    )


def _statements(cursor: MagicMock) -> list[str]:
    return [c.args[0] for c in cursor.execute.call_args_list]


def test_commit_replaces_both_tables(inserted):
    cursor = MagicMock()
    result = commit_outcome(_outcome(), cursor)

    assert (result.customers, result.returns) == (2, 1)
    assert _statements(cursor) == [
        "BEGIN",
        "DELETE FROM return_requests",
        "DELETE FROM customers",
        "COMMIT",
    ]
    (cust_sql, cust_rows), (ret_sql, ret_rows) = inserted
    assert cust_sql.startswith('INSERT INTO customers ("id","name","phone"')
    assert cust_rows[0] == ("C-001", "Cliente 1", "999000001", "cliente1@example.com", "Norte", "2023-01-15")
    assert ret_sql.startswith("INSERT INTO return_requests")
    assert ret_rows == [
        ("D-001", "C-002", "Producto A", "Hogar", "defect", "resolved", "2023-02-01", "2023-02-05", 120.0, "refund")
    ]


def test_custom_table_names(inserted):
    cursor = MagicMock()
    commit_outcome(_outcome(), cursor, customers_table="stg_customers", returns_table="stg_returns")
    assert "DELETE FROM stg_returns" in _statements(cursor)
    assert inserted[0][0].startswith("INSERT INTO stg_customers")


def test_structurally_rejected_outcome_is_refused(inserted):
    cursor = MagicMock()
    with pytest.raises(CommitRefusedError, match="structural"):
        commit_outcome(ImportOutcome.rejected(['missing required table: "clientes"']), cursor)
    cursor.execute.assert_not_called()


def test_outcome_without_records_is_refused(inserted):
    outcome = run_import(make_tables([customer_record(1, email="bad")], []))
    assert outcome.accepted
    with pytest.raises(CommitRefusedError, match="no accepted records"):
        commit_outcome(outcome, MagicMock())
    assert inserted == []


def test_insert_failure_rolls_back(monkeypatch):
    def boom(cursor, sql, rows, page_size=1000):
        raise RuntimeError("unique violation")

    monkeypatch.setattr("returns_importer.db.batch_insert.execute_values", boom)
    cursor = MagicMock()
    with pytest.raises(CommitError, match="insert failed: customers: unique violation"):
        commit_outcome(_outcome(), cursor)
    statements = _statements(cursor)
    assert statements[-1] == "ROLLBACK"
    assert "COMMIT" not in statements


def test_rollback_failure_is_logged(inserted, caplog):
    cursor = MagicMock()

    def execute(sql):
        if sql in ("DELETE FROM customers", "ROLLBACK"):
            raise RuntimeError(f"{sql} failed")

    cursor.execute.side_effect = execute
    with caplog.at_level("ERROR", logger=commit_mod.__name__):
        with pytest.raises(CommitError, match="DELETE FROM customers failed"):
            commit_outcome(_outcome(), cursor)
    assert "rollback failed" in caplog.text
