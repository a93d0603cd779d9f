# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from returns_importer.logging.init import reset_logging
from returns_importer.models.sheet_data import SheetData


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
tables:
  customers:
    sheet: clientes
    text_columns: [id_cliente, celular]
  returns:
    sheet: devoluciones
    text_columns: [id_devolucion, id_cliente]
preview_rows: 10
null_sentinels: ["N/A", "-"]
enum_aliases:
  reason:
    dañado: damage
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def customer_record(i: int = 1, **overrides: Any) -> dict[str, Any]:
    rec = {
        "id_cliente": f"C-{i:03d}",
        "nombres": f"Cliente {i}",
        "celular": f"999000{i:03d}",
        "email": f"cliente{i}@example.com",
        "zona": "Norte",
        "fecha_registro": "2023-01-15",
    }
    rec.update(overrides)
    return rec


def return_record(i: int = 1, customer: str = "C-001", **overrides: Any) -> dict[str, Any]:
    rec = {
        "id_devolucion": f"D-{i:03d}",
        "id_cliente": customer,
        "producto": "Producto A",
        "categoria": "Hogar",
        "motivo": "defecto",
        "estado": "pendiente",
        "fecha_solicitud": "2023-02-01",
        "fecha_cierre": None,
        "costo": 120,
        "resolucion": None,
    }
    rec.update(overrides)
    return rec


def make_tables(
    customers: list[dict[str, Any]], returns: list[dict[str, Any]]
) -> dict[str, SheetData]:
    from returns_importer.models.config_models import CUSTOMER_COLUMNS, RETURN_COLUMNS

    return {
        "clientes": SheetData.from_records("clientes", customers, columns=CUSTOMER_COLUMNS),
        "devoluciones": SheetData.from_records("devoluciones", returns, columns=RETURN_COLUMNS),
    }


def make_workbook(path: Path, sheets: dict[str, list[dict[str, Any]]]) -> Path:
    """Write one sheet per entry; row 1 is the header (DataFrame columns)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, records in sheets.items():
            pd.DataFrame(records).to_excel(writer, sheet_name=sheet, index=False)
    return path


@pytest.fixture()
def valid_workbook(temp_workdir: Path) -> Path:
    customers = [customer_record(i) for i in range(1, 4)]
    returns = [
        return_record(1, "C-001"),
        return_record(2, "C-002", estado="resuelto", fecha_cierre="2023-02-05", resolucion="reembolso"),
        return_record(3, "C-003", estado="en proceso"),
    ]
    return make_workbook(
        temp_workdir / "data" / "ok.xlsx", {"clientes": customers, "devoluciones": returns}
    )
