#!/usr/bin/env python3
"""Sample workbook generator for the returns importer.

Writes an .xlsx file with the two sheets the importer expects:
- clientes: id_cliente, nombres, celular, email, zona, fecha_registro
- devoluciones: id_devolucion, id_cliente, producto, categoria, motivo,
  estado, fecha_solicitud, fecha_cierre, costo, resolucion

Row 1 of each sheet is the header. With --with-errors a few rows are broken on
purpose (duplicate id, bad phone, unknown customer, resolved without closing
date) so the row diagnostics can be exercised by hand.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

ZONES = ["Norte", "Sur", "Este", "Oeste", "Centro"]
REASONS = ["defecto", "daño", "arrepentimiento", "otro"]
STATUSES = ["pendiente", "en_proceso", "resuelto"]
RESOLUTIONS = ["reparación", "cambio", "reembolso", "cupón"]
CATEGORIES = ["Electrónica", "Hogar", "Ropa", "Deportes"]


def generate_customers(count: int, rng: np.random.Generator) -> list[dict[str, Any]]:
    return [
        {
            "id_cliente": f"C-{i:03d}",
            "nombres": f"Cliente {i}",
            "celular": f"999000{i:03d}",
            "email": f"cliente{i}@example.com",
            "zona": str(rng.choice(ZONES)),
            "fecha_registro": "2023-01-15",
        }
        for i in range(1, count + 1)
    ]


def generate_returns(count: int, customers: int, rng: np.random.Generator) -> list[dict[str, Any]]:
    rows = []
    for i in range(1, count + 1):
        status = str(rng.choice(STATUSES))
        resolved = status == "resuelto"
        rows.append(
            {
                "id_devolucion": f"D-{i:03d}",
                "id_cliente": f"C-{int(rng.integers(1, customers + 1)):03d}",
                "producto": f"Producto {chr(65 + i % 26)}",
                "categoria": str(rng.choice(CATEGORIES)),
                "motivo": str(rng.choice(REASONS)),
                "estado": status,
                "fecha_solicitud": "2023-02-01",
                "fecha_cierre": "2023-02-05" if resolved else None,
                "costo": int(rng.integers(50, 550)),
                "resolucion": str(rng.choice(RESOLUTIONS)) if resolved else None,
            }
        )
    return rows


def inject_errors(customers: list[dict[str, Any]], returns: list[dict[str, Any]]) -> None:
    """Append rows that the importer must reject."""
    if customers:
        customers.append(dict(customers[0], nombres="Duplicado"))  # duplicate id/phone/email
    customers.append(
        {
            "id_cliente": "C-900",
            "nombres": "Telefono Malo",
            "celular": "12ab",
            "email": "malo@example.com",
            "zona": "Sur",
            "fecha_registro": "2023-01-15",
        }
    )
    returns.append(
        {
            "id_devolucion": "D-900",
            "id_cliente": "C-999",  # unknown customer
            "producto": "Producto Z",
            "categoria": "Hogar",
            "motivo": "otro",
            "estado": "pendiente",
            "fecha_solicitud": "2023-02-01",
            "fecha_cierre": None,
            "costo": 10,
            "resolucion": None,
        }
    )
    returns.append(
        {
            "id_devolucion": "D-901",
            "id_cliente": "C-001",
            "producto": "Producto Y",
            "categoria": "Ropa",
            "motivo": "defecto",
            "estado": "resuelto",
            "fecha_solicitud": "2023-02-01",
            "fecha_cierre": None,  # required when resolved
            "costo": 25,
            "resolucion": "reembolso",
        }
    )


def create_workbook(output_path: Path, customers: int, returns: int, seed: int, with_errors: bool) -> None:
    rng = np.random.default_rng(seed)
    customer_rows = generate_customers(customers, rng)
    return_rows = generate_returns(returns, customers, rng)
    if with_errors:
        inject_errors(customer_rows, return_rows)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(customer_rows).to_excel(writer, sheet_name="clientes", index=False)
        pd.DataFrame(return_rows).to_excel(writer, sheet_name="devoluciones", index=False)

    print(f"Created workbook: {output_path}")
    print(f"  clientes: {len(customer_rows)} rows")
    print(f"  devoluciones: {len(return_rows)} rows")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a sample customers/returns workbook")
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--customers", type=int, default=20, help="Number of customers (default: 20)")
    parser.add_argument("--returns", type=int, default=30, help="Number of return requests (default: 30)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--with-errors", action="store_true", help="Append rows the importer must reject")
    args = parser.parse_args()

    if args.customers < 1 or args.returns < 0:
        print("Error: --customers must be >= 1 and --returns >= 0", file=sys.stderr)
        return 1
    if args.output.suffix != ".xlsx":
        print("Error: output file must have .xlsx extension", file=sys.stderr)
        return 1

    create_workbook(args.output, args.customers, args.returns, args.seed, args.with_errors)
    return 0


if __name__ == "__main__":
    sys.exit(main())
