from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from returns_importer.models.entities import (
    REASON_ALIASES,
    RESOLUTION_ALIASES,
    STATUS_ALIASES,
    Reason,
    Resolution,
    Status,
)
from returns_importer.services.normalizer import (
    canonicalize,
    normalize_cost,
    normalize_date,
    normalize_enum_token,
    normalize_text,
)


@pytest.mark.parametrize(
    "value,expected",
    [(None, ""), (42, ""), (3.5, ""), (True, ""), ("  Ana  ", "Ana"), ("", "")],
)
def test_normalize_text(value, expected):
    assert normalize_text(value) == expected


def test_normalize_enum_token_collapses_whitespace():
    assert normalize_enum_token("  En   Proceso ") == "en_proceso"
    assert normalize_enum_token("RESUELTO") == "resuelto"
    assert normalize_enum_token(None) == ""
    assert normalize_enum_token("") == ""


def test_canonicalize_folds_aliases():
    assert canonicalize("dano", REASON_ALIASES) is Reason.DAMAGE
    assert canonicalize("daño", REASON_ALIASES) is Reason.DAMAGE
    assert canonicalize("arrepentimiento", REASON_ALIASES) is Reason.BUYER_REMORSE
    assert canonicalize("en_proceso", STATUS_ALIASES) is Status.IN_PROGRESS
    assert canonicalize("reparacion", RESOLUTION_ALIASES) is Resolution.REPAIR
    assert canonicalize("cupon", RESOLUTION_ALIASES) is Resolution.VOUCHER
    assert canonicalize("refund", RESOLUTION_ALIASES) is Resolution.REFUND


def test_canonicalize_unknown_or_empty():
    assert canonicalize("roto", REASON_ALIASES) is None
    assert canonicalize("", STATUS_ALIASES) is None


def test_serial_and_text_dates_agree():
    """Serial 44593 and the text 2022-02-01 are the same day."""
    assert normalize_date(44593) == "2022-02-01"
    assert normalize_date("2022-02-01") == "2022-02-01"
    assert normalize_date(44593.75) == "2022-02-01"  # time part floored


def test_normalize_date_idempotent_on_iso():
    once = normalize_date("2023-03-01")
    assert normalize_date(once) == once


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2023-03-01T10:30:00", "2023-03-01"),
        ("01/03/2023", "2023-03-01"),  # day first
        ("2023/03/01", "2023-03-01"),
        ("  2023-03-01 ", "2023-03-01"),
        (datetime(2023, 3, 1, 15, 0), "2023-03-01"),
        (date(2023, 3, 1), "2023-03-01"),
        (pd.Timestamp("2023-03-01"), "2023-03-01"),
    ],
)
def test_normalize_date_accepted_inputs(value, expected):
    assert normalize_date(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "not a date", "2023-02-30", "2023-13-01", True, float("nan"), pd.NaT, [2023, 1, 1], 1e12],
)
def test_normalize_date_rejects(value):
    assert normalize_date(value) is None


@pytest.mark.parametrize(
    "value,expected",
    [(0, 0.0), (120, 120.0), (12.5, 12.5), ("  99.90 ", 99.9), ("0", 0.0)],
)
def test_normalize_cost_valid(value, expected):
    assert normalize_cost(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", -1, "-5", True, float("nan"), float("inf")])
def test_normalize_cost_invalid(value):
    assert normalize_cost(value) is None
