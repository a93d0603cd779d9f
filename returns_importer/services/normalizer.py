from __future__ import annotations

import math
import numbers
import re
from collections.abc import Mapping
from datetime import UTC, date, datetime, timedelta
from enum import Enum
from typing import Any, TypeVar

import pandas as pd

"""Cell normalization for the returns workbook importer.

Pure functions turning raw cell values (as produced by the workbook decoder or
any other caller) into canonical strings, enum tokens, enum members, ISO dates
and costs. None of them raise on bad input: they return "" / None and leave the
diagnosis to the row validators.

Dates arrive in two encodings for the same logical field:
- spreadsheet serial numbers (days since 1899-12-30, 25569 = 1970-01-01)
- user-typed text (ISO `YYYY-MM-DD` or a few common day-first layouts)
The decoder may also hand over real date/datetime/Timestamp objects.
"""

__all__ = [
    "normalize_text",
    "normalize_enum_token",
    "canonicalize",
    "normalize_date",
    "normalize_cost",
    "SERIAL_EPOCH_OFFSET",
]

E = TypeVar("E", bound=Enum)

# Spreadsheet serial of 1970-01-01
SERIAL_EPOCH_OFFSET = 25569
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# ISO date followed by a time part, e.g. 2023-03-01T10:00:00Z
_ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]")
_WHITESPACE_RE = re.compile(r"\s+")

# Day-first layouts accepted for typed dates (tried in order)
DATE_FORMATS: tuple[str, ...] = (
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
)


def normalize_text(value: Any) -> str:
    """Return the trimmed string, or "" for absent / non-text cells."""
    if not isinstance(value, str):
        return ""
    return value.strip()


def normalize_enum_token(value: Any) -> str:
    """Tokenize an enum cell: trimmed, lower-cased, whitespace runs -> '_'.

    >>> normalize_enum_token("  En   Proceso ")
    'en_proceso'
    """
    if value is None:
        return ""
    return _WHITESPACE_RE.sub("_", str(value).strip().lower())


def canonicalize(token: str, aliases: Mapping[str, E]) -> E | None:
    """Fold a token through a per-enum alias table. Unknown tokens give None."""
    if not token:
        return None
    return aliases.get(token)


def _from_serial(value: float) -> str | None:
    if not math.isfinite(value):
        return None
    days = math.floor(value) - SERIAL_EPOCH_OFFSET
    try:
        return (_EPOCH + timedelta(days=days)).strftime("%Y-%m-%d")
    except OverflowError:
        return None


def _from_text(text: str) -> str | None:
    if not text:
        return None
    if ISO_DATE_RE.match(text):
        try:
            date.fromisoformat(text)
        except ValueError:
            return None  # e.g. 2023-02-30
        return text
    if _ISO_DATETIME_RE.match(text):
        parsed = pd.to_datetime(text, format="ISO8601", errors="coerce")
        return None if pd.isna(parsed) else parsed.strftime("%Y-%m-%d")
    for fmt in DATE_FORMATS:
        parsed = pd.to_datetime(text, format=fmt, errors="coerce")
        if not pd.isna(parsed):
            return parsed.strftime("%Y-%m-%d")
    return None


def normalize_date(value: Any) -> str | None:
    """Normalize a date cell to ``YYYY-MM-DD``.

    Accepts:
    (a) a spreadsheet serial number: days = floor(v) - 25569 after 1970-01-01 UTC
    (b) a ``YYYY-MM-DD`` string, returned unchanged when it is a real calendar date
    (c) another date string (ISO datetime or one of DATE_FORMATS)
    (d) date / datetime / pandas.Timestamp values from the decoder

    Anything else, or a value that does not denote a valid calendar date,
    yields None. The function is idempotent on its own output.

    >>> normalize_date(44593)
    '2022-02-01'
    >>> normalize_date("2022-02-01")
    '2022-02-01'
    """
    if value is None or value is pd.NaT or isinstance(value, bool):
        return None
    if isinstance(value, datetime):  # includes pandas.Timestamp
        if pd.isna(value):
            return None
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, numbers.Real):
        return _from_serial(float(value))
    if isinstance(value, str):
        return _from_text(value.strip())
    return None


def normalize_cost(value: Any) -> float | None:
    """Parse a cost cell into a non-negative float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number
