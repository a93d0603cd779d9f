from __future__ import annotations

import json
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DEFAULT_SCHEMA, DatabaseConfig, ImportConfig, TableSchema, WorkbookSchema
from ..models.entities import Reason, Resolution, Status
from ..services.normalizer import normalize_enum_token

"""Config loader: config/import.yml -> ImportConfig.

Responsibilities:
- Load YAML
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults (sheet names, text columns, preview size, alias tables)
- Merge configured enum aliases into the default canonicalization tables
"""

E = TypeVar("E", bound=Enum)

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or config violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _merge_aliases(base: dict[str, E], extra: dict[str, str] | None, enum_cls: type[E], name: str) -> dict[str, E]:
    merged = dict(base)
    for token, canonical in (extra or {}).items():
        try:
            member = enum_cls(canonical)
        except ValueError as e:
            allowed = ", ".join(m.value for m in enum_cls)
            raise ConfigError(f"enum_aliases.{name}: '{canonical}' is not one of {allowed}") from e
        merged[normalize_enum_token(token)] = member
    return merged


def _table(base: TableSchema, raw: dict[str, Any] | None) -> TableSchema:
    if not raw:
        return base
    return replace(
        base,
        sheet_name=raw.get("sheet", base.sheet_name),
        text_columns=frozenset(raw["text_columns"]) if "text_columns" in raw else base.text_columns,
    )


def build_schema(data: dict[str, Any]) -> WorkbookSchema:
    tables = data.get("tables") or {}
    aliases = data.get("enum_aliases") or {}
    schema = WorkbookSchema(
        customers=_table(DEFAULT_SCHEMA.customers, tables.get("customers")),
        returns=_table(DEFAULT_SCHEMA.returns, tables.get("returns")),
        reason_aliases=_merge_aliases(DEFAULT_SCHEMA.reason_aliases, aliases.get("reason"), Reason, "reason"),
        status_aliases=_merge_aliases(DEFAULT_SCHEMA.status_aliases, aliases.get("status"), Status, "status"),
        resolution_aliases=_merge_aliases(
            DEFAULT_SCHEMA.resolution_aliases, aliases.get("resolution"), Resolution, "resolution"
        ),
    )
    if schema.customers.sheet_name == schema.returns.sheet_name:
        raise ConfigError("tables.customers.sheet and tables.returns.sheet must differ")
    return schema


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    db_raw = data.get("database", {})
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    sentinels = data.get("null_sentinels")
    return ImportConfig(
        source_directory=data["source_directory"],
        schema=build_schema(data),
        preview_rows=data.get("preview_rows", 10),
        null_sentinels={s.strip().upper() for s in sentinels} if sentinels else None,
        keep_na_strings=data.get("keep_na_strings"),
        database=db,
    )
