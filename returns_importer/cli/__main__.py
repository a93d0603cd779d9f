from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..excel.reader import WorkbookReadError, read_workbook
from ..logging.init import log_summary, setup_logging
from ..models.config_models import ImportConfig
from ..services.orchestrator import ProcessingError, process_all, run_import, scan_excel_files
from ..services.summary import render_summary_line

"""CLI entrypoint: returns-import.

Flow:
- Load .env and config/import.yml
- Scan source_directory for .xlsx workbooks (non-recursive)
- Validate each workbook, log per-file counts and write diagnostics to logs/
- With --commit, persist accepted records of each committable workbook
- Print the SUMMARY line and exit with 0 (clean) / 2 (diagnostics) / 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_DIAGNOSTICS = 2


def _resolve_dsn(cfg: ImportConfig) -> str:
    """Connection string resolution order.

    1. DATABASE_URL / PGDSN environment variables (.env included)
    2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
    3. database section of the config file
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Yield a psycopg2 cursor; transactions are driven by services.commit."""
    import psycopg2

    conn = psycopg2.connect(_resolve_dsn(cfg))
    conn.autocommit = False
    try:
        with conn.cursor() as cur:
            yield cur
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so that its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="returns-import", description="Customers / returns workbook importer")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to import.yml")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print each workbook's validation outcome (preview, counts, diagnostics) as JSON then exit",
    )
    p.add_argument("--commit", action="store_true", help="Persist accepted records to PostgreSQL")
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    try:
        files = scan_excel_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no .xlsx files")
        return EXIT_SUCCESS_ALL
    schema = cfg.schema
    for f in files:
        print(f"FILE: {f.name}")
        try:
            tables = read_workbook(
                f,
                target_sheets=schema.sheet_names,
                keep_na_strings=cfg.keep_na_strings,
                null_sentinels=cfg.null_sentinels,
                text_columns={t.sheet_name: t.text_columns for t in schema.tables},
            )
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        outcome = run_import(tables, schema=schema, preview_rows=cfg.preview_rows)
        print(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=2))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None -> read sys.argv; [] means "no arguments" (tests)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    app_logger = setup_logging(debug=args.debug)
    if args.debug:
        app_logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        app_logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        app_logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    app_logger.info(f"Processing workbooks from: {directory}")

    # DISABLE_DB_CONNECT=1 forces mock mode (tests, dry runs)
    use_db = args.commit and os.getenv("DISABLE_DB_CONNECT") != "1"
    mode = "mock"
    try:
        if use_db:
            try:
                with _db_connection(cfg) as cur:
                    mode = "live"
                    result = process_all(cfg, cursor=cur, commit=True)
            except ProcessingError:
                raise
            except Exception as db_e:
                if mode == "live":
                    raise
                app_logger.warning(f"DB connection failed -> mock mode, nothing committed: {db_e}")
                result = process_all(cfg, cursor=None, commit=True)
        else:
            result = process_all(cfg, cursor=None, commit=args.commit)
    except ProcessingError as e:
        app_logger.error(f"processing({mode}): {e}")
        return EXIT_FATAL

    app_logger.info(f"mode={mode} committed_files={result.committed_files}")
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.clean:
        return EXIT_SUCCESS_ALL
    return EXIT_DIAGNOSTICS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
