from __future__ import annotations

import re
from pathlib import Path

from returns_importer.cli import main as cli_main

"""SUMMARY line contract: last stdout line, fixed key order."""

SUMMARY_RE = re.compile(
    r"^SUMMARY files=(\d+)/(\d+) accepted=(\d+) rejected=(\d+) failed=(\d+) "
    r"customers=(\d+)/(\d+) returns=(\d+)/(\d+) row_errors=(\d+) committed=(\d+) elapsed_sec=[0-9.]+$"
)


def test_summary_is_last_line(write_config: Path, valid_workbook: Path, capsys):
    cli_main([])
    lines = capsys.readouterr().out.strip().splitlines()
    match = SUMMARY_RE.match(lines[-1])
    assert match is not None, lines[-1]
    files, files_total, accepted, rejected, failed, cv, ct, rv, rt, errors, committed = map(int, match.groups())
    assert files == files_total == 1
    assert (accepted, rejected, failed) == (1, 0, 0)
    assert (cv, ct, rv, rt) == (3, 3, 3, 3)
    assert errors == 0
    assert committed == 0


def test_per_file_line_precedes_summary(write_config: Path, valid_workbook: Path, capsys):
    cli_main([])
    out = capsys.readouterr().out
    assert "INFO file=ok.xlsx customers=3/3 returns=3/3 row_errors=0" in out
    assert out.index("file=ok.xlsx") < out.index("SUMMARY")
