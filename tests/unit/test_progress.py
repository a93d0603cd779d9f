from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

from returns_importer.services import progress
from returns_importer.services.progress import ProgressTracker


def test_disabled_outside_tty(monkeypatch):
    monkeypatch.setattr(progress, "is_tty_enabled", lambda: False)
    with ProgressTracker(3) as tracker:
        assert tracker.pbar is None
        tracker.start_file(Path("a.xlsx"))
        tracker.set_postfix(accepted=1)
        tracker.finish_file()
    assert tracker.current_file == 1


def test_bar_ticks_once_per_workbook(monkeypatch):
    bar = MagicMock()
    factory = MagicMock(return_value=bar)
    monkeypatch.setattr(progress, "is_tty_enabled", lambda: True)
    monkeypatch.setattr(progress, "tqdm", factory)

    with ProgressTracker(2, description="Validating") as tracker:
        tracker.start_file(Path("a.xlsx"))
        tracker.finish_file(success=False)
        tracker.start_file(Path("b.xlsx"))
        tracker.finish_file()

    assert factory.call_args.kwargs["unit"] == "workbook"
    assert bar.update.call_count == 2
    bar.set_description.assert_any_call("Validating (b.xlsx)")
    bar.close.assert_called_once()
    assert tracker.pbar is None


def test_no_bar_for_empty_batch(monkeypatch):
    monkeypatch.setattr(progress, "is_tty_enabled", lambda: True)
    assert ProgressTracker(0).pbar is None
