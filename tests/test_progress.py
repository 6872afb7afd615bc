import importlib
import logging

import pytest

import progress
from progress import reset, set_counts, set_done, set_progress_pct, set_status, snapshot


def test_set_done_no_args_defaults_to_solved():
    reset()
    set_done()
    snap = snapshot()
    assert snap["status"] == "Solved"
    assert snap["percent"] == 100.0
    assert snap["done"] is True
    assert snap["ok"] is True


def test_set_done_with_failure_flag_and_reason():
    reset()
    set_status("Solving")
    set_done(False, reason="boom")
    snap = snapshot()
    assert snap["status"] == "Error"
    assert snap["percent"] == 100.0
    assert snap["message"] == "boom"
    assert snap["done"] is True
    assert snap["ok"] is False


def test_reset_increments_run_identifier_and_clears_counts():
    reset()
    set_counts(total=19, checked=7, failures=1)
    first = snapshot()
    reset()
    second = snapshot()
    assert isinstance(first["run_id"], int)
    assert second["run_id"] == first["run_id"] + 1
    assert (second["shapes_total"], second["shapes_checked"], second["failures"]) == (0, 0, 0)


def test_set_counts_only_touches_given_fields():
    reset()
    set_counts(total=63)
    set_counts(checked="12")
    set_counts(failures=-4)
    snap = snapshot()
    assert snap["shapes_total"] == 63
    assert snap["shapes_checked"] == 12
    assert snap["failures"] == 0


def test_progress_percent_is_clamped():
    reset()
    set_progress_pct(140)
    assert snapshot()["percent"] == 100.0
    set_progress_pct("nope")
    assert snapshot()["percent"] == 0.0


def test_snapshot_hides_timer_start():
    reset()
    snap = snapshot()
    assert "elapsed_start" not in snap
    assert snap["elapsed_str"] == "0s"


@pytest.fixture
def attempt_lines():
    lines = []

    class _Collect(logging.Handler):
        def emit(self, record):
            lines.append(record.getMessage())

    handler = _Collect()
    progress.ATTEMPT_LOGGER.addHandler(handler)
    try:
        yield lines
    finally:
        progress.ATTEMPT_LOGGER.removeHandler(handler)


def test_phase_and_attempt_transitions_are_logged(attempt_lines):
    reset()
    progress.set_attempt("5-ominoes")
    progress.set_phase("enumerate")
    progress.set_phase("enumerate")
    progress.set_phase("solve")
    set_done(True)

    events = [line.split(" | ")[0] for line in attempt_lines]
    assert events == [
        "Progress reset",
        "Attempt started",
        "Phase started",
        "Phase finished",
        "Phase started",
        "Attempt finished",
        "Phase finished",
        "Run finished",
    ]
    assert "phase=enumerate" in attempt_lines[3]
    assert "duration=" in attempt_lines[3]
    assert snapshot()["phase"] == ""


def test_log_attempt_detail_drops_empty_fields(attempt_lines):
    progress.log_attempt_detail("Survey finished", size=4, variant="", note=None, failures=0)
    assert attempt_lines == ["Survey finished | size=4 failures=0"]


def test_reload_starts_from_idle_state():
    reset()
    set_done(False, reason="previous run")
    fresh = importlib.reload(progress)
    snap = fresh.snapshot()
    assert snap["status"] == "Idle"
    assert snap["done"] is False
    assert snap["message"] == ""
