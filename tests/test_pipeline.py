from __future__ import annotations

from typing import Any, Dict, List

import pytest

from hyprdots_installer.pipeline import run_pipeline
from hyprdots_installer.state_store import ensure_defaults


class RecordingStep:
    def __init__(self, step_id: str, log: List[str], fail: bool = False) -> None:
        self.step_id = step_id
        self.log = log
        self.fail = fail

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        self.log.append(self.step_id)
        if self.fail:
            raise RuntimeError(f"{self.step_id} failed")
        return state


def _steps(log: List[str], failing: str = ""):
    return [RecordingStep(s, log, fail=(s == failing)) for s in ("10_a", "20_b", "30_c")]


def test_runs_all_in_order():
    log: List[str] = []
    result = run_pipeline(state=ensure_defaults({}), steps=_steps(log))
    assert log == ["10_a", "20_b", "30_c"]
    assert result.ran_steps == log
    assert result.finished
    assert result.state["execution"]["current_step"] is None


def test_resume_skips_completed_steps():
    log: List[str] = []
    state = ensure_defaults({})
    with pytest.raises(RuntimeError):
        run_pipeline(state=state, steps=_steps(log, failing="20_b"))
    assert state["execution"]["completed_steps"] == ["10_a"]
    assert state["execution"]["current_step"] == "20_b"

    log.clear()
    result = run_pipeline(state=state, steps=_steps(log))
    assert log == ["20_b", "30_c"]
    assert result.skipped_steps == ["10_a"]


def test_force_reruns_completed_steps():
    log: List[str] = []
    state = ensure_defaults({"execution": {"completed_steps": ["10_a", "20_b"]}})
    run_pipeline(state=state, steps=_steps(log), force=True)
    assert log == ["10_a", "20_b", "30_c"]


def test_start_at_and_stop_after():
    log: List[str] = []
    result = run_pipeline(state=ensure_defaults({}), steps=_steps(log), start_at="20_b", stop_after="20_b")
    assert log == ["20_b"]
    assert not result.finished


def test_dry_run_marks_nothing_completed():
    log: List[str] = []
    state = ensure_defaults({})
    run_pipeline(state=state, steps=_steps(log), dry_run=True)
    assert log == ["10_a", "20_b", "30_c"]
    assert state["execution"]["completed_steps"] == []


def test_unknown_step_id_rejected():
    with pytest.raises(ValueError, match="Unknown step_id"):
        run_pipeline(state=ensure_defaults({}), steps=_steps([]), start_at="99_nope")
