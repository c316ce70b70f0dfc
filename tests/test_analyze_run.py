import numpy as np
import pytest

from simlab.analyze_run import (
    RunAnalysisError,
    analyze,
    load_events,
    load_timeseries,
    relative_drift,
    resolve_run_dir,
)
from simlab.cli import main
from simlab.core.logging_utils import RunLogger


@pytest.fixture
def run_dir(tmp_path):
    runs = tmp_path / "runs"
    with RunLogger(("t", "y", "vy", "energy"), root_dir=runs, run_id="sample") as logger:
        logger.write_meta({"sketch": "gravity"})
        for i in range(20):
            t = i * 0.1
            logger.log_ts([t, 80.0 - t, -1.0, 100.0 + 0.01 * i])
        logger.log_event(1.0, "bounce", {"y": -90.0, "vy": 3.0})
        logger.log_event(1.5, "pause")
    return logger.run_dir


def test_load_timeseries_and_events(run_dir):
    ts = load_timeseries(run_dir / "timeseries.csv")
    assert set(ts) == {"t", "y", "vy", "energy"}
    assert ts["t"].size == 20
    events = load_events(run_dir / "events.csv")
    assert events[0]["type"] == "bounce"
    assert events[0]["details"] == {"vy": 3.0, "y": -90.0}
    assert events[1]["details"] == {}


def test_relative_drift():
    assert relative_drift(np.array([2.0, 2.5])) == pytest.approx(0.25)
    assert relative_drift(np.array([0.0, 0.5])) == pytest.approx(0.5)
    assert relative_drift(np.array([])) == 0.0


def test_analyze_writes_figures(run_dir):
    summary = analyze(run_dir)
    assert summary["sketch"] == "gravity"
    assert summary["samples"] == 20
    assert summary["events"] == {"bounce": 1, "pause": 1}
    assert summary["rel_drift"] == pytest.approx(0.0019)
    names = sorted(path.name for path in summary["figures"])
    assert names == ["energy.png", "vy.png", "y.png"]
    assert all(path.exists() for path in summary["figures"])


def test_resolve_last_run(run_dir):
    assert resolve_run_dir(None, run_dir.parent) == run_dir
    assert resolve_run_dir("sample", run_dir.parent) == run_dir
    with pytest.raises(RunAnalysisError):
        resolve_run_dir("missing", run_dir.parent)


def test_analyze_command(run_dir, capsys):
    assert main(["analyze", "--runs-dir", str(run_dir.parent)]) == 0
    out = capsys.readouterr().out
    assert "Run: sample" in out
    assert "bounce: 1" in out
