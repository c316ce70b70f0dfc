"""Analyze a recorded sketch run and generate diagnostic figures."""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from simlab.core.logging_utils import RunLogger

FIGS_SUBDIR = "figs"
DEFAULT_RUNS_DIR = Path("data") / "runs"
_EVENT_COLORS = {"bounce": "#d9480f", "reset": "#1864ab", "pause": "#868e96", "resume": "#2b8a3e"}


class RunAnalysisError(RuntimeError):
    """A run directory cannot be analyzed."""


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row or not row.get("type"):
                continue
            event = {"t": float(row["t"]), "type": row["type"], "details": {}}
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def resolve_run_dir(run_dir: str | Path | None, runs_dir: Path = DEFAULT_RUNS_DIR) -> Path:
    """Explicit path, run id under ``runs_dir``, or the last logged run."""

    if run_dir:
        run_path = Path(run_dir)
        if not run_path.is_dir():
            run_path = runs_dir / run_dir
    else:
        last_run_file = runs_dir / RunLogger.LAST_RUN_FILENAME
        if not last_run_file.exists():
            raise RunAnalysisError(f"No run given and {last_run_file} is missing")
        run_path = runs_dir / last_run_file.read_text(encoding="utf-8").strip()
    if not run_path.is_dir():
        raise RunAnalysisError(f"Run directory not found: {run_path}")
    return run_path


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def relative_drift(values: np.ndarray) -> float:
    if values.size == 0:
        return 0.0
    denom = values[0] if abs(values[0]) > 1e-12 else 1.0
    return float((values[-1] - values[0]) / denom)


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {}
    for event in events:
        summary[event["type"]] = summary.get(event["type"], 0) + 1
    return summary


def plot_column(
    fig_dir: Path, ts: Dict[str, np.ndarray], column: str, events: List[dict]
) -> Path:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts[column], color="#4dabf7")
    labelled: set[str] = set()
    for event in events:
        color = _EVENT_COLORS.get(event["type"])
        if color is None:
            continue
        label = event["type"] if event["type"] not in labelled else None
        labelled.add(event["type"])
        ax.axvline(event["t"], color=color, linestyle="--", alpha=0.4, label=label)
    if labelled:
        ax.legend()
    ax.set_xlabel("t [s]")
    ax.set_ylabel(column)
    ax.set_title(f"{column} over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    out = fig_dir / f"{column}.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def plot_energy(fig_dir: Path, ts: Dict[str, np.ndarray], rel_drift: float) -> Path:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["energy"], color="#ffa94d")
    ax.set_xlabel("t [s]")
    ax.set_ylabel("energy per unit mass")
    ax.set_title(f"Energy - relative drift dE/E = {rel_drift:.2e}")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    out = fig_dir / "energy.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def analyze(run_path: Path) -> dict:
    """Write figures for ``run_path`` and return the summary numbers."""

    meta_path = run_path / RunLogger.META_FILENAME
    ts_path = run_path / RunLogger.TIMESERIES_FILENAME
    ev_path = run_path / RunLogger.EVENTS_FILENAME
    if not ts_path.exists() or not ev_path.exists():
        raise RunAnalysisError("Run directory lacks timeseries.csv or events.csv")

    meta: dict = {}
    if meta_path.exists():
        with meta_path.open("r", encoding="utf-8") as fh:
            meta = json.load(fh)

    ts = load_timeseries(ts_path)
    if "t" not in ts or ts["t"].size == 0:
        raise RunAnalysisError("timeseries.csv is empty")
    events = load_events(ev_path)
    fig_dir = ensure_fig_dir(run_path)

    figures = [
        plot_column(fig_dir, ts, column, events)
        for column in ts
        if column not in ("t", "energy")
    ]
    rel_drift = 0.0
    if "energy" in ts:
        rel_drift = relative_drift(ts["energy"])
        figures.append(plot_energy(fig_dir, ts, rel_drift))

    return {
        "sketch": meta.get("sketch", "unknown"),
        "samples": int(ts["t"].size),
        "duration": float(ts["t"][-1] - ts["t"][0]),
        "rel_drift": rel_drift,
        "events": summarize_events(events),
        "figures": figures,
    }


def print_summary(run_dir: Path, summary: dict) -> None:
    print(f"Run: {run_dir.name}")
    print(f" Sketch: {summary['sketch']}")
    print(f" Samples: {summary['samples']} over {summary['duration']:.3f} s")
    print(f" Relative energy drift dE/E = {summary['rel_drift']:.3e}")
    events = summary["events"]
    if events:
        print(" Events: " + ", ".join(f"{etype}: {count}" for etype, count in sorted(events.items())))
    else:
        print(" Events: none")
    print(f" Figures written to {run_dir / FIGS_SUBDIR}")


__all__ = [
    "RunAnalysisError",
    "analyze",
    "load_events",
    "load_timeseries",
    "print_summary",
    "relative_drift",
    "resolve_run_dir",
    "summarize_events",
]
