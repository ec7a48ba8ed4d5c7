"""
Run Viewer page for the Snake UI.

Browses the output of headless `main.py --mode play` runs:
  - summary tiles from summary.json
  - score/length over time from metrics.csv
  - board replay of any saved snapshot
"""

import json
from pathlib import Path

import pandas as pd
import streamlit as st

from snake_engine.logging.run_manager import RunManager
from snake_engine.logging.snapshot import SnapshotManager
from snake_engine.ui.components.grid_view import render_snapshot_board


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_summary(run_dir: Path) -> dict:
    path = run_dir / "summary.json"
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_metrics(run_dir: Path) -> pd.DataFrame:
    """Load a run's metrics CSV, empty if it has no rows yet."""
    path = run_dir / "metrics.csv"
    if not path.exists():
        return pd.DataFrame()
    return pd.read_csv(path)


# ---------------------------------------------------------------------------
# Main render
# ---------------------------------------------------------------------------

def render_run_viewer(default_dir: str = "runs") -> None:
    """Render the run viewer page."""
    st.title("📁 Runs")

    base_dir = st.text_input("Output directory", value=default_dir, key="rv_basedir")
    run_names = RunManager.list_runs(base_dir)
    if not run_names:
        st.info("No runs found. Play one with `python main.py --mode play` first!")
        return

    selected = st.selectbox("Select run", options=run_names[::-1], key="rv_run_sel")
    run_dir = Path(base_dir) / selected

    # --- Summary ---
    summary = _load_summary(run_dir)
    if summary:
        cols = st.columns(4)
        cols[0].metric("Ticks", summary.get("ticks", "N/A"))
        cols[1].metric("Score", summary.get("final_score", "N/A"))
        cols[2].metric("Length", summary.get("final_length", "N/A"))
        cols[3].metric("Ended by", summary.get("collision") or "tick limit")

    # --- Metrics ---
    df = _load_metrics(run_dir)
    if not df.empty:
        st.line_chart(df.set_index("tick")[["score", "length"]], use_container_width=True)

    # --- Snapshot replay ---
    snapshots = SnapshotManager(run_dir) if (run_dir / "snapshots").is_dir() else None
    ticks = snapshots.list_snapshots() if snapshots is not None else []
    if not ticks:
        st.caption("No snapshots saved for this run.")
        return

    tick = st.selectbox("Snapshot tick", options=ticks, index=len(ticks) - 1, key="rv_snap_sel")
    snapshot = snapshots.load(tick)
    st.plotly_chart(render_snapshot_board(snapshot), use_container_width=False, key="rv_board")
    if snapshot.get("label"):
        st.caption(f"Label: {snapshot['label']}")
