"""
Snapshot manager for Snake runs.

Writes GameState snapshots as JSON for later inspection. Snapshots are
records for analysis: `load` returns the raw dict and never rebuilds a
GameState.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from snake_engine.core.state import GameState


class SnapshotManager:
    """
    Saves and loads state snapshots as JSON files.

    Each snapshot is saved to: {output_dir}/snapshots/tick_{N:06d}.json

    Attributes:
        output_dir: Base output directory for the run.
        snapshot_dir: Directory holding the snapshot files.
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        self.snapshot_dir = self.output_dir / "snapshots"
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, tick: int) -> Path:
        return self.snapshot_dir / f"tick_{tick:06d}.json"

    def save(self, state: GameState, label: str | None = None) -> Path:
        """
        Save a snapshot of the given state, named after its tick.

        Args:
            state: State to record.
            label: Optional free-text tag stored alongside the state.

        Returns:
            Path to the saved snapshot file.
        """
        payload = state.to_dict()
        if label is not None:
            payload["label"] = label

        file_path = self._path_for(state.tick)
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False, default=_json_default)

        return file_path

    def load(self, tick: int) -> dict:
        """
        Load the snapshot taken at a given tick.

        Raises:
            FileNotFoundError: If no snapshot exists for that tick.
        """
        file_path = self._path_for(tick)
        if not file_path.exists():
            raise FileNotFoundError(f"Snapshot not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def list_snapshots(self) -> list[int]:
        """Sorted tick numbers of all saved snapshots."""
        ticks = []
        for p in self.snapshot_dir.glob("tick_*.json"):
            try:
                ticks.append(int(p.stem.split("_")[1]))
            except (IndexError, ValueError):
                continue
        return sorted(ticks)


def _json_default(obj: Any) -> Any:
    """JSON serialization fallback for NumPy types."""
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
