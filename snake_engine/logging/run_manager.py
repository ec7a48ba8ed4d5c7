"""
Run manager for Snake runs.

Manages the output directory of one headless game:
  - creates a timestamped run directory under a base path
  - saves the config used for the run
  - exposes the metrics CSV and snapshot locations
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from snake_engine.core.config import GameConfig, save_config
from snake_engine.core.state import GameState
from snake_engine.logging.csv_logger import CSVLogger
from snake_engine.logging.snapshot import SnapshotManager


class RunManager:
    """
    Owns a single run's output directory.

    Directory structure:
        {base_dir}/{run_name}/
            config.json    copy of the game config
            metrics.csv    per-tick KPIs
            summary.json   written by finalize()
            snapshots/     state snapshots (JSON)

    Attributes:
        run_dir: Path to this run's output directory.
        csv_logger: CSVLogger for metrics.
        snapshot_manager: SnapshotManager for state snapshots.
    """

    def __init__(
        self,
        config: GameConfig,
        base_dir: Optional[str | Path] = None,
        run_name: Optional[str] = None,
    ):
        """
        Create the run directory and save the config into it.

        Args:
            config: Game configuration (saved as config.json).
            base_dir: Base output directory. None = config.output.output_dir.
            run_name: Subdirectory name. None = timestamp.
        """
        if base_dir is None:
            base_dir = config.output.output_dir
        if run_name is None:
            run_name = datetime.now().strftime("%Y%m%d_%H%M%S")

        self.config = config
        self.run_dir = Path(base_dir) / run_name
        self.run_dir.mkdir(parents=True, exist_ok=True)

        self._config_path = self.run_dir / "config.json"
        save_config(config, self._config_path)

        self.csv_logger = CSVLogger(self.run_dir / "metrics.csv")
        self.snapshot_manager = SnapshotManager(self.run_dir)

    @property
    def config_path(self) -> Path:
        return self._config_path

    @property
    def metrics_path(self) -> Path:
        return self.csv_logger.file_path

    @property
    def snapshots_dir(self) -> Path:
        return self.snapshot_manager.snapshot_dir

    def log_tick(self, kpis: dict) -> bool:
        """
        Log one tick's KPIs, honoring config.output.log_every_n_ticks.

        Terminal ticks are always logged.

        Returns:
            True if the row was written.
        """
        every = self.config.output.log_every_n_ticks
        if kpis.get("status") != "game_over" and kpis.get("tick", 0) % every != 0:
            return False
        self.csv_logger.log_tick(kpis)
        return True

    def save_snapshot(self, state: GameState, label: Optional[str] = None) -> Path:
        """Save a state snapshot."""
        return self.snapshot_manager.save(state, label=label)

    def finalize(self, summary: Optional[dict] = None) -> None:
        """Write summary.json if a summary is given."""
        if summary is not None:
            with open(self.run_dir / "summary.json", "w", encoding="utf-8") as f:
                json.dump(summary, f, indent=2, ensure_ascii=False)

    @staticmethod
    def list_runs(base_dir: str | Path) -> list[str]:
        """Sorted names of run directories (those holding a config.json)."""
        base = Path(base_dir)
        if not base.exists():
            return []
        return sorted(
            d.name for d in base.iterdir()
            if d.is_dir() and (d / "config.json").exists()
        )

    def __repr__(self) -> str:
        return f"RunManager(run_dir='{self.run_dir}')"
