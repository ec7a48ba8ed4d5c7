"""
Tick CSV logger for Snake runs.

Streams one KPI row per logged tick into `metrics.csv`. Rows must arrive in
increasing tick order, so a game's CSV can be read back with pandas as a
tick-indexed series.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Optional

from snake_engine.simulation.metrics import MetricsCollector


class CSVLogger:
    """
    Appends tick KPIs to a CSV file.

    The header is written when the file is created. Opening an existing,
    non-empty file continues after its last row.

    Attributes:
        file_path: Path to the CSV file.
        columns: Ordered column names (keys outside them are dropped).
        ticks_logged: Rows written through this logger.
        last_tick: Tick of the most recent row, or None.
    """

    def __init__(
        self,
        file_path: str | Path,
        columns: Optional[list[str]] = None,
    ):
        self.file_path = Path(file_path)
        self.columns = columns or MetricsCollector.kpi_names()
        self.ticks_logged = 0
        self.last_tick: Optional[int] = None

        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.file_path.exists() or self.file_path.stat().st_size == 0:
            with open(self.file_path, "w", newline="", encoding="utf-8") as f:
                csv.DictWriter(f, fieldnames=self.columns).writeheader()

    def log_tick(self, kpis: dict) -> None:
        """
        Append the KPI row of one tick.

        Raises:
            ValueError: If the tick is missing or not after the last logged one.
        """
        tick = kpis.get("tick")
        if tick is None:
            raise ValueError("KPI row has no 'tick'")
        if self.last_tick is not None and tick <= self.last_tick:
            raise ValueError(f"tick {tick} logged after tick {self.last_tick}")

        with open(self.file_path, "a", newline="", encoding="utf-8") as f:
            csv.DictWriter(f, fieldnames=self.columns, extrasaction="ignore").writerow(kpis)

        self.ticks_logged += 1
        self.last_tick = tick

    def __repr__(self) -> str:
        return f"CSVLogger(file_path='{self.file_path}', ticks_logged={self.ticks_logged})"
