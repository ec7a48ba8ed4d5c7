"""
KPI metrics collection for Snake runs.

MetricsCollector turns each committed tick into a flat dictionary of KPIs
suitable for CSV export, and summarizes a whole game once it ends.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from snake_engine.core.geometry import manhattan
from snake_engine.core.state import GameState
from snake_engine.simulation.runner import TickStats


class MetricsCollector:
    """
    Collects per-tick KPIs.

    Usage:
      1. After each tick, call `collect(state, tick_stats)`
      2. The resulting dict is appended to `history`
      3. Call `summary()` when the game is over

    Attributes:
        history: List of KPI dicts, one per collected tick.
    """

    def __init__(self):
        self.history: list[dict] = []

    def collect(self, state: GameState, tick_stats: Optional[TickStats] = None) -> dict:
        """
        Compute KPIs for the given state and append them to history.

        Args:
            state: State after the tick.
            tick_stats: Stats the runner recorded for that tick, if any.

        Returns:
            Dict of KPI_name → value.
        """
        cells = state.grid_size * state.grid_size
        free = state.free_cells

        kpis = {
            "tick": state.tick,
            "status": state.status,
            "score": state.score,
            "length": state.length,
            "direction": state.direction.value,
            "head_x": state.head.x,
            "head_y": state.head.y,
            "food_x": state.food.x,
            "food_y": state.food.y,
            "food_distance": manhattan(state.head, state.food),
            "ate_food": bool(tick_stats.ate_food) if tick_stats is not None else False,
            "collision": tick_stats.collision if tick_stats is not None else None,
            "free_cells": free,
            "fill_ratio": state.length / cells,
        }

        self.history.append(kpis)
        return kpis

    def get_history(self) -> list[dict]:
        """Return all collected KPI dicts."""
        return list(self.history)

    def get_kpi_series(self, kpi_name: str) -> list:
        """Extract one KPI across all collected ticks."""
        return [snap[kpi_name] for snap in self.history if kpi_name in snap]

    def summary(self) -> dict:
        """
        Summarize the collected game.

        Returns:
            Dict with final score/length, ticks, meals and the mean number of
            ticks between consecutive meals (0.0 if fewer than two meals).
        """
        if not self.history:
            return {
                "ticks": 0,
                "final_score": 0,
                "final_length": 0,
                "meals": 0,
                "mean_ticks_between_meals": 0.0,
                "max_fill_ratio": 0.0,
            }

        last = self.history[-1]
        meal_ticks = np.array(
            [snap["tick"] for snap in self.history if snap["ate_food"]],
            dtype=np.int64,
        )
        gaps = np.diff(meal_ticks)

        return {
            "ticks": int(last["tick"]),
            "final_score": int(last["score"]),
            "final_length": int(last["length"]),
            "meals": int(meal_ticks.size),
            "mean_ticks_between_meals": float(gaps.mean()) if gaps.size else 0.0,
            "max_fill_ratio": float(np.max(self.get_kpi_series("fill_ratio"))),
        }

    @staticmethod
    def kpi_names() -> list[str]:
        """Return the ordered list of all KPI names."""
        return [
            "tick",
            "status",
            "score",
            "length",
            "direction",
            "head_x",
            "head_y",
            "food_x",
            "food_y",
            "food_distance",
            "ate_food",
            "collision",
            "free_cells",
            "fill_ratio",
        ]

    def reset(self) -> None:
        """Clear collected history."""
        self.history.clear()
