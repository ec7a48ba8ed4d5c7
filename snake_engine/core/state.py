"""
Game state for the Snake engine.

GameState is an immutable snapshot. Every transition (input, pause, tick)
returns a new GameState built with `dataclasses.replace`; the previous
snapshot is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from snake_engine.core.geometry import Direction, Position


STATUS_RUNNING = "running"
STATUS_PAUSED = "paused"
STATUS_GAME_OVER = "game_over"


@dataclass(frozen=True, slots=True)
class GameState:
    """
    One snapshot of a snake game.

    Attributes:
        grid_size: Width and height of the square board.
        snake: Occupied cells, head first and tail last.
        direction: Direction of the last committed move.
        queued_direction: Direction requested by input, applied on the next tick.
        food: Cell holding the food item.
        score: Number of food items eaten.
        is_game_over: Terminal flag. Once set it never clears within a lineage.
        is_paused: While set, ticks are no-ops.
        tick: Number of committed simulation steps.
    """
    grid_size: int
    snake: tuple[Position, ...]
    direction: Direction
    food: Position
    queued_direction: Optional[Direction] = None
    score: int = 0
    is_game_over: bool = False
    is_paused: bool = False
    tick: int = 0

    @property
    def head(self) -> Position:
        return self.snake[0]

    @property
    def length(self) -> int:
        return len(self.snake)

    @property
    def status(self) -> str:
        """One of "running", "paused" or "game_over"."""
        if self.is_game_over:
            return STATUS_GAME_OVER
        if self.is_paused:
            return STATUS_PAUSED
        return STATUS_RUNNING

    @property
    def free_cells(self) -> int:
        """Number of board cells not covered by the snake."""
        return self.grid_size * self.grid_size - len(set(self.snake))

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation (positions as [x, y] lists)."""
        return {
            "grid_size": self.grid_size,
            "snake": [[p.x, p.y] for p in self.snake],
            "direction": self.direction.value,
            "queued_direction": (
                self.queued_direction.value if self.queued_direction is not None else None
            ),
            "food": [self.food.x, self.food.y],
            "score": self.score,
            "is_game_over": self.is_game_over,
            "is_paused": self.is_paused,
            "tick": self.tick,
            "status": self.status,
        }

    def __repr__(self) -> str:
        return (
            f"GameState(tick={self.tick}, status={self.status}, score={self.score}, "
            f"head={self.head!r}, length={self.length}, food={self.food!r})"
        )
