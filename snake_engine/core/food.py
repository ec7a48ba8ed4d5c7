"""
Food placement for the Snake engine.

A single food item sits on the board at a time. When it is eaten a new cell
is drawn uniformly at random from the cells the snake does not cover.

Randomness is injected as a zero-argument callable returning a float in
[0, 1). Passing a fixed sequence makes placement fully reproducible.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, Optional

import numpy as np

from snake_engine.core.geometry import Position, iter_cells


Rng = Callable[[], float]

# Returned when the snake covers every cell. It may overlap the snake.
FALLBACK_FOOD = Position(0, 0)


def make_rng(seed: Optional[int] = None) -> Rng:
    """
    Build a uniform [0, 1) source backed by a numpy Generator.

    Args:
        seed: Random seed. None = fresh entropy from the OS.

    Returns:
        Zero-argument callable returning a float in [0, 1).
    """
    generator = np.random.default_rng(seed)

    def rng() -> float:
        return float(generator.random())

    return rng


def free_cells(grid_size: int, snake: Iterable[Position]) -> list[Position]:
    """
    List cells not covered by the snake, in row-major order.

    Args:
        grid_size: Board width and height.
        snake: Occupied cells.

    Returns:
        Free cells, y outer and x inner.
    """
    occupied = set(snake)
    return [cell for cell in iter_cells(grid_size) if cell not in occupied]


def spawn_food(
    grid_size: int,
    snake: Iterable[Position],
    rng: Optional[Rng] = None,
) -> Position:
    """
    Pick a new food cell uniformly among the free cells.

    The index is floor(rng() * number_of_free_cells). If the board is full the
    fixed fallback (0, 0) is returned.

    Args:
        grid_size: Board width and height.
        snake: Cells occupied by the snake.
        rng: Uniform [0, 1) source. None = unseeded system generator.

    Returns:
        The chosen food position.
    """
    candidates = free_cells(grid_size, snake)
    if not candidates:
        return FALLBACK_FOOD

    if rng is None:
        rng = make_rng()

    # clamp in case rng() returns exactly 1.0
    idx = min(math.floor(rng() * len(candidates)), len(candidates) - 1)
    return candidates[idx]
