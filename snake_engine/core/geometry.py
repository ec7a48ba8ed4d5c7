"""
Grid geometry for the Snake engine.

Provides the Position value type, the four movement directions with their
unit vectors and opposites, and bounds checks for a square, non-wrapping grid.

Coordinates are 0-based; x grows to the right and y grows downward, so
"up" is a step of -1 on the y axis.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


@dataclass(frozen=True, slots=True)
class Position:
    """
    A cell on the grid.

    Attributes:
        x: Column index.
        y: Row index.
    """
    x: int
    y: int

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def as_tuple(self) -> tuple[int, int]:
        """Position as an (x, y) tuple."""
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"({self.x},{self.y})"


class Direction(str, Enum):
    """One of the four movement directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def vector(self) -> Position:
        """Unit displacement for one step in this direction."""
        return DIRECTION_VECTORS[self]

    @property
    def opposite(self) -> Direction:
        """The direction pointing the other way."""
        return OPPOSITE[self]

    @classmethod
    def parse(cls, value: Direction | str) -> Direction:
        """
        Coerce a Direction or its string value ("up", "DOWN", ...) to a Direction.

        Raises:
            ValueError: If the value names no direction.
        """
        if isinstance(value, Direction):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown direction '{value}', expected one of "
                f"{[d.value for d in cls]}"
            ) from None


DIRECTION_VECTORS: dict[Direction, Position] = {
    Direction.UP: Position(0, -1),
    Direction.DOWN: Position(0, 1),
    Direction.LEFT: Position(-1, 0),
    Direction.RIGHT: Position(1, 0),
}

OPPOSITE: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def in_bounds(pos: Position, grid_size: int) -> bool:
    """True if both coordinates lie in [0, grid_size)."""
    return 0 <= pos.x < grid_size and 0 <= pos.y < grid_size


def step(pos: Position, direction: Direction) -> Position:
    """Cell reached by moving one step from pos in the given direction."""
    return pos + direction.vector


def manhattan(a: Position, b: Position) -> int:
    """Manhattan distance between two cells (no wrap-around)."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def iter_cells(grid_size: int) -> Iterator[Position]:
    """Yield every cell of the board in row-major order (y outer, x inner)."""
    for y in range(grid_size):
        for x in range(grid_size):
            yield Position(x, y)
