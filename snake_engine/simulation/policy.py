"""
Autopilot policies for headless Snake runs.

A policy looks at the current GameState and returns the Direction it wants
queued before the next tick, or None to keep going straight. Policies never
touch the state themselves; the runner feeds their choice through
`queue_direction`, so illegal reversals are rejected the same way as
keyboard input.
"""

from __future__ import annotations

from typing import Callable, Optional

from snake_engine.core.food import Rng
from snake_engine.core.geometry import Direction
from snake_engine.core.state import GameState
from snake_engine.simulation.engine import would_collide


Policy = Callable[[GameState], Optional[Direction]]


def _legal_moves(state: GameState) -> list[Direction]:
    """Directions other than a reversal, in enum order."""
    return [d for d in Direction if d != state.direction.opposite]


def straight_policy(state: GameState) -> Optional[Direction]:
    """Never steer."""
    return None


def make_random_policy(rng: Rng) -> Policy:
    """
    Build a policy that turns at random among non-fatal moves.

    Falls back to any legal move when every option is fatal.
    """
    def policy(state: GameState) -> Optional[Direction]:
        moves = _legal_moves(state)
        safe = [d for d in moves if not would_collide(state, d)]
        options = safe or moves
        idx = min(int(rng() * len(options)), len(options) - 1)
        return options[idx]

    return policy


def greedy_policy(state: GameState) -> Optional[Direction]:
    """
    Step toward the food, preferring the axis with the larger gap.

    Moves that would end the game on the next tick are skipped. If no
    move toward the food is safe, any safe move is taken; if none is safe
    the current direction is kept.
    """
    head, food = state.head, state.food
    dx = food.x - head.x
    dy = food.y - head.y

    horizontal = Direction.RIGHT if dx > 0 else Direction.LEFT
    vertical = Direction.DOWN if dy > 0 else Direction.UP

    preferred: list[Direction] = []
    if abs(dx) >= abs(dy):
        if dx != 0:
            preferred.append(horizontal)
        if dy != 0:
            preferred.append(vertical)
    else:
        preferred.append(vertical)
        if dx != 0:
            preferred.append(horizontal)

    legal = _legal_moves(state)
    for direction in preferred + legal:
        if direction in legal and not would_collide(state, direction):
            return direction
    return None


def get_policy(name: str, rng: Rng) -> Policy:
    """
    Look up a policy by config name.

    Raises:
        ValueError: If the name is unknown.
    """
    if name == "greedy":
        return greedy_policy
    if name == "random":
        return make_random_policy(rng)
    if name == "straight":
        return straight_policy
    raise ValueError(f"Unknown policy '{name}'")
