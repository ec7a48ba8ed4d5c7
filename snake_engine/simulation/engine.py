"""
Simulation Engine — pure state transitions for the Snake game.

Five operations make up the engine:
  - create_initial_state: build a fresh game for a board size
  - queue_direction: record a pending turn (rejecting reversals)
  - toggle_pause: flip the paused flag
  - advance: one tick of movement, collision, eating and scoring
  - spawn_food (re-exported from core.food): relocate the food item

Every function takes a GameState and returns a GameState. Inputs are never
modified; when nothing changes the very same object is returned.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from snake_engine.core.food import Rng, spawn_food
from snake_engine.core.geometry import Direction, Position, in_bounds, step
from snake_engine.core.state import GameState


DEFAULT_GRID_SIZE = 16
INITIAL_LENGTH = 3
MIN_GRID_SIZE = 4

COLLISION_WALL = "wall"
COLLISION_SELF = "self"


# ---------------------------------------------------------------------------
# State factory
# ---------------------------------------------------------------------------

def create_initial_state(
    grid_size: int = DEFAULT_GRID_SIZE,
    rng: Optional[Rng] = None,
) -> GameState:
    """
    Build the starting state for a new game.

    The snake is three cells long, lying horizontally with its head on the
    board centre (grid_size // 2, grid_size // 2) and facing right.

    Args:
        grid_size: Board width and height.
        rng: Uniform [0, 1) source for the first food placement.

    Returns:
        A running, unpaused GameState at tick 0.

    Raises:
        ValueError: If grid_size is not an int or is too small for the snake.
    """
    if isinstance(grid_size, bool) or not isinstance(grid_size, int):
        raise ValueError(f"grid_size must be an int, got {grid_size!r}")
    if grid_size < MIN_GRID_SIZE:
        raise ValueError(f"grid_size must be >= {MIN_GRID_SIZE}, got {grid_size}")

    mid = grid_size // 2
    snake = tuple(Position(mid - i, mid) for i in range(INITIAL_LENGTH))

    return GameState(
        grid_size=grid_size,
        snake=snake,
        direction=Direction.RIGHT,
        queued_direction=None,
        food=spawn_food(grid_size, snake, rng),
        score=0,
        is_game_over=False,
        is_paused=False,
        tick=0,
    )


# ---------------------------------------------------------------------------
# Input reducer / pause toggle
# ---------------------------------------------------------------------------

def queue_direction(state: GameState, direction: Direction | str) -> GameState:
    """
    Record a direction change to apply on the next tick.

    The request is dropped when the game is over, when it repeats the current
    or already-queued direction, or when it would reverse the snake onto itself.
    A later request before the next tick overwrites an earlier one.

    Args:
        state: Current state.
        direction: Requested direction (Direction or its string value).

    Returns:
        The same state if the request is dropped, else a copy with
        queued_direction set.
    """
    if state.is_game_over:
        return state

    requested = Direction.parse(direction)
    if requested == state.direction or requested == state.queued_direction:
        return state
    if requested.opposite == state.direction:
        return state

    return replace(state, queued_direction=requested)


def toggle_pause(state: GameState) -> GameState:
    """Flip is_paused. A finished game is returned unchanged."""
    if state.is_game_over:
        return state
    return replace(state, is_paused=not state.is_paused)


# ---------------------------------------------------------------------------
# Tick advancer
# ---------------------------------------------------------------------------

def advance(state: GameState, rng: Optional[Rng] = None) -> GameState:
    """
    Execute one simulation tick.

    Processing order:
      1. Paused or finished games are returned unchanged (no tick increment).
      2. Effective direction = queued direction if any, else current direction.
      3. next_head = head + unit vector of the effective direction.
      4. Wall check: next_head outside [0, grid_size) on either axis.
      5. Eating check: next_head lands on the food.
      6. Self check: against the whole snake when eating (the tail stays put),
         against everything but the tail otherwise (the tail moves away).
      7. On collision: commit the direction, clear the queue, set
         is_game_over and bump tick. Snake, food and score are left as is.
      8. Otherwise slide the snake forward; when eating keep the tail, bump
         score and place new food over the grown snake.

    Args:
        state: Current state.
        rng: Uniform [0, 1) source for food relocation. None = system generator.

    Returns:
        The next state.
    """
    # --- 1. Gate ---
    if state.is_game_over or state.is_paused:
        return state

    # --- 2-3. Direction and next head ---
    direction = state.queued_direction if state.queued_direction is not None else state.direction
    next_head = step(state.head, direction)

    # --- 4-6. Collision and eating checks ---
    out_of_bounds = not in_bounds(next_head, state.grid_size)
    is_eating = next_head == state.food
    body = state.snake if is_eating else state.snake[:-1]
    hits_self = next_head in body

    # --- 7. Terminal transition ---
    if out_of_bounds or hits_self:
        return replace(
            state,
            direction=direction,
            queued_direction=None,
            is_game_over=True,
            tick=state.tick + 1,
        )

    # --- 8. Move / grow ---
    if is_eating:
        snake = (next_head,) + state.snake
        food = spawn_food(state.grid_size, snake, rng)
        score = state.score + 1
    else:
        snake = (next_head,) + state.snake[:-1]
        food = state.food
        score = state.score

    # --- Commit ---
    return replace(
        state,
        direction=direction,
        queued_direction=None,
        snake=snake,
        food=food,
        score=score,
        tick=state.tick + 1,
    )


# ---------------------------------------------------------------------------
# Helpers for drivers
# ---------------------------------------------------------------------------

def would_collide(state: GameState, direction: Direction) -> bool:
    """
    True if moving one step in `direction` from `state` would end the game.

    Uses the same wall and tail rules as `advance`.
    """
    next_head = step(state.head, direction)
    if not in_bounds(next_head, state.grid_size):
        return True
    body = state.snake if next_head == state.food else state.snake[:-1]
    return next_head in body


def classify_collision(state: GameState) -> Optional[str]:
    """
    Report what ended a finished game.

    The terminal transition commits the fatal direction but leaves the snake
    in place, so replaying one step from the head re-derives the cause.

    Returns:
        "wall", "self", or None if the game is not over.
    """
    if not state.is_game_over:
        return None
    next_head = step(state.head, state.direction)
    if not in_bounds(next_head, state.grid_size):
        return COLLISION_WALL
    return COLLISION_SELF

