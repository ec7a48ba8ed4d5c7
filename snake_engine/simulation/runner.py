"""
Game Runner — drives the pure Snake engine one tick at a time.

The runner is the in-process stand-in for an external driver: it owns the
current GameState, serializes input (direction presses, pause toggles) and
ticks onto it, asks an optional autopilot policy for a direction before each
tick, and records per-tick statistics.

`run_batch` plays many independent headless games, optionally across a
process pool, and aggregates their results.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Optional

from snake_engine.core.config import GameConfig
from snake_engine.core.food import Rng, make_rng
from snake_engine.core.geometry import Direction
from snake_engine.core.state import GameState
from snake_engine.simulation.engine import (
    advance,
    classify_collision,
    create_initial_state,
    queue_direction,
    toggle_pause,
)
from snake_engine.simulation.policy import Policy, get_policy


# ---------------------------------------------------------------------------
# Tick statistics and run result
# ---------------------------------------------------------------------------

@dataclass
class TickStats:
    """What happened during one committed tick."""
    tick: int = 0
    direction: str = Direction.RIGHT.value
    ate_food: bool = False
    length: int = 0
    score: int = 0
    collision: Optional[str] = None  # "wall", "self" or None


@dataclass
class RunResult:
    """Result of a complete headless game."""
    grid_size: int
    seed: Optional[int]
    total_ticks: int = 0
    final_score: int = 0
    final_length: int = 0
    game_over: bool = False
    collision: Optional[str] = None
    tick_stats_history: list[TickStats] = field(default_factory=list)


@dataclass
class BatchResult:
    """Aggregate of several independent games."""
    results: list[RunResult] = field(default_factory=list)

    @property
    def games(self) -> int:
        return len(self.results)

    @property
    def mean_score(self) -> float:
        if not self.results:
            return 0.0
        return sum(r.final_score for r in self.results) / len(self.results)

    @property
    def max_score(self) -> int:
        return max((r.final_score for r in self.results), default=0)

    @property
    def mean_length(self) -> float:
        if not self.results:
            return 0.0
        return sum(r.final_length for r in self.results) / len(self.results)

    def collision_counts(self) -> dict[str, int]:
        """Number of games ended by each collision kind."""
        counts: dict[str, int] = {}
        for r in self.results:
            if r.collision is not None:
                counts[r.collision] = counts.get(r.collision, 0) + 1
        return counts


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

class GameRunner:
    """
    Sequential driver around the pure engine.

    Attributes:
        config: Game configuration.
        rng: Uniform [0, 1) source shared by food placement and the policy.
        state: Latest committed GameState.
        policy: Autopilot consulted before each tick, or None for manual play.
        on_tick: Optional callback(state, runner) after each committed tick.
        on_game_over: Optional callback(state, runner) when the game ends.
    """

    def __init__(
        self,
        config: GameConfig,
        rng: Optional[Rng] = None,
        autopilot: bool = True,
    ):
        """
        Create a runner and its first game.

        Args:
            config: Game configuration.
            rng: Randomness source. None = seeded from config.board.seed.
            autopilot: Whether to consult config.player.policy before each tick.
        """
        self.config = config
        self.rng = rng if rng is not None else make_rng(config.board.seed)
        self.policy: Optional[Policy] = (
            get_policy(config.player.policy, self.rng) if autopilot else None
        )

        self.tick_stats: Optional[TickStats] = None
        self._history: list[TickStats] = []

        self.on_tick: Optional[Callable[[GameState, "GameRunner"], None]] = None
        self.on_game_over: Optional[Callable[[GameState, "GameRunner"], None]] = None

        self.state = create_initial_state(config.board.grid_size, self.rng)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self, grid_size: Optional[int] = None) -> GameState:
        """
        Start a new game lineage (restart or board size change).

        Args:
            grid_size: New board size. None = keep the configured size.
        """
        if grid_size is not None:
            self.config.board.grid_size = grid_size
        self.state = create_initial_state(self.config.board.grid_size, self.rng)
        self.tick_stats = None
        self._history = []
        return self.state

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def press(self, direction: Direction | str) -> GameState:
        """Queue a direction on the current state."""
        self.state = queue_direction(self.state, direction)
        return self.state

    def toggle_pause(self) -> GameState:
        """Pause or resume the current game."""
        self.state = toggle_pause(self.state)
        return self.state

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def step(self) -> GameState:
        """
        Advance the game by one tick.

        Processing order:
          1. Ask the policy (if any) for a direction and queue it
          2. Advance the engine
          3. Record TickStats if a tick was committed
          4. Fire callbacks
        """
        prev = self.state
        if self.policy is not None and not prev.is_game_over and not prev.is_paused:
            choice = self.policy(prev)
            if choice is not None:
                prev = queue_direction(prev, choice)

        nxt = advance(prev, self.rng)
        self.state = nxt

        if nxt is prev:
            return nxt

        stats = TickStats(
            tick=nxt.tick,
            direction=nxt.direction.value,
            ate_food=nxt.score > prev.score,
            length=nxt.length,
            score=nxt.score,
            collision=classify_collision(nxt),
        )
        self.tick_stats = stats
        self._history.append(stats)

        if self.on_tick is not None:
            self.on_tick(nxt, self)
        if nxt.is_game_over and self.on_game_over is not None:
            self.on_game_over(nxt, self)

        return nxt

    def run(self, max_ticks: Optional[int] = None) -> RunResult:
        """
        Tick until the game ends or max_ticks ticks have been committed.

        Args:
            max_ticks: Tick budget. None = config.timing.max_ticks.

        Returns:
            RunResult for this game.

        Raises:
            RuntimeError: If the game is paused (it could never progress).
        """
        if max_ticks is None:
            max_ticks = self.config.timing.max_ticks
        if self.state.is_paused:
            raise RuntimeError("Cannot run a paused game; toggle pause first")

        ticks_run = 0
        while ticks_run < max_ticks and not self.state.is_game_over:
            self.step()
            ticks_run += 1

        return RunResult(
            grid_size=self.state.grid_size,
            seed=self.config.board.seed,
            total_ticks=self.state.tick,
            final_score=self.state.score,
            final_length=self.state.length,
            game_over=self.state.is_game_over,
            collision=classify_collision(self.state),
            tick_stats_history=self.history,
        )

    @property
    def history(self) -> list[TickStats]:
        """TickStats for every committed tick of the current game."""
        return list(self._history)

    def __repr__(self) -> str:
        return f"GameRunner(state={self.state!r})"


# ---------------------------------------------------------------------------
# Batch play (worker must be top-level for pickling in multiprocessing)
# ---------------------------------------------------------------------------

def _play_single_game(config_dict: dict, seed: Optional[int], max_ticks: int) -> RunResult:
    """Play one headless game from a config dict. Runs in a worker process."""
    config = GameConfig.from_dict(config_dict)
    config.board.seed = seed
    runner = GameRunner(config)
    return runner.run(max_ticks=max_ticks)


def run_batch(
    config: GameConfig,
    games: int,
    base_seed: Optional[int] = None,
    parallel: bool = False,
    workers: int = 4,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> BatchResult:
    """
    Play several independent headless games.

    Game i uses seed base_seed + i (or an unseeded generator if both
    base_seed and config.board.seed are None).

    Args:
        config: Game configuration shared by all games.
        games: Number of games.
        base_seed: First seed. None = config.board.seed.
        parallel: Use a ProcessPoolExecutor instead of a plain loop.
        workers: Worker processes for parallel mode.
        progress_callback: Optional callback(completed, total).

    Returns:
        BatchResult with results ordered by game index.

    Raises:
        ValueError: If games < 1.
    """
    if games < 1:
        raise ValueError(f"games must be >= 1, got {games}")

    if base_seed is None:
        base_seed = config.board.seed

    config_dict = config.to_dict()
    max_ticks = config.timing.max_ticks
    jobs = [
        (i, base_seed + i if base_seed is not None else None)
        for i in range(games)
    ]

    results: list[Optional[RunResult]] = [None] * games
    completed = 0

    if parallel and workers > 1 and games > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(_play_single_game, config_dict, seed, max_ticks): idx
                for idx, seed in jobs
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()
                completed += 1
                if progress_callback is not None:
                    progress_callback(completed, games)
    else:
        for idx, seed in jobs:
            results[idx] = _play_single_game(config_dict, seed, max_ticks)
            completed += 1
            if progress_callback is not None:
                progress_callback(completed, games)

    return BatchResult(results=[r for r in results if r is not None])
