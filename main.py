"""
Snake — CLI Entry Point

Usage:
    python main.py --mode play --config config/default_config.json
    python main.py --mode play --grid-size 20 --policy random --show
    python main.py --mode batch --games 50 --seed 7
    python main.py --mode play --set board.grid_size=24 --set timing.max_ticks=2000
    python main.py --ui
"""

import argparse
import sys
import time
from pathlib import Path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Snake — deterministic grid snake engine with headless autopilot runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --ui                                   Launch Streamlit UI
  python main.py --mode play --show                     Play one headless game, print the final board
  python main.py --mode batch --games 100 --parallel    Play 100 games across worker processes
        """,
    )

    parser.add_argument(
        "--mode",
        choices=["play", "batch"],
        default=None,
        help="Run mode: 'play' for one logged game, 'batch' for many games",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to JSON config file (default: built-in defaults)",
    )
    parser.add_argument(
        "--ui",
        action="store_true",
        help="Launch Streamlit web UI (ignores --mode and --config)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Override random seed")
    parser.add_argument("--grid-size", type=int, default=None, help="Override board size")
    parser.add_argument("--ticks", type=int, default=None, help="Override max ticks per game")
    parser.add_argument(
        "--policy",
        choices=["greedy", "random", "straight"],
        default=None,
        help="Override autopilot policy",
    )
    parser.add_argument("--games", type=int, default=10, help="Number of games (batch mode)")
    parser.add_argument("--parallel", action="store_true", help="Use worker processes (batch mode)")
    parser.add_argument("--output", type=str, default=None, help="Override output directory")
    parser.add_argument("--show", action="store_true", help="Print the final board (play mode)")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override any config field, e.g. --set board.grid_size=20 (repeatable)",
    )

    return parser.parse_args()


def launch_ui() -> None:
    """Launch the Streamlit web UI."""
    import subprocess
    ui_path = Path(__file__).parent / "snake_engine" / "ui" / "app.py"
    if not ui_path.exists():
        print(f"Error: UI app not found at {ui_path}")
        sys.exit(1)
    subprocess.run(
        [
            sys.executable, "-m", "streamlit", "run", str(ui_path),
            "--server.port=8501",
            "--server.headless=true",
            "--browser.gatherUsageStats=false",
        ],
        check=True,
    )


def build_config(args: argparse.Namespace):
    """Load the config file (or defaults) and apply CLI overrides."""
    from snake_engine.core.config import (
        apply_param_override,
        get_default_config,
        load_config,
        parse_override,
    )

    config = load_config(args.config) if args.config else get_default_config()

    if args.seed is not None:
        config.board.seed = args.seed
    if args.grid_size is not None:
        config.board.grid_size = args.grid_size
    if args.ticks is not None:
        config.timing.max_ticks = args.ticks
    if args.policy is not None:
        config.player.policy = args.policy
    if args.output is not None:
        config.output.output_dir = args.output
    for assignment in args.overrides:
        key, value = parse_override(assignment)
        apply_param_override(config, key, value)

    errors = config.validate()
    if errors:
        msg = "Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(msg)
    return config


def run_play(config, show: bool = False) -> None:
    """Play a single headless game, logging every tick to a run directory."""
    from snake_engine.logging.run_manager import RunManager
    from snake_engine.simulation.metrics import MetricsCollector
    from snake_engine.simulation.runner import GameRunner
    from snake_engine.ui.components.grid_view import board_to_text

    print(f"[Snake] Single game")
    print(f"  Grid: {config.board.grid_size}x{config.board.grid_size}")
    print(f"  Policy: {config.player.policy}")
    print(f"  Seed: {config.board.seed}")
    print(f"  Max ticks: {config.timing.max_ticks}")
    print(f"  Output: {config.output.output_dir}")
    print()

    runner = GameRunner(config)
    metrics = MetricsCollector()
    run_manager = RunManager(config)
    run_manager.save_snapshot(runner.state, label="initial")

    def on_tick(state, r) -> None:
        kpis = metrics.collect(state, r.tick_stats)
        run_manager.log_tick(kpis)
        if kpis["ate_food"]:
            print(f"  Tick {state.tick:5d} | Score: {state.score:4d} | Length: {state.length:4d}")

    def on_game_over(state, r) -> None:
        if config.output.snapshot_on_game_over:
            run_manager.save_snapshot(state, label="game_over")

    runner.on_tick = on_tick
    runner.on_game_over = on_game_over

    start_time = time.time()
    result = runner.run()
    elapsed = time.time() - start_time

    print()
    print(f"[Result]")
    print(f"  Ticks: {result.total_ticks}")
    print(f"  Score: {result.final_score}")
    print(f"  Length: {result.final_length}")
    print(f"  Game over: {result.game_over} ({result.collision or 'tick limit'})")
    print(f"  Elapsed: {elapsed:.2f}s")

    if show:
        print()
        print(board_to_text(runner.state))

    summary = metrics.summary()
    summary.update({
        "game_over": result.game_over,
        "collision": result.collision,
        "seed": config.board.seed,
        "elapsed_seconds": round(elapsed, 3),
    })
    run_manager.finalize(summary)
    print(f"  Output saved to: {run_manager.run_dir}")
    print(f"  Metrics: {run_manager.metrics_path}")
    print(f"  Snapshots: {run_manager.snapshots_dir}")


def run_batch_mode(config, games: int, parallel: bool) -> None:
    """Play many headless games and print aggregate scores."""
    from snake_engine.simulation.runner import run_batch

    print(f"[Snake] Batch")
    print(f"  Games: {games}")
    print(f"  Grid: {config.board.grid_size}x{config.board.grid_size}")
    print(f"  Policy: {config.player.policy}")
    print(f"  Base seed: {config.board.seed}")
    print()

    def progress_cb(done: int, total: int) -> None:
        pct = done / total * 100 if total > 0 else 100
        print(f"\r  Progress: {done}/{total} ({pct:.0f}%)", end="", flush=True)

    start_time = time.time()
    batch = run_batch(config, games, parallel=parallel, progress_callback=progress_cb)
    elapsed = time.time() - start_time
    print()

    print()
    print(f"[Batch Results]")
    print(f"  Mean score: {batch.mean_score:.2f}")
    print(f"  Max score: {batch.max_score}")
    print(f"  Mean length: {batch.mean_length:.2f}")
    for cause, count in sorted(batch.collision_counts().items()):
        print(f"  Ended by {cause}: {count}")
    print(f"  Elapsed: {elapsed:.1f}s")


def main() -> None:
    args = parse_args()

    if args.ui:
        launch_ui()
        return

    if args.mode is None:
        print("Error: Specify --mode (play|batch) or --ui to launch the web interface.")
        print("Run with --help for usage information.")
        sys.exit(1)

    config = build_config(args)

    if args.mode == "play":
        run_play(config, show=args.show)
    elif args.mode == "batch":
        run_batch_mode(config, args.games, parallel=args.parallel)


if __name__ == "__main__":
    main()
