"""
Snake — Streamlit Web UI

Two pages, picked from the sidebar:
  1. Play: one game in the browser on top of the pure engine, with
     direction buttons, typed keys, pause/resume, restart, a grid size
     select, single step or timed auto-play, and a live score/length chart
  2. Runs: browse headless run output and replay saved snapshots
"""

import time
from typing import Optional

import pandas as pd
import streamlit as st

from snake_engine.core.config import GRID_SIZES, get_default_config
from snake_engine.core.controls import PAUSE, key_to_action
from snake_engine.core.geometry import Direction
from snake_engine.simulation.metrics import MetricsCollector
from snake_engine.simulation.runner import GameRunner
from snake_engine.ui.components.grid_view import render_board
from snake_engine.ui.pages.run_viewer import render_run_viewer

# Must be the very first Streamlit command
st.set_page_config(
    page_title="Snake",
    page_icon="🐍",
    layout="wide",
)


# ---------------------------------------------------------------------------
# Session state helpers
# ---------------------------------------------------------------------------

def _init_session_state() -> None:
    if "runner" in st.session_state:
        return
    config = get_default_config()
    config.board.seed = None
    st.session_state.config = config
    st.session_state.runner = GameRunner(config, autopilot=False)
    st.session_state.metrics = MetricsCollector()


def _restart(grid_size: Optional[int] = None) -> None:
    """Start a new game on the same runner, optionally on another board size."""
    st.session_state.runner.reset(grid_size)
    st.session_state.metrics.reset()


def _apply_keys(runner: GameRunner, keys: str) -> None:
    """Feed typed keys (WASD, p or space) to the runner, in order."""
    for key in keys:
        action = key_to_action(key)
        if action == PAUSE:
            runner.toggle_pause()
        elif action is not None:
            runner.press(action)


def _tick() -> None:
    runner: GameRunner = st.session_state.runner
    before = runner.state
    after = runner.step()
    if after is not before:
        st.session_state.metrics.collect(after, runner.tick_stats)


# ---------------------------------------------------------------------------
# Play page
# ---------------------------------------------------------------------------

def _render_header(state) -> None:
    col_score, col_len, col_status = st.columns(3)
    col_score.metric("Score", state.score)
    col_len.metric("Length", state.length)
    col_status.metric("Status", state.status.replace("_", " ").title())


def _render_play() -> None:
    """Render the interactive game. Inputs are applied before anything is drawn."""
    runner: GameRunner = st.session_state.runner

    # --- Sidebar: board settings ---
    current_size = runner.state.grid_size
    grid_size = st.sidebar.selectbox(
        "Grid",
        options=list(GRID_SIZES),
        index=list(GRID_SIZES).index(current_size) if current_size in GRID_SIZES else 1,
        format_func=lambda s: f"{s} x {s}",
        key="grid_size",
    )
    if grid_size != current_size:
        _restart(grid_size)

    auto_ticks = st.sidebar.number_input(
        "Auto-play ticks", min_value=1, max_value=500, value=20, key="auto_ticks",
    )
    auto_btn = st.sidebar.button("🚀 Auto-play", key="autoplay")
    tick_ms = st.session_state.config.timing.tick_ms

    with st.sidebar.form("keys", clear_on_submit=True):
        keys = st.text_input("Keys", key="typed_keys", help="w/a/s/d to steer, p or space to pause")
        if st.form_submit_button("Send"):
            _apply_keys(runner, keys)

    # --- Controls ---
    header = st.container()
    ctrl = st.columns(7)
    if ctrl[0].button("⬆️ Up", key="up"):
        runner.press(Direction.UP)
    if ctrl[1].button("⬅️ Left", key="left"):
        runner.press(Direction.LEFT)
    if ctrl[2].button("⬇️ Down", key="down"):
        runner.press(Direction.DOWN)
    if ctrl[3].button("➡️ Right", key="right"):
        runner.press(Direction.RIGHT)
    if ctrl[4].button("▶️ Resume" if runner.state.is_paused else "⏸️ Pause", key="pause"):
        runner.toggle_pause()
    if ctrl[5].button("⏭️ Step", key="step"):
        _tick()
    if ctrl[6].button("🔄 Restart", key="restart"):
        _restart()
        st.rerun()

    board_placeholder = st.empty()
    chart_placeholder = st.empty()

    # --- Auto-play: one frame per tick, each with its own element key ---
    if auto_btn:
        for _ in range(int(auto_ticks)):
            if runner.state.is_game_over or runner.state.is_paused:
                break
            _tick()
            board_placeholder.plotly_chart(
                render_board(runner.state),
                use_container_width=False,
                key=f"board_tick_{runner.state.tick}",
            )
            time.sleep(tick_ms / 1000.0)

    # --- Header, board and chart reflect the state after this run's input ---
    with header:
        _render_header(runner.state)

    board_placeholder.plotly_chart(render_board(runner.state), use_container_width=False, key="board")

    history = st.session_state.metrics.get_history()
    if history:
        df = pd.DataFrame(history).set_index("tick")
        chart_placeholder.line_chart(df[["score", "length"]], use_container_width=True)

    if runner.state.is_game_over:
        st.error(f"Game over! Final score: {runner.state.score}")


# ---------------------------------------------------------------------------
# Main render
# ---------------------------------------------------------------------------

def main() -> None:
    """Main entry point for the Streamlit app."""
    _init_session_state()

    st.sidebar.title("🐍 Snake")
    page = st.sidebar.radio("Navigation", options=["🎮 Play", "📁 Runs"], index=0, key="page")
    st.sidebar.markdown("---")

    if page == "🎮 Play":
        _render_play()
    else:
        render_run_viewer(st.session_state.config.output.output_dir)


if __name__ == "__main__":
    main()
