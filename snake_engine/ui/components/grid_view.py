"""
Board view for the Snake UI.

Renders a GameState (or a saved snapshot dict) as a Plotly figure:
  - body segments as green squares
  - head as a darker square
  - food as a red diamond

Also provides a plain-text rendering used by the CLI.
"""

from typing import Optional

import plotly.graph_objects as go

from snake_engine.core.state import GameState


HEAD_CHAR = "H"
BODY_CHAR = "o"
FOOD_CHAR = "*"
EMPTY_CHAR = "."


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------

def board_to_text(state: GameState) -> str:
    """
    Render the board as rows of characters, top row first.

    Head is drawn over body, and both over food (the board-full fallback
    can put food under the snake).
    """
    rows = [[EMPTY_CHAR] * state.grid_size for _ in range(state.grid_size)]
    rows[state.food.y][state.food.x] = FOOD_CHAR
    for seg in state.snake[1:]:
        rows[seg.y][seg.x] = BODY_CHAR
    rows[state.head.y][state.head.x] = HEAD_CHAR
    return "\n".join("".join(row) for row in rows)


# ---------------------------------------------------------------------------
# Plotly rendering
# ---------------------------------------------------------------------------

def _board_figure(
    grid_size: int,
    snake: list[tuple[int, int]],
    food: tuple[int, int],
    title: str,
    width: int,
    height: int,
) -> go.Figure:
    fig = go.Figure()
    marker_size = max(4, int(min(width, height) * 0.8 / grid_size))

    # --- Food ---
    fig.add_trace(go.Scatter(
        x=[food[0]], y=[food[1]],
        mode="markers",
        marker=dict(symbol="diamond", size=marker_size, color="rgba(231, 76, 60, 0.9)"),
        name="Food",
        hovertemplate="Food (%{x}, %{y})<extra></extra>",
    ))

    # --- Body ---
    body = snake[1:]
    if body:
        fig.add_trace(go.Scatter(
            x=[p[0] for p in body], y=[p[1] for p in body],
            mode="markers",
            marker=dict(symbol="square", size=marker_size, color="rgba(46, 204, 113, 0.8)"),
            name=f"Body ({len(body)})",
            hovertemplate="Body (%{x}, %{y})<extra></extra>",
        ))

    # --- Head ---
    if snake:
        fig.add_trace(go.Scatter(
            x=[snake[0][0]], y=[snake[0][1]],
            mode="markers",
            marker=dict(symbol="square", size=marker_size, color="rgba(30, 132, 73, 1.0)"),
            name="Head",
            hovertemplate="Head (%{x}, %{y})<extra></extra>",
        ))

    # --- Layout (y grows downward, so the axis is flipped) ---
    fig.update_layout(
        title=title,
        width=width,
        height=height,
        xaxis=dict(
            range=[-0.5, grid_size - 0.5],
            scaleanchor="y",
            scaleratio=1,
            constrain="domain",
            showgrid=False,
            zeroline=False,
        ),
        yaxis=dict(
            range=[grid_size - 0.5, -0.5],
            showgrid=False,
            zeroline=False,
        ),
        template="plotly_white",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        margin=dict(l=30, r=30, t=60, b=30),
    )

    return fig


def render_board(
    state: GameState,
    title: Optional[str] = None,
    width: int = 520,
    height: int = 520,
) -> go.Figure:
    """
    Render a live GameState.

    Args:
        state: State to draw.
        title: Optional chart title. None = size, score and status.
        width: Plot width in pixels.
        height: Plot height in pixels.

    Returns:
        Plotly figure.
    """
    if title is None:
        title = (
            f"Snake ({state.grid_size}×{state.grid_size}) | "
            f"Score {state.score} | {state.status.replace('_', ' ').title()}"
        )
    return _board_figure(
        state.grid_size,
        [p.as_tuple() for p in state.snake],
        state.food.as_tuple(),
        title,
        width,
        height,
    )


def render_snapshot_board(
    snapshot: dict,
    title: Optional[str] = None,
    width: int = 520,
    height: int = 520,
) -> go.Figure:
    """
    Render a snapshot dict as written by SnapshotManager.

    Args:
        snapshot: Dict with 'grid_size', 'snake', 'food' and optionally 'tick'.
    """
    grid_size = snapshot.get("grid_size", 16)
    if title is None:
        title = f"Snapshot ({grid_size}×{grid_size}) | Tick {snapshot.get('tick', '?')}"
    return _board_figure(
        grid_size,
        [tuple(p) for p in snapshot.get("snake", [])],
        tuple(snapshot.get("food", (0, 0))),
        title,
        width,
        height,
    )
