"""
Unit tests for the board view (text and Plotly rendering).
"""

import plotly.graph_objects as go

from snake_engine.core.geometry import Direction, Position
from snake_engine.core.state import GameState
from snake_engine.ui.components.grid_view import (
    board_to_text,
    render_board,
    render_snapshot_board,
)


def small_state(**kwargs) -> GameState:
    return GameState(
        grid_size=4,
        snake=(Position(2, 1), Position(1, 1), Position(0, 1)),
        direction=Direction.RIGHT,
        food=Position(3, 3),
        **kwargs,
    )


class TestBoardToText:
    def test_layout(self):
        assert board_to_text(small_state()).splitlines() == [
            "....",
            "ooH.",
            "....",
            "...*",
        ]

    def test_head_drawn_over_food(self):
        state = GameState(
            grid_size=4,
            snake=(Position(0, 0), Position(1, 0)),
            direction=Direction.LEFT,
            food=Position(0, 0),
        )
        assert board_to_text(state).splitlines()[0] == "Ho.."


class TestRenderBoard:
    def test_returns_figure_with_traces(self):
        fig = render_board(small_state())
        assert isinstance(fig, go.Figure)
        names = [t.name for t in fig.data]
        assert names == ["Food", "Body (2)", "Head"]

    def test_head_position(self):
        fig = render_board(small_state())
        head = fig.data[-1]
        assert list(head.x) == [2]
        assert list(head.y) == [1]

    def test_y_axis_flipped(self):
        fig = render_board(small_state())
        assert tuple(fig.layout.yaxis.range) == (3.5, -0.5)

    def test_default_title_has_status(self):
        fig = render_board(small_state(is_paused=True, score=2))
        assert "Score 2" in fig.layout.title.text
        assert "Paused" in fig.layout.title.text

    def test_snapshot_dict(self):
        snapshot = small_state(tick=5).to_dict()
        fig = render_snapshot_board(snapshot)
        assert "Tick 5" in fig.layout.title.text
        assert list(fig.data[0].x) == [3]
