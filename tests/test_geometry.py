"""
Unit tests for grid geometry and keyboard mapping.
"""

import pytest

from snake_engine.core.controls import KEY_TO_DIRECTION, PAUSE, key_to_action
from snake_engine.core.geometry import (
    Direction,
    Position,
    in_bounds,
    iter_cells,
    manhattan,
    step,
)


class TestPosition:
    def test_equality_by_fields(self):
        assert Position(2, 3) == Position(2, 3)
        assert Position(2, 3) != Position(3, 2)

    def test_hashable(self):
        assert len({Position(1, 1), Position(1, 1), Position(0, 1)}) == 2

    def test_add(self):
        assert Position(2, 3) + Position(-1, 1) == Position(1, 4)

    def test_immutable(self):
        p = Position(1, 1)
        with pytest.raises(AttributeError):
            p.x = 5


class TestDirection:
    @pytest.mark.parametrize("direction,vector", [
        (Direction.UP, Position(0, -1)),
        (Direction.DOWN, Position(0, 1)),
        (Direction.LEFT, Position(-1, 0)),
        (Direction.RIGHT, Position(1, 0)),
    ])
    def test_vectors(self, direction, vector):
        assert direction.vector == vector

    def test_opposites_pair_up(self):
        for d in Direction:
            assert d.opposite != d
            assert d.opposite.opposite == d
            assert d.vector + d.opposite.vector == Position(0, 0)

    def test_parse(self):
        assert Direction.parse("up") is Direction.UP
        assert Direction.parse(" LEFT ") is Direction.LEFT
        assert Direction.parse(Direction.DOWN) is Direction.DOWN

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown direction"):
            Direction.parse("north")

    def test_string_value(self):
        assert Direction.RIGHT.value == "right"


class TestGridHelpers:
    def test_in_bounds(self):
        assert in_bounds(Position(0, 0), 4)
        assert in_bounds(Position(3, 3), 4)
        assert not in_bounds(Position(4, 0), 4)
        assert not in_bounds(Position(0, -1), 4)

    def test_step(self):
        assert step(Position(5, 5), Direction.UP) == Position(5, 4)

    def test_manhattan(self):
        assert manhattan(Position(0, 0), Position(3, 4)) == 7

    def test_iter_cells_row_major(self):
        cells = list(iter_cells(2))
        assert cells == [Position(0, 0), Position(1, 0), Position(0, 1), Position(1, 1)]


class TestControls:
    def test_arrow_keys(self):
        assert key_to_action("ArrowUp") is Direction.UP
        assert key_to_action("ArrowDown") is Direction.DOWN
        assert key_to_action("ArrowLeft") is Direction.LEFT
        assert key_to_action("ArrowRight") is Direction.RIGHT

    def test_wasd_both_cases(self):
        for key in "wW":
            assert key_to_action(key) is Direction.UP
        for key in "aA":
            assert key_to_action(key) is Direction.LEFT
        for key in "sS":
            assert key_to_action(key) is Direction.DOWN
        for key in "dD":
            assert key_to_action(key) is Direction.RIGHT

    def test_pause_keys(self):
        assert key_to_action(" ") == PAUSE
        assert key_to_action("p") == PAUSE

    def test_unmapped(self):
        assert key_to_action("x") is None
        assert key_to_action("Enter") is None

    def test_every_direction_reachable(self):
        assert set(KEY_TO_DIRECTION.values()) == set(Direction)
