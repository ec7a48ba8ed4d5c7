"""
Unit tests for run output: CSV logger, snapshot manager and run manager.
"""

import csv
import json

import numpy as np
import pytest

from snake_engine.core.config import GameConfig
from snake_engine.core.geometry import Direction, Position
from snake_engine.core.state import GameState
from snake_engine.logging.csv_logger import CSVLogger
from snake_engine.logging.run_manager import RunManager
from snake_engine.logging.snapshot import SnapshotManager, _json_default
from snake_engine.simulation.metrics import MetricsCollector
from snake_engine.simulation.runner import GameRunner


def read_rows(path) -> list[dict]:
    with open(path, "r", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def make_state(tick: int = 0, **kwargs) -> GameState:
    return GameState(
        grid_size=8,
        snake=(Position(4, 4), Position(3, 4), Position(2, 4)),
        direction=Direction.RIGHT,
        food=Position(0, 1),
        tick=tick,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# CSVLogger
# ---------------------------------------------------------------------------

class TestCSVLogger:
    def test_header_written_on_create(self, tmp_path):
        logger = CSVLogger(tmp_path / "m.csv", columns=["tick", "score"])
        assert logger.file_path.read_text().splitlines() == ["tick,score"]
        assert logger.ticks_logged == 0
        assert logger.last_tick is None

    def test_log_tick_rows(self, tmp_path):
        logger = CSVLogger(tmp_path / "m.csv", columns=["tick", "score"])
        logger.log_tick({"tick": 1, "score": 0})
        logger.log_tick({"tick": 2, "score": 1, "extra": "dropped"})
        assert read_rows(logger.file_path) == [
            {"tick": "1", "score": "0"},
            {"tick": "2", "score": "1"},
        ]
        assert logger.ticks_logged == 2
        assert logger.last_tick == 2

    def test_default_columns(self, tmp_path):
        logger = CSVLogger(tmp_path / "m.csv")
        assert logger.columns == MetricsCollector.kpi_names()

    def test_creates_parent_dir(self, tmp_path):
        logger = CSVLogger(tmp_path / "a" / "b" / "m.csv")
        assert logger.file_path.parent.is_dir()

    def test_reopen_keeps_existing_rows(self, tmp_path):
        path = tmp_path / "m.csv"
        CSVLogger(path, columns=["tick"]).log_tick({"tick": 1})
        CSVLogger(path, columns=["tick"]).log_tick({"tick": 2})
        assert path.read_text().splitlines() == ["tick", "1", "2"]

    def test_rejects_out_of_order_tick(self, tmp_path):
        logger = CSVLogger(tmp_path / "m.csv", columns=["tick"])
        logger.log_tick({"tick": 3})
        with pytest.raises(ValueError, match="tick 3 logged after tick 3"):
            logger.log_tick({"tick": 3})
        with pytest.raises(ValueError):
            logger.log_tick({"tick": 1})
        assert logger.ticks_logged == 1

    def test_rejects_row_without_tick(self, tmp_path):
        with pytest.raises(ValueError, match="no 'tick'"):
            CSVLogger(tmp_path / "m.csv").log_tick({"score": 1})


# ---------------------------------------------------------------------------
# SnapshotManager
# ---------------------------------------------------------------------------

class TestSnapshotManager:
    def test_save_and_load(self, tmp_path):
        manager = SnapshotManager(tmp_path)
        path = manager.save(make_state(tick=7), label="checkpoint")
        assert path.name == "tick_000007.json"
        data = manager.load(7)
        assert data["tick"] == 7
        assert data["snake"] == [[4, 4], [3, 4], [2, 4]]
        assert data["food"] == [0, 1]
        assert data["direction"] == "right"
        assert data["queued_direction"] is None
        assert data["status"] == "running"
        assert data["label"] == "checkpoint"

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SnapshotManager(tmp_path).load(3)

    def test_list_snapshots(self, tmp_path):
        manager = SnapshotManager(tmp_path)
        for t in (5, 1, 12):
            manager.save(make_state(tick=t))
        (manager.snapshot_dir / "tick_bogus.json").write_text("{}")
        assert manager.list_snapshots() == [1, 5, 12]

    def test_numpy_default(self):
        assert _json_default(np.int64(3)) == 3
        assert _json_default(np.float32(0.5)) == 0.5
        assert _json_default(np.array([1, 2])) == [1, 2]
        with pytest.raises(TypeError):
            _json_default(object())


# ---------------------------------------------------------------------------
# RunManager
# ---------------------------------------------------------------------------

class TestRunManager:
    def test_layout(self, tmp_path):
        manager = RunManager(GameConfig(), base_dir=tmp_path, run_name="r1")
        assert manager.run_dir == tmp_path / "r1"
        assert manager.config_path.exists()
        assert manager.snapshots_dir.is_dir()
        saved = json.loads(manager.config_path.read_text())
        assert saved["board"]["grid_size"] == 16

    def test_log_every_n_ticks(self, tmp_path):
        config = GameConfig()
        config.output.log_every_n_ticks = 3
        manager = RunManager(config, base_dir=tmp_path, run_name="r")
        written = [manager.log_tick({"tick": t, "status": "running"}) for t in range(1, 7)]
        assert written == [False, False, True, False, False, True]

    def test_game_over_always_logged(self, tmp_path):
        config = GameConfig()
        config.output.log_every_n_ticks = 100
        manager = RunManager(config, base_dir=tmp_path, run_name="r")
        assert manager.log_tick({"tick": 7, "status": "game_over"}) is True

    def test_finalize_writes_summary(self, tmp_path):
        manager = RunManager(GameConfig(), base_dir=tmp_path, run_name="r")
        manager.finalize({"final_score": 3})
        summary = json.loads((manager.run_dir / "summary.json").read_text())
        assert summary == {"final_score": 3}

    def test_list_runs(self, tmp_path):
        RunManager(GameConfig(), base_dir=tmp_path, run_name="b")
        RunManager(GameConfig(), base_dir=tmp_path, run_name="a")
        (tmp_path / "stray").mkdir()
        assert RunManager.list_runs(tmp_path) == ["a", "b"]
        assert RunManager.list_runs(tmp_path / "nothing") == []

    def test_logs_a_full_game(self, tmp_path):
        config = GameConfig()
        config.player.policy = "straight"
        runner = GameRunner(config, rng=lambda: 0.0)
        metrics = MetricsCollector()
        manager = RunManager(config, base_dir=tmp_path, run_name="game")

        runner.on_tick = lambda state, r: manager.log_tick(metrics.collect(state, r.tick_stats))
        runner.on_game_over = lambda state, r: manager.save_snapshot(state, label="game_over")
        runner.run()

        rows = read_rows(manager.metrics_path)
        assert len(rows) == 8
        assert rows[-1]["status"] == "game_over"
        assert rows[-1]["collision"] == "wall"
        assert manager.snapshot_manager.list_snapshots() == [8]
