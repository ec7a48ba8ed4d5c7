"""
Unit tests for the configuration system.

Tests cover:
- Default config creation and validation
- JSON load/save roundtrip
- Partial config loading (missing fields use defaults)
- Invalid value detection
- Unknown key warnings
- Dot-notation parameter overrides
"""

import json
from pathlib import Path

import pytest

from snake_engine.core.config import (
    GRID_SIZES,
    BoardConfig,
    GameConfig,
    OutputConfig,
    PlayerConfig,
    TimingConfig,
    apply_param_override,
    get_default_config,
    load_config,
    parse_override,
    save_config,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def default_config() -> GameConfig:
    return get_default_config()


@pytest.fixture
def minimal_config_path(tmp_path) -> Path:
    """Config file with only a few overrides."""
    path = tmp_path / "minimal.json"
    path.write_text(json.dumps({
        "board": {"grid_size": 20},
        "player": {"policy": "random"},
    }))
    return path


@pytest.fixture
def invalid_config_path(tmp_path) -> Path:
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps({
        "board": {"grid_size": 2},
        "timing": {"tick_ms": 0},
        "player": {"policy": "psychic"},
    }))
    return path


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

class TestDefaultConfig:
    def test_default_config_valid(self, default_config):
        errors = default_config.validate()
        assert errors == [], f"Default config has errors: {errors}"

    def test_default_values(self, default_config):
        assert default_config.board.grid_size == 16
        assert default_config.board.seed == 42
        assert default_config.timing.tick_ms == 140
        assert default_config.timing.max_ticks == 5000
        assert default_config.player.policy == "greedy"
        assert default_config.output.output_dir == "runs"
        assert default_config.output.log_every_n_ticks == 1
        assert default_config.output.snapshot_on_game_over is True

    def test_ui_grid_sizes(self):
        assert GRID_SIZES == (12, 16, 20, 24)


# ---------------------------------------------------------------------------
# Section validation
# ---------------------------------------------------------------------------

class TestValidation:
    @pytest.mark.parametrize("size", [0, 3, -1, 257])
    def test_bad_grid_size(self, size):
        assert BoardConfig(grid_size=size).validate()

    def test_non_int_grid_size(self):
        errors = BoardConfig(grid_size=12.5).validate()
        assert any("must be an int" in e for e in errors)

    def test_bool_grid_size_rejected(self):
        assert BoardConfig(grid_size=True).validate()

    def test_null_seed_ok(self):
        assert BoardConfig(seed=None).validate() == []

    def test_negative_seed(self):
        assert BoardConfig(seed=-1).validate()

    def test_timing(self):
        assert TimingConfig(tick_ms=0).validate()
        assert TimingConfig(max_ticks=0).validate()

    def test_policy(self):
        assert PlayerConfig(policy="random").validate() == []
        assert PlayerConfig(policy="nope").validate()

    def test_output(self):
        assert OutputConfig(output_dir="").validate()
        assert OutputConfig(log_every_n_ticks=0).validate()

    def test_top_level_collects_all(self):
        cfg = GameConfig()
        cfg.board.grid_size = 1
        cfg.timing.max_ticks = 0
        assert len(cfg.validate()) == 2


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------

class TestConfigIO:
    def test_roundtrip(self, default_config, tmp_path):
        default_config.board.grid_size = 24
        default_config.player.policy = "straight"
        path = tmp_path / "cfg" / "out.json"
        save_config(default_config, path)
        loaded = load_config(path)
        assert loaded == default_config

    def test_partial_uses_defaults(self, minimal_config_path):
        cfg = load_config(minimal_config_path)
        assert cfg.board.grid_size == 20
        assert cfg.player.policy == "random"
        assert cfg.board.seed == 42
        assert cfg.timing.tick_ms == 140

    def test_invalid_raises(self, invalid_config_path):
        with pytest.raises(ValueError, match="Invalid configuration") as exc:
            load_config(invalid_config_path)
        message = str(exc.value)
        assert "board.grid_size" in message
        assert "timing.tick_ms" in message
        assert "player.policy" in message

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_config(path)

    def test_unknown_key_warns(self):
        with pytest.warns(UserWarning, match="Unknown config key 'colour'"):
            cfg = GameConfig.from_dict({"board": {"grid_size": 12, "colour": "green"}})
        assert cfg.board.grid_size == 12

    def test_unknown_section_warns(self):
        with pytest.warns(UserWarning, match="Unknown config key 'sound'"):
            GameConfig.from_dict({"sound": {"volume": 3}})

    def test_to_dict(self, default_config):
        data = default_config.to_dict()
        assert data["board"] == {"grid_size": 16, "seed": 42}
        assert set(data) == {"board", "timing", "player", "output"}


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------

class TestParamOverride:
    def test_override(self, default_config):
        apply_param_override(default_config, "board.grid_size", 20)
        assert default_config.board.grid_size == 20

    def test_override_bad_section(self, default_config):
        with pytest.raises(KeyError, match="'audio' not found"):
            apply_param_override(default_config, "audio.volume", 1)

    def test_override_bad_field(self, default_config):
        with pytest.raises(KeyError, match="'width' not found"):
            apply_param_override(default_config, "board.width", 1)

    def test_parse_override_json_values(self):
        assert parse_override("board.grid_size=20") == ("board.grid_size", 20)
        assert parse_override("board.seed=null") == ("board.seed", None)
        assert parse_override("output.snapshot_on_game_over=false") == (
            "output.snapshot_on_game_over", False,
        )

    def test_parse_override_plain_string(self):
        assert parse_override("player.policy=random") == ("player.policy", "random")

    def test_parse_override_splits_on_first_equals(self):
        assert parse_override("output.output_dir=a=b") == ("output.output_dir", "a=b")

    @pytest.mark.parametrize("text", ["board.grid_size", "=20", ""])
    def test_parse_override_malformed(self, text):
        with pytest.raises(ValueError, match="section.field=value"):
            parse_override(text)

    def test_parsed_override_applies(self, default_config):
        apply_param_override(default_config, *parse_override("timing.tick_ms=90"))
        assert default_config.timing.tick_ms == 90
