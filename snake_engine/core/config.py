"""
Configuration system for the Snake engine.

Provides a hierarchical dataclass-based config with JSON serialization,
validation, and sensible defaults for board, timing, autopilot and output
settings. The pure engine functions take plain arguments; this config is
consumed by the runner, the CLI and the UI.
"""

from __future__ import annotations

import json
import warnings
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Optional


POLICIES = ("greedy", "random", "straight")

# Board sizes offered by the interactive UI.
GRID_SIZES = (12, 16, 20, 24)


# ---------------------------------------------------------------------------
# Sub-config dataclasses (grouped by domain)
# ---------------------------------------------------------------------------

@dataclass
class BoardConfig:
    """Board size and randomness."""
    grid_size: int = 16
    seed: Optional[int] = 42  # None = unseeded

    def validate(self) -> list[str]:
        errors = []
        if not isinstance(self.grid_size, int) or isinstance(self.grid_size, bool):
            errors.append(f"board.grid_size must be an int, got {self.grid_size!r}")
        elif self.grid_size < 4:
            errors.append(f"board.grid_size must be >= 4, got {self.grid_size}")
        elif self.grid_size > 256:
            errors.append(f"board.grid_size must be <= 256, got {self.grid_size}")
        if self.seed is not None and self.seed < 0:
            errors.append(f"board.seed must be >= 0 or null, got {self.seed}")
        return errors


@dataclass
class TimingConfig:
    """Driver cadence and run length."""
    tick_ms: int = 140       # interval between ticks for real-time drivers
    max_ticks: int = 5000    # stop a headless run after this many ticks

    def validate(self) -> list[str]:
        errors = []
        if self.tick_ms < 1:
            errors.append(f"timing.tick_ms must be >= 1, got {self.tick_ms}")
        if self.max_ticks < 1:
            errors.append(f"timing.max_ticks must be >= 1, got {self.max_ticks}")
        return errors


@dataclass
class PlayerConfig:
    """Autopilot used by headless runs."""
    policy: str = "greedy"  # "greedy", "random" or "straight"

    def validate(self) -> list[str]:
        errors = []
        if self.policy not in POLICIES:
            errors.append(f"player.policy must be one of {list(POLICIES)}, got '{self.policy}'")
        return errors


@dataclass
class OutputConfig:
    """Run output settings."""
    output_dir: str = "runs"
    log_every_n_ticks: int = 1
    snapshot_on_game_over: bool = True

    def validate(self) -> list[str]:
        errors = []
        if not self.output_dir:
            errors.append("output.output_dir must not be empty")
        if self.log_every_n_ticks < 1:
            errors.append(f"output.log_every_n_ticks must be >= 1, got {self.log_every_n_ticks}")
        return errors


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

@dataclass
class GameConfig:
    """
    Top-level game configuration.

    Nested dataclasses group related settings.
    Load from JSON with `load_config()`, validate with `validate()`.
    """
    board: BoardConfig = field(default_factory=BoardConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def validate(self) -> list[str]:
        """Validate all config sections. Returns list of error messages (empty = valid)."""
        errors = []
        for f in fields(self):
            sub = getattr(self, f.name)
            if hasattr(sub, "validate"):
                errors.extend(sub.validate())
        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dict for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameConfig:
        """Create GameConfig from nested dict, merging with defaults."""
        config = cls()
        _merge_into_dataclass(config, data)
        return config


# ---------------------------------------------------------------------------
# JSON I/O helpers
# ---------------------------------------------------------------------------

def _merge_into_dataclass(target: Any, source: dict[str, Any]) -> None:
    """
    Recursively merge a dict into a dataclass instance.
    Unknown keys emit a warning but don't raise.
    """
    if not isinstance(source, dict):
        return

    known_fields = {f.name for f in fields(target)}
    for key, value in source.items():
        if key not in known_fields:
            warnings.warn(
                f"Unknown config key '{key}' in section {type(target).__name__}, ignored.",
                UserWarning,
                stacklevel=3,
            )
            continue

        current = getattr(target, key)

        if hasattr(current, "__dataclass_fields__") and isinstance(value, dict):
            _merge_into_dataclass(current, value)
        else:
            setattr(target, key, value)


def load_config(path: str | Path) -> GameConfig:
    """
    Load config from a JSON file. Missing fields use defaults.

    Args:
        path: Path to JSON config file.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If path doesn't exist.
        json.JSONDecodeError: If JSON is malformed.
        ValueError: If config values are invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = GameConfig.from_dict(data)

    errors = config.validate()
    if errors:
        msg = "Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(msg)

    return config


def save_config(config: GameConfig, path: str | Path) -> None:
    """Save config to JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)


def get_default_config() -> GameConfig:
    """Return a fresh default config (all defaults, validated)."""
    config = GameConfig()
    errors = config.validate()
    assert not errors, f"Default config is invalid: {errors}"
    return config


def apply_param_override(config: GameConfig, dotted_key: str, value: Any) -> None:
    """
    Apply a single parameter override using dot notation.

    Example:
        apply_param_override(config, "board.grid_size", 20)
        apply_param_override(config, "player.policy", "random")

    Raises:
        KeyError: If the path doesn't exist.
    """
    parts = dotted_key.split(".")
    obj = config
    for part in parts[:-1]:
        if not hasattr(obj, part):
            raise KeyError(f"Config path '{dotted_key}' invalid: '{part}' not found in {type(obj).__name__}")
        obj = getattr(obj, part)

    final_key = parts[-1]
    if not hasattr(obj, final_key):
        raise KeyError(f"Config path '{dotted_key}' invalid: '{final_key}' not found in {type(obj).__name__}")

    setattr(obj, final_key, value)


def parse_override(assignment: str) -> tuple[str, Any]:
    """
    Split a "section.field=value" assignment for `apply_param_override`.

    The value is decoded as JSON when possible ("20", "null", "true"),
    otherwise kept as a plain string ("random").

    Raises:
        ValueError: If there is no '=' or the key is empty.
    """
    key, sep, raw = assignment.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Override must look like section.field=value, got '{assignment}'")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value
