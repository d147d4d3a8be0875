"""
Difficulty Presets

Three fixed presets (easy, medium, hard) plus optional per-field overrides
loaded from JSON, so difficulty can be tuned without code changes.

Usage:
    from opponent.difficulty import get_difficulty_settings

    settings = get_difficulty_settings('hard')

Environment:
    DIFFICULTY_CONFIG - Path to JSON overrides (default: configs/difficulty.json)

JSON format (every key optional):
    {
      "name": "tuned",
      "presets": {
        "hard": {"mistake_chance": 0.0, "decision_delay": 200}
      }
    }
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "difficulty.json"


@dataclass(frozen=True)
class DifficultySettings:
    """Immutable per-agent tuning knobs"""
    aggressiveness: float      # 0-1, eagerness to spend resources
    planning_depth: int        # 1 reactive .. 3 strategic; counter-strategy needs >= 2
    mistake_chance: float      # Probability of swapping the top two actions
    efficiency_weight: float   # Advisory only
    decision_delay: int        # Milliseconds between steps (pacing only)


PRESETS: Dict[str, DifficultySettings] = {
    'easy': DifficultySettings(
        aggressiveness=0.3,
        planning_depth=1,
        mistake_chance=0.2,
        efficiency_weight=0.3,
        decision_delay=800,
    ),
    'medium': DifficultySettings(
        aggressiveness=0.6,
        planning_depth=2,
        mistake_chance=0.08,
        efficiency_weight=0.6,
        decision_delay=500,
    ),
    'hard': DifficultySettings(
        aggressiveness=0.9,
        planning_depth=3,
        mistake_chance=0.02,
        efficiency_weight=0.9,
        decision_delay=300,
    ),
}

_FIELD_TYPES = {f.name: f.type for f in fields(DifficultySettings)}


class DifficultyConfig:
    """
    Built-in presets with JSON overrides applied on top.

    A missing or invalid file leaves the built-in presets in force.
    """

    def __init__(self, config_path: Optional[str] = None):
        if config_path:
            self.path = Path(config_path)
        else:
            env_path = os.environ.get('DIFFICULTY_CONFIG')
            self.path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        self._config: Dict[str, Any] = {}
        self._presets: Dict[str, DifficultySettings] = dict(PRESETS)
        self._load()

    def _load(self):
        self._presets = dict(PRESETS)
        try:
            if self.path.exists():
                with open(self.path, 'r', encoding='utf-8') as f:
                    self._config = json.load(f)
                logger.info(f"Loaded difficulty config from: {self.path}")
                logger.info(f"  Config name: {self._config.get('name', 'unknown')}")
                self._apply_overrides(self._config.get('presets', {}))
            else:
                logger.warning(f"Difficulty config not found: {self.path}, using built-in presets")
                self._config = {}
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in difficulty config {self.path}: {e}")
            self._config = {}
            self._presets = dict(PRESETS)

    def _apply_overrides(self, overrides: Dict[str, Dict[str, Any]]):
        for name, values in overrides.items():
            base = self._presets.get(name)
            if base is None:
                logger.warning(f"Ignoring overrides for unknown difficulty '{name}'")
                continue

            changes = {}
            for key, value in values.items():
                if key not in _FIELD_TYPES:
                    logger.warning(f"Ignoring unknown difficulty field '{name}.{key}'")
                    continue
                changes[key] = int(value) if _FIELD_TYPES[key] in (int, 'int') else float(value)

            if changes:
                self._presets[name] = replace(base, **changes)
                logger.info(f"  [{name}] overrides: {changes}")

    def reload(self):
        self._load()

    @property
    def name(self) -> str:
        return self._config.get('name', 'builtin')

    def get(self, difficulty: str) -> DifficultySettings:
        """Settings for a preset name; KeyError for unknown names"""
        key = difficulty.lower()
        if key not in self._presets:
            raise KeyError(f"Unknown difficulty '{difficulty}' (expected one of {sorted(self._presets)})")
        return self._presets[key]


# Module-level cache
_config_instance: Optional[DifficultyConfig] = None


def get_difficulty_config() -> DifficultyConfig:
    global _config_instance
    if _config_instance is None:
        _config_instance = DifficultyConfig()
    return _config_instance


def reset_difficulty_config():
    """Drop the cached config (tests, or after editing the JSON)"""
    global _config_instance
    _config_instance = None


def get_difficulty_settings(difficulty: str) -> DifficultySettings:
    return get_difficulty_config().get(difficulty)
