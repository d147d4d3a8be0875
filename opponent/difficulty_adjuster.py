"""
Adaptive Difficulty

Rubber-banding on top of the fixed presets. Once per AI turn the agent
records how far the human players are ahead of it (overall goal progress);
from week 5 on, with at least three records, the gap nudges the agent's
mistake chance, aggressiveness and efficiency weight:

    humans ahead -> fewer mistakes, more aggressive
    agent ahead  -> more mistakes, less aggressive

The signal is clamped, so the swing stays within about +/-20% of the preset.
Planning depth and decision delay are never adjusted.

History lives in a PerformanceRepository owned by the game session and
cleared with reset() when a new game starts.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, replace
from typing import Deque, Dict, List, Optional

from .difficulty import DifficultySettings
from .evaluators import GoalProgressEvaluator
from .models import GoalSettings, Player

logger = logging.getLogger(__name__)

# Records kept per AI player
MAX_PERFORMANCE_HISTORY = 20

# No adjustment before this week
ACTIVATION_WEEK = 5

# Records needed before the gap is trusted
MIN_RECORDS = 3

MAX_SIGNAL = 0.5
TREND_WEIGHT = 0.3
BOOST_SCALE = 0.3

# Bounds for adjusted settings
MISTAKE_CHANCE_RANGE = (0.005, 0.35)
AGGRESSIVENESS_RANGE = (0.1, 1.0)
EFFICIENCY_RANGE = (0.1, 1.0)


@dataclass(frozen=True)
class DifficultyAdjustment:
    """Deltas applied on top of a preset"""
    mistake_multiplier: float = 1.0
    aggressiveness_boost: float = 0.0
    efficiency_boost: float = 0.0
    performance_gap: float = 0.0     # Weighted human - agent progress
    active: bool = False


NEUTRAL_ADJUSTMENT = DifficultyAdjustment()


@dataclass(frozen=True)
class PerformanceRecord:
    week: int
    human_progress: float   # Mean overall progress of the human players
    ai_progress: float
    gap: float              # human - ai, positive when the humans lead


class PerformanceRepository:
    """Session-owned performance history, keyed by AI player id"""

    def __init__(self):
        self.lock = threading.RLock()
        self.history: Dict[str, Deque[PerformanceRecord]] = {}

    def reset(self):
        with self.lock:
            self.history.clear()
        logger.info("🧹 Performance history reset for new game")


def _clamp(value: float, bounds) -> float:
    low, high = bounds
    return max(low, min(high, value))


def apply_adjustment(base: DifficultySettings, adjustment: DifficultyAdjustment) -> DifficultySettings:
    """Adjusted copy of base (base itself when the adjustment is inactive)"""
    if not adjustment.active:
        return base
    return replace(
        base,
        mistake_chance=_clamp(base.mistake_chance * adjustment.mistake_multiplier, MISTAKE_CHANCE_RANGE),
        aggressiveness=_clamp(base.aggressiveness + adjustment.aggressiveness_boost, AGGRESSIVENESS_RANGE),
        efficiency_weight=_clamp(base.efficiency_weight + adjustment.efficiency_boost, EFFICIENCY_RANGE),
    )


class DifficultyAdjuster:

    def __init__(self, repository: PerformanceRepository,
                 progress_evaluator: Optional[GoalProgressEvaluator] = None):
        self.repository = repository
        self.progress_evaluator = progress_evaluator or GoalProgressEvaluator()

    def record_performance(self, ai_player: Player, humans: List[Player], goals: GoalSettings, week: int):
        """Store this week's progress gap; a second call in the same week replaces it"""
        if not humans or week < ACTIVATION_WEEK:
            return

        ai_progress = self.progress_evaluator.evaluate(ai_player, goals).overall
        human_progress = sum(
            self.progress_evaluator.evaluate(human, goals).overall for human in humans
        ) / len(humans)
        record = PerformanceRecord(
            week=week,
            human_progress=human_progress,
            ai_progress=ai_progress,
            gap=human_progress - ai_progress,
        )

        with self.repository.lock:
            history = self.repository.history.get(ai_player.id)
            if history is None:
                history = deque(maxlen=MAX_PERFORMANCE_HISTORY)
                self.repository.history[ai_player.id] = history

            if history and history[-1].week == week:
                history[-1] = record
            else:
                history.append(record)

    def calculate_adjustment(self, ai_player_id: str) -> DifficultyAdjustment:
        with self.repository.lock:
            records = list(self.repository.history.get(ai_player_id, ()))
        if len(records) < MIN_RECORDS:
            return NEUTRAL_ADJUSTMENT

        # Recent weeks count up to ~4x as much as the oldest
        weighted_sum = 0.0
        weight_sum = 0.0
        for i, record in enumerate(records):
            weight = 2 ** (2 * i / len(records))
            weighted_sum += record.gap * weight
            weight_sum += weight
        avg_gap = weighted_sum / weight_sum

        recent = records[-3:]
        trend = recent[-1].gap - recent[0].gap

        signal = max(-MAX_SIGNAL, min(MAX_SIGNAL, avg_gap + trend * TREND_WEIGHT))
        adjustment = DifficultyAdjustment(
            mistake_multiplier=1.0 - signal,
            aggressiveness_boost=signal * BOOST_SCALE,
            efficiency_boost=signal * BOOST_SCALE,
            performance_gap=avg_gap,
            active=True,
        )
        logger.debug(f"Difficulty adjustment for {ai_player_id}: gap={avg_gap:+.3f}, signal={signal:+.3f}")
        return adjustment

    def current_gap(self, ai_player_id: str) -> float:
        """Latest recorded gap, 0.0 without data"""
        with self.repository.lock:
            history = self.repository.history.get(ai_player_id)
            if not history:
                return 0.0
            return history[-1].gap
