"""
Counter-Strategy Calculator

Turns rival profiles into multipliers on the agent's own action priorities.
The agent races rivals on the axes they push hardest and takes a flat bonus
on the axis they neglect most (the gap). Weights only ever boost.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

from .observer import PlayerBehaviorObserver, PlayerStrategyProfile

logger = logging.getLogger(__name__)

AXES = ('education', 'wealth', 'combat', 'happiness')


@dataclass(frozen=True)
class CounterStrategyWeights:
    """Per-axis priority multipliers, always >= 1.0"""
    education: float = 1.0
    wealth: float = 1.0
    combat: float = 1.0
    happiness: float = 1.0

    def for_axis(self, axis: str) -> float:
        return getattr(self, axis, 1.0)

    @property
    def is_neutral(self) -> bool:
        return all(getattr(self, axis) == 1.0 for axis in AXES)

    def __str__(self) -> str:
        return (f"CounterStrategyWeights(edu={self.education:.2f}, wealth={self.wealth:.2f}, "
                f"combat={self.combat:.2f}, happy={self.happiness:.2f})")


NEUTRAL_WEIGHTS = CounterStrategyWeights()


def gap_exploit(planning_depth: int) -> float:
    return 0.3 if planning_depth >= 3 else 0.15


def competitive_boost(planning_depth: int) -> float:
    return 0.6 if planning_depth >= 3 else 0.4


class CounterStrategyCalculator:
    """Rival profiles + planning depth -> CounterStrategyWeights"""

    def __init__(self, observer: PlayerBehaviorObserver):
        self.observer = observer

    def compute(self, rival_ids: Iterable[str], planning_depth: int) -> CounterStrategyWeights:
        # Reactive agents never counter-strategize
        if planning_depth < 2:
            return NEUTRAL_WEIGHTS

        profiles: List[PlayerStrategyProfile] = []
        for rival_id in rival_ids:
            profile = self.observer.get_player_profile(rival_id)
            if profile is not None:
                profiles.append(profile)

        if not profiles:
            return NEUTRAL_WEIGHTS

        avg_focus = {
            axis: sum(getattr(p.focus_weights, axis) for p in profiles) / len(profiles)
            for axis in AXES
        }

        # First minimum in AXES order is the gap
        gap_axis = AXES[0]
        for axis in AXES[1:]:
            if avg_focus[axis] < avg_focus[gap_axis]:
                gap_axis = axis

        weights = {}
        for axis in AXES:
            if axis == gap_axis:
                weights[axis] = 1.0 + gap_exploit(planning_depth)
            else:
                weights[axis] = 1.0 + avg_focus[axis] * competitive_boost(planning_depth)

        result = CounterStrategyWeights(**weights)
        logger.debug(f"Counter-strategy from {len(profiles)} profile(s), gap={gap_axis}: {result}")
        return result
