"""
Goal Progress and Resource Urgency Evaluators

Two pure scoring passes over a Player:

- GoalProgressEvaluator normalizes the four victory axes to 0-1 progress.
- ResourceUrgencyEvaluator turns survival stats into coarse urgency steps
  that trigger the planner's interrupts.

Neither evaluator mutates anything or reads anything but its arguments.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .models import (
    EDUCATION_POINTS_PER_DEGREE,
    GoalSettings,
    HousingTier,
    Player,
    rank_index,
)

logger = logging.getLogger(__name__)


class GoalAxis(Enum):
    """Victory axes, in weakest-goal tie order"""
    WEALTH = "wealth"
    HAPPINESS = "happiness"
    EDUCATION = "education"
    CAREER = "career"


@dataclass(frozen=True)
class GoalAxisProgress:
    current: float
    target: float
    progress: float


@dataclass(frozen=True)
class GoalProgress:
    wealth: GoalAxisProgress
    happiness: GoalAxisProgress
    education: GoalAxisProgress
    career: GoalAxisProgress

    @property
    def overall(self) -> float:
        """Unweighted mean of the four axes"""
        return (self.wealth.progress + self.happiness.progress
                + self.education.progress + self.career.progress) / 4

    def axis(self, goal: GoalAxis) -> GoalAxisProgress:
        return getattr(self, goal.value)


@dataclass(frozen=True)
class ResourceUrgency:
    """Independent 0-1 urgency per survival resource (no aggregate)"""
    food: float
    rent: float
    clothing: float
    health: float
    housing: float


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _axis(current: float, target: float) -> GoalAxisProgress:
    # A non-positive target is already met
    if target <= 0:
        return GoalAxisProgress(current=current, target=target, progress=1.0)
    return GoalAxisProgress(current=current, target=target, progress=clamp01(current / target))


class GoalProgressEvaluator:
    """Player + goal targets -> per-axis progress"""

    def evaluate(self, player: Player, goals: GoalSettings) -> GoalProgress:
        education_points = len(player.completed_degrees) * EDUCATION_POINTS_PER_DEGREE
        return GoalProgress(
            wealth=_axis(player.total_wealth, goals.wealth),
            happiness=_axis(player.happiness, goals.happiness),
            education=_axis(education_points, goals.education),
            career=_axis(rank_index(player.guild_rank), goals.career),
        )


def weakest_goal(progress: GoalProgress) -> GoalAxis:
    """Lowest-progress axis; ties go to the earlier axis in GoalAxis order"""
    weakest = GoalAxis.WEALTH
    for goal in GoalAxis:
        if progress.axis(goal).progress < progress.axis(weakest).progress:
            weakest = goal
    return weakest


class ResourceUrgencyEvaluator:
    """
    Player -> survival urgencies.

    Step functions rather than curves: the values only need to cross the
    planner's interrupt thresholds, not rank against each other.
    """

    def evaluate(self, player: Player) -> ResourceUrgency:
        return ResourceUrgency(
            food=self._food(player),
            rent=self._rent(player),
            clothing=self._clothing(player),
            health=self._health(player),
            housing=self._housing(player),
        )

    @staticmethod
    def _food(player: Player) -> float:
        if player.food_level < 25:
            return 1.0
        if player.food_level < 50:
            return 0.6
        return 0.1

    @staticmethod
    def _rent(player: Player) -> float:
        if player.housing == HousingTier.HOMELESS:
            return 0.0
        if player.weeks_since_rent >= 3:
            return 1.0
        if player.weeks_since_rent >= 2:
            return 0.5
        return 0.1

    @staticmethod
    def _clothing(player: Player) -> float:
        if player.clothing_condition < 25:
            return 0.9
        if player.clothing_condition < 50:
            return 0.4
        return 0.1

    @staticmethod
    def _health(player: Player) -> float:
        if player.health < 30:
            return 1.0
        if player.health < 50:
            return 0.5
        return 0.1

    @staticmethod
    def _housing(player: Player) -> float:
        # Valuables kept in the slums invite robbery
        if (player.housing == HousingTier.SLUMS
                and player.has_valuables
                and player.gold > 200):
            return 0.5
        return 0.1
