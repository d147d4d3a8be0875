"""
Opponent Package

Autonomous AI opponent for the guild life-sim. The agent reads player state
through a GameStore, ranks candidate actions against the four victory goals
and survival needs, and executes a bounded sequence of mutations each turn.
"""

from .actions import ActionKind, AIAction, FocusAxis
from .counter_strategy import CounterStrategyCalculator, CounterStrategyWeights
from .difficulty import DifficultySettings, get_difficulty_settings
from .difficulty_adjuster import DifficultyAdjuster, DifficultyAdjustment, PerformanceRepository, apply_adjustment
from .evaluators import (
    GoalAxis,
    GoalProgress,
    GoalProgressEvaluator,
    ResourceUrgency,
    ResourceUrgencyEvaluator,
    weakest_goal,
)
from .interfaces import Board, ContentTables, GameStore
from .models import GoalSettings, HousingTier, GuildRank, Player
from .observer import ObserverRepository, PlayerBehaviorObserver, PlayerStrategyProfile, StrategyLabel
from .planner import ActionPlanner
from .turn_runner import (
    Agent,
    ImmediateScheduler,
    PlayerTurnLocks,
    Scheduler,
    SleepScheduler,
    TurnEndReason,
    TurnReport,
    create_agent,
)

__all__ = [
    'ActionKind',
    'AIAction',
    'FocusAxis',
    'CounterStrategyCalculator',
    'CounterStrategyWeights',
    'DifficultySettings',
    'get_difficulty_settings',
    'DifficultyAdjuster',
    'DifficultyAdjustment',
    'PerformanceRepository',
    'apply_adjustment',
    'GoalAxis',
    'GoalProgress',
    'GoalProgressEvaluator',
    'ResourceUrgency',
    'ResourceUrgencyEvaluator',
    'weakest_goal',
    'Board',
    'ContentTables',
    'GameStore',
    'GoalSettings',
    'HousingTier',
    'GuildRank',
    'Player',
    'ObserverRepository',
    'PlayerBehaviorObserver',
    'PlayerStrategyProfile',
    'StrategyLabel',
    'ActionPlanner',
    'Agent',
    'ImmediateScheduler',
    'PlayerTurnLocks',
    'Scheduler',
    'SleepScheduler',
    'TurnEndReason',
    'TurnReport',
    'create_agent',
]
