"""
Turn Runner

The Agent drives one AI turn as a bounded loop:

    Idle -> Stepping -> Done

Each step re-reads the player from the store, asks the planner for a fresh
ranking, executes the top action and pauses through the scheduler. The loop
ends when the planner picks END_TURN, time runs out, the game ends, a skip is
requested or the safety budget is spent. Every exit that leaves time on the
clock issues end_turn to the store.

At the start of each turn the agent observes the human rivals still in the
game and, through the difficulty adjuster, re-tunes its preset for the turn.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from config import config

from . import decision_logger
from .actions import ActionKind
from .board import RingBoard
from .content import StaticContent
from .counter_strategy import CounterStrategyCalculator, CounterStrategyWeights
from .difficulty import DifficultySettings, get_difficulty_settings
from .difficulty_adjuster import (
    DifficultyAdjuster,
    DifficultyAdjustment,
    PerformanceRepository,
    apply_adjustment,
)
from .evaluators import (
    GoalAxis,
    GoalProgress,
    GoalProgressEvaluator,
    ResourceUrgency,
    ResourceUrgencyEvaluator,
    weakest_goal,
)
from .executor import ActionExecutor
from .interfaces import Board, ContentTables, GameStore
from .models import GoalSettings, Player
from .observer import ObserverRepository, PlayerBehaviorObserver
from .planner import ActionPlanner

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_STEPS = 15


class TurnEndReason(Enum):
    """Why a turn loop stopped"""
    END_TURN_CHOSEN = "end-turn-chosen"
    OUT_OF_TIME = "out-of-time"
    SAFETY_BUDGET = "safety-budget"
    GAME_OVER = "game-over"
    SKIPPED = "skipped"
    PLAYER_MISSING = "player-missing"


@dataclass
class TurnReport:
    """Outcome of one run_turn call"""
    player_id: str
    steps: int = 0
    executed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    end_reason: Optional[TurnEndReason] = None
    ended_turn: bool = False


@dataclass(frozen=True)
class AgentAnalysis:
    """Snapshot of how the agent currently reads a player"""
    progress: GoalProgress
    urgency: ResourceUrgency
    weakest_goal: GoalAxis
    difficulty: DifficultySettings         # After adaptive adjustment
    adjustment: DifficultyAdjustment
    counter_weights: CounterStrategyWeights


# =============================================================================
# Pacing
# =============================================================================

class Scheduler(ABC):
    """Inter-step pause. Never affects what the agent decides."""

    @abstractmethod
    def pause(self, delay_ms: int):
        pass


class ImmediateScheduler(Scheduler):
    """No pause (tests, headless runs)"""

    def pause(self, delay_ms: int):
        pass


class SleepScheduler(Scheduler):
    """Blocking sleep scaled by a speed multiplier, never below a floor"""

    def __init__(self, speed_multiplier: float = 1.0, min_delay_ms: int = 50):
        self.speed_multiplier = speed_multiplier if speed_multiplier > 0 else 1.0
        self.min_delay_ms = min_delay_ms

    def delay_for(self, delay_ms: int) -> float:
        """Milliseconds actually slept for a requested delay"""
        return max(self.min_delay_ms, delay_ms / self.speed_multiplier)

    def pause(self, delay_ms: int):
        time.sleep(self.delay_for(delay_ms) / 1000.0)


# =============================================================================
# Session-wide turn locks
# =============================================================================

class PlayerTurnLocks:
    """
    One lock per player id, shared by every agent in a session.

    A player's turn is a critical section: a second agent asked to play the
    same player while a turn is running backs off instead of interleaving
    mutations.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def lock_for(self, player_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(player_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[player_id] = lock
            return lock

    def is_locked(self, player_id: str) -> bool:
        return self.lock_for(player_id).locked()


# =============================================================================
# Agent
# =============================================================================

class Agent:
    """
    One AI opponent.

    Owns its own step budget and in-flight guard. Observer state, performance
    history and per-player turn locks are shared with other agents through the
    session's repositories; an agent built without them gets private ones.
    """

    def __init__(
        self,
        store: GameStore,
        board: Board,
        content: ContentTables,
        difficulty: DifficultySettings,
        goals: GoalSettings,
        repository: ObserverRepository,
        scheduler: Optional[Scheduler] = None,
        planner: Optional[ActionPlanner] = None,
        safety_steps: int = DEFAULT_SAFETY_STEPS,
        performance: Optional[PerformanceRepository] = None,
        turn_locks: Optional[PlayerTurnLocks] = None,
    ):
        self.store = store
        self.difficulty = difficulty
        self.goals = goals
        self.safety_steps = safety_steps
        self.scheduler = scheduler or ImmediateScheduler()
        self.turn_locks = turn_locks or PlayerTurnLocks()

        self.planner = planner or ActionPlanner(board, content)
        self.executor = ActionExecutor(store, board, content)
        self.observer = PlayerBehaviorObserver(repository)
        self.counter_strategy = CounterStrategyCalculator(self.observer)
        self.adjuster = DifficultyAdjuster(performance or PerformanceRepository(),
                                           self.planner.progress_evaluator)

        self.steps_remaining = 0
        self.action_log: List[str] = []

        self._in_flight = threading.Lock()
        self._skip_requested = threading.Event()

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    def request_skip(self):
        """Stop the running turn at the next step boundary"""
        self._skip_requested.set()

    def run_turn(self, player_id: str) -> Optional[TurnReport]:
        """
        Play one full turn for player_id.

        Returns None without doing anything if this agent is already running a
        turn, or another agent in the session is playing the same player.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.warning(f"⚠️  Turn already in progress, ignoring run_turn({player_id})")
            return None

        player_lock = self.turn_locks.lock_for(player_id)
        if not player_lock.acquire(blocking=False):
            self._in_flight.release()
            logger.warning(f"⚠️  Another agent is playing {player_id}, ignoring run_turn")
            return None

        try:
            return self._run_turn(player_id)
        finally:
            self._skip_requested.clear()
            player_lock.release()
            self._in_flight.release()

    def _run_turn(self, player_id: str) -> TurnReport:
        report = TurnReport(player_id=player_id)
        self.steps_remaining = self.safety_steps
        self.action_log = []
        failed_keys: Set[str] = set()

        week = self.store.current_week()
        rivals = self._rivals(player_id)
        self.observer.observe(rivals, week)
        rival_ids = [p.id for p in rivals]
        settings = self._adjusted_settings(player_id, rivals, week)
        logger.info(f"🤖 Turn start for {player_id} (week {week}, budget {self.steps_remaining})")

        while True:
            if self._skip_requested.is_set():
                logger.info(f"⏭️  Skip requested, ending turn for {player_id}")
                self._end_turn(report, TurnEndReason.SKIPPED)
                break

            player = self.store.get_player(player_id)
            if player is None:
                logger.error(f"Player {player_id} not found in store")
                report.end_reason = TurnEndReason.PLAYER_MISSING
                break

            stop_reason = self._stop_reason(player)
            if stop_reason is not None:
                if stop_reason == TurnEndReason.SAFETY_BUDGET:
                    logger.warning(f"⚠️  Safety budget of {self.safety_steps} steps spent, forcing end of turn")
                if player.time_remaining > 0:
                    self._end_turn(report, stop_reason)
                else:
                    report.end_reason = stop_reason
                break

            weights = self.counter_strategy.compute(rival_ids, settings.planning_depth)
            candidates = self.planner.plan(player, self.goals, settings, weights)
            candidates = [a for a in candidates if a.key() not in failed_keys]
            action = candidates[0]

            if action.kind == ActionKind.END_TURN:
                self._end_turn(report, TurnEndReason.END_TURN_CHOSEN)
                break

            report.steps += 1
            success = self.executor.execute(player, action)
            self.steps_remaining -= 1

            decision_logger.log_step(player, report.steps, candidates, action, success, week=week)
            if success:
                logger.info(f"✅ {action.description}")
                report.executed.append(action.description)
                self.action_log.append(action.description)
            else:
                logger.info(f"❌ {action.description} (not executable)")
                report.failed.append(action.description)
                self.action_log.append(f"FAILED: {action.description}")
                failed_keys.add(action.key())

            after = self.store.get_player(player_id)
            if after is not None and after.is_game_over:
                logger.info(f"💀 {player_id} is out of the game")
                self._end_turn(report, TurnEndReason.GAME_OVER)
                break

            self.scheduler.pause(settings.decision_delay)

        decision_logger.log_turn_summary(player_id, report.executed, report.failed, report.end_reason.value)
        logger.info(f"🏁 Turn end for {player_id}: {report.end_reason.value} after {report.steps} steps "
                    f"({len(report.failed)} failed)")
        return report

    def _stop_reason(self, player: Player) -> Optional[TurnEndReason]:
        if self.steps_remaining <= 0:
            return TurnEndReason.SAFETY_BUDGET
        if player.time_remaining < 1:
            return TurnEndReason.OUT_OF_TIME
        if player.is_game_over:
            return TurnEndReason.GAME_OVER
        return None

    def _end_turn(self, report: TurnReport, reason: TurnEndReason):
        self.store.end_turn()
        report.ended_turn = True
        report.end_reason = reason

    def _rivals(self, player_id: str) -> List[Player]:
        """Human players still in the game"""
        return [
            p for p in self.store.get_players()
            if not p.is_ai and not p.is_game_over and p.id != player_id
        ]

    def _adjusted_settings(self, player_id: str, rivals: List[Player], week: int) -> DifficultySettings:
        """Record this week's performance gap and return the preset tuned for this turn"""
        player = self.store.get_player(player_id)
        if player is None:
            return self.difficulty
        self.adjuster.record_performance(player, rivals, self.goals, week)
        adjustment = self.adjuster.calculate_adjustment(player_id)
        if adjustment.active:
            logger.info(f"🎚️  Difficulty adjusted for {player_id}: gap {adjustment.performance_gap:+.2f}, "
                        f"mistakes x{adjustment.mistake_multiplier:.2f}, "
                        f"aggressiveness {adjustment.aggressiveness_boost:+.2f}")
        return apply_adjustment(self.difficulty, adjustment)

    def analyze(self, player: Player) -> AgentAnalysis:
        """How the agent reads this player right now (debug/UI)"""
        progress = self.planner.progress_evaluator.evaluate(player, self.goals)
        rival_ids = [p.id for p in self._rivals(player.id)]
        adjustment = self.adjuster.calculate_adjustment(player.id)
        settings = apply_adjustment(self.difficulty, adjustment)
        return AgentAnalysis(
            progress=progress,
            urgency=self.planner.urgency_evaluator.evaluate(player),
            weakest_goal=weakest_goal(progress),
            difficulty=settings,
            adjustment=adjustment,
            counter_weights=self.counter_strategy.compute(rival_ids, settings.planning_depth),
        )


def create_agent(
    store: GameStore,
    goals: GoalSettings,
    repository: ObserverRepository,
    difficulty: Optional[str] = None,
    board: Optional[Board] = None,
    content: Optional[ContentTables] = None,
    scheduler: Optional[Scheduler] = None,
    performance: Optional[PerformanceRepository] = None,
    turn_locks: Optional[PlayerTurnLocks] = None,
) -> Agent:
    """Build an Agent from runtime config, with reference board and content by default"""
    difficulty_name = difficulty or config.DIFFICULTY
    if scheduler is None:
        if config.HEADLESS:
            scheduler = ImmediateScheduler()
        else:
            scheduler = SleepScheduler(config.SPEED_MULTIPLIER, config.MIN_STEP_DELAY_MS)

    logger.info(f"🎮 Creating {difficulty_name} agent (safety budget {config.SAFETY_STEPS})")
    return Agent(
        store=store,
        board=board or RingBoard(),
        content=content or StaticContent(),
        difficulty=get_difficulty_settings(difficulty_name),
        goals=goals,
        repository=repository,
        scheduler=scheduler,
        safety_steps=config.SAFETY_STEPS,
        performance=performance,
        turn_locks=turn_locks,
    )
