"""
Action Planner

Single-ply rule engine. Every step the planner scores the player's current
state from scratch and returns candidate actions ranked by priority:

1. Critical interrupts (food, rent, health, clothing)
2. Weakest-goal focus (education, wealth, happiness or career)
3. General strategic layer (jobs, opportunistic work, housing, withdrawals)
4. Counter-strategy weighting, END_TURN fallback, sort, mistake swap

Later layers never remove earlier candidates; ranking is by priority alone.
No lookahead: the turn runner re-plans on fresh state after every action.
"""

import logging
import random
from typing import List, Optional

from . import board as locations
from . import priorities
from .actions import (
    AIAction,
    ApplyJob,
    BuyAppliance,
    BuyClothing,
    BuyFood,
    DepositBank,
    EndTurn,
    FocusAxis,
    Graduate,
    Heal,
    Move,
    MoveHousing,
    PayRent,
    Rest,
    Study,
    Work,
    WithdrawBank,
)
from .counter_strategy import NEUTRAL_WEIGHTS, CounterStrategyWeights
from .difficulty import DifficultySettings
from .evaluators import (
    GoalAxis,
    GoalProgress,
    GoalProgressEvaluator,
    ResourceUrgency,
    ResourceUrgencyEvaluator,
    weakest_goal,
)
from .interfaces import Board, ContentTables
from .models import RENT_COSTS, Degree, GoalSettings, HousingTier, Job, Player

logger = logging.getLogger(__name__)

# Errand costs
MEAL_COST = 12
MEAL_FOOD_GAIN = 15
CLOTHING_COST = 12
CLOTHING_CONDITION = 35
HEAL_COST = 30
HEAL_AMOUNT = 25

# Appliances worth buying for happiness, in order of preference
APPLIANCE_WISHLIST = (
    ('cooking-fire', 276),
    ('scrying-mirror', 525),
    ('preservation-box', 876),
)
APPLIANCE_LIMIT = 3
APPLIANCE_MIN_GOLD = 300

REST_HOURS = 4
REST_HAPPINESS = 5
REST_BELOW_HAPPINESS = 40

# Hours that must be left over after an errand trip
TRAVEL_MARGIN = 2

JOB_SEEK_MIN_HOURS = 8
JOB_UPGRADE_RATIO = 1.2

# Weeks of unpaid noble rent before moving back to the slums
DOWNGRADE_AFTER_WEEKS = 3

IMMEDIATE_NEEDS_BUFFER = 100
WITHDRAW_BELOW_GOLD = 30
WITHDRAW_MIN_SAVINGS = 50
WITHDRAW_MAX = 100

MISTAKE_MIN_ACTIONS = 3


class ActionPlanner:
    """
    Player state -> ranked candidate actions.

    The only randomness is the mistake swap, drawn from the injected rng.
    """

    def __init__(self, board: Board, content: ContentTables, rng: Optional[random.Random] = None):
        self.board = board
        self.content = content
        self.rng = rng if rng is not None else random.Random()
        self.progress_evaluator = GoalProgressEvaluator()
        self.urgency_evaluator = ResourceUrgencyEvaluator()

    def plan(
        self,
        player: Player,
        goals: GoalSettings,
        difficulty: DifficultySettings,
        counter_weights: CounterStrategyWeights = NEUTRAL_WEIGHTS,
    ) -> List[AIAction]:
        """Ranked actions for this step; never empty, END_TURN always present"""
        progress = self.progress_evaluator.evaluate(player, goals)
        urgency = self.urgency_evaluator.evaluate(player)

        actions: List[AIAction] = []
        actions += self._critical_interrupts(player, urgency)
        actions += self._goal_focus(player, progress, difficulty)
        actions += self._strategic_layer(player, progress, urgency, difficulty)

        self._apply_counter_weights(actions, counter_weights)
        actions.append(EndTurn(priority=priorities.END_TURN, description="End turn"))

        ranked = sorted(actions, key=lambda a: a.priority, reverse=True)
        ranked = self._maybe_make_mistake(ranked, difficulty)

        logger.debug(f"Planned {len(ranked)} actions for {player.id}: "
                     + ", ".join(f"{a.kind.value}={a.priority}" for a in ranked[:5]))
        return ranked

    # =========================================================================
    # Travel helpers
    # =========================================================================

    def _distance(self, player: Player, location: str) -> int:
        return self.board.shortest_distance(player.current_location, location)

    def _travel(self, player: Player, location: str, priority: int, purpose: str,
                margin: int = TRAVEL_MARGIN) -> Optional[Move]:
        """Move toward a location, or None if the trip would leave too little time"""
        trip = self._distance(player, location)
        if player.time_remaining <= trip + margin:
            return None
        return Move(
            priority=priority,
            description=f"Travel to {location} to {purpose}",
            destination=location,
            time_cost=trip,
        )

    def _at_or_travel(self, player: Player, location: str, action: AIAction,
                      travel_priority: int, purpose: str,
                      margin: int = TRAVEL_MARGIN) -> Optional[AIAction]:
        """The action itself when standing at its location, else a trip there"""
        if player.current_location == location:
            return action
        return self._travel(player, location, travel_priority, purpose, margin)

    # =========================================================================
    # Layer 1: critical interrupts
    # =========================================================================

    def _critical_interrupts(self, player: Player, urgency: ResourceUrgency) -> List[AIAction]:
        actions: List[Optional[AIAction]] = []

        if urgency.food > 0.5 and player.gold >= MEAL_COST:
            actions.append(self._at_or_travel(
                player, locations.FOOD_LOCATION,
                BuyFood(priority=priorities.BUY_FOOD, description="Buy a meal (starving)",
                        cost=MEAL_COST, food_gain=MEAL_FOOD_GAIN),
                priorities.TRAVEL_FOOD, "buy food"))

        rent = RENT_COSTS[player.housing]
        if urgency.rent > 0.5 and player.gold >= rent:
            actions.append(self._at_or_travel(
                player, locations.RENT_LOCATION,
                PayRent(priority=priorities.PAY_RENT,
                        description=f"Pay {rent}g rent ({player.weeks_since_rent} weeks due)",
                        cost=rent),
                priorities.TRAVEL_RENT, "pay rent"))

        if urgency.health >= 0.5 and player.gold >= HEAL_COST:
            actions.append(self._at_or_travel(
                player, locations.HEALER_LOCATION,
                Heal(priority=priorities.HEAL, description=f"Heal (health {player.health})",
                     cost=HEAL_COST, amount=HEAL_AMOUNT),
                priorities.TRAVEL_HEAL, "heal"))

        if urgency.clothing > 0.6 and player.gold >= CLOTHING_COST:
            buy = BuyClothing(priority=priorities.BUY_CLOTHING,
                              description=f"Replace worn clothing ({player.clothing_condition})",
                              cost=CLOTHING_COST, condition=CLOTHING_CONDITION)
            if player.current_location in locations.CLOTHING_LOCATIONS:
                actions.append(buy)
            else:
                nearest = min(locations.CLOTHING_LOCATIONS, key=lambda loc: self._distance(player, loc))
                actions.append(self._travel(player, nearest, priorities.TRAVEL_CLOTHING, "buy clothing"))

        return [a for a in actions if a is not None]

    # =========================================================================
    # Layer 2: weakest-goal focus
    # =========================================================================

    def _goal_focus(self, player: Player, progress: GoalProgress,
                    difficulty: DifficultySettings) -> List[AIAction]:
        actions = self._ready_graduations(player)

        goal = weakest_goal(progress)
        if goal == GoalAxis.EDUCATION:
            actions += self._education_actions(player, difficulty)
        elif goal == GoalAxis.WEALTH:
            actions += self._wealth_actions(player, difficulty)
        elif goal == GoalAxis.HAPPINESS:
            actions += self._happiness_actions(player)
        else:
            actions += self._career_actions(player)

        return [a for a in actions if a is not None]

    def _ready_graduations(self, player: Player) -> List[AIAction]:
        """Every finished-but-unclaimed degree, when already at the academy"""
        if player.current_location != locations.STUDY_LOCATION:
            return []

        actions = []
        for degree_id, sessions in player.degree_progress.items():
            if degree_id in player.completed_degrees:
                continue
            degree = self.content.get_degree(degree_id)
            if degree is not None and sessions >= degree.sessions_required:
                actions.append(Graduate(priority=priorities.GRADUATE_READY,
                                        description=f"Graduate {degree.name}",
                                        degree_id=degree.id))
        return actions

    def next_degree(self, player: Player, difficulty: DifficultySettings) -> Optional[Degree]:
        """Degree to pursue next, or None when nothing is unlocked"""
        available = self.content.available_degrees(player.completed_degrees)
        if not available:
            return None

        if difficulty.planning_depth >= 2:
            return max(available, key=lambda d: self._degree_value(d, player))
        return min(available, key=lambda d: d.cost_per_session)

    def _degree_value(self, degree: Degree, player: Player) -> int:
        # Jobs this degree alone would open up
        unlocked = [
            job for job in self.content.all_jobs()
            if degree.id in job.required_degrees
            and all(req == degree.id or req in player.completed_degrees
                    for req in job.required_degrees)
        ]
        if not unlocked:
            return degree.education_points
        return max(job.base_wage for job in unlocked) * 10 + degree.education_points

    def _education_actions(self, player: Player, difficulty: DifficultySettings) -> List[Optional[AIAction]]:
        degree = self.next_degree(player, difficulty)
        if degree is None:
            return []

        sessions = player.degree_progress.get(degree.id, 0)
        if sessions >= degree.sessions_required:
            return [self._at_or_travel(
                player, locations.STUDY_LOCATION,
                Graduate(priority=priorities.GRADUATE, description=f"Graduate {degree.name}",
                         degree_id=degree.id),
                priorities.TRAVEL_STUDY, "graduate")]

        if player.gold < degree.cost_per_session or player.time_remaining < degree.hours_per_session:
            return []

        study = Study(
            priority=priorities.study_priority(difficulty.aggressiveness),
            description=f"Study {degree.name} (session {sessions + 1}/{degree.sessions_required})",
            degree_id=degree.id,
            cost=degree.cost_per_session,
            hours=degree.hours_per_session,
        )
        return [self._at_or_travel(player, locations.STUDY_LOCATION, study, priorities.TRAVEL_STUDY,
                                   f"study {degree.name}", margin=degree.hours_per_session)]

    def _work_shift(self, player: Player, priority: int, travel_priority: int,
                    reason: str) -> Optional[AIAction]:
        """Work the current job, or travel to it, if a full shift fits"""
        job = self._current_job(player)
        if job is None or player.time_remaining < job.hours_per_shift:
            return None

        work = Work(
            priority=priority,
            description=f"Work {job.name} ({reason})",
            job_id=job.id,
            hours=job.hours_per_shift,
            wage=player.current_wage,
        )
        return self._at_or_travel(player, self.content.job_location(job), work, travel_priority,
                                  f"work as {job.name}", margin=job.hours_per_shift)

    def _wealth_actions(self, player: Player, difficulty: DifficultySettings) -> List[Optional[AIAction]]:
        actions = [self._work_shift(player, priorities.WORK_FOR_WEALTH,
                                    priorities.TRAVEL_WORK_FOR_WEALTH, "build wealth")]

        safe_amount = 200 if difficulty.planning_depth >= 2 else 100
        if player.gold > safe_amount + IMMEDIATE_NEEDS_BUFFER:
            amount = player.gold - safe_amount
            actions.append(self._at_or_travel(
                player, locations.BANK_LOCATION,
                DepositBank(priority=priorities.DEPOSIT, description=f"Deposit {amount}g",
                            amount=amount),
                priorities.TRAVEL_DEPOSIT, "deposit gold"))
        return actions

    def _happiness_actions(self, player: Player) -> List[Optional[AIAction]]:
        actions: List[Optional[AIAction]] = []

        if player.gold > APPLIANCE_MIN_GOLD and len(player.appliances) < APPLIANCE_LIMIT:
            wanted = next(
                ((item_id, cost) for item_id, cost in APPLIANCE_WISHLIST
                 if item_id not in player.appliances and cost <= player.gold),
                None,
            )
            if wanted is not None:
                item_id, cost = wanted
                actions.append(self._at_or_travel(
                    player, locations.APPLIANCE_LOCATION,
                    BuyAppliance(priority=priorities.BUY_APPLIANCE,
                                 description=f"Buy {item_id} ({cost}g)",
                                 appliance_id=item_id, cost=cost),
                    priorities.TRAVEL_APPLIANCE, f"buy {item_id}"))

        home = player.home_location
        if (player.happiness < REST_BELOW_HAPPINESS
                and player.time_remaining >= REST_HOURS
                and home is not None):
            rest = Rest(priority=priorities.REST, description=f"Rest at home (happiness {player.happiness})",
                        hours=REST_HOURS, happiness_gain=REST_HAPPINESS)
            actions.append(self._at_or_travel(player, home, rest, priorities.TRAVEL_HOME_TO_REST,
                                              "rest", margin=REST_HOURS))
        return actions

    def _career_actions(self, player: Player) -> List[Optional[AIAction]]:
        if player.current_job is None:
            best = self.best_available_job(player)
            if best is None:
                return []
            return [self._apply(player, best, priorities.APPLY_FOR_CAREER,
                                priorities.TRAVEL_APPLY_FOR_CAREER, "start a career")]

        return [self._work_shift(player, priorities.WORK_FOR_CAREER,
                                 priorities.TRAVEL_WORK_FOR_CAREER, "build dependability")]

    # =========================================================================
    # Layer 3: general strategic layer
    # =========================================================================

    def _strategic_layer(self, player: Player, progress: GoalProgress, urgency: ResourceUrgency,
                         difficulty: DifficultySettings) -> List[AIAction]:
        actions: List[Optional[AIAction]] = []
        best = self.best_available_job(player)

        if player.current_job is None:
            if best is not None and player.time_remaining >= JOB_SEEK_MIN_HOURS:
                actions.append(self._apply(player, best, priorities.SEEK_JOB,
                                           priorities.TRAVEL_SEEK_JOB, "find work"))
        else:
            current = self._current_job(player)
            current_wage = current.base_wage if current is not None else player.current_wage
            if (best is not None and best.id != player.current_job
                    and best.base_wage > current_wage * JOB_UPGRADE_RATIO):
                actions.append(self._apply(player, best, priorities.UPGRADE_JOB,
                                           priorities.TRAVEL_UPGRADE_JOB, "upgrade job"))

            actions.append(self._work_shift(
                player,
                priorities.opportunistic_work_priority(progress.wealth.progress),
                priorities.TRAVEL_OPPORTUNISTIC_WORK,
                "spare hours"))

        noble_rent = RENT_COSTS[HousingTier.NOBLE]
        if (player.housing == HousingTier.SLUMS
                and urgency.housing >= 0.5
                and player.gold >= 2 * noble_rent
                and difficulty.aggressiveness > 0.5):
            actions.append(self._at_or_travel(
                player, locations.RENT_LOCATION,
                MoveHousing(priority=priorities.UPGRADE_HOUSING,
                            description="Move to Noble Heights (protect valuables)",
                            tier=HousingTier.NOBLE, cost=2 * noble_rent, new_rent=noble_rent),
                priorities.TRAVEL_UPGRADE_HOUSING, "move house"))

        slums_rent = RENT_COSTS[HousingTier.SLUMS]
        if (player.housing == HousingTier.NOBLE
                and player.weeks_since_rent >= DOWNGRADE_AFTER_WEEKS
                and player.gold < noble_rent):
            actions.append(self._at_or_travel(
                player, locations.RENT_LOCATION,
                MoveHousing(priority=priorities.DOWNGRADE_HOUSING,
                            description="Move back to the slums (rent overdue)",
                            tier=HousingTier.SLUMS, cost=0, new_rent=slums_rent),
                priorities.TRAVEL_DOWNGRADE_HOUSING, "downgrade housing"))

        if player.gold < WITHDRAW_BELOW_GOLD and player.savings > WITHDRAW_MIN_SAVINGS:
            amount = min(WITHDRAW_MAX, player.savings)
            actions.append(self._at_or_travel(
                player, locations.BANK_LOCATION,
                WithdrawBank(priority=priorities.WITHDRAW, description=f"Withdraw {amount}g",
                             amount=amount),
                priorities.TRAVEL_WITHDRAW, "withdraw gold"))

        return [a for a in actions if a is not None]

    # =========================================================================
    # Jobs
    # =========================================================================

    def _current_job(self, player: Player) -> Optional[Job]:
        if player.current_job is None:
            return None
        return self.content.get_job(player.current_job)

    def best_available_job(self, player: Player) -> Optional[Job]:
        """Highest base wage the player qualifies for (first in table order on ties)"""
        jobs = self.content.available_jobs(player)
        if not jobs:
            return None
        return max(jobs, key=lambda job: job.base_wage)

    def _apply(self, player: Player, job: Job, priority: int, travel_priority: int,
               purpose: str) -> Optional[AIAction]:
        apply = ApplyJob(priority=priority,
                         description=f"Apply for {job.name} ({job.base_wage}g/h)",
                         job_id=job.id)
        return self._at_or_travel(player, locations.HIRING_LOCATION, apply, travel_priority, purpose)

    # =========================================================================
    # Ranking
    # =========================================================================

    @staticmethod
    def _apply_counter_weights(actions: List[AIAction], weights: CounterStrategyWeights):
        for action in actions:
            if action.focus == FocusAxis.NONE:
                continue
            multiplier = weights.for_axis(action.focus.value)
            action.priority = priorities.round_half_up(action.priority * multiplier)

    def _maybe_make_mistake(self, ranked: List[AIAction], difficulty: DifficultySettings) -> List[AIAction]:
        if len(ranked) < MISTAKE_MIN_ACTIONS:
            return ranked
        if self.rng.random() < difficulty.mistake_chance:
            logger.debug(f"Mistake: swapping {ranked[0].kind.value} and {ranked[1].kind.value}")
            ranked[0], ranked[1] = ranked[1], ranked[0]
        return ranked
