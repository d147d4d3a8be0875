"""
Action Planner Test Suite

Covers the ranking contract (never empty, END_TURN last, sorted), each
priority layer and the counter-strategy multipliers.

Run with: python -m pytest tests/test_planner.py -v
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from dataclasses import replace

from opponent import board as locations
from opponent.actions import ActionKind
from opponent.board import RingBoard
from opponent.content import StaticContent
from opponent.counter_strategy import CounterStrategyWeights
from opponent.difficulty import PRESETS
from opponent.interfaces import Board
from opponent.models import GoalSettings, GuildRank, HousingTier, ItemState, Player
from opponent.planner import ActionPlanner

EASY = PRESETS['easy']
MEDIUM = PRESETS['medium']
HARD = PRESETS['hard']

GOALS = GoalSettings()

# Everything but the axis under test already met
ALL_DEGREES = {"trade-guild", "junior-academy", "combat-training", "arcane-studies", "commerce"}


# =============================================================================
# MOCK CLASSES
# =============================================================================

class FixedRandom:
    """rng stand-in that always draws the same value"""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class FixedDistanceBoard(Board):
    """Every trip costs the same, except staying put"""

    def __init__(self, hours: int):
        self.hours = hours

    def shortest_distance(self, from_location: str, to_location: str) -> int:
        return 0 if from_location == to_location else self.hours


def make_planner(board=None, rng_value: float = 0.99) -> ActionPlanner:
    return ActionPlanner(board or RingBoard(), StaticContent(), rng=FixedRandom(rng_value))


def kinds(actions):
    return [a.kind for a in actions]


def first(actions, kind):
    return next(a for a in actions if a.kind == kind)


# =============================================================================
# RANKING CONTRACT
# =============================================================================

class TestRankingContract:

    @pytest.mark.parametrize("player", [
        Player(id="p"),
        Player(id="p", time_remaining=0, gold=0),
        Player(id="p", food_level=5, gold=0, clothing_condition=0, health=5, weeks_since_rent=9),
        Player(id="p", gold=5000, savings=300, happiness=10, current_job="floor-sweeper",
               current_wage=4, current_location=locations.GUILD_HALL),
    ])
    @pytest.mark.parametrize("difficulty", [EASY, MEDIUM, HARD])
    def test_never_empty_and_ends_with_end_turn(self, player, difficulty):
        actions = make_planner().plan(player, GOALS, difficulty)
        assert actions
        assert actions[-1].kind == ActionKind.END_TURN
        assert actions[-1].priority == 1

    def test_sorted_descending_without_mistake(self):
        player = Player(id="p", food_level=30, gold=500, clothing_condition=10, weeks_since_rent=3)
        actions = make_planner(rng_value=0.99).plan(player, GOALS, EASY)
        priorities = [a.priority for a in actions]
        assert priorities == sorted(priorities, reverse=True)

    def test_mistake_swaps_top_two(self):
        player = Player(id="p", food_level=10, gold=50, current_location=locations.FENCE)
        clean = make_planner(rng_value=0.99).plan(player, GOALS, EASY)
        mistaken = make_planner(rng_value=0.0).plan(player, GOALS, EASY)

        assert len(clean) >= 3
        assert mistaken[0].priority == clean[1].priority
        assert mistaken[1].priority == clean[0].priority
        assert [a.priority for a in mistaken[2:]] == [a.priority for a in clean[2:]]

    def test_no_mistake_with_fewer_than_three_actions(self):
        # Out of time and broke: only END_TURN survives
        player = Player(id="p", time_remaining=0, gold=0)
        actions = make_planner(rng_value=0.0).plan(player, GOALS, EASY)
        assert kinds(actions) == [ActionKind.END_TURN]

    def test_zero_mistake_chance_never_swaps(self):
        player = Player(id="p", food_level=10, gold=50, current_location=locations.FENCE)
        never_wrong = replace(MEDIUM, mistake_chance=0.0)
        actions = make_planner(rng_value=0.0).plan(player, GOALS, never_wrong)
        assert actions[0].priority == 95


# =============================================================================
# CRITICAL INTERRUPTS
# =============================================================================

class TestCriticalInterrupts:

    def test_scenario_starving_player_travels_to_food(self):
        # Fence is three hops from the tavern
        player = Player(id="p", food_level=10, gold=50, current_location=locations.FENCE)
        actions = make_planner().plan(player, GOALS, EASY)

        top = actions[0]
        assert top.kind == ActionKind.MOVE
        assert top.priority == 95
        assert top.location == locations.RUSTY_TANKARD
        assert top.time_cost == 6

    def test_buys_food_when_at_tavern(self):
        player = Player(id="p", food_level=10, gold=50, current_location=locations.RUSTY_TANKARD)
        top = make_planner().plan(player, GOALS, EASY)[0]
        assert top.kind == ActionKind.BUY_FOOD
        assert top.priority == 100
        assert top.cost == 12

    def test_food_at_boundary_still_urgent(self):
        # food 25 -> urgency 0.6, above the 0.5 trigger
        player = Player(id="p", food_level=25, gold=50, current_location=locations.RUSTY_TANKARD)
        assert make_planner().plan(player, GOALS, EASY)[0].kind == ActionKind.BUY_FOOD

    def test_no_food_action_when_broke(self):
        player = Player(id="p", food_level=10, gold=11, current_location=locations.RUSTY_TANKARD)
        actions = make_planner().plan(player, GOALS, EASY)
        assert ActionKind.BUY_FOOD not in kinds(actions)
        assert all(a.location != locations.RUSTY_TANKARD for a in actions)

    def test_travel_refused_when_trip_eats_the_margin(self):
        board = FixedDistanceBoard(6)
        tight = Player(id="p", food_level=10, gold=50, time_remaining=8)
        actions = make_planner(board).plan(tight, GOALS, EASY)
        assert all(a.location != locations.RUSTY_TANKARD for a in actions)

        roomy = Player(id="p", food_level=10, gold=50, time_remaining=9)
        assert make_planner(board).plan(roomy, GOALS, EASY)[0].location == locations.RUSTY_TANKARD

    def test_rent_paid_at_landlord(self):
        player = Player(id="p", weeks_since_rent=3, gold=100, current_location=locations.LANDLORD)
        top = make_planner().plan(player, GOALS, EASY)[0]
        assert top.kind == ActionKind.PAY_RENT
        assert top.priority == 90

    def test_rent_not_urgent_at_two_weeks(self):
        # Urgency 0.5 does not exceed the trigger
        player = Player(id="p", weeks_since_rent=2, gold=100, current_location=locations.LANDLORD)
        assert ActionKind.PAY_RENT not in kinds(make_planner().plan(player, GOALS, EASY))

    def test_food_outranks_rent(self):
        player = Player(id="p", food_level=10, weeks_since_rent=3, gold=200,
                        current_location=locations.FENCE)
        actions = make_planner().plan(player, GOALS, EASY)
        assert actions[0].location == locations.RUSTY_TANKARD
        assert actions[1].location == locations.LANDLORD
        assert actions[1].priority == 85

    def test_heal_when_badly_hurt(self):
        player = Player(id="p", health=20, gold=100, current_location=locations.ENCHANTER)
        top = make_planner().plan(player, GOALS, EASY)[0]
        assert top.kind == ActionKind.HEAL
        assert top.priority == 80

    def test_clothing_bought_at_clothier(self):
        player = Player(id="p", clothing_condition=10, gold=50, current_location=locations.GENERAL_STORE)
        top = make_planner().plan(player, GOALS, EASY)[0]
        assert top.kind == ActionKind.BUY_CLOTHING
        assert top.priority == 75
        assert top.condition == 35

    def test_clothing_travel_picks_nearest_clothier(self):
        # Slums is two hops from the general store, five from the armory
        player = Player(id="p", clothing_condition=10, gold=50, current_location=locations.SLUMS)
        move = next(a for a in make_planner().plan(player, GOALS, EASY) if a.priority == 70
                    and a.kind == ActionKind.MOVE)
        assert move.location == locations.GENERAL_STORE

    def test_worn_but_wearable_clothing_is_not_urgent(self):
        player = Player(id="p", clothing_condition=30, gold=50, current_location=locations.GENERAL_STORE)
        assert ActionKind.BUY_CLOTHING not in kinds(make_planner().plan(player, GOALS, EASY))


# =============================================================================
# WEAKEST-GOAL FOCUS
# =============================================================================

class TestEducationFocus:

    def test_strategic_agent_picks_degree_unlocking_best_wage(self):
        player = Player(id="p", gold=100)
        degree = make_planner().next_degree(player, MEDIUM)
        # Arcane studies opens the 11g/h enchantment assistant job
        assert degree.id == "arcane-studies"

    def test_reactive_agent_picks_cheapest_degree(self):
        degree = make_planner().next_degree(Player(id="p"), EASY)
        assert degree.id == "trade-guild"

    def test_study_priority_scales_with_aggressiveness(self):
        player = Player(id="p", gold=100, current_location=locations.ACADEMY)
        medium = first(make_planner().plan(player, GOALS, MEDIUM), ActionKind.STUDY)
        hard = first(make_planner().plan(player, GOALS, HARD), ActionKind.STUDY)
        assert medium.priority == 82
        assert hard.priority == 88
        assert medium.degree_id == "arcane-studies"

    def test_travel_to_academy_when_elsewhere(self):
        player = Player(id="p", gold=100, current_location=locations.GUILD_HALL)
        actions = make_planner().plan(player, GOALS, EASY)
        move = next(a for a in actions if a.location == locations.ACADEMY)
        assert move.priority == 65

    def test_no_study_when_session_unaffordable(self):
        player = Player(id="p", gold=5, current_location=locations.ACADEMY)
        assert ActionKind.STUDY not in kinds(make_planner().plan(player, GOALS, EASY))

    def test_finished_degree_graduates_first(self):
        player = Player(id="p", gold=100, current_location=locations.ACADEMY,
                        degree_progress={"trade-guild": 10})
        top = make_planner().plan(player, GOALS, EASY)[0]
        assert top.kind == ActionKind.GRADUATE
        assert top.degree_id == "trade-guild"
        assert top.priority == 88


class TestWealthFocus:

    def _employed(self, **kwargs) -> Player:
        defaults = dict(id="p", happiness=75, completed_degrees=set(ALL_DEGREES),
                        guild_rank=GuildRank.GUILD_MASTER, current_job="floor-sweeper",
                        current_wage=4, current_location=locations.GUILD_HALL)
        defaults.update(kwargs)
        return Player(**defaults)

    def test_work_shift_at_job(self):
        top = make_planner().plan(self._employed(gold=0), GOALS, EASY)[0]
        assert top.kind == ActionKind.WORK
        assert top.priority == 80
        assert top.hours == 6
        assert top.wage == 4

    def test_travel_to_job_when_elsewhere(self):
        player = self._employed(gold=0, current_location=locations.BANK)
        actions = make_planner().plan(player, GOALS, EASY)
        move = next(a for a in actions if a.location == locations.GUILD_HALL and a.priority == 75)
        assert move.kind == ActionKind.MOVE

    def test_strategic_agent_keeps_200_gold(self):
        player = self._employed(gold=450, current_location=locations.BANK)
        deposit = first(make_planner().plan(player, GOALS, MEDIUM), ActionKind.DEPOSIT_BANK)
        assert deposit.amount == 250
        assert deposit.priority == 60

    def test_reactive_agent_keeps_100_gold(self):
        player = self._employed(gold=250, current_location=locations.BANK)
        deposit = first(make_planner().plan(player, GOALS, EASY), ActionKind.DEPOSIT_BANK)
        assert deposit.amount == 150

    def test_no_deposit_inside_buffer(self):
        player = self._employed(gold=300, current_location=locations.BANK)
        assert ActionKind.DEPOSIT_BANK not in kinds(make_planner().plan(player, GOALS, MEDIUM))


class TestHappinessFocus:

    GOALS = GoalSettings(wealth=100)

    def _unhappy(self, **kwargs) -> Player:
        defaults = dict(id="p", happiness=10, savings=100, completed_degrees=set(ALL_DEGREES),
                        guild_rank=GuildRank.GUILD_MASTER)
        defaults.update(kwargs)
        return Player(**defaults)

    def test_buys_first_wanted_appliance(self):
        player = self._unhappy(gold=400, current_location=locations.ENCHANTER)
        buy = first(make_planner().plan(player, self.GOALS, EASY), ActionKind.BUY_APPLIANCE)
        assert buy.appliance_id == "cooking-fire"
        assert buy.cost == 276
        assert buy.priority == 65

    def test_skips_owned_appliances(self):
        player = self._unhappy(gold=600, current_location=locations.ENCHANTER,
                               appliances={"cooking-fire": ItemState()})
        buy = first(make_planner().plan(player, self.GOALS, EASY), ActionKind.BUY_APPLIANCE)
        assert buy.appliance_id == "scrying-mirror"

    def test_no_appliance_at_300_gold(self):
        player = self._unhappy(gold=300, current_location=locations.ENCHANTER)
        assert ActionKind.BUY_APPLIANCE not in kinds(make_planner().plan(player, self.GOALS, EASY))

    def test_rests_at_home(self):
        player = self._unhappy(gold=0, current_location=locations.SLUMS)
        rest = first(make_planner().plan(player, self.GOALS, EASY), ActionKind.REST)
        assert rest.priority == 45
        assert rest.hours == 4
        assert rest.happiness_gain == 5

    def test_heads_home_to_rest(self):
        player = self._unhappy(gold=0, current_location=locations.FENCE)
        actions = make_planner().plan(player, self.GOALS, EASY)
        move = next(a for a in actions if a.location == locations.SLUMS)
        assert move.priority == 40

    def test_no_rest_with_under_four_hours(self):
        player = self._unhappy(gold=0, current_location=locations.SLUMS, time_remaining=3)
        assert ActionKind.REST not in kinds(make_planner().plan(player, self.GOALS, EASY))


class TestCareerFocus:

    GOALS = GoalSettings(wealth=100, happiness=50, education=9)

    def test_applies_for_best_paying_job(self):
        player = Player(id="p", gold=200, happiness=50, completed_degrees={"trade-guild"},
                        experience=20, dependability=30, current_location=locations.GUILD_HALL)
        top = make_planner().plan(player, self.GOALS, EASY)[0]
        assert top.kind == ActionKind.APPLY_JOB
        assert top.job_id == "market-vendor"
        assert top.priority == 85

    def test_employed_works_for_dependability(self):
        player = Player(id="p", gold=200, happiness=50, completed_degrees={"trade-guild"},
                        current_job="floor-sweeper", current_wage=4,
                        current_location=locations.GUILD_HALL)
        work = [a for a in make_planner().plan(player, self.GOALS, EASY) if a.kind == ActionKind.WORK]
        assert 75 in [a.priority for a in work]


# =============================================================================
# STRATEGIC LAYER
# =============================================================================

class TestStrategicLayer:

    def test_job_upgrade_when_much_better_wage(self):
        player = Player(id="p", gold=5000, happiness=75, completed_degrees={"trade-guild"},
                        experience=20, dependability=30, current_job="floor-sweeper",
                        current_wage=4, current_location=locations.GUILD_HALL)
        upgrade = first(make_planner().plan(player, GOALS, EASY), ActionKind.APPLY_JOB)
        assert upgrade.job_id == "market-vendor"
        assert upgrade.priority == 60

    def test_no_job_seeking_with_under_eight_hours(self):
        player = Player(id="p", gold=5000, happiness=75, time_remaining=7,
                        current_location=locations.GUILD_HALL)
        actions = make_planner().plan(player, GOALS, EASY)
        assert all(a.priority != 70 for a in actions if a.kind == ActionKind.APPLY_JOB)

    def test_opportunistic_work_bonus_when_poor(self):
        player = Player(id="p", gold=0, happiness=0, current_job="floor-sweeper", current_wage=4,
                        current_location=locations.GUILD_HALL)
        work = [a.priority for a in make_planner().plan(player, GOALS, EASY) if a.kind == ActionKind.WORK]
        assert 70 in work

    def test_housing_upgrade_for_aggressive_agent(self):
        player = Player(id="p", gold=900, appliances={"cooking-fire": ItemState()},
                        current_location=locations.LANDLORD)
        move = first(make_planner().plan(player, GOALS, HARD), ActionKind.MOVE_HOUSING)
        assert move.tier == HousingTier.NOBLE
        assert move.cost == 800
        assert move.new_rent == 400
        assert move.priority == 55

    def test_timid_agent_stays_in_slums(self):
        player = Player(id="p", gold=900, appliances={"cooking-fire": ItemState()},
                        current_location=locations.LANDLORD)
        assert ActionKind.MOVE_HOUSING not in kinds(make_planner().plan(player, GOALS, EASY))

    def test_overdue_noble_rent_moves_back_to_slums(self):
        player = Player(id="p", gold=100, housing=HousingTier.NOBLE, weeks_since_rent=3,
                        current_location=locations.LANDLORD)
        move = first(make_planner().plan(player, GOALS, EASY), ActionKind.MOVE_HOUSING)
        assert move.tier == HousingTier.SLUMS
        assert move.cost == 0
        assert move.new_rent == 50
        assert move.priority == 80

    def test_overdue_noble_rent_travels_to_landlord(self):
        player = Player(id="p", gold=100, housing=HousingTier.NOBLE, weeks_since_rent=3,
                        current_location=locations.SLUMS)
        actions = make_planner().plan(player, GOALS, EASY)
        trips = [a for a in actions
                 if a.kind == ActionKind.MOVE and a.destination == locations.LANDLORD]
        assert [a.priority for a in trips] == [75]
        assert ActionKind.MOVE_HOUSING not in kinds(actions)

    @pytest.mark.parametrize("gold,weeks", [(400, 3), (100, 2)])
    def test_no_downgrade_while_rent_is_payable_or_recent(self, gold, weeks):
        player = Player(id="p", gold=gold, housing=HousingTier.NOBLE, weeks_since_rent=weeks,
                        current_location=locations.LANDLORD)
        actions = make_planner().plan(player, GOALS, EASY)
        assert all(a.tier != HousingTier.SLUMS for a in actions if a.kind == ActionKind.MOVE_HOUSING)

    def test_withdraw_when_low_on_cash(self):
        player = Player(id="p", gold=10, savings=500, current_location=locations.BANK)
        withdraw = first(make_planner().plan(player, GOALS, EASY), ActionKind.WITHDRAW_BANK)
        assert withdraw.amount == 100
        assert withdraw.priority == 65

    def test_withdraw_capped_at_savings(self):
        player = Player(id="p", gold=10, savings=60, current_location=locations.BANK)
        withdraw = first(make_planner().plan(player, GOALS, EASY), ActionKind.WITHDRAW_BANK)
        assert withdraw.amount == 60


# =============================================================================
# COUNTER-STRATEGY WEIGHTS
# =============================================================================

class TestCounterWeights:

    def test_education_boost_applies_to_study(self):
        player = Player(id="p", gold=100, current_location=locations.ACADEMY)
        weights = CounterStrategyWeights(education=1.3)
        study = first(make_planner().plan(player, GOALS, HARD, weights), ActionKind.STUDY)
        # 88 * 1.3 = 114.4
        assert study.priority == 114

    def test_weighted_priority_rounds_half_up(self):
        # Opportunistic work 50 (wealth progress >= 0.5) * 1.25 = 62.5
        player = Player(id="p", gold=5000, happiness=0, current_job="floor-sweeper", current_wage=4,
                        current_location=locations.GUILD_HALL)
        weights = CounterStrategyWeights(wealth=1.25)
        work = [a.priority for a in make_planner().plan(player, GOALS, EASY, weights)
                if a.kind == ActionKind.WORK]
        assert 63 in work

    def test_moves_and_interrupts_not_reweighted(self):
        player = Player(id="p", food_level=10, gold=50, current_location=locations.FENCE)
        weights = CounterStrategyWeights(education=2.0, wealth=2.0, combat=2.0, happiness=2.0)
        actions = make_planner().plan(player, GOALS, EASY, weights)
        moves = [a for a in actions if a.kind == ActionKind.MOVE]
        # Food trip, academy trip, guild hall trip
        assert sorted(a.priority for a in moves) == [65, 65, 95]
        assert actions[0].location == locations.RUSTY_TANKARD
