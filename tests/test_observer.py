"""
Player Behavior Observer Tests

Run with: python -m pytest tests/test_observer.py -v
"""

import threading

import pytest

from opponent.models import HousingTier, ItemState, Player
from opponent.observer import (
    MAX_DELTA_HISTORY,
    FocusWeights,
    ObserverRepository,
    PlayerBehaviorObserver,
    PlayerSnapshot,
    PlayerStrategyProfile,
    StrategyLabel,
    TurnDelta,
    classify_strategy,
    signal_scores,
)


def delta(**kwargs) -> TurnDelta:
    """TurnDelta with everything quiet unless given"""
    fields = dict(
        wealth_delta=0, happiness_delta=0, degree_delta=0, dependability_delta=0,
        floor_delta=0, quest_delta=0, got_new_job=False, got_wage_increase=False,
        upgraded_housing=False, bought_equipment=False, bought_appliances=False,
    )
    fields.update(kwargs)
    return TurnDelta(**fields)


@pytest.fixture
def repository():
    return ObserverRepository()


@pytest.fixture
def observer(repository):
    return PlayerBehaviorObserver(repository)


class TestSnapshotsAndDeltas:

    def test_snapshot_counts_collections(self):
        player = Player(id="h", completed_degrees={"a", "b"}, dungeon_floors_cleared={1, 2, 3},
                        appliances={"cooking-fire": ItemState()})
        snap = PlayerSnapshot.from_player(player, week=4)
        assert snap.week == 4
        assert snap.degree_count == 2
        assert snap.dungeon_floors_cleared == 3
        assert snap.appliance_count == 1
        assert snap.durable_count == 0

    def test_delta_flags(self):
        before = PlayerSnapshot.from_player(Player(id="h", gold=100, current_wage=4), week=1)
        after = PlayerSnapshot.from_player(
            Player(id="h", gold=300, savings=50, current_job="bank-teller", current_wage=9,
                   housing=HousingTier.NOBLE, equipped_weapon="sword",
                   appliances={"cooking-fire": ItemState()}),
            week=2)
        d = TurnDelta.between(before, after)
        assert d.wealth_delta == 250
        assert d.got_new_job
        assert d.got_wage_increase
        assert d.upgraded_housing
        assert d.bought_equipment
        assert d.bought_appliances

    def test_losing_a_job_is_not_a_new_job(self):
        before = PlayerSnapshot.from_player(Player(id="h", current_job="scribe"), week=1)
        after = PlayerSnapshot.from_player(Player(id="h", current_job=None), week=2)
        assert not TurnDelta.between(before, after).got_new_job


class TestSignalScoring:

    def test_degree_and_dependability(self):
        assert signal_scores(delta(degree_delta=1, dependability_delta=6))['education'] == 4
        assert signal_scores(delta(dependability_delta=5))['education'] == 0

    @pytest.mark.parametrize("wealth,expected", [(101, 2), (100, 1), (51, 1), (50, 0), (-20, 0)])
    def test_wealth_steps(self, wealth, expected):
        assert signal_scores(delta(wealth_delta=wealth))['wealth'] == expected

    def test_job_events_add_wealth_signal(self):
        scores = signal_scores(delta(wealth_delta=200, got_new_job=True, got_wage_increase=True))
        assert scores['wealth'] == 4

    def test_combat_signals(self):
        scores = signal_scores(delta(floor_delta=1, bought_equipment=True, quest_delta=2))
        assert scores['combat'] == 5

    @pytest.mark.parametrize("happiness,expected", [(6, 2), (5, 1), (1, 1), (0, 0)])
    def test_happiness_steps(self, happiness, expected):
        assert signal_scores(delta(happiness_delta=happiness))['happiness'] == expected

    def test_appliance_adds_happiness_signal(self):
        assert signal_scores(delta(bought_appliances=True))['happiness'] == 1


class TestClassification:

    def test_even_weights_are_balanced(self):
        assert classify_strategy(FocusWeights()) == StrategyLabel.BALANCED

    def test_small_spread_is_balanced(self):
        weights = FocusWeights(education=0.3, wealth=0.25, combat=0.25, happiness=0.2)
        assert classify_strategy(weights) == StrategyLabel.BALANCED

    @pytest.mark.parametrize("axis,label", [
        ("education", StrategyLabel.EDUCATION_RUSH),
        ("wealth", StrategyLabel.WEALTH_GRIND),
        ("combat", StrategyLabel.COMBAT_FOCUS),
        ("happiness", StrategyLabel.HAPPINESS_FOCUS),
    ])
    def test_dominant_axis(self, axis, label):
        weights = FocusWeights(education=0.1, wealth=0.1, combat=0.1, happiness=0.1)
        setattr(weights, axis, 0.7)
        assert classify_strategy(weights) == label


class TestObserve:

    def test_same_week_observation_changes_nothing(self, observer, repository):
        rival = Player(id="h", gold=0)
        observer.observe([rival], week=1)

        rival.gold = 500
        rival.completed_degrees.add("scholar")
        observer.observe([rival], week=1)

        assert "h" not in repository.profiles
        assert repository.snapshots["h"].gold == 500

    def test_snapshot_always_overwritten(self, observer, repository):
        rival = Player(id="h", gold=0)
        observer.observe([rival], week=1)
        rival.gold = 500
        observer.observe([rival], week=1)
        observer.observe([rival], week=2)

        # Baseline moved to 500 in week 1, so week 2 shows no wealth change
        profile = repository.profiles["h"]
        assert profile.recent_deltas[-1].wealth_delta == 0

    def test_profile_hidden_until_third_turn(self, observer):
        rival = Player(id="h")
        observer.observe([rival], week=1)   # baseline only
        observer.observe([rival], week=2)
        observer.observe([rival], week=3)
        assert observer.get_player_profile("h") is None

        observer.observe([rival], week=4)
        profile = observer.get_player_profile("h")
        assert profile is not None
        assert profile.turn_count == 3

    def test_unknown_player_has_no_profile(self, observer):
        assert observer.get_player_profile("nobody") is None

    def test_degree_pushes_education_weight(self, observer, repository):
        rival = Player(id="h")
        observer.observe([rival], week=1)
        rival.completed_degrees.add("trade-guild")
        observer.observe([rival], week=2)

        weights = repository.profiles["h"].focus_weights
        assert weights.education == pytest.approx(0.25 * 0.7 + 1.0 * 0.3)
        assert weights.wealth == pytest.approx(0.25 * 0.7)
        assert weights.total() == pytest.approx(1.0)

    def test_quiet_turn_leaves_weights_alone(self, observer, repository):
        rival = Player(id="h")
        observer.observe([rival], week=1)
        observer.observe([rival], week=2)

        profile = repository.profiles["h"]
        assert profile.turn_count == 1
        assert profile.focus_weights == FocusWeights()
        assert len(profile.recent_deltas) == 1

    def test_focus_mass_preserved_over_many_turns(self, observer, repository):
        rival = Player(id="h")
        observer.observe([rival], week=1)
        for week in range(2, 12):
            rival.gold += 150 if week % 2 else 0
            rival.happiness += 3
            if week % 3 == 0:
                rival.dungeon_floors_cleared.add(week)
            observer.observe([rival], week=week)

        assert repository.profiles["h"].focus_weights.total() == pytest.approx(1.0)

    def test_delta_history_is_bounded(self, observer, repository):
        rival = Player(id="h")
        for week in range(1, MAX_DELTA_HISTORY + 4):
            rival.gold += 10
            observer.observe([rival], week=week)

        profile = repository.profiles["h"]
        assert profile.turn_count == MAX_DELTA_HISTORY + 2
        assert len(profile.recent_deltas) == MAX_DELTA_HISTORY

    def test_location_frequency_counts_visits(self, observer, repository):
        rival = Player(id="h", current_location="academy")
        observer.observe([rival], week=1)
        observer.observe([rival], week=2)
        observer.observe([rival], week=3)
        rival.current_location = "bank"
        observer.observe([rival], week=4)

        assert repository.profiles["h"].location_frequency == {"academy": 2, "bank": 1}

    def test_education_rush_detected(self, observer):
        rival = Player(id="h")
        observer.observe([rival], week=1)
        for week in range(2, 6):
            rival.completed_degrees.add(f"degree-{week}")
            observer.observe([rival], week=week)

        assert observer.get_player_profile("h").dominant_strategy == StrategyLabel.EDUCATION_RUSH

    def test_rivals_tracked_independently(self, observer, repository):
        scholar = Player(id="a")
        earner = Player(id="b")
        observer.observe([scholar, earner], week=1)
        scholar.completed_degrees.add("scholar")
        earner.gold += 500
        observer.observe([scholar, earner], week=2)

        assert repository.profiles["a"].focus_weights.education > 0.25
        assert repository.profiles["b"].focus_weights.wealth > 0.25

    def test_all_profiles_is_a_copy(self, observer):
        rival = Player(id="h")
        observer.observe([rival], week=1)
        observer.observe([rival], week=2)

        profiles = observer.all_profiles()
        assert list(profiles) == ["h"]
        profiles.clear()
        assert observer.all_profiles()

    def test_profile_read_waits_for_repository_lock(self, observer, repository):
        repository.profiles["h"] = PlayerStrategyProfile(turn_count=3)
        results = []
        reader = threading.Thread(target=lambda: results.append(observer.get_player_profile("h")))

        with repository.lock:
            reader.start()
            reader.join(timeout=0.1)
            assert reader.is_alive()
            assert results == []

        reader.join(timeout=5)
        assert results == [repository.profiles["h"]]


class TestReset:

    def test_reset_clears_every_profile(self, observer, repository):
        rivals = [Player(id="a"), Player(id="b")]
        for week in range(1, 6):
            observer.observe(rivals, week=week)
        assert observer.get_player_profile("a") is not None

        observer.reset()

        assert observer.get_player_profile("a") is None
        assert observer.get_player_profile("b") is None
        assert repository.snapshots == {}

    def test_reset_is_shared_across_observers(self, repository):
        first = PlayerBehaviorObserver(repository)
        second = PlayerBehaviorObserver(repository)
        rival = Player(id="h")
        for week in range(1, 5):
            first.observe([rival], week=week)
        assert second.get_player_profile("h") is not None

        repository.reset()
        assert first.get_player_profile("h") is None
