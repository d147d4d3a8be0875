"""
Player Behavior Observer

Infers where each human rival invests effort by diffing state snapshots taken
at the start of every AI turn, rather than hooking into individual store
actions. Each rival gets a PlayerStrategyProfile: four focus weights kept as
an exponential moving average, a location histogram, recent deltas and a
dominant-strategy label.

All state lives in an ObserverRepository owned by the game session, shared
by every agent in that session and cleared explicitly with reset().
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, List, Optional

from .models import HousingTier, Player

logger = logging.getLogger(__name__)

# Recent deltas kept per rival
MAX_DELTA_HISTORY = 10

# Share of each new observation in the running focus weights
FOCUS_SMOOTHING = 0.3

# Max-min spread below which a rival counts as balanced
BALANCED_SPREAD = 0.12

# Qualifying turns before a profile is trusted
MIN_PROFILE_TURNS = 3


class StrategyLabel(Enum):
    """Classified rival strategy"""
    EDUCATION_RUSH = "education-rush"
    WEALTH_GRIND = "wealth-grind"
    COMBAT_FOCUS = "combat-focus"
    HAPPINESS_FOCUS = "happiness-focus"
    BALANCED = "balanced"


@dataclass(frozen=True)
class PlayerSnapshot:
    """Strategy-relevant subset of a Player at one point in time"""
    week: int
    gold: int
    savings: int
    investments: int
    happiness: int
    degree_count: int
    dependability: int
    health: int
    current_job: Optional[str]
    current_wage: int
    housing: HousingTier
    current_location: str
    completed_quests: int
    dungeon_floors_cleared: int
    equipped_weapon: Optional[str]
    equipped_armor: Optional[str]
    appliance_count: int
    durable_count: int

    @property
    def wealth(self) -> int:
        return self.gold + self.savings + self.investments

    @classmethod
    def from_player(cls, player: Player, week: int) -> 'PlayerSnapshot':
        return cls(
            week=week,
            gold=player.gold,
            savings=player.savings,
            investments=player.investments,
            happiness=player.happiness,
            degree_count=len(player.completed_degrees),
            dependability=player.dependability,
            health=player.health,
            current_job=player.current_job,
            current_wage=player.current_wage,
            housing=player.housing,
            current_location=player.current_location,
            completed_quests=player.completed_quests,
            dungeon_floors_cleared=len(player.dungeon_floors_cleared),
            equipped_weapon=player.equipped_weapon,
            equipped_armor=player.equipped_armor,
            appliance_count=len(player.appliances),
            durable_count=len(player.durables),
        )


@dataclass(frozen=True)
class TurnDelta:
    """What changed between two snapshots taken in different weeks"""
    wealth_delta: int
    happiness_delta: int
    degree_delta: int
    dependability_delta: int
    floor_delta: int
    quest_delta: int
    got_new_job: bool
    got_wage_increase: bool
    upgraded_housing: bool
    bought_equipment: bool
    bought_appliances: bool

    @classmethod
    def between(cls, prev: PlayerSnapshot, curr: PlayerSnapshot) -> 'TurnDelta':
        return cls(
            wealth_delta=curr.wealth - prev.wealth,
            happiness_delta=curr.happiness - prev.happiness,
            degree_delta=curr.degree_count - prev.degree_count,
            dependability_delta=curr.dependability - prev.dependability,
            floor_delta=curr.dungeon_floors_cleared - prev.dungeon_floors_cleared,
            quest_delta=curr.completed_quests - prev.completed_quests,
            got_new_job=curr.current_job != prev.current_job and curr.current_job is not None,
            got_wage_increase=curr.current_wage > prev.current_wage,
            upgraded_housing=curr.housing != prev.housing and curr.housing == HousingTier.NOBLE,
            bought_equipment=(curr.equipped_weapon != prev.equipped_weapon
                              or curr.equipped_armor != prev.equipped_armor
                              or curr.durable_count > prev.durable_count),
            bought_appliances=curr.appliance_count > prev.appliance_count,
        )


@dataclass
class FocusWeights:
    """Where a rival spends effort; starts evenly split"""
    education: float = 0.25
    wealth: float = 0.25
    combat: float = 0.25
    happiness: float = 0.25

    def total(self) -> float:
        return self.education + self.wealth + self.combat + self.happiness

    def as_dict(self) -> Dict[str, float]:
        return {
            'education': self.education,
            'wealth': self.wealth,
            'combat': self.combat,
            'happiness': self.happiness,
        }


@dataclass
class PlayerStrategyProfile:
    turn_count: int = 0
    focus_weights: FocusWeights = field(default_factory=FocusWeights)
    location_frequency: Dict[str, int] = field(default_factory=dict)
    recent_deltas: Deque[TurnDelta] = field(default_factory=lambda: deque(maxlen=MAX_DELTA_HISTORY))
    dominant_strategy: StrategyLabel = StrategyLabel.BALANCED

    def __str__(self) -> str:
        w = self.focus_weights
        return (f"PlayerStrategyProfile(turns={self.turn_count}, "
                f"strategy={self.dominant_strategy.value}, "
                f"edu={w.education:.2f}, wealth={w.wealth:.2f}, "
                f"combat={w.combat:.2f}, happy={w.happiness:.2f})")


class ObserverRepository:
    """
    Session-owned store of rival snapshots and profiles.

    Shared by reference between the observer and the counter-strategy
    calculator of every agent in the session.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.snapshots: Dict[str, PlayerSnapshot] = {}
        self.profiles: Dict[str, PlayerStrategyProfile] = {}

    def reset(self):
        """Forget every rival (new game)"""
        with self.lock:
            self.snapshots.clear()
            self.profiles.clear()
        logger.info("🧹 Observer state reset for new game")


def signal_scores(delta: TurnDelta) -> Dict[str, int]:
    """Integer evidence per axis for one turn"""
    education = (3 if delta.degree_delta > 0 else 0) + (1 if delta.dependability_delta > 5 else 0)

    if delta.wealth_delta > 100:
        wealth = 2
    elif delta.wealth_delta > 50:
        wealth = 1
    else:
        wealth = 0
    wealth += int(delta.got_new_job) + int(delta.got_wage_increase)

    combat = ((3 if delta.floor_delta > 0 else 0)
              + int(delta.bought_equipment)
              + (1 if delta.quest_delta > 0 else 0))

    if delta.happiness_delta > 5:
        happiness = 2
    elif delta.happiness_delta > 0:
        happiness = 1
    else:
        happiness = 0
    happiness += int(delta.bought_appliances)

    return {'education': education, 'wealth': wealth, 'combat': combat, 'happiness': happiness}


def update_focus_weights(profile: PlayerStrategyProfile, delta: TurnDelta) -> bool:
    """
    Blend one turn's evidence into the running weights.

    Returns False (and changes nothing) when the turn carried no signal.
    """
    signals = signal_scores(delta)
    total = sum(signals.values())
    if total == 0:
        return False

    weights = profile.focus_weights
    for axis, signal in signals.items():
        blended = getattr(weights, axis) * (1 - FOCUS_SMOOTHING) + (signal / total) * FOCUS_SMOOTHING
        setattr(weights, axis, blended)
    return True


def classify_strategy(weights: FocusWeights) -> StrategyLabel:
    values = [weights.education, weights.wealth, weights.combat, weights.happiness]
    highest = max(values)
    if highest - min(values) < BALANCED_SPREAD:
        return StrategyLabel.BALANCED

    if highest == weights.education:
        return StrategyLabel.EDUCATION_RUSH
    if highest == weights.wealth:
        return StrategyLabel.WEALTH_GRIND
    if highest == weights.combat:
        return StrategyLabel.COMBAT_FOCUS
    return StrategyLabel.HAPPINESS_FOCUS


class PlayerBehaviorObserver:
    """Feeds rival snapshots into the repository once per AI turn"""

    def __init__(self, repository: ObserverRepository):
        self.repository = repository

    def observe(self, rivals: List[Player], week: int):
        """
        Snapshot every rival and, across a week boundary, update its profile.

        Two calls in the same week only refresh the stored snapshot.
        """
        with self.repository.lock:
            for player in rivals:
                snapshot = PlayerSnapshot.from_player(player, week)
                prev = self.repository.snapshots.get(player.id)

                if prev is not None and prev.week != week:
                    self._record_turn(player.id, prev, snapshot)

                # Baseline for the next comparison
                self.repository.snapshots[player.id] = snapshot

    def _record_turn(self, player_id: str, prev: PlayerSnapshot, snapshot: PlayerSnapshot):
        delta = TurnDelta.between(prev, snapshot)

        profile = self.repository.profiles.get(player_id)
        if profile is None:
            profile = PlayerStrategyProfile()
            self.repository.profiles[player_id] = profile
            logger.debug(f"New strategy profile for rival {player_id}")

        profile.turn_count += 1
        profile.recent_deltas.append(delta)

        loc = snapshot.current_location
        profile.location_frequency[loc] = profile.location_frequency.get(loc, 0) + 1

        if not update_focus_weights(profile, delta):
            logger.debug(f"No focus signal from rival {player_id} this turn")

        previous_label = profile.dominant_strategy
        profile.dominant_strategy = classify_strategy(profile.focus_weights)
        if profile.dominant_strategy != previous_label:
            logger.info(f"🔎 Rival {player_id} now reads as {profile.dominant_strategy.value} "
                        f"(after {profile.turn_count} turns)")

    def get_player_profile(self, player_id: str) -> Optional[PlayerStrategyProfile]:
        """Profile once enough turns were seen, else None"""
        with self.repository.lock:
            profile = self.repository.profiles.get(player_id)
            if profile is None or profile.turn_count < MIN_PROFILE_TURNS:
                return None
            return profile

    def all_profiles(self) -> Dict[str, PlayerStrategyProfile]:
        """Copy of every profile, including immature ones (debug/UI)"""
        with self.repository.lock:
            return dict(self.repository.profiles)

    def reset(self):
        self.repository.reset()
