"""
Core Data Model

Player state as exposed by the game store, the per-game goal targets, and the
content records (jobs, degrees) the planner reasons about.

The Agent only ever reads these objects. All clamping of bounded stats is the
store's job.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

# Turn time budget in hours
HOURS_PER_TURN = 60

# Every completed degree is worth the same number of education points
EDUCATION_POINTS_PER_DEGREE = 9


class HousingTier(Enum):
    """Where the player lives, cheapest first"""
    HOMELESS = "homeless"
    SLUMS = "slums"      # Cheap but robbery-prone
    NOBLE = "noble"      # Safest tier


# Weekly rent per housing tier
RENT_COSTS: Dict[HousingTier, int] = {
    HousingTier.HOMELESS: 0,
    HousingTier.SLUMS: 50,
    HousingTier.NOBLE: 400,
}


class GuildRank(Enum):
    """Career ladder, lowest first"""
    NOVICE = "novice"
    APPRENTICE = "apprentice"
    JOURNEYMAN = "journeyman"
    ADEPT = "adept"
    VETERAN = "veteran"
    ELITE = "elite"
    GUILD_MASTER = "guild-master"


GUILD_RANK_ORDER: List[GuildRank] = [
    GuildRank.NOVICE,
    GuildRank.APPRENTICE,
    GuildRank.JOURNEYMAN,
    GuildRank.ADEPT,
    GuildRank.VETERAN,
    GuildRank.ELITE,
    GuildRank.GUILD_MASTER,
]


def rank_index(rank: GuildRank) -> int:
    """1-based position of a rank in the career ladder"""
    return GUILD_RANK_ORDER.index(rank) + 1


@dataclass
class ItemState:
    """State of an owned appliance or durable"""
    is_broken: bool = False


@dataclass
class Player:
    """
    Point-in-time view of one player, as returned by the game store.

    Bounded stats (happiness, food_level, clothing_condition, health) live
    in 0-100; the store keeps them there.
    """
    id: str
    name: str = ""
    is_ai: bool = False
    is_game_over: bool = False

    # Location and time
    current_location: str = "slums"
    time_remaining: int = HOURS_PER_TURN

    # Finances
    gold: int = 0
    savings: int = 0
    investments: int = 0

    # Wellbeing
    happiness: int = 50
    food_level: int = 100
    clothing_condition: int = 50
    health: int = 100
    max_health: int = 100

    # Education
    completed_degrees: Set[str] = field(default_factory=set)
    degree_progress: Dict[str, int] = field(default_factory=dict)

    # Employment
    current_job: Optional[str] = None
    current_wage: int = 0
    dependability: int = 0
    experience: int = 0
    guild_rank: GuildRank = GuildRank.NOVICE

    # Housing
    housing: HousingTier = HousingTier.SLUMS
    weeks_since_rent: int = 0

    # Adventure
    dungeon_floors_cleared: Set[int] = field(default_factory=set)
    completed_quests: int = 0
    equipped_weapon: Optional[str] = None
    equipped_armor: Optional[str] = None

    # Possessions
    appliances: Dict[str, ItemState] = field(default_factory=dict)
    durables: Dict[str, ItemState] = field(default_factory=dict)

    @property
    def total_wealth(self) -> int:
        return self.gold + self.savings + self.investments

    @property
    def has_valuables(self) -> bool:
        return bool(self.appliances) or bool(self.durables)

    @property
    def home_location(self) -> Optional[str]:
        """Board location of the player's home (None when homeless)"""
        if self.housing == HousingTier.NOBLE:
            return "noble-heights"
        if self.housing == HousingTier.SLUMS:
            return "slums"
        return None


@dataclass(frozen=True)
class GoalSettings:
    """Victory targets for one game session"""
    wealth: int = 5000
    happiness: int = 75
    education: int = 45
    career: int = 4


@dataclass(frozen=True)
class Job:
    """An employer's job listing"""
    id: str
    name: str
    location: str                  # Board location where shifts are worked
    base_wage: int                 # Gold per hour
    hours_per_shift: int = 6
    required_degrees: tuple = ()   # ALL required (AND logic)
    required_clothing: int = 0     # Minimum clothing condition
    required_experience: int = 0
    required_dependability: int = 0


@dataclass(frozen=True)
class Degree:
    """An academy degree"""
    id: str
    name: str
    cost_per_session: int
    hours_per_session: int = 6
    sessions_required: int = 10
    education_points: int = EDUCATION_POINTS_PER_DEGREE
    prerequisites: tuple = ()
