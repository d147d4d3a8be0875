"""
Sandbox World

In-memory GameStore for headless play and tests. Keeps every bounded stat in
range after each mutation and runs a weekly upkeep tick once every player has
ended a turn. Only the rules the agent interacts with are modelled.
"""

import logging
from typing import Dict, List, Optional

from .content import StaticContent, can_work_job
from .interfaces import ContentTables, GameStore
from .models import (
    GUILD_RANK_ORDER,
    HOURS_PER_TURN,
    RENT_COSTS,
    HousingTier,
    ItemState,
    Player,
)

logger = logging.getLogger(__name__)

# Weekly upkeep
FOOD_DECAY = 15
CLOTHING_DECAY = 5
STARVATION_DAMAGE = 10

# Per-shift accumulators
DEPENDABILITY_PER_SHIFT = 2
MAX_ACCUMULATOR = 100

APPLIANCE_HAPPINESS = 5
GRADUATION_HAPPINESS = 5
ERRAND_HOURS = 1

# Dependability needed for each guild rank, lowest first
RANK_THRESHOLDS = (0, 10, 25, 40, 55, 70, 85)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class SandboxWorld(GameStore):
    """
    Turn order follows the order players were added. end_turn() passes the
    turn on; when it wraps back to the first player a new week begins.
    """

    def __init__(self, content: Optional[ContentTables] = None):
        self.content = content or StaticContent()
        self.players: Dict[str, Player] = {}
        self.turn_order: List[str] = []
        self.current_index = 0
        self.week = 1
        self.turns_ended = 0
        self._rent: Dict[str, int] = {}

    def add_player(self, player: Player) -> Player:
        self.players[player.id] = player
        self.turn_order.append(player.id)
        return player

    @property
    def current_player_id(self) -> Optional[str]:
        if not self.turn_order:
            return None
        return self.turn_order[self.current_index]

    def rent_for(self, player: Player) -> int:
        return self._rent.get(player.id, RENT_COSTS[player.housing])

    # =========================================================================
    # Reads
    # =========================================================================

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    def get_players(self) -> List[Player]:
        return [self.players[pid] for pid in self.turn_order]

    def current_week(self) -> int:
        return self.week

    # =========================================================================
    # Mutations
    # =========================================================================

    def _spend(self, player_id: str, gold: int = 0, hours: int = 0) -> Optional[Player]:
        """Player after paying gold and hours, or None if they cannot be paid"""
        player = self.players.get(player_id)
        if player is None or player.is_game_over:
            return None
        if player.gold < gold or player.time_remaining < hours:
            return None
        player.gold -= gold
        player.time_remaining -= hours
        return player

    def _settle(self, player: Player):
        """Clamp every bounded stat"""
        player.happiness = _clamp(player.happiness, 0, 100)
        player.food_level = _clamp(player.food_level, 0, 100)
        player.clothing_condition = _clamp(player.clothing_condition, 0, 100)
        player.health = _clamp(player.health, 0, player.max_health)
        player.dependability = _clamp(player.dependability, 0, MAX_ACCUMULATOR)
        player.experience = _clamp(player.experience, 0, MAX_ACCUMULATOR)
        player.time_remaining = max(0, player.time_remaining)
        player.gold = max(0, player.gold)
        player.savings = max(0, player.savings)

    def move_to(self, player_id: str, location: str, time_cost: int):
        player = self._spend(player_id, hours=time_cost)
        if player is None:
            return False
        player.current_location = location
        self._settle(player)

    def work_shift(self, player_id: str, hours: int, wage: int):
        current = self.players.get(player_id)
        if current is None or current.current_job is None:
            return False
        player = self._spend(player_id, hours=hours)
        if player is None:
            return False
        player.gold += hours * wage
        player.dependability += DEPENDABILITY_PER_SHIFT
        player.experience += hours // 2
        self._settle(player)
        self._promote(player)

    def buy_food(self, player_id: str, cost: int, food_gain: int):
        player = self._spend(player_id, gold=cost, hours=ERRAND_HOURS)
        if player is None:
            return False
        player.food_level += food_gain
        self._settle(player)

    def buy_clothing(self, player_id: str, cost: int, condition: int):
        player = self._spend(player_id, gold=cost, hours=ERRAND_HOURS)
        if player is None:
            return False
        player.clothing_condition = condition
        self._settle(player)

    def buy_appliance(self, player_id: str, appliance_id: str, cost: int):
        player = self._spend(player_id, gold=cost)
        if player is None:
            return False
        player.appliances[appliance_id] = ItemState()
        player.happiness += APPLIANCE_HAPPINESS
        self._settle(player)

    def study_degree(self, player_id: str, degree_id: str, cost: int, hours: int):
        if self.content.get_degree(degree_id) is None:
            return False
        player = self._spend(player_id, gold=cost, hours=hours)
        if player is None:
            return False
        player.degree_progress[degree_id] = player.degree_progress.get(degree_id, 0) + 1
        self._settle(player)

    def complete_degree(self, player_id: str, degree_id: str):
        player = self.players.get(player_id)
        degree = self.content.get_degree(degree_id)
        if player is None or degree is None:
            return False
        if player.degree_progress.get(degree_id, 0) < degree.sessions_required:
            return False
        player.completed_degrees.add(degree_id)
        player.happiness += GRADUATION_HAPPINESS
        self._settle(player)

    def apply_for_job(self, player_id: str, job_id: str) -> bool:
        player = self.players.get(player_id)
        job = self.content.get_job(job_id)
        if player is None or job is None or not can_work_job(job, player):
            return False
        if self._spend(player_id, hours=ERRAND_HOURS) is None:
            return False
        player.current_job = job.id
        player.current_wage = job.base_wage
        self._settle(player)
        return True

    def pay_rent(self, player_id: str):
        player = self.players.get(player_id)
        if player is None or player.housing == HousingTier.HOMELESS:
            return False
        if self._spend(player_id, gold=self.rent_for(player)) is None:
            return False
        player.weeks_since_rent = 0
        self._settle(player)

    def deposit_to_bank(self, player_id: str, amount: int):
        player = self._spend(player_id, gold=amount)
        if player is None:
            return False
        player.savings += amount
        self._settle(player)

    def withdraw_from_bank(self, player_id: str, amount: int):
        player = self.players.get(player_id)
        if player is None or player.savings < amount:
            return False
        player.savings -= amount
        player.gold += amount
        self._settle(player)

    def upgrade_housing(self, player_id: str, tier: HousingTier, cost: int, new_rent: int):
        player = self._spend(player_id, gold=cost)
        if player is None:
            return False
        player.housing = tier
        player.weeks_since_rent = 0
        self._rent[player_id] = new_rent
        self._settle(player)

    def rest_at_home(self, player_id: str, hours: int) -> int:
        player = self._spend(player_id, hours=hours)
        if player is None:
            return 0
        before = player.happiness
        player.happiness += 5
        self._settle(player)
        return player.happiness - before

    def heal(self, player_id: str, cost: int, amount: int):
        player = self._spend(player_id, gold=cost)
        if player is None:
            return False
        player.health += amount
        self._settle(player)

    def end_turn(self):
        if not self.turn_order:
            return
        self.turns_ended += 1
        self.current_index = (self.current_index + 1) % len(self.turn_order)
        if self.current_index == 0:
            self._weekly_tick()

    # =========================================================================
    # Weekly upkeep
    # =========================================================================

    def _weekly_tick(self):
        self.week += 1
        for player in self.players.values():
            if player.is_game_over:
                continue
            player.time_remaining = HOURS_PER_TURN
            player.food_level -= FOOD_DECAY
            player.clothing_condition -= CLOTHING_DECAY
            if player.housing != HousingTier.HOMELESS:
                player.weeks_since_rent += 1
            if player.food_level <= 0:
                player.health -= STARVATION_DAMAGE
            self._settle(player)
            if player.health <= 0:
                player.is_game_over = True
                logger.info(f"💀 {player.name or player.id} has perished in week {self.week}")
        logger.debug(f"Week {self.week} begins")

    def _promote(self, player: Player):
        rank = GUILD_RANK_ORDER[0]
        for threshold, candidate in zip(RANK_THRESHOLDS, GUILD_RANK_ORDER):
            if player.dependability >= threshold:
                rank = candidate
        if GUILD_RANK_ORDER.index(rank) > GUILD_RANK_ORDER.index(player.guild_rank):
            player.guild_rank = rank
            logger.info(f"🎖️  {player.name or player.id} promoted to {rank.value}")
