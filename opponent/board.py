"""
Board Locations and Reference Pathing

Location ids used by the planner, and a ring board implementing the
shortest-distance query. The real board module owns the movement path
geometry; RingBoard mirrors its layout closely enough for headless play.
"""

import logging
from typing import Dict, Tuple

from .interfaces import Board

logger = logging.getLogger(__name__)


# =============================================================================
# Location ids
# =============================================================================

NOBLE_HEIGHTS = "noble-heights"
LANDLORD = "landlord"
SLUMS = "slums"
FENCE = "fence"
GENERAL_STORE = "general-store"
SHADOW_MARKET = "shadow-market"
RUSTY_TANKARD = "rusty-tankard"
ARMORY = "armory"
ENCHANTER = "enchanter"
ACADEMY = "academy"
GUILD_HALL = "guild-hall"
FORGE = "forge"
BANK = "bank"

# Where each errand is run
FOOD_LOCATION = RUSTY_TANKARD          # Tavern food never spoils
RENT_LOCATION = LANDLORD
HEALER_LOCATION = ENCHANTER
CLOTHING_LOCATIONS: Tuple[str, ...] = (ARMORY, GENERAL_STORE)
STUDY_LOCATION = ACADEMY
HIRING_LOCATION = GUILD_HALL
APPLIANCE_LOCATION = ENCHANTER
BANK_LOCATION = BANK

# Board perimeter, clockwise from the top-left corner
BOARD_RING: Tuple[str, ...] = (
    NOBLE_HEIGHTS,
    LANDLORD,
    SLUMS,
    FENCE,
    GENERAL_STORE,
    SHADOW_MARKET,
    RUSTY_TANKARD,
    ARMORY,
    ENCHANTER,
    ACADEMY,
    GUILD_HALL,
    FORGE,
    BANK,
)

HOURS_PER_STEP = 2


class RingBoard(Board):
    """
    Board where every location sits on a single loop.

    Distance is the shorter way round the loop, HOURS_PER_STEP hours per hop.
    Unknown locations cost nothing to reach, matching the board module.
    """

    def __init__(self, ring: Tuple[str, ...] = BOARD_RING, hours_per_step: int = HOURS_PER_STEP):
        self.ring = ring
        self.hours_per_step = hours_per_step
        self._index: Dict[str, int] = {loc: i for i, loc in enumerate(ring)}

    def shortest_distance(self, from_location: str, to_location: str) -> int:
        from_index = self._index.get(from_location)
        to_index = self._index.get(to_location)
        if from_index is None or to_index is None:
            logger.debug(f"Unknown location in path query: {from_location} -> {to_location}")
            return 0
        if from_index == to_index:
            return 0

        distance = abs(from_index - to_index)
        wrapped = min(distance, len(self.ring) - distance)
        return wrapped * self.hours_per_step
