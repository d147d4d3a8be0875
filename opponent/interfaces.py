"""
External Collaborator Interfaces

The Agent owns none of the game state. It reads players through a GameStore,
mutates them through the same store, asks a Board for travel distances and
asks ContentTables for jobs and degrees.

Mutation contract:
- Each call may be attempted redundantly; the store clamps every resulting
  stat to its valid range.
- A call that returns False has failed and changed nothing. Any other return
  value (including None) means the mutation was applied.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Degree, HousingTier, Job, Player


class Board(ABC):
    """Board/pathing collaborator"""

    @abstractmethod
    def shortest_distance(self, from_location: str, to_location: str) -> int:
        """Travel time in hours between two locations"""
        pass


class ContentTables(ABC):
    """Read-only job and degree tables"""

    @abstractmethod
    def get_job(self, job_id: str) -> Optional['Job']:
        pass

    @abstractmethod
    def all_jobs(self) -> List['Job']:
        pass

    @abstractmethod
    def available_jobs(self, player: 'Player') -> List['Job']:
        """Jobs the player currently qualifies for"""
        pass

    @abstractmethod
    def get_degree(self, degree_id: str) -> Optional['Degree']:
        pass

    @abstractmethod
    def available_degrees(self, completed_degrees) -> List['Degree']:
        """Degrees whose prerequisites are met and which are not yet completed"""
        pass

    @abstractmethod
    def job_location(self, job: 'Job') -> str:
        """Board location where the job's shifts are worked"""
        pass


class GameStore(ABC):
    """
    World/store collaborator.

    Reads always return fresh state; the Agent never caches a Player across
    a mutation.
    """

    # =========================================================================
    # Reads
    # =========================================================================

    @abstractmethod
    def get_player(self, player_id: str) -> Optional['Player']:
        pass

    @abstractmethod
    def get_players(self) -> List['Player']:
        pass

    @abstractmethod
    def current_week(self) -> int:
        pass

    # =========================================================================
    # Mutations
    # =========================================================================

    @abstractmethod
    def move_to(self, player_id: str, location: str, time_cost: int):
        pass

    @abstractmethod
    def work_shift(self, player_id: str, hours: int, wage: int):
        pass

    @abstractmethod
    def buy_food(self, player_id: str, cost: int, food_gain: int):
        pass

    @abstractmethod
    def buy_clothing(self, player_id: str, cost: int, condition: int):
        """Replace clothing; condition is the new clothing level"""
        pass

    @abstractmethod
    def buy_appliance(self, player_id: str, appliance_id: str, cost: int):
        pass

    @abstractmethod
    def study_degree(self, player_id: str, degree_id: str, cost: int, hours: int):
        pass

    @abstractmethod
    def complete_degree(self, player_id: str, degree_id: str):
        pass

    @abstractmethod
    def apply_for_job(self, player_id: str, job_id: str) -> bool:
        """False when the qualification check fails"""
        pass

    @abstractmethod
    def pay_rent(self, player_id: str):
        pass

    @abstractmethod
    def deposit_to_bank(self, player_id: str, amount: int):
        pass

    @abstractmethod
    def withdraw_from_bank(self, player_id: str, amount: int):
        pass

    @abstractmethod
    def upgrade_housing(self, player_id: str, tier: 'HousingTier', cost: int, new_rent: int):
        pass

    @abstractmethod
    def rest_at_home(self, player_id: str, hours: int) -> int:
        """Returns the happiness gained"""
        pass

    @abstractmethod
    def heal(self, player_id: str, cost: int, amount: int):
        pass

    @abstractmethod
    def end_turn(self):
        pass
