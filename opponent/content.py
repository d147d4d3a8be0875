"""
Reference Content Tables

Job and degree tables with the query functions the planner needs. Wages and
requirements follow the game's employer listings; StaticContent can be built
from any other tables that use the same records.
"""

from typing import Dict, Iterable, List, Optional

from . import board
from .interfaces import ContentTables
from .models import Degree, Job, Player

# Clothing condition needed for each dress code
CLOTHING_NONE = 0
CLOTHING_CASUAL = 25
CLOTHING_DRESS = 50
CLOTHING_BUSINESS = 75
CLOTHING_UNIFORM = 75


# =============================================================================
# Degrees
# =============================================================================

DEGREES: List[Degree] = [
    # Entry degrees - no prerequisites
    Degree("trade-guild", "Trade Guild Certificate", cost_per_session=10),
    Degree("junior-academy", "Junior Academy", cost_per_session=15),
    Degree("combat-training", "Combat Training", cost_per_session=15),
    Degree("arcane-studies", "Arcane Studies", cost_per_session=20),
    # Second tier
    Degree("commerce", "Commerce", cost_per_session=25, prerequisites=("trade-guild",)),
    Degree("scholar", "Scholar", cost_per_session=25, prerequisites=("junior-academy",)),
    Degree("master-combat", "Master Combat", cost_per_session=35, prerequisites=("combat-training",)),
    Degree("alchemy", "Alchemy", cost_per_session=30, prerequisites=("arcane-studies",)),
    # Scholar track
    Degree("advanced-scholar", "Advanced Scholar", cost_per_session=40, prerequisites=("scholar",)),
    Degree("sage-studies", "Sage Studies", cost_per_session=50, prerequisites=("advanced-scholar",)),
    Degree("loremaster", "Loremaster", cost_per_session=60, prerequisites=("sage-studies",)),
]


# =============================================================================
# Jobs
# =============================================================================

JOBS: List[Job] = [
    # Guild Hall
    Job("floor-sweeper", "Floor Sweeper", board.GUILD_HALL, 4),
    Job("errand-runner", "Errand Runner", board.GUILD_HALL, 5,
        required_clothing=CLOTHING_CASUAL, required_experience=10, required_dependability=20),
    Job("assistant-clerk", "Assistant Clerk", board.GUILD_HALL, 7, required_degrees=("trade-guild",),
        required_clothing=CLOTHING_CASUAL, required_experience=20, required_dependability=30),
    Job("guild-accountant", "Guild Accountant", board.GUILD_HALL, 14, required_degrees=("commerce",),
        required_clothing=CLOTHING_DRESS, required_experience=40, required_dependability=50),
    Job("guild-administrator", "Guild Administrator", board.GUILD_HALL, 22,
        required_degrees=("commerce", "master-combat"),
        required_clothing=CLOTHING_BUSINESS, required_experience=60, required_dependability=60),
    # General Store / Shadow Market
    Job("market-porter", "Market Porter", board.GENERAL_STORE, 4, required_dependability=10),
    Job("shop-clerk", "Shop Clerk", board.GENERAL_STORE, 6, required_degrees=("trade-guild",),
        required_clothing=CLOTHING_CASUAL, required_experience=10, required_dependability=20),
    Job("shop-manager", "Shop Manager", board.GENERAL_STORE, 16, required_degrees=("commerce",),
        required_clothing=CLOTHING_DRESS, required_experience=50, required_dependability=50),
    Job("market-vendor", "Market Vendor", board.SHADOW_MARKET, 10, required_degrees=("trade-guild",),
        required_clothing=CLOTHING_CASUAL, required_experience=20, required_dependability=30),
    # Bank
    Job("bank-janitor", "Bank Janitor", board.BANK, 6,
        required_clothing=CLOTHING_CASUAL, required_experience=10, required_dependability=20),
    Job("bank-teller", "Bank Teller", board.BANK, 9, required_degrees=("junior-academy",),
        required_clothing=CLOTHING_DRESS, required_experience=20, required_dependability=40),
    Job("guild-treasurer", "Guild Treasurer", board.BANK, 22, required_degrees=("scholar", "commerce"),
        required_clothing=CLOTHING_BUSINESS, required_experience=60, required_dependability=60),
    # Forge
    Job("forge-laborer", "Forge Laborer", board.FORGE, 4, hours_per_shift=8),
    Job("apprentice-smith", "Apprentice Smith", board.FORGE, 6, hours_per_shift=8,
        required_degrees=("trade-guild",),
        required_clothing=CLOTHING_CASUAL, required_experience=15, required_dependability=20),
    Job("journeyman-smith", "Journeyman Smith", board.FORGE, 10, hours_per_shift=8,
        required_degrees=("combat-training",),
        required_clothing=CLOTHING_CASUAL, required_experience=30, required_dependability=40),
    Job("master-smith", "Master Smith", board.FORGE, 18, required_degrees=("master-combat",),
        required_clothing=CLOTHING_CASUAL, required_experience=50, required_dependability=50),
    # Academy
    Job("library-assistant", "Library Assistant", board.ACADEMY, 7, required_degrees=("junior-academy",),
        required_clothing=CLOTHING_CASUAL, required_experience=10, required_dependability=30),
    Job("scribe", "Scribe", board.ACADEMY, 8, required_degrees=("junior-academy",),
        required_clothing=CLOTHING_DRESS, required_experience=20, required_dependability=40),
    Job("teacher", "Teacher", board.ACADEMY, 14, required_degrees=("scholar",),
        required_clothing=CLOTHING_DRESS, required_experience=40, required_dependability=50),
    Job("senior-teacher", "Senior Teacher", board.ACADEMY, 17, required_degrees=("advanced-scholar",),
        required_clothing=CLOTHING_DRESS, required_experience=50, required_dependability=55),
    Job("academy-lecturer", "Academy Lecturer", board.ACADEMY, 18, required_degrees=("sage-studies",),
        required_clothing=CLOTHING_DRESS, required_experience=55, required_dependability=58),
    Job("sage", "Sage", board.ACADEMY, 20, required_degrees=("loremaster",),
        required_clothing=CLOTHING_DRESS, required_experience=50, required_dependability=60),
    Job("weapons-instructor", "Weapons Instructor", board.ACADEMY, 19, required_degrees=("master-combat",),
        required_clothing=CLOTHING_UNIFORM, required_experience=50, required_dependability=55),
    # Armory
    Job("city-guard", "City Guard", board.ARMORY, 8, hours_per_shift=8, required_degrees=("combat-training",),
        required_clothing=CLOTHING_UNIFORM, required_experience=20, required_dependability=40),
    # Enchanter
    Job("scroll-copier", "Scroll Copier", board.ENCHANTER, 7, required_degrees=("arcane-studies",),
        required_clothing=CLOTHING_CASUAL, required_experience=15, required_dependability=30),
    Job("enchantment-assistant", "Enchantment Assistant", board.ENCHANTER, 11,
        required_degrees=("arcane-studies",),
        required_clothing=CLOTHING_DRESS, required_experience=25, required_dependability=40),
    Job("alchemist", "Alchemist", board.ENCHANTER, 15, required_degrees=("alchemy",),
        required_clothing=CLOTHING_DRESS, required_experience=40, required_dependability=50),
    # Noble Heights
    Job("court-advisor", "Court Advisor", board.NOBLE_HEIGHTS, 21, required_degrees=("loremaster",),
        required_clothing=CLOTHING_BUSINESS, required_experience=60, required_dependability=60),
]


def can_work_job(job: Job, player: Player) -> bool:
    """Check if a player meets every requirement of a job"""
    if not all(degree in player.completed_degrees for degree in job.required_degrees):
        return False
    if player.clothing_condition < job.required_clothing:
        return False
    if player.experience < job.required_experience:
        return False
    if player.dependability < job.required_dependability:
        return False
    return True


class StaticContent(ContentTables):
    """ContentTables backed by in-memory lists (table order is preserved)"""

    def __init__(self, jobs: Iterable[Job] = None, degrees: Iterable[Degree] = None):
        self._jobs: List[Job] = list(JOBS if jobs is None else jobs)
        self._degrees: List[Degree] = list(DEGREES if degrees is None else degrees)
        self._jobs_by_id: Dict[str, Job] = {job.id: job for job in self._jobs}
        self._degrees_by_id: Dict[str, Degree] = {degree.id: degree for degree in self._degrees}

    def get_job(self, job_id: str) -> Optional[Job]:
        return self._jobs_by_id.get(job_id)

    def all_jobs(self) -> List[Job]:
        return list(self._jobs)

    def available_jobs(self, player: Player) -> List[Job]:
        return [job for job in self._jobs if can_work_job(job, player)]

    def get_degree(self, degree_id: str) -> Optional[Degree]:
        return self._degrees_by_id.get(degree_id)

    def available_degrees(self, completed_degrees) -> List[Degree]:
        completed = set(completed_degrees)
        return [
            degree for degree in self._degrees
            if degree.id not in completed
            and all(req in completed for req in degree.prerequisites)
        ]

    def job_location(self, job: Job) -> str:
        if job.location in board.BOARD_RING:
            return job.location
        return board.HIRING_LOCATION
