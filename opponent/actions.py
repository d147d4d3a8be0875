"""
Agent Actions

One dataclass per action kind. Every action carries a priority (higher runs
first) and a human-readable description used only for logs. Each kind also
declares the focus axis it serves; counter-strategy weights are applied per
axis.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple

from .models import HousingTier


class ActionKind(Enum):
    """Every action the Agent can plan"""
    MOVE = "move"
    WORK = "work"
    BUY_FOOD = "buy-food"
    BUY_CLOTHING = "buy-clothing"
    STUDY = "study"
    GRADUATE = "graduate"
    APPLY_JOB = "apply-job"
    PAY_RENT = "pay-rent"
    DEPOSIT_BANK = "deposit-bank"
    WITHDRAW_BANK = "withdraw-bank"
    BUY_APPLIANCE = "buy-appliance"
    MOVE_HOUSING = "move-housing"
    REST = "rest"
    HEAL = "heal"
    END_TURN = "end-turn"


class FocusAxis(Enum):
    """Goal axis an action pushes toward (NONE is never re-weighted)"""
    EDUCATION = "education"
    WEALTH = "wealth"
    COMBAT = "combat"
    HAPPINESS = "happiness"
    NONE = "none"


@dataclass
class AIAction:
    """Base for all planned actions"""
    priority: int = 0
    description: str = ""

    kind: ClassVar[ActionKind]
    focus: ClassVar[FocusAxis] = FocusAxis.NONE

    @property
    def location(self) -> Optional[str]:
        """Target board location (travel actions only)"""
        return None

    def target_ids(self) -> Tuple:
        """Ids that distinguish this action from others of the same kind"""
        return ()

    def key(self) -> str:
        """Identity used to skip actions that already failed this turn"""
        ids = ",".join(str(i) for i in self.target_ids())
        return f"{self.kind.value}:{self.location or ''}:{ids}"

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.description} (priority={self.priority})"


@dataclass
class Move(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.MOVE
    destination: str = ""
    time_cost: int = 0

    @property
    def location(self) -> Optional[str]:
        return self.destination


@dataclass
class Work(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.WORK
    focus: ClassVar[FocusAxis] = FocusAxis.WEALTH
    job_id: str = ""
    hours: int = 0
    wage: int = 0

    def target_ids(self) -> Tuple:
        return (self.job_id,)


@dataclass
class BuyFood(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.BUY_FOOD
    cost: int = 0
    food_gain: int = 0


@dataclass
class BuyClothing(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.BUY_CLOTHING
    cost: int = 0
    condition: int = 0


@dataclass
class Study(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.STUDY
    focus: ClassVar[FocusAxis] = FocusAxis.EDUCATION
    degree_id: str = ""
    cost: int = 0
    hours: int = 0

    def target_ids(self) -> Tuple:
        return (self.degree_id,)


@dataclass
class Graduate(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.GRADUATE
    focus: ClassVar[FocusAxis] = FocusAxis.EDUCATION
    degree_id: str = ""

    def target_ids(self) -> Tuple:
        return (self.degree_id,)


@dataclass
class ApplyJob(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.APPLY_JOB
    focus: ClassVar[FocusAxis] = FocusAxis.WEALTH
    job_id: str = ""

    def target_ids(self) -> Tuple:
        return (self.job_id,)


@dataclass
class PayRent(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.PAY_RENT
    cost: int = 0


@dataclass
class DepositBank(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.DEPOSIT_BANK
    focus: ClassVar[FocusAxis] = FocusAxis.WEALTH
    amount: int = 0


@dataclass
class WithdrawBank(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.WITHDRAW_BANK
    focus: ClassVar[FocusAxis] = FocusAxis.WEALTH
    amount: int = 0


@dataclass
class BuyAppliance(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.BUY_APPLIANCE
    focus: ClassVar[FocusAxis] = FocusAxis.HAPPINESS
    appliance_id: str = ""
    cost: int = 0

    def target_ids(self) -> Tuple:
        return (self.appliance_id,)


@dataclass
class MoveHousing(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.MOVE_HOUSING
    tier: HousingTier = HousingTier.NOBLE
    cost: int = 0
    new_rent: int = 0

    def target_ids(self) -> Tuple:
        return (self.tier.value,)


@dataclass
class Rest(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.REST
    focus: ClassVar[FocusAxis] = FocusAxis.HAPPINESS
    hours: int = 0
    happiness_gain: int = 0


@dataclass
class Heal(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.HEAL
    cost: int = 0
    amount: int = 0


@dataclass
class EndTurn(AIAction):
    kind: ClassVar[ActionKind] = ActionKind.END_TURN
