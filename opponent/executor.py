"""
Action Executor

Maps each action kind to a handler that re-checks the action against the
player's fresh state and then calls the store. Handlers return True when the
mutation went through and False when the action was not executable; they do
not raise for game conditions (too little gold or time, unmet requirements).
"""

import logging
from typing import Callable, Dict

from .actions import (
    ActionKind,
    AIAction,
    ApplyJob,
    BuyAppliance,
    BuyClothing,
    BuyFood,
    DepositBank,
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
from .interfaces import Board, ContentTables, GameStore
from .models import RENT_COSTS, Player

logger = logging.getLogger(__name__)

Handler = Callable[[Player, AIAction], bool]


class ActionExecutor:
    """Runs one planned action against the store"""

    def __init__(self, store: GameStore, board: Board, content: ContentTables):
        self.store = store
        self.board = board
        self.content = content
        self._handlers: Dict[ActionKind, Handler] = {
            ActionKind.MOVE: self._move,
            ActionKind.WORK: self._work,
            ActionKind.BUY_FOOD: self._buy_food,
            ActionKind.BUY_CLOTHING: self._buy_clothing,
            ActionKind.STUDY: self._study,
            ActionKind.GRADUATE: self._graduate,
            ActionKind.APPLY_JOB: self._apply_job,
            ActionKind.PAY_RENT: self._pay_rent,
            ActionKind.DEPOSIT_BANK: self._deposit,
            ActionKind.WITHDRAW_BANK: self._withdraw,
            ActionKind.BUY_APPLIANCE: self._buy_appliance,
            ActionKind.MOVE_HOUSING: self._move_housing,
            ActionKind.REST: self._rest,
            ActionKind.HEAL: self._heal,
            ActionKind.END_TURN: self._end_turn,
        }

    def execute(self, player: Player, action: AIAction) -> bool:
        """
        Execute an action for a freshly read player.

        Raises:
            ValueError: if no handler exists for the action's kind
        """
        kind = getattr(action, 'kind', None)
        handler = self._handlers.get(kind)
        if handler is None:
            raise ValueError(f"No handler for action kind: {kind}")

        ok = handler(player, action)
        if not ok:
            logger.debug(f"Action not executable for {player.id}: {action}")
        return ok

    @staticmethod
    def _applied(result) -> bool:
        # Stores signal failure with an explicit False
        return result is not False

    # =========================================================================
    # Movement
    # =========================================================================

    def _move(self, player: Player, action: Move) -> bool:
        if not action.destination or action.destination == player.current_location:
            return False
        # Cost from the current position, not the one seen at planning time
        cost = self.board.shortest_distance(player.current_location, action.destination)
        if player.time_remaining < cost:
            return False
        return self._applied(self.store.move_to(player.id, action.destination, cost))

    # =========================================================================
    # Purchases
    # =========================================================================

    def _buy_food(self, player: Player, action: BuyFood) -> bool:
        if player.gold < action.cost:
            return False
        return self._applied(self.store.buy_food(player.id, action.cost, action.food_gain))

    def _buy_clothing(self, player: Player, action: BuyClothing) -> bool:
        if player.gold < action.cost:
            return False
        # Clothing is replaced, not topped up
        if action.condition <= player.clothing_condition:
            return False
        return self._applied(self.store.buy_clothing(player.id, action.cost, action.condition))

    def _buy_appliance(self, player: Player, action: BuyAppliance) -> bool:
        if not action.appliance_id or player.gold < action.cost:
            return False
        if action.appliance_id in player.appliances:
            return False
        return self._applied(self.store.buy_appliance(player.id, action.appliance_id, action.cost))

    def _heal(self, player: Player, action: Heal) -> bool:
        if player.gold < action.cost or player.health >= player.max_health:
            return False
        return self._applied(self.store.heal(player.id, action.cost, action.amount))

    # =========================================================================
    # Employment
    # =========================================================================

    def _work(self, player: Player, action: Work) -> bool:
        if player.time_remaining < action.hours:
            return False
        if player.current_job != action.job_id:
            return False
        wage = action.wage or player.current_wage
        return self._applied(self.store.work_shift(player.id, action.hours, wage))

    def _apply_job(self, player: Player, action: ApplyJob) -> bool:
        if not action.job_id or self.content.get_job(action.job_id) is None:
            return False
        return self.store.apply_for_job(player.id, action.job_id) is True

    # =========================================================================
    # Education
    # =========================================================================

    def _study(self, player: Player, action: Study) -> bool:
        if not action.degree_id:
            return False
        if player.gold < action.cost or player.time_remaining < action.hours:
            return False
        return self._applied(self.store.study_degree(player.id, action.degree_id, action.cost, action.hours))

    def _graduate(self, player: Player, action: Graduate) -> bool:
        degree = self.content.get_degree(action.degree_id)
        if degree is None or degree.id in player.completed_degrees:
            return False
        if player.degree_progress.get(degree.id, 0) < degree.sessions_required:
            return False
        return self._applied(self.store.complete_degree(player.id, degree.id))

    # =========================================================================
    # Housing and banking
    # =========================================================================

    def _pay_rent(self, player: Player, action: PayRent) -> bool:
        rent = RENT_COSTS[player.housing]
        if rent <= 0 or player.gold < rent:
            return False
        return self._applied(self.store.pay_rent(player.id))

    def _move_housing(self, player: Player, action: MoveHousing) -> bool:
        if player.housing == action.tier or player.gold < action.cost:
            return False
        return self._applied(self.store.upgrade_housing(player.id, action.tier, action.cost, action.new_rent))

    def _deposit(self, player: Player, action: DepositBank) -> bool:
        if action.amount <= 0 or player.gold < action.amount:
            return False
        return self._applied(self.store.deposit_to_bank(player.id, action.amount))

    def _withdraw(self, player: Player, action: WithdrawBank) -> bool:
        if action.amount <= 0 or player.savings < action.amount:
            return False
        return self._applied(self.store.withdraw_from_bank(player.id, action.amount))

    def _rest(self, player: Player, action: Rest) -> bool:
        if player.time_remaining < action.hours:
            return False
        if player.home_location is None or player.current_location != player.home_location:
            return False
        return self._applied(self.store.rest_at_home(player.id, action.hours))

    # =========================================================================
    # Turn control
    # =========================================================================

    def _end_turn(self, player: Player, action: AIAction) -> bool:
        return self._applied(self.store.end_turn())
