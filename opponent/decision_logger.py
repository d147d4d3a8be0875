"""
Agent Decision Logger

Writes one block per executed agent step: the player's state summary, the
top-ranked candidates and what happened to the chosen action. Used for
post-game analysis of why the agent did what it did.

Logs go to a dedicated logger that does not propagate to the root logger,
so the main log stays readable. Files are rotated per game.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from config import config

from .actions import AIAction
from .models import Player

LOG_DIR = Path(config.LOG_DIR)

DECISION_LOG_PATH = LOG_DIR / f"{config.AGENT_NAME}_decisions.log"

# Candidates listed per step
TOP_CANDIDATES = 5

decision_logger = logging.getLogger("agent_decisions")
decision_logger.setLevel(logging.INFO)
decision_logger.propagate = False

_file_handler: Optional[logging.FileHandler] = None


def _ensure_handler():
    """Lazily initialize the file handler."""
    global _file_handler
    if _file_handler is None:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        _file_handler = logging.FileHandler(str(DECISION_LOG_PATH))
        _file_handler.setFormatter(logging.Formatter('%(message)s'))
        decision_logger.addHandler(_file_handler)


def log_step(
    player: Player,
    step: int,
    candidates: Sequence[AIAction],
    chosen: AIAction,
    success: bool,
    week: int = 0,
):
    """
    Log one agent step.

    Args:
        player: Player state the plan was built from
        step: 1-based step number within the turn
        candidates: Ranked candidate list from the planner
        chosen: The action that was attempted
        success: Whether the store accepted it
        week: Current game week
    """
    if not config.DECISION_LOG_ENABLED:
        return
    _ensure_handler()

    timestamp = datetime.now().isoformat()
    entry_lines = [
        f"=== {player.name or player.id} week {week} step {step} @ {timestamp} ===",
        f"Location: {player.current_location}, Time: {player.time_remaining}h",
        f"Gold: {player.gold}, Savings: {player.savings}, Happiness: {player.happiness}, "
        f"Food: {player.food_level}, Clothing: {player.clothing_condition}, Health: {player.health}",
        f"Job: {player.current_job or 'none'} @ {player.current_wage}g/h, "
        f"Degrees: {len(player.completed_degrees)}, Housing: {player.housing.value}",
        "",
        "Candidates:",
    ]
    for action in candidates[:TOP_CANDIDATES]:
        entry_lines.append(f"  {action.priority:>4}  {action.kind.value:<14} {action.description}")
    if len(candidates) > TOP_CANDIDATES:
        entry_lines.append(f"  ... {len(candidates) - TOP_CANDIDATES} more")

    entry_lines.append("")
    entry_lines.append(f"Chosen: {chosen.kind.value} ({chosen.description}) -> {'OK' if success else 'FAILED'}")
    entry_lines.append("=" * 50)
    entry_lines.append("")

    decision_logger.info('\n'.join(entry_lines))


def log_turn_summary(player_id: str, executed: List[str], failed: List[str], reason: str):
    """Log the end-of-turn summary line."""
    if not config.DECISION_LOG_ENABLED:
        return
    _ensure_handler()
    decision_logger.info(
        f"--- Turn end for {player_id}: {reason}, "
        f"{len(executed)} executed, {len(failed)} failed ---\n"
    )


def rotate_decision_log(game_label: str = None):
    """
    Rotate the decision log file after a game ends.

    Args:
        game_label: Short label for the finished game (for filename)
    """
    global _file_handler

    try:
        if _file_handler is None:
            return

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        label = game_label.replace(' ', '_') if game_label else "game"
        new_path = LOG_DIR / f"{config.AGENT_NAME}_{timestamp}_{label}_decisions.log"

        _file_handler.flush()
        _file_handler.close()
        decision_logger.removeHandler(_file_handler)
        _file_handler = None

        if DECISION_LOG_PATH.exists() and DECISION_LOG_PATH.stat().st_size > 0:
            shutil.move(str(DECISION_LOG_PATH), str(new_path))

    except OSError as e:
        # decision_logger might be the thing that is broken
        logging.getLogger(__name__).error(f"Error rotating decision log: {e}")


def flush():
    """Flush the decision log."""
    if _file_handler:
        _file_handler.flush()
