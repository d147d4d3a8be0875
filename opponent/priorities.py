"""
Action Priority Table

Every priority the planner assigns, in one place. Values are fixed so the
agent's choices are reproducible: a given state always yields the same
ranking (apart from the deliberate mistake swap).

Interrupts sit in 70-100, goal focus in 40-88, the general strategic layer
in 45-70, and END_TURN at 1 so it only wins when nothing else is possible.
"""

import math

# =============================================================================
# Critical interrupts
# =============================================================================

BUY_FOOD = 100
TRAVEL_FOOD = 95
PAY_RENT = 90
TRAVEL_RENT = 85
HEAL = 80
TRAVEL_HEAL = 75
BUY_CLOTHING = 75
TRAVEL_CLOTHING = 70

# =============================================================================
# Weakest-goal focus
# =============================================================================

# Education
GRADUATE_READY = 88          # Any finished degree while standing at the academy
GRADUATE = 85
STUDY_BASE = 70              # Plus aggressiveness * STUDY_AGGRESSION_BONUS
STUDY_AGGRESSION_BONUS = 20
TRAVEL_STUDY = 65

# Wealth
WORK_FOR_WEALTH = 80
TRAVEL_WORK_FOR_WEALTH = 75
DEPOSIT = 60
TRAVEL_DEPOSIT = 55

# Happiness
BUY_APPLIANCE = 65
TRAVEL_APPLIANCE = 60
REST = 45
TRAVEL_HOME_TO_REST = 40

# Career
APPLY_FOR_CAREER = 85
TRAVEL_APPLY_FOR_CAREER = 80
WORK_FOR_CAREER = 75
TRAVEL_WORK_FOR_CAREER = 70

# =============================================================================
# General strategic layer
# =============================================================================

SEEK_JOB = 70
TRAVEL_SEEK_JOB = 65
UPGRADE_JOB = 60
TRAVEL_UPGRADE_JOB = 55
OPPORTUNISTIC_WORK = 50
OPPORTUNISTIC_WORK_POOR_BONUS = 20   # When wealth progress < 0.5
TRAVEL_OPPORTUNISTIC_WORK = 45
UPGRADE_HOUSING = 55
TRAVEL_UPGRADE_HOUSING = 50
DOWNGRADE_HOUSING = 80       # Noble housing with rent 3+ weeks overdue
TRAVEL_DOWNGRADE_HOUSING = 75
WITHDRAW = 65
TRAVEL_WITHDRAW = 60

# =============================================================================
# Fallback
# =============================================================================

END_TURN = 1


def study_priority(aggressiveness: float) -> float:
    """Eager agents push study ahead of wealth-building"""
    return STUDY_BASE + aggressiveness * STUDY_AGGRESSION_BONUS


def opportunistic_work_priority(wealth_progress: float) -> int:
    if wealth_progress < 0.5:
        return OPPORTUNISTIC_WORK + OPPORTUNISTIC_WORK_POOR_BONUS
    return OPPORTUNISTIC_WORK


def round_half_up(value: float) -> int:
    """Round .5 upward (Python's round() is banker's rounding)"""
    return math.floor(value + 0.5)
