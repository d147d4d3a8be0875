#!/usr/bin/env python3
"""
Play AI opponents against stand-in humans in the sandbox world.

Stand-in humans are agents too, but registered as non-AI players so the AI
observes and counters them the way it would real rivals.

Usage:
    # One medium AI vs one easy stand-in, 20 weeks
    python tools/run_headless.py --weeks 20

    # Hard AI vs two stand-ins, reproducible
    python tools/run_headless.py --difficulty hard --rivals 2 --seed 42

    # Show every step
    python tools/run_headless.py --weeks 5 --verbose
"""

import argparse
import logging
import os
import random
import sys

# Allow running from the repo root without installing
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import config
from opponent import decision_logger
from opponent.board import RingBoard
from opponent.content import StaticContent
from opponent.difficulty import get_difficulty_settings
from opponent.difficulty_adjuster import PerformanceRepository
from opponent.evaluators import GoalProgressEvaluator
from opponent.models import GoalSettings, Player
from opponent.observer import ObserverRepository
from opponent.planner import ActionPlanner
from opponent.sandbox import SandboxWorld
from opponent.turn_runner import Agent, ImmediateScheduler, PlayerTurnLocks

STARTING_GOLD = 100


def build_game(difficulty: str, rival_difficulty: str, rivals: int, seed: int, goals: GoalSettings):
    """Sandbox with one AI player and the given number of stand-in humans"""
    board = RingBoard()
    content = StaticContent()
    store = SandboxWorld(content)
    session_repository = ObserverRepository()
    session_performance = PerformanceRepository()
    turn_locks = PlayerTurnLocks()
    rng = random.Random(seed)

    agents = {}

    ai = store.add_player(Player(id="ai", name="Grimwald", is_ai=True, gold=STARTING_GOLD))
    agents[ai.id] = Agent(
        store, board, content,
        difficulty=get_difficulty_settings(difficulty),
        goals=goals,
        repository=session_repository,
        scheduler=ImmediateScheduler(),
        planner=ActionPlanner(board, content, rng=random.Random(rng.random())),
        safety_steps=config.SAFETY_STEPS,
        performance=session_performance,
        turn_locks=turn_locks,
    )

    for i in range(rivals):
        human = store.add_player(Player(id=f"human{i + 1}", name=f"Stand-in {i + 1}", gold=STARTING_GOLD))
        # Stand-ins keep their own observations out of the AI's repository
        agents[human.id] = Agent(
            store, board, content,
            difficulty=get_difficulty_settings(rival_difficulty),
            goals=goals,
            repository=ObserverRepository(),
            scheduler=ImmediateScheduler(),
            planner=ActionPlanner(board, content, rng=random.Random(rng.random())),
            safety_steps=config.SAFETY_STEPS,
            turn_locks=turn_locks,
        )

    return store, agents, session_repository


def play(store: SandboxWorld, agents: dict, weeks: int) -> int:
    """Run whole weeks; returns the number of turns played"""
    turns = 0
    for _ in range(weeks):
        for player_id in list(store.turn_order):
            player = store.get_player(player_id)
            if player.is_game_over:
                store.end_turn()
                continue
            report = agents[player_id].run_turn(player_id)
            turns += 1
            # Out-of-time exits leave ending the turn to the game
            if report is None or not report.ended_turn:
                store.end_turn()
    return turns


def print_summary(store: SandboxWorld, goals: GoalSettings, repository: ObserverRepository, turns: int):
    evaluator = GoalProgressEvaluator()

    print(f"\n{'='*60}")
    print(f"Sandbox finished at week {store.week} ({turns} turns)")
    print(f"{'='*60}")
    print(f"{'Player':<14} {'Wealth':>8} {'Happy':>6} {'Edu':>6} {'Career':>7} {'Overall':>8}")
    print(f"{'-'*14} {'-'*8} {'-'*6} {'-'*6} {'-'*7} {'-'*8}")
    for player in store.get_players():
        progress = evaluator.evaluate(player, goals)
        status = " 💀" if player.is_game_over else ""
        print(f"{player.name:<14} {progress.wealth.progress:>8.2f} {progress.happiness.progress:>6.2f} "
              f"{progress.education.progress:>6.2f} {progress.career.progress:>7.2f} "
              f"{progress.overall:>8.2f}{status}")

    if repository.profiles:
        print(f"\n## Rival profiles (as seen by the AI)")
        for player_id, profile in repository.profiles.items():
            print(f"  {player_id}: {profile}")


def main():
    parser = argparse.ArgumentParser(description='Run AI opponents headless in the sandbox world')
    parser.add_argument('--weeks', type=int, default=20, help='Weeks to simulate')
    parser.add_argument('--difficulty', choices=['easy', 'medium', 'hard'], default='medium',
                        help='AI difficulty')
    parser.add_argument('--rival-difficulty', choices=['easy', 'medium', 'hard'], default='easy',
                        help='Difficulty used to drive the stand-in humans')
    parser.add_argument('--rivals', type=int, default=1, help='Number of stand-in humans')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log every step')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    goals = GoalSettings()
    store, agents, repository = build_game(args.difficulty, args.rival_difficulty,
                                           args.rivals, args.seed, goals)
    turns = play(store, agents, args.weeks)
    print_summary(store, goals, repository, turns)

    # One decision log file per simulated game
    decision_logger.rotate_decision_log(f"{args.difficulty}_vs_{args.rivals}")


if __name__ == '__main__':
    main()
