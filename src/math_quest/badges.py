"""Badge definitions and unlock evaluation."""
from dataclasses import dataclass
from typing import Callable

from math_quest.models import ALL_OPERATORS, AggregateState

QUESTION_MILESTONES = [
    1, 10, 20, 50, 80, 100, 150, 200, 300, 400, 500, 600, 700, 800, 900, 1000,
    1200, 1500, 2000, 2500, 3000, 4000, 5000, 6000, 7000, 8000, 9000, 10000,
]
OPERATOR_MILESTONES = [10, 50, 100, 200, 500, 1000]
OPERATOR_TIERS = ["Rookie", "Skilled", "Expert", "Master", "Champion", "Legend"]
OPERATOR_NAMES = {"ADD": "Addition", "SUBTRACT": "Subtraction", "MULTIPLY": "Multiplication", "DIVIDE": "Division"}


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    category: str
    predicate: Callable[[AggregateState], bool]


def evaluate(state: AggregateState, catalog) -> list[str]:
    """Ids of badges whose predicate holds and that the player doesn't have yet."""
    earned = set(state.badges)
    new_ids = []
    for badge in catalog:
        if badge.id in earned or badge.id in new_ids:
            continue
        if badge.predicate(state):
            new_ids.append(badge.id)
    return new_ids


def _level_badges() -> list[Badge]:
    return [
        Badge(f"level_{i}", f"Level {i}", f"Reach level {i}", "level",
              lambda s, i=i: s.level >= i)
        for i in range(1, 101)
    ]


def _total_badges() -> list[Badge]:
    return [
        Badge(f"total_{n}", f"Problem Solver {n}", f"Answer {n} questions correctly", "total",
              lambda s, n=n: s.correct_answers >= n)
        for n in QUESTION_MILESTONES
    ]


def _streak_badges() -> list[Badge]:
    return [
        Badge(f"streak_{n}", f"Focus Master {n}", f"Get {n} answers right in a row", "streak",
              lambda s, n=n: s.max_streak >= n)
        for n in range(5, 101, 5)
    ]


def _operator_badges() -> list[Badge]:
    badges = []
    for op in ALL_OPERATORS:
        name = OPERATOR_NAMES[op.name]
        for n, tier in zip(OPERATOR_MILESTONES, OPERATOR_TIERS):
            badges.append(Badge(
                f"op_{op.name.lower()}_{n}",
                f"{name} {tier}",
                f"Answer {n} {name.lower()} questions correctly",
                "operator",
                lambda s, op=op, n=n: s.stats_for(op).correct >= n,
            ))
    return badges


def _boss_badges() -> list[Badge]:
    return [
        Badge(f"boss_{i}", f"Dragon Slayer {i}", f"Defeat {i} bosses", "boss",
              lambda s, i=i: s.bosses_defeated >= i)
        for i in range(1, 21)
    ]


def default_catalog() -> list[Badge]:
    return _level_badges() + _total_badges() + _streak_badges() + _operator_badges() + _boss_badges()


DEFAULT_CATALOG = tuple(default_catalog())


def catalog_by_id(catalog=DEFAULT_CATALOG) -> dict:
    return {badge.id: badge for badge in catalog}
