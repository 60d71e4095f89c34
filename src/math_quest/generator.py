"""Procedural arithmetic question generation.

Every generated question satisfies the invariants of ``Question``: the answer
is a non-negative integer, subtraction never goes below zero and division is
always exact.  Division is built from divisor and quotient rather than by
testing random dividends for divisibility.
"""
import random
import uuid
from dataclasses import replace
from datetime import datetime
from math import isqrt

from loguru import logger

from math_quest.models import DifficultyConfig, MistakeRecord, Operator, Question

DEFAULT_REVIEW_PROBABILITY = 0.4
REVIEW_CANDIDATES = 3
SAFE_RANGE = (0, 10)
# Second factor for times-table practice
TABLE_FACTORS = (2, 10)


def new_question_id() -> str:
    return uuid.uuid4().hex


def due_mistakes(mistakes, now: datetime) -> list:
    """Mistake records whose review time has passed, most urgent first."""
    return sorted((m for m in mistakes if m.is_due(now)), key=lambda m: m.next_review_time)


def reissue(record: MistakeRecord) -> Question:
    """Turn a stored mistake back into a fresh review question."""
    return replace(record.question, id=new_question_id(), is_review=True, is_boss=False)


def generate(
    config: DifficultyConfig,
    due_pool=(),
    *,
    rng=None,
    review_probability: float = DEFAULT_REVIEW_PROBABILITY,
) -> Question:
    rng = rng or random
    if due_pool and rng.random() < review_probability:
        candidates = sorted(due_pool, key=lambda m: m.next_review_time)[:REVIEW_CANDIDATES]
        return reissue(rng.choice(candidates))

    operators = config.operators or (Operator.ADD,)
    operator = rng.choice(list(operators))
    lo, hi = _bounds(config)

    if operator is Operator.ADD:
        a, b = _addition(lo, hi, rng)
    elif operator is Operator.SUBTRACT:
        a, b = _subtraction(lo, hi, rng)
    elif operator is Operator.MULTIPLY:
        a, b = _multiplication(hi, _factor_range(config.multiplication_range), rng)
    else:
        a, b = _division(hi, _factor_range(config.division_range), rng)

    return Question(
        id=new_question_id(),
        operand1=a,
        operand2=b,
        operator=operator,
        answer=operator.apply(a, b),
    )


def _bounds(config: DifficultyConfig) -> tuple:
    lo, hi = max(0, config.min), config.max
    if hi <= lo:
        logger.debug("Degenerate range [{}, {}], using {}", config.min, config.max, SAFE_RANGE)
        return SAFE_RANGE
    return lo, hi


def _factor_range(bounds):
    if not bounds:
        return None
    lo, hi = sorted(bounds)
    return max(1, lo), max(1, hi)


def _addition(lo: int, hi: int, rng) -> tuple:
    a = rng.randrange(lo, hi)
    # 0 + n is too easy to show often
    if a == 0 and rng.random() > 0.1:
        a = rng.randint(1, min(10, hi))
    b = rng.randint(0, hi - a)
    return a, b


def _subtraction(lo: int, hi: int, rng) -> tuple:
    a = rng.randrange(lo, hi)
    quarter = hi // 4
    if a < quarter:
        a = rng.randrange(quarter, hi)
    b = rng.randint(0, a)
    return a, b


def _multiplication(hi: int, table, rng) -> tuple:
    if table:
        return rng.randint(*table), rng.randint(*TABLE_FACTORS)
    limit = max(2, isqrt(hi))
    return rng.randint(2, limit), rng.randint(2, limit)


def _division(hi: int, divisors, rng) -> tuple:
    if divisors:
        divisor, quotient = rng.randint(*divisors), rng.randint(*TABLE_FACTORS)
    else:
        limit = max(2, isqrt(hi))
        divisor, quotient = rng.randint(2, limit), rng.randint(2, limit)
    return divisor * quotient, divisor
