"""Data classes for the practice engine's domain model."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Operator(str, Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"

    def apply(self, a: int, b: int) -> int:
        if self is Operator.ADD:
            return a + b
        if self is Operator.SUBTRACT:
            return a - b
        if self is Operator.MULTIPLY:
            return a * b
        return a // b


ALL_OPERATORS = (Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY, Operator.DIVIDE)


@dataclass(frozen=True)
class Question:
    id: str
    operand1: int
    operand2: int
    operator: Operator
    answer: int
    is_review: bool = False
    is_boss: bool = False
    text: Optional[str] = None

    @property
    def key(self) -> tuple:
        """Content identity of the fact, independent of the instance id."""
        return (self.operand1, self.operand2, self.operator)

    @property
    def prompt(self) -> str:
        if self.text:
            return self.text
        return f"{self.operand1} {self.operator.value} {self.operand2} = ?"


@dataclass(frozen=True)
class MistakeRecord:
    question: Question
    user_answer: int
    timestamp: datetime
    next_review_time: datetime
    review_count: int = 0
    proficiency: int = 0

    @property
    def key(self) -> tuple:
        return self.question.key

    def is_due(self, now: datetime) -> bool:
        return self.next_review_time <= now


@dataclass(frozen=True)
class DifficultyConfig:
    min: int
    max: int
    operators: tuple
    description: str = ""
    multiplication_range: Optional[tuple] = None
    division_range: Optional[tuple] = None


@dataclass(frozen=True)
class OperatorStats:
    attempts: int = 0
    correct: int = 0
    total_time_ms: int = 0


@dataclass(frozen=True)
class StageRecord:
    stage: int
    timestamp: datetime
    score: int
    stars: int
    total_questions: int
    correct_count: int


@dataclass(frozen=True)
class Redemption:
    id: str
    reward_id: str
    name: str
    cost: int
    timestamp: datetime


def empty_operator_stats() -> dict:
    return {op: OperatorStats() for op in ALL_OPERATORS}


@dataclass(frozen=True)
class AggregateState:
    level: int = 1
    xp: int = 0
    points: int = 0
    current_stage: int = 1
    stage_stars: dict = field(default_factory=dict)
    total_questions: int = 0
    correct_answers: int = 0
    current_streak: int = 0
    max_streak: int = 0
    badges: tuple = ()
    mistakes: tuple = ()
    daily_activity: dict = field(default_factory=dict)
    operator_stats: dict = field(default_factory=empty_operator_stats)
    bosses_defeated: int = 0
    stage_history: tuple = ()
    rewards_redeemed: tuple = ()

    def stars_for(self, stage: int) -> int:
        return self.stage_stars.get(stage, 0)

    def stats_for(self, operator: Operator) -> OperatorStats:
        return self.operator_stats.get(operator, OperatorStats())
