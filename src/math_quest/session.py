"""Stage batches and in-order answer processing for one stage attempt."""
import random
from dataclasses import dataclass
from datetime import datetime

from math_quest import outcome, progress
from math_quest.boss import boss_question
from math_quest.generator import DEFAULT_REVIEW_PROBABILITY, due_mistakes, generate, reissue
from math_quest.models import AggregateState, Question
from math_quest.stages import REVIEW_STAGE, config_for, is_boss_stage

QUESTIONS_PER_STAGE = 10
REVIEW_SLOTS = 3
REVIEW_BATCH_SIZE = 15


class SessionStateError(RuntimeError):
    """An answer event doesn't fit the session it was submitted to."""


def build_stage_batch(
    state: AggregateState,
    stage: int,
    now: datetime,
    *,
    rng=None,
    boss_problem=None,
    size: int = QUESTIONS_PER_STAGE,
    review_slots: int = REVIEW_SLOTS,
    review_probability: float = DEFAULT_REVIEW_PROBABILITY,
) -> list[Question]:
    rng = rng or random
    config = config_for(stage)
    due = due_mistakes(state.mistakes, now)
    questions = [
        generate(
            config,
            due if i < review_slots else (),
            rng=rng,
            review_probability=review_probability,
        )
        for i in range(size)
    ]
    if is_boss_stage(stage):
        questions[-1] = boss_question(boss_problem, rng=rng)
    return questions


def build_boss_challenge(boss_problem=None, *, rng=None) -> list[Question]:
    return [boss_question(boss_problem, rng=rng)]


def build_review_batch(state: AggregateState, now: datetime, size: int = REVIEW_BATCH_SIZE) -> list[Question]:
    """Bootcamp batch: due records first, then the least practiced."""
    ordered = sorted(state.mistakes, key=lambda m: (not m.is_due(now), m.proficiency))
    return [reissue(record) for record in ordered[:size]]


@dataclass(frozen=True)
class Answer:
    question_id: str
    correct: bool
    value: int


@dataclass(frozen=True)
class AnswerResult:
    state: AggregateState
    correct: bool
    question: Question


class StageSession:
    """Answers for a single attempt at a stage, applied strictly in order.

    Not thread-safe; callers submit one answer at a time.
    """

    def __init__(self, stage: int, questions: list[Question]):
        self.stage = stage
        self.questions = list(questions)
        self.answers: list[Answer] = []

    @property
    def is_review(self) -> bool:
        return self.stage == REVIEW_STAGE

    @property
    def index(self) -> int:
        return len(self.answers)

    @property
    def current(self) -> Question | None:
        if self.index < len(self.questions):
            return self.questions[self.index]
        return None

    @property
    def finished(self) -> bool:
        return self.index >= len(self.questions)

    def submit(self, state: AggregateState, user_answer: int, time_taken_ms: int, now: datetime,
               *, catalog=None) -> AnswerResult:
        question = self.current
        if question is None:
            raise SessionStateError(
                f"Answer submitted after the last question ({len(self.questions)}) of stage {self.stage}"
            )
        correct = user_answer == question.answer
        self.answers.append(Answer(question.id, correct, user_answer))
        new_state = progress.apply_answer(
            state, question, correct, user_answer, time_taken_ms, now, catalog=catalog,
        )
        return AnswerResult(new_state, correct, question)

    def finish(self, state: AggregateState, now: datetime) -> outcome.StageOutcome:
        if not self.finished:
            raise SessionStateError(
                f"Stage {self.stage} finished with {self.index} of {len(self.questions)} answers"
            )
        return outcome.evaluate(self.answers, self.stage, state, now)
