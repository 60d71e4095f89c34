"""Spaced repetition scheduling for missed facts."""
from dataclasses import replace
from datetime import datetime, timedelta

from math_quest.models import MistakeRecord

MASTERY_THRESHOLD = 5
RETRY_DELAY = timedelta(minutes=1)
# Indexed by proficiency - 1
INTERVALS = (
    timedelta(minutes=5),
    timedelta(minutes=30),
    timedelta(hours=4),
    timedelta(hours=24),
    timedelta(days=3),
)


class _Mastered:
    def __repr__(self) -> str:
        return "MASTERED"


MASTERED = _Mastered()


def interval_for(proficiency: int) -> timedelta:
    index = min(max(proficiency, 1), len(INTERVALS)) - 1
    return INTERVALS[index]


def advance(record: MistakeRecord, was_correct: bool, now: datetime):
    """Calculate the next state of a mistake record.

    Args:
        record: The record being reviewed.
        was_correct: Whether the learner answered the fact correctly.
        now: Current time, supplied by the caller.

    Returns:
        The updated record, or ``MASTERED`` when the record should be removed.
    """
    if not was_correct:
        # Any miss restarts the ladder
        return replace(
            record,
            proficiency=0,
            next_review_time=now + RETRY_DELAY,
            review_count=record.review_count + 1,
            timestamp=now,
        )

    proficiency = record.proficiency + 1
    if proficiency >= MASTERY_THRESHOLD:
        return MASTERED

    return replace(
        record,
        proficiency=proficiency,
        next_review_time=now + interval_for(proficiency),
        review_count=record.review_count + 1,
        timestamp=now,
    )


def new_record(question, user_answer: int, now: datetime) -> MistakeRecord:
    return MistakeRecord(
        question=question,
        user_answer=user_answer,
        timestamp=now,
        next_review_time=now + RETRY_DELAY,
    )
