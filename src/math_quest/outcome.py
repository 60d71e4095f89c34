"""Stage completion: stars, unlocking and stage history."""
from dataclasses import dataclass, replace
from datetime import datetime

from math_quest.models import AggregateState, StageRecord
from math_quest.stages import MAX_STAGE, REVIEW_STAGE

STAR_THRESHOLDS = ((0.9, 3), (0.6, 2), (0.3, 1))


@dataclass(frozen=True)
class StageOutcome:
    stars: int
    unlock_next: bool
    state: AggregateState
    correct_count: int
    total: int

    @property
    def score(self) -> int:
        return _score(self.correct_count, self.total)


def _score(correct_count: int, total: int) -> int:
    return round(correct_count / total * 100) if total else 0


def stars_for(correct_count: int, total: int) -> int:
    if total <= 0:
        return 0
    fraction = correct_count / total
    for threshold, stars in STAR_THRESHOLDS:
        if fraction >= threshold:
            return stars
    return 0


def _is_correct(answer) -> bool:
    if isinstance(answer, bool):
        return answer
    return bool(answer.correct)


def evaluate(answers, stage_number: int, prior_state: AggregateState, now: datetime) -> StageOutcome:
    total = len(answers)
    correct_count = sum(1 for a in answers if _is_correct(a))

    if stage_number == REVIEW_STAGE:
        return StageOutcome(0, False, prior_state, correct_count, total)

    stars = stars_for(correct_count, total)
    unlock_next = (
        stars > 0
        and stage_number == prior_state.current_stage
        and prior_state.current_stage < MAX_STAGE
    )
    record = StageRecord(
        stage=stage_number,
        timestamp=now,
        score=_score(correct_count, total),
        stars=stars,
        total_questions=total,
        correct_count=correct_count,
    )
    stage_stars = dict(prior_state.stage_stars)
    if stars > 0:
        stage_stars[stage_number] = max(prior_state.stars_for(stage_number), stars)

    state = replace(
        prior_state,
        current_stage=prior_state.current_stage + 1 if unlock_next else prior_state.current_stage,
        stage_stars=stage_stars,
        stage_history=prior_state.stage_history + (record,),
    )
    return StageOutcome(stars, unlock_next, state, correct_count, total)
