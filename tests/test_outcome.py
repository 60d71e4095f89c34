from datetime import datetime

import pytest

from math_quest.models import AggregateState
from math_quest.outcome import evaluate, stars_for
from math_quest.session import Answer
from math_quest.stages import MAX_STAGE, REVIEW_STAGE


def batch(correct, total):
    return [i < correct for i in range(total)]


@pytest.mark.parametrize("correct,stars", [
    (10, 3), (9, 3), (8, 2), (6, 2), (5, 1), (3, 1), (2, 0), (0, 0),
])
def test_star_thresholds(correct, stars):
    assert stars_for(correct, 10) == stars


def test_empty_batch_is_zero_stars():
    assert stars_for(0, 0) == 0


def test_nine_of_ten_is_three_stars(now):
    result = evaluate(batch(9, 10), 1, AggregateState(), now)
    assert result.stars == 3
    assert result.unlock_next
    assert result.state.current_stage == 2
    assert result.state.stage_stars == {1: 3}
    assert result.correct_count == 9
    assert result.total == 10
    assert result.score == 90


def test_six_of_ten_is_two_stars(now):
    assert evaluate(batch(6, 10), 1, AggregateState(), now).stars == 2


def test_replaying_old_stage_does_not_unlock(now):
    state = AggregateState(current_stage=5, stage_stars={2: 1})
    result = evaluate(batch(10, 10), 2, state, now)
    assert not result.unlock_next
    assert result.state.current_stage == 5
    assert result.state.stage_stars[2] == 3


def test_stars_never_regress(now):
    state = AggregateState(current_stage=5, stage_stars={2: 3})
    result = evaluate(batch(4, 10), 2, state, now)
    assert result.stars == 1
    assert result.state.stage_stars[2] == 3


def test_zero_stars_keeps_frontier(now):
    state = AggregateState(current_stage=3)
    result = evaluate(batch(1, 10), 3, state, now)
    assert result.stars == 0
    assert not result.unlock_next
    assert result.state.current_stage == 3
    assert 3 not in result.state.stage_stars


def test_last_stage_does_not_unlock_beyond_max(now):
    state = AggregateState(current_stage=MAX_STAGE)
    result = evaluate(batch(10, 10), MAX_STAGE, state, now)
    assert result.stars == 3
    assert not result.unlock_next
    assert result.state.current_stage == MAX_STAGE


def test_stage_history_recorded(now):
    result = evaluate(batch(7, 10), 1, AggregateState(), now)
    record = result.state.stage_history[-1]
    assert record.stage == 1
    assert record.stars == 2
    assert record.score == 70
    assert record.correct_count == 7
    assert record.timestamp == now


def test_review_mode_bypasses_progression(now):
    state = AggregateState(current_stage=4)
    result = evaluate(batch(10, 10), REVIEW_STAGE, state, now)
    assert result.stars == 0
    assert not result.unlock_next
    assert result.state is state
    assert result.correct_count == 10


def test_accepts_answer_objects(now):
    answers = [Answer("a", True, 7), Answer("b", False, 3), Answer("c", True, 5)]
    result = evaluate(answers, 1, AggregateState(), now)
    assert result.correct_count == 2
    assert result.stars == 2
