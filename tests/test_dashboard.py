from datetime import timedelta

from math_quest.dashboard import (
    get_accuracy_color, get_accuracy_label, get_operator_scores, get_study_stats,
    get_weak_operators, sorted_mistakes,
)
from math_quest.models import AggregateState, MistakeRecord, Operator, OperatorStats, Question


def test_accuracy_label():
    assert get_accuracy_label(95) == "SUPERSTAR"
    assert get_accuracy_label(80) == "GREAT"
    assert get_accuracy_label(55) == "KEEP GOING"
    assert get_accuracy_label(10) == "NEEDS PRACTICE"


def test_accuracy_color():
    assert get_accuracy_color(95) == "green"
    assert get_accuracy_color(10) == "red"


def test_operator_scores():
    scores = get_operator_scores(AggregateState())
    assert [s["operator"] for s in scores] == [Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY, Operator.DIVIDE]
    assert all(s["score"] == 0.0 for s in scores)


def test_operator_score_values():
    stats = dict(AggregateState().operator_stats)
    stats[Operator.MULTIPLY] = OperatorStats(attempts=4, correct=3, total_time_ms=10000)
    scores = {s["operator"]: s for s in get_operator_scores(AggregateState(operator_stats=stats))}
    assert scores[Operator.MULTIPLY]["score"] == 75.0
    assert scores[Operator.MULTIPLY]["avg_seconds"] == 2.5


def test_weak_operators_need_enough_attempts():
    stats = dict(AggregateState().operator_stats)
    stats[Operator.DIVIDE] = OperatorStats(attempts=10, correct=4)
    stats[Operator.SUBTRACT] = OperatorStats(attempts=10, correct=6)
    stats[Operator.ADD] = OperatorStats(attempts=2, correct=0)
    weak = get_weak_operators(AggregateState(operator_stats=stats))
    assert [w["operator"] for w in weak] == [Operator.DIVIDE, Operator.SUBTRACT]


def test_study_stats(now):
    q = Question(id="q", operand1=3, operand2=4, operator=Operator.ADD, answer=7)
    due = MistakeRecord(question=q, user_answer=8, timestamp=now, next_review_time=now - timedelta(minutes=1))
    state = AggregateState(
        xp=50, total_questions=4, correct_answers=3, stage_stars={1: 3, 2: 2},
        mistakes=(due,), daily_activity={now.date().isoformat(): 4},
    )
    stats = get_study_stats(state, now)
    assert stats["xp_progress"] == 50.0
    assert stats["next_level_xp"] == 100
    assert stats["accuracy"] == 75.0
    assert stats["total_stars"] == 5
    assert stats["mistakes_due"] == 1
    assert stats["today"] == 4


def test_sorted_mistakes_due_first(now):
    def rec(a, offset):
        q = Question(id=str(a), operand1=a, operand2=1, operator=Operator.ADD, answer=a + 1)
        return MistakeRecord(question=q, user_answer=0, timestamp=now, next_review_time=now + offset)

    later, due = rec(1, timedelta(hours=1)), rec(2, -timedelta(minutes=1))
    assert sorted_mistakes(AggregateState(mistakes=(later, due)), now) == [due, later]
