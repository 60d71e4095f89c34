"""Plain-dict snapshots of the player state.

Loading is a forward-compatible merge: fields missing from an older snapshot
take their defaults and unknown keys are ignored.
"""
from datetime import datetime

from math_quest.models import (
    ALL_OPERATORS, AggregateState, MistakeRecord, Operator, OperatorStats, Question,
    Redemption, StageRecord,
)


def _question_to_dict(q: Question) -> dict:
    return {
        "id": q.id,
        "operand1": q.operand1,
        "operand2": q.operand2,
        "operator": q.operator.value,
        "answer": q.answer,
        "is_review": q.is_review,
        "is_boss": q.is_boss,
        "text": q.text,
    }


def _question_from_dict(d: dict) -> Question:
    return Question(
        id=d["id"],
        operand1=int(d["operand1"]),
        operand2=int(d["operand2"]),
        operator=Operator(d["operator"]),
        answer=int(d["answer"]),
        is_review=bool(d.get("is_review", False)),
        is_boss=bool(d.get("is_boss", False)),
        text=d.get("text"),
    )


def _mistake_to_dict(m: MistakeRecord) -> dict:
    return {
        "question": _question_to_dict(m.question),
        "user_answer": m.user_answer,
        "timestamp": m.timestamp.isoformat(),
        "next_review_time": m.next_review_time.isoformat(),
        "review_count": m.review_count,
        "proficiency": m.proficiency,
    }


def _mistake_from_dict(d: dict) -> MistakeRecord:
    raw = d.get("timestamp") or d.get("next_review_time")
    timestamp = datetime.fromisoformat(raw) if raw else datetime.now()
    return MistakeRecord(
        question=_question_from_dict(d["question"]),
        user_answer=int(d.get("user_answer", 0)),
        timestamp=timestamp,
        next_review_time=datetime.fromisoformat(d["next_review_time"]) if d.get("next_review_time") else timestamp,
        review_count=int(d.get("review_count", 0)),
        proficiency=int(d.get("proficiency", 0)),
    )


def _record_to_dict(r: StageRecord) -> dict:
    return {
        "stage": r.stage,
        "timestamp": r.timestamp.isoformat(),
        "score": r.score,
        "stars": r.stars,
        "total_questions": r.total_questions,
        "correct_count": r.correct_count,
    }


def _record_from_dict(d: dict) -> StageRecord:
    return StageRecord(
        stage=int(d["stage"]),
        timestamp=datetime.fromisoformat(d["timestamp"]),
        score=int(d.get("score", 0)),
        stars=int(d.get("stars", 0)),
        total_questions=int(d.get("total_questions", 0)),
        correct_count=int(d.get("correct_count", 0)),
    )


def _redemption_to_dict(r: Redemption) -> dict:
    return {
        "id": r.id,
        "reward_id": r.reward_id,
        "name": r.name,
        "cost": r.cost,
        "timestamp": r.timestamp.isoformat(),
    }


def _redemption_from_dict(d: dict) -> Redemption:
    return Redemption(
        id=d["id"],
        reward_id=d.get("reward_id", ""),
        name=d.get("name", ""),
        cost=int(d.get("cost", 0)),
        timestamp=datetime.fromisoformat(d["timestamp"]),
    )


def state_to_dict(state: AggregateState) -> dict:
    return {
        "level": state.level,
        "xp": state.xp,
        "points": state.points,
        "current_stage": state.current_stage,
        # JSON object keys are strings
        "stage_stars": {str(k): v for k, v in state.stage_stars.items()},
        "total_questions": state.total_questions,
        "correct_answers": state.correct_answers,
        "current_streak": state.current_streak,
        "max_streak": state.max_streak,
        "badges": list(state.badges),
        "mistakes": [_mistake_to_dict(m) for m in state.mistakes],
        "daily_activity": dict(state.daily_activity),
        "operator_stats": {
            op.value: {"attempts": s.attempts, "correct": s.correct, "total_time_ms": s.total_time_ms}
            for op, s in state.operator_stats.items()
        },
        "bosses_defeated": state.bosses_defeated,
        "stage_history": [_record_to_dict(r) for r in state.stage_history],
        "rewards_redeemed": [_redemption_to_dict(r) for r in state.rewards_redeemed],
    }


def state_from_dict(data: dict | None) -> AggregateState:
    """Rebuild a state from a snapshot, filling in defaults for missing fields."""
    data = data or {}
    defaults = AggregateState()

    operator_stats = {op: OperatorStats() for op in ALL_OPERATORS}
    for key, s in (data.get("operator_stats") or {}).items():
        try:
            op = Operator(key)
        except ValueError:
            continue
        operator_stats[op] = OperatorStats(
            attempts=int(s.get("attempts", 0)),
            correct=int(s.get("correct", 0)),
            total_time_ms=int(s.get("total_time_ms", 0)),
        )

    return AggregateState(
        level=int(data.get("level", defaults.level)),
        xp=int(data.get("xp", defaults.xp)),
        points=int(data.get("points", defaults.points)),
        current_stage=int(data.get("current_stage", defaults.current_stage)),
        stage_stars={int(k): int(v) for k, v in (data.get("stage_stars") or {}).items()},
        total_questions=int(data.get("total_questions", 0)),
        correct_answers=int(data.get("correct_answers", 0)),
        current_streak=int(data.get("current_streak", 0)),
        max_streak=int(data.get("max_streak", 0)),
        badges=tuple(data.get("badges") or ()),
        mistakes=tuple(_mistake_from_dict(m) for m in data.get("mistakes") or ()),
        daily_activity={k: int(v) for k, v in (data.get("daily_activity") or {}).items()},
        operator_stats=operator_stats,
        bosses_defeated=int(data.get("bosses_defeated", 0)),
        stage_history=tuple(_record_from_dict(r) for r in data.get("stage_history") or ()),
        rewards_redeemed=tuple(_redemption_from_dict(r) for r in data.get("rewards_redeemed") or ()),
    )
