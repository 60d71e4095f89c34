"""Progress dashboard statistics and weak-area detection."""
from datetime import datetime

from math_quest.models import ALL_OPERATORS, AggregateState
from math_quest.progress import accuracy, level_threshold, xp_progress
from math_quest.stages import MAX_STAGE


def get_accuracy_label(score: float) -> str:
    if score >= 90:
        return "SUPERSTAR"
    elif score >= 75:
        return "GREAT"
    elif score >= 50:
        return "KEEP GOING"
    return "NEEDS PRACTICE"


def get_accuracy_color(score: float) -> str:
    if score >= 90:
        return "green"
    elif score >= 75:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def get_operator_scores(state: AggregateState) -> list[dict]:
    results = []
    for op in ALL_OPERATORS:
        s = state.stats_for(op)
        score = round(s.correct / s.attempts * 100, 1) if s.attempts else 0.0
        results.append({
            "operator": op,
            "attempts": s.attempts,
            "correct": s.correct,
            "score": score,
            "avg_seconds": round(s.total_time_ms / s.attempts / 1000, 1) if s.attempts else 0.0,
            "label": get_accuracy_label(score),
        })
    return results


def get_weak_operators(state: AggregateState, threshold: float = 70.0, min_attempts: int = 5) -> list[dict]:
    """Operators practiced enough to judge whose accuracy is below threshold, worst first."""
    weak = [
        s for s in get_operator_scores(state)
        if s["attempts"] >= min_attempts and s["score"] < threshold
    ]
    return sorted(weak, key=lambda s: s["score"])


def get_study_stats(state: AggregateState, now: datetime) -> dict:
    return {
        "level": state.level,
        "xp": state.xp,
        "next_level_xp": level_threshold(state.level),
        "xp_progress": round(xp_progress(state.xp, state.level), 1),
        "points": state.points,
        "current_stage": state.current_stage,
        "max_stage": MAX_STAGE,
        "total_stars": sum(state.stage_stars.values()),
        "questions_answered": state.total_questions,
        "accuracy": accuracy(state),
        "max_streak": state.max_streak,
        "badges": len(state.badges),
        "mistakes": len(state.mistakes),
        "mistakes_due": sum(1 for m in state.mistakes if m.is_due(now)),
        "bosses_defeated": state.bosses_defeated,
        "today": state.daily_activity.get(now.date().isoformat(), 0),
        "active_days": len(state.daily_activity),
    }


def sorted_mistakes(state: AggregateState, now: datetime) -> list:
    """Mistakes for display: overdue first, then by review time."""
    return sorted(state.mistakes, key=lambda m: (not m.is_due(now), m.next_review_time))
