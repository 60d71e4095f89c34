"""Answer-event reducer for the player's aggregate progression state."""
from dataclasses import replace
from datetime import datetime

from loguru import logger

from math_quest import badges, srs
from math_quest.models import AggregateState, OperatorStats, Question

MAX_LEVEL = 100
LEVEL_THRESHOLDS = [0] + [int(100 * i ** 1.5) for i in range(1, MAX_LEVEL + 1)]

BASE_XP = 10
STREAK_XP_CAP = 10
WRONG_XP = 1
BOSS_XP = 50
CORRECT_POINTS = 1
BOSS_POINTS = 5


def level_threshold(level: int) -> int:
    """XP needed to advance past ``level``."""
    return LEVEL_THRESHOLDS[min(level, MAX_LEVEL)]


def level_for(level: int, xp: int) -> int:
    while level < MAX_LEVEL and xp >= LEVEL_THRESHOLDS[level]:
        level += 1
    return level


def xp_progress(xp: int, level: int) -> float:
    """Percent progress from the current level's floor to the next threshold."""
    floor = LEVEL_THRESHOLDS[min(level, MAX_LEVEL) - 1]
    ceiling = level_threshold(level)
    if level >= MAX_LEVEL or ceiling <= floor:
        return 100.0
    return min(100.0, max(0.0, (xp - floor) / (ceiling - floor) * 100))


def xp_for(correct: bool, streak: int, is_boss: bool) -> int:
    if not correct:
        return WRONG_XP
    gain = BASE_XP + min(streak, STREAK_XP_CAP)
    if is_boss:
        gain += BOSS_XP
    return gain


def points_for(correct: bool, is_boss: bool) -> int:
    if not correct:
        return 0
    return BOSS_POINTS if is_boss else CORRECT_POINTS


def accuracy(state: AggregateState) -> float:
    if state.total_questions == 0:
        return 0.0
    return round(state.correct_answers / state.total_questions * 100, 1)


def _update_mistakes(mistakes: tuple, question: Question, correct: bool, user_answer: int, now: datetime) -> tuple:
    # Matched by content: review instances carry fresh ids
    records = list(mistakes)
    index = next((i for i, m in enumerate(records) if m.key == question.key), None)
    if index is None:
        if not correct:
            records.append(srs.new_record(question, user_answer, now))
        return tuple(records)

    result = srs.advance(records[index], correct, now)
    if result is srs.MASTERED:
        logger.debug("Mastered {}", question.prompt)
        del records[index]
    else:
        records[index] = result
    return tuple(records)


def apply_answer(
    state: AggregateState,
    question: Question,
    correct: bool,
    user_answer: int,
    time_taken_ms: int,
    now: datetime,
    *,
    catalog=None,
) -> AggregateState:
    """Fold one answer event into the state, returning a new state."""
    streak = state.current_streak + 1 if correct else 0
    boss_win = correct and question.is_boss

    xp = state.xp + xp_for(correct, streak, question.is_boss)
    level = level_for(state.level, xp)
    if level > state.level:
        logger.info("Level up: {} -> {}", state.level, level)

    op_stats = state.stats_for(question.operator)
    operator_stats = dict(state.operator_stats)
    operator_stats[question.operator] = OperatorStats(
        attempts=op_stats.attempts + 1,
        correct=op_stats.correct + (1 if correct else 0),
        total_time_ms=op_stats.total_time_ms + time_taken_ms,
    )

    today = now.date().isoformat()
    daily_activity = dict(state.daily_activity)
    daily_activity[today] = daily_activity.get(today, 0) + 1

    updated = replace(
        state,
        total_questions=state.total_questions + 1,
        correct_answers=state.correct_answers + (1 if correct else 0),
        current_streak=streak,
        max_streak=max(state.max_streak, streak),
        xp=xp,
        level=level,
        points=state.points + points_for(correct, question.is_boss),
        bosses_defeated=state.bosses_defeated + (1 if boss_win else 0),
        operator_stats=operator_stats,
        daily_activity=daily_activity,
        mistakes=_update_mistakes(state.mistakes, question, correct, user_answer, now),
    )

    earned = badges.evaluate(updated, badges.DEFAULT_CATALOG if catalog is None else catalog)
    if earned:
        logger.info("Badges earned: {}", ", ".join(earned))
        updated = replace(updated, badges=updated.badges + tuple(earned))
    return updated
