from unittest.mock import patch

import pytest

from math_quest.app import (
    SessionExitRequested, cmd_play, cmd_review, cmd_rewards, run_stage, session_int_prompt, session_prompt,
)
from math_quest.config import Settings
from math_quest.db import init_db, load_state, save_state
from math_quest.models import AggregateState, Operator, Question
from math_quest.session import StageSession


@pytest.fixture
def settings(tmp_db):
    init_db(tmp_db)
    return Settings(db_path=tmp_db)


def two_questions():
    return [
        Question(id="a", operand1=3, operand2=4, operator=Operator.ADD, answer=7),
        Question(id="b", operand1=9, operand2=5, operator=Operator.SUBTRACT, answer=4),
    ]


def test_session_exit_requested_is_exception():
    with pytest.raises(SessionExitRequested):
        raise SessionExitRequested()


def test_session_prompt_raises_on_q():
    with patch("math_quest.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("math_quest.app.Prompt.ask", return_value="menu"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("math_quest.app.Prompt.ask", return_value="hello"):
        assert session_prompt("test prompt") == "hello"


def test_session_int_prompt_retries_until_number():
    with patch("math_quest.app.Prompt.ask", side_effect=["seven", " 7 "]):
        assert session_int_prompt("answer") == 7


def test_session_int_prompt_raises_on_q():
    with patch("math_quest.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_int_prompt("answer")


def test_run_stage_exits_on_q_after_saving_first_answer(settings):
    session = StageSession(1, two_questions())
    with patch("math_quest.app.Prompt.ask", side_effect=["8", "q"]):
        with pytest.raises(SessionExitRequested):
            run_stage(settings.db_path, session, settings)
    state = load_state(settings.db_path)
    assert state.total_questions == 1
    assert len(state.mistakes) == 1
    assert state.current_stage == 1


def test_run_stage_completes_and_unlocks(settings):
    session = StageSession(1, two_questions())
    with patch("math_quest.app.Prompt.ask", side_effect=["7", "4"]):
        result = run_stage(settings.db_path, session, settings)
    assert result.stars == 3
    state = load_state(settings.db_path)
    assert state.correct_answers == 2
    assert state.current_stage == 2
    assert state.stage_stars == {1: 3}


def test_cmd_play_rejects_locked_stage(settings):
    with patch("math_quest.app.IntPrompt.ask", return_value=7):
        cmd_play(settings.db_path, settings)
    assert load_state(settings.db_path).total_questions == 0


def test_cmd_review_with_empty_mistake_book(settings):
    with patch("math_quest.app.Prompt.ask") as ask:
        cmd_review(settings.db_path, settings)
    ask.assert_not_called()


def test_cmd_rewards_redeems(settings):
    save_state(settings.db_path, AggregateState(points=50))
    with patch("math_quest.app.Prompt.ask", return_value="1"), \
            patch("math_quest.app.Confirm.ask", return_value=True):
        cmd_rewards(settings.db_path, settings)
    state = load_state(settings.db_path)
    assert state.points == 30
    assert state.rewards_redeemed[0].reward_id == "sticker"


def test_cmd_rewards_not_enough_points(settings):
    save_state(settings.db_path, AggregateState(points=5))
    with patch("math_quest.app.Prompt.ask", return_value="1"), \
            patch("math_quest.app.Confirm.ask", return_value=True):
        cmd_rewards(settings.db_path, settings)
    assert load_state(settings.db_path).points == 5


@pytest.mark.parametrize("choice", ["0", "-1", "99", "two"])
def test_cmd_rewards_rejects_out_of_range_choice(settings, choice):
    save_state(settings.db_path, AggregateState(points=500))
    with patch("math_quest.app.Prompt.ask", return_value=choice), \
            patch("math_quest.app.Confirm.ask", return_value=True) as confirm:
        cmd_rewards(settings.db_path, settings)
    confirm.assert_not_called()
    state = load_state(settings.db_path)
    assert state.points == 500
    assert state.rewards_redeemed == ()
