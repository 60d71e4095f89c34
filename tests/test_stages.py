from math_quest.models import Operator
from math_quest.stages import MAX_STAGE, REVIEW_STAGE, config_for, is_boss_stage, is_unlocked


def test_first_tier():
    c = config_for(1)
    assert (c.min, c.max) == (0, 10)
    assert set(c.operators) == {Operator.ADD, Operator.SUBTRACT}


def test_tier_boundaries():
    assert config_for(5).max == 10
    assert config_for(6).max == 20
    assert config_for(21).operators == (Operator.MULTIPLY,)
    assert config_for(21).multiplication_range == (2, 5)
    assert config_for(26).multiplication_range == (6, 9)
    assert config_for(36).operators == (Operator.DIVIDE,)
    assert config_for(36).division_range == (2, 9)
    assert len(config_for(41).operators) == 4
    assert config_for(51).max == 500
    assert config_for(71).max == 1000


def test_total_function_out_of_range():
    assert config_for(REVIEW_STAGE) == config_for(1)
    assert config_for(0) == config_for(1)
    assert config_for(MAX_STAGE) == config_for(1000)


def test_every_stage_has_operators_and_valid_range():
    for stage in range(1, MAX_STAGE + 1):
        c = config_for(stage)
        assert c.operators
        assert c.max > c.min >= 0


def test_range_never_shrinks_across_add_sub_tiers():
    maxes = [config_for(s).max for s in range(1, 21)]
    assert maxes == sorted(maxes)


def test_boss_stages():
    assert is_boss_stage(5)
    assert is_boss_stage(100)
    assert not is_boss_stage(4)
    assert not is_boss_stage(REVIEW_STAGE)
    assert [s for s in range(1, 21) if is_boss_stage(s)] == [5, 10, 15, 20]


def test_is_unlocked():
    assert is_unlocked(1, 1)
    assert is_unlocked(3, 5)
    assert not is_unlocked(6, 5)
    assert not is_unlocked(0, 5)
    assert not is_unlocked(101, 101)
