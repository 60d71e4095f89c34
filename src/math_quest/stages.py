"""Stage number to difficulty lookup."""
from math_quest.models import DifficultyConfig, Operator

MAX_STAGE = 100
REVIEW_STAGE = -1

ADD_SUB = (Operator.ADD, Operator.SUBTRACT)
ALL_FOUR = (Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY, Operator.DIVIDE)

# (last stage of tier, config), checked in order
TIERS = [
    (5, DifficultyConfig(0, 10, ADD_SUB, "Add and subtract within 10")),
    (10, DifficultyConfig(0, 20, ADD_SUB, "Add and subtract within 20")),
    (15, DifficultyConfig(5, 50, ADD_SUB, "Add and subtract within 50")),
    (20, DifficultyConfig(10, 100, ADD_SUB, "Add and subtract within 100")),
    (25, DifficultyConfig(1, 100, (Operator.MULTIPLY,), "Times tables 2-5",
                          multiplication_range=(2, 5))),
    (30, DifficultyConfig(1, 100, (Operator.MULTIPLY,), "Times tables 6-9",
                          multiplication_range=(6, 9))),
    (35, DifficultyConfig(10, 100, (Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY),
                          "Mixed practice within 100", multiplication_range=(2, 9))),
    (40, DifficultyConfig(1, 100, (Operator.DIVIDE,), "Division basics",
                          division_range=(2, 9))),
    (50, DifficultyConfig(10, 100, ALL_FOUR, "All four operations within 100",
                          multiplication_range=(2, 12), division_range=(2, 10))),
    (70, DifficultyConfig(50, 500, ADD_SUB, "Big numbers within 500")),
]
FINAL_TIER = DifficultyConfig(100, 1000, ALL_FOUR, "The quest: everything within 1000")


def config_for(stage: int) -> DifficultyConfig:
    """Return the difficulty configuration for a stage.

    Total over all integers: anything below the first tier (including the
    review sentinel) gets the easiest config, anything past the last tier
    gets the final one.
    """
    for last_stage, config in TIERS:
        if stage <= last_stage:
            return config
    return FINAL_TIER


def is_boss_stage(stage: int) -> bool:
    return stage > 0 and stage % 5 == 0


def is_unlocked(stage: int, current_stage: int) -> bool:
    return 1 <= stage <= min(current_stage, MAX_STAGE)
