"""Boss word problems.

The surrounding application may ask an external service for a story problem.
Whatever it got back (or ``None``) is handed to ``boss_question``; anything
unusable is replaced with a problem from the local bank so a boss fight never
waits on the network.
"""
import random
from collections.abc import Mapping

from loguru import logger

from math_quest.generator import new_question_id
from math_quest.models import Operator, Question

FALLBACK_PROBLEMS = [
    {"text": "The dragon guards its gold! It holds 45 coins in its left claw and 38 in its right. "
             "How many coins is the dragon holding?", "answer": 83},
    {"text": "A young wizard has 100 ml of potion. Each invisibility potion needs 15 ml. "
             "After brewing 4 potions, how many ml are left?", "answer": 40},
    {"text": "A spaceship has 3 thrusters. Each thruster burns 12 energy cubes per second. "
             "How many cubes do they burn in 5 seconds?", "answer": 180},
    {"text": "You have 64 magic beans to share equally among 8 elves. How many beans does each elf get?",
     "answer": 8},
    {"text": "A hero finds 5 apple trees. Each tree has 12 red apples and 8 green apples. "
             "How many apples are there in total?", "answer": 100},
]


def _whole_number(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _parse(generated) -> dict | None:
    if not isinstance(generated, Mapping):
        return None
    text = generated.get("text") or generated.get("question")
    answer = _whole_number(generated.get("answer"))
    if not text or answer is None or answer < 0:
        return None
    return {"text": str(text), "answer": answer}


def boss_question(generated=None, *, rng=None) -> Question:
    """Build a boss question from a generated problem, falling back to the local bank."""
    problem = _parse(generated)
    if problem is None:
        if generated is not None:
            logger.warning("Unusable boss problem {!r}, using local bank", generated)
        else:
            logger.info("No generated boss problem, using local bank")
        problem = (rng or random).choice(FALLBACK_PROBLEMS)

    answer = problem["answer"]
    # Placeholder operands keep answer == operand1 + operand2
    return Question(
        id=new_question_id(),
        operand1=answer,
        operand2=0,
        operator=Operator.ADD,
        answer=answer,
        is_boss=True,
        text=problem["text"],
    )
