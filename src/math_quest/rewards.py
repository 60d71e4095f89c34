"""Rewards catalog and point redemption."""
import json
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path

from loguru import logger

from math_quest.models import AggregateState, Redemption

CONTENT_DIR = Path(__file__).parent / "content"


class InsufficientPointsError(ValueError):
    pass


@dataclass(frozen=True)
class Reward:
    id: str
    name: str
    cost: int
    icon: str = ""


def load_rewards(path: Path | None = None) -> list[Reward]:
    """Load the rewards catalog from rewards.json."""
    data = json.loads((path or CONTENT_DIR / "rewards.json").read_text(encoding="utf-8"))
    return [
        Reward(id=r["id"], name=r["name"], cost=int(r["cost"]), icon=r.get("icon", ""))
        for r in data["rewards"]
    ]


def can_afford(state: AggregateState, reward: Reward) -> bool:
    return state.points >= reward.cost


def redeem(state: AggregateState, reward: Reward, now: datetime) -> AggregateState:
    if not can_afford(state, reward):
        raise InsufficientPointsError(
            f"{reward.name} costs {reward.cost} points, only {state.points} available"
        )
    redemption = Redemption(
        id=uuid.uuid4().hex,
        reward_id=reward.id,
        name=reward.name,
        cost=reward.cost,
        timestamp=now,
    )
    logger.info("Redeemed {} for {} points", reward.name, reward.cost)
    return replace(
        state,
        points=state.points - reward.cost,
        rewards_redeemed=state.rewards_redeemed + (redemption,),
    )
