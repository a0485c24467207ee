"""Loyalty rules: points earned on purchases and the status they unlock."""

import math
from pydantic import BaseModel, Field

from config import LOYALTY_POINTS_RATE
from workflow.models import LoyaltyStatus, NextLevelInfo


class LoyaltyLevelConfig(BaseModel):
    """Threshold and reward rate of one loyalty level."""

    threshold: int = Field(ge=0, description="Points needed to reach the level")
    reward_rate: float = Field(ge=0.0, description="Percentage of purchases returned as points")


class LoyaltyLevels(BaseModel):
    """Configurable loyalty ladder: bronze < silver (argent) < gold (or)."""

    bronze: LoyaltyLevelConfig = Field(default_factory=lambda: LoyaltyLevelConfig(threshold=0, reward_rate=0.5))
    silver: LoyaltyLevelConfig = Field(default_factory=lambda: LoyaltyLevelConfig(threshold=500, reward_rate=0.75))
    gold: LoyaltyLevelConfig = Field(default_factory=lambda: LoyaltyLevelConfig(threshold=1000, reward_rate=1.0))


def points_for_purchase(sale_amount: float, rate_percent: float = LOYALTY_POINTS_RATE) -> int:
    """Points earned for a purchase, rounded down.

    Args:
        sale_amount: Purchase amount in FCFA
        rate_percent: Percentage of the amount converted into points

    Returns:
        floor(sale_amount * rate_percent / 100), never negative
    """
    return max(math.floor(sale_amount * (rate_percent / 100)), 0)


def derive_loyalty_status(points: int, levels: LoyaltyLevels | None = None) -> LoyaltyStatus:
    levels = levels or LoyaltyLevels()
    if points >= levels.gold.threshold:
        return "or"
    if points >= levels.silver.threshold:
        return "argent"
    return "bronze"


def next_level_info(
    points: int,
    status: LoyaltyStatus | None = None,
    levels: LoyaltyLevels | None = None,
) -> NextLevelInfo:
    """Distance of a client to the next loyalty level.

    Args:
        points: Current loyalty points
        status: Stored status; "or" is treated as the top level regardless of points
        levels: Loyalty ladder (defaults to LoyaltyLevels())

    Returns:
        NextLevelInfo with the next level, missing points and progress in percent
    """
    levels = levels or LoyaltyLevels()
    gold, silver = levels.gold.threshold, levels.silver.threshold

    if status == "or" or points >= gold:
        return NextLevelInfo(next_level=None, points_needed=0, progress=100.0)

    if points >= silver:
        return NextLevelInfo(
            next_level="or",
            points_needed=gold - points,
            progress=_progress(points, gold),
        )

    return NextLevelInfo(
        next_level="argent",
        points_needed=silver - points,
        progress=_progress(points, silver),
    )


def _progress(points: int, threshold: int) -> float:
    if threshold <= 0:
        return 100.0
    return min(max(points, 0) / threshold * 100, 100.0)


def loyalty_update_for_purchase(
    client_document: dict,
    sale_amount: float,
    rate_percent: float = LOYALTY_POINTS_RATE,
    levels: LoyaltyLevels | None = None,
) -> dict:
    """Client attributes to write after a purchase.

    Args:
        client_document: Client document with loyaltyPoints / totalSpent (missing means 0)
        sale_amount: Purchase amount in FCFA
        rate_percent: Percentage of the amount converted into points
        levels: Loyalty ladder

    Returns:
        Empty dict when the purchase earns no points, otherwise the new
        loyaltyPoints, loyaltyStatus and totalSpent values
    """
    points_added = points_for_purchase(sale_amount, rate_percent)
    if points_added <= 0:
        return {}

    total_points = (client_document.get("loyaltyPoints") or 0) + points_added
    return {
        "loyaltyPoints": total_points,
        "loyaltyStatus": derive_loyalty_status(total_points, levels),
        "totalSpent": (client_document.get("totalSpent") or 0) + sale_amount,
    }
