"""
Burn Tiers

Classifies a day's spend relative to the daily budget and target.

- cold: under the daily subscription cost
- warm: at or over the daily cost, under the target
- hot: at or over the target
"""

from enum import Enum
from typing import Any

from .config import BudgetConfig

MIN_RATIO_DENOMINATOR = 0.01


class BurnTier(str, Enum):
    """Qualitative spend tiers."""

    COLD = "cold"
    WARM = "warm"
    HOT = "hot"

    @property
    def color(self) -> str:
        return _TIER_COLORS[self]


_TIER_COLORS = {
    BurnTier.COLD: "red",
    BurnTier.WARM: "orange",
    BurnTier.HOT: "green",
}


def classify(cost: float, daily_budget: float, daily_target: float) -> BurnTier:
    """
    Map a cost onto a burn tier.

    Boundaries are half-open: a cost equal to the budget is warm, a cost
    equal to the target is hot.
    """
    if cost < daily_budget:
        return BurnTier.COLD
    if cost < daily_target:
        return BurnTier.WARM
    return BurnTier.HOT


def burn_ratio(cost: float, daily_budget: float) -> float:
    """Multiple of the daily subscription cost spent so far."""
    return cost / max(daily_budget, MIN_RATIO_DENOMINATOR)


def burn_message(tier: BurnTier, ratio: float) -> str:
    if tier == BurnTier.COLD:
        return f"Only {ratio:.1f}x your subscription — burn more"
    if tier == BurnTier.WARM:
        return f"{ratio:.0f}x your subscription today"
    return f"{ratio:.0f}x your subscription — cooking"


def describe_burn(cost: float, config: BudgetConfig) -> dict[str, Any]:
    """
    Summarize a cost against a budget configuration.

    Args:
        cost: Today's spend in USD
        config: Active budget configuration

    Returns:
        Dictionary with tier, ratio, message and the budget figures used
    """
    budget = config.effective_daily_budget
    target = config.effective_daily_target
    tier = classify(cost, budget, target)
    ratio = burn_ratio(cost, budget)

    return {
        "cost": cost,
        "tier": tier.value,
        "color": tier.color,
        "ratio": round(ratio, 2),
        "message": burn_message(tier, ratio),
        "daily_budget": budget,
        "daily_target": target,
        "monthly_budget": config.monthly_budget,
        "plan": config.plan.value,
    }
