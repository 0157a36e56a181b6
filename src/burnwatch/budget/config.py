"""
Budget Configuration

Defines the subscription plan tiers and the budget configuration that the
setup flow persists. Budget and target figures are derived from the plan
selection or a custom override.

Persisted JSON shape:
    {"plan": "pro"|"max5x"|"max20x"|"custom",
     "customDailyBudget": number|null,
     "dailyTarget": number|null}
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

FALLBACK_DAILY_BUDGET = 5.0
FALLBACK_DAILY_TARGET = 50.0
DAYS_PER_MONTH = 30


class PlanTier(str, Enum):
    """Subscription plan tiers."""

    PRO = "pro"
    MAX5X = "max5x"
    MAX20X = "max20x"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _PLAN_LABELS[self]

    @property
    def monthly_price(self) -> float | None:
        """Monthly subscription price in USD (None for custom)."""
        return _PLAN_PRICES.get(self)

    @property
    def default_daily_budget(self) -> float | None:
        """Monthly price spread over 30 days, rounded half-up to cents."""
        price = self.monthly_price
        if price is None:
            return None
        daily = Decimal(str(price)) / Decimal(DAYS_PER_MONTH)
        return float(daily.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


_PLAN_LABELS = {
    PlanTier.PRO: "Pro",
    PlanTier.MAX5X: "Max 5x",
    PlanTier.MAX20X: "Max 20x",
    PlanTier.CUSTOM: "Custom",
}

_PLAN_PRICES = {
    PlanTier.PRO: 20.0,
    PlanTier.MAX5X: 100.0,
    PlanTier.MAX20X: 200.0,
}


class BudgetConfig(BaseModel):
    """Budget configuration produced by the setup flow."""

    plan: PlanTier = Field(description="Selected subscription plan")
    custom_daily_budget: float | None = Field(
        default=None,
        ge=0.0,
        alias="customDailyBudget",
        description="Daily budget in USD, only used when plan is custom",
    )
    daily_target: float | None = Field(
        default=None,
        ge=0.0,
        alias="dailyTarget",
        description="Daily spend target in USD (None = default target)",
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def effective_daily_budget(self) -> float:
        if self.plan == PlanTier.CUSTOM:
            if self.custom_daily_budget is not None:
                return self.custom_daily_budget
            return FALLBACK_DAILY_BUDGET

        default = self.plan.default_daily_budget
        return default if default is not None else FALLBACK_DAILY_BUDGET

    @property
    def effective_daily_target(self) -> float:
        return self.daily_target if self.daily_target is not None else FALLBACK_DAILY_TARGET

    @property
    def monthly_budget(self) -> float:
        return self.effective_daily_budget * DAYS_PER_MONTH

    def to_json(self) -> str:
        """Serialize using the persisted key names."""
        return self.model_dump_json(by_alias=True, indent=2)
