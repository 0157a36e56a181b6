"""
Burnwatch - Tool Input Validation Schemas

Pydantic models for validating all MCP tool inputs.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from ..budget.config import PlanTier


class CheckStatusInput(BaseModel):
    """Input validation for check_status tool."""

    include_details: bool = Field(
        default=False,
        description="Include metrics and settings details",
    )


class GetTodayUsageInput(BaseModel):
    """Input validation for get_today_usage tool (no parameters)."""

    pass


class RefreshUsageInput(BaseModel):
    """Input validation for refresh_usage tool."""

    wait: bool = Field(
        default=False,
        description="Wait for the triggered fetch cycle to finish before returning",
    )


class GetUsageHistoryInput(BaseModel):
    """Input validation for get_usage_history tool."""

    period: Literal["daily", "weekly", "monthly"] = Field(
        default="daily",
        description="History series: daily, weekly, or monthly",
    )
    days: int | None = Field(
        default=None,
        ge=1,
        le=30,
        description="Trailing days of the daily series (1-30, daily only)",
    )

    @model_validator(mode="after")
    def days_only_for_daily(self) -> "GetUsageHistoryInput":
        """Reject a day window for weekly/monthly series."""
        if self.days is not None and self.period != "daily":
            raise ValueError("days is only supported for the daily period")
        return self


class GetBudgetConfigInput(BaseModel):
    """Input validation for get_budget_config tool (no parameters)."""

    pass


class SaveBudgetConfigInput(BaseModel):
    """Input validation for save_budget_config tool."""

    plan: PlanTier = Field(..., description="Subscription plan: pro, max5x, max20x, or custom")
    custom_daily_budget: float | None = Field(
        default=None,
        ge=0.0,
        le=100_000.0,
        description="Daily budget in USD (custom plan only)",
    )
    daily_target: float | None = Field(
        default=None,
        ge=0.0,
        le=100_000.0,
        description="Daily spend target in USD",
    )
