"""
Budget Module

Plan-derived daily budgets, burn tier classification and the persisted
budget configuration.

Public API:
    - BudgetConfig: Persisted budget configuration (plan + overrides)
    - PlanTier: Subscription plan tiers with monthly prices
    - BurnTier: cold / warm / hot classification
    - classify(): Map a cost onto a burn tier
    - describe_burn(): Tier, ratio and message for a cost
    - ConfigStore: JSON load/save with needs-setup tracking

Usage:
    >>> from burnwatch.budget import BudgetConfig, PlanTier, classify
    >>>
    >>> config = BudgetConfig(plan=PlanTier.MAX5X, daily_target=40.0)
    >>> config.effective_daily_budget
    3.33
    >>> classify(12.0, config.effective_daily_budget, config.effective_daily_target)
    <BurnTier.WARM: 'warm'>
"""

from .config import FALLBACK_DAILY_BUDGET, FALLBACK_DAILY_TARGET, BudgetConfig, PlanTier
from .store import DEFAULT_CONFIG_PATH, ConfigStore
from .tiers import BurnTier, burn_message, burn_ratio, classify, describe_burn

__all__ = [
    # Configuration
    "BudgetConfig",
    "PlanTier",
    "FALLBACK_DAILY_BUDGET",
    "FALLBACK_DAILY_TARGET",
    # Classification
    "BurnTier",
    "classify",
    "burn_ratio",
    "burn_message",
    "describe_burn",
    # Persistence
    "ConfigStore",
    "DEFAULT_CONFIG_PATH",
]
