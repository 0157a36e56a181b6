"""
Burnwatch - Subscription Burn Monitor

Tracks daily AI coding spend from ccusage reports against a
subscription-derived budget.
"""

__version__ = "1.0.0"

from .budget import BudgetConfig, BurnTier, ConfigStore, PlanTier, classify
from .config import MonitorSettings
from .usage import Failed, Loaded, Loading, SeriesPoint, UsageMonitor

__all__ = [
    "__version__",
    "UsageMonitor",
    "MonitorSettings",
    "BudgetConfig",
    "PlanTier",
    "BurnTier",
    "classify",
    "ConfigStore",
    "SeriesPoint",
    "Loading",
    "Loaded",
    "Failed",
]
