"""
Burnwatch - Input Validation Module

Provides Pydantic-based validation for all MCP tool inputs.
"""

from .decorators import validate_input
from .tool_schemas import (
    CheckStatusInput,
    GetBudgetConfigInput,
    GetTodayUsageInput,
    GetUsageHistoryInput,
    RefreshUsageInput,
    SaveBudgetConfigInput,
)

__all__ = [
    # Decorator
    "validate_input",
    # Tool input schemas
    "CheckStatusInput",
    "GetTodayUsageInput",
    "RefreshUsageInput",
    "GetUsageHistoryInput",
    "GetBudgetConfigInput",
    "SaveBudgetConfigInput",
]
