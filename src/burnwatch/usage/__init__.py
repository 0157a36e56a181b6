"""
Usage Module

Acquires usage reports from ccusage and turns them into published state.

Public API:
    - UsageMonitor: Fetch orchestration and observable state
    - ExecutableLocator: npx discovery across Node.js installs
    - ProcessInvoker: Async subprocess runner with augmented PATH
    - decode_*/parse_*: Report decoding (strict / best-effort)
    - normalize_*: Report rows to chart series
    - SeriesPoint, ModelBreakdown, Loading, Loaded, Failed: Published types

Usage:
    >>> from burnwatch.config import MonitorSettings
    >>> from burnwatch.usage import UsageMonitor, Loaded
    >>>
    >>> monitor = UsageMonitor(MonitorSettings(refresh_interval=300))
    >>> unsubscribe = monitor.subscribe(lambda field, m: print(field, m.state))
    >>> monitor.start()          # from inside a running event loop
    >>> ...
    >>> await monitor.stop()
"""

from .invoker import InvocationResult, ProcessInvoker, build_search_path
from .locator import ExecutableLocator, version_sort_key
from .models import (
    ErrorKind,
    Failed,
    Loaded,
    Loading,
    ModelBreakdown,
    MonitorState,
    SeriesPoint,
    UsageError,
    state_to_dict,
)
from .monitor import HISTORY_PERIODS, UsageMonitor
from .parser import (
    DailyReport,
    MonthlyReport,
    WeeklyReport,
    decode_daily,
    decode_monthly,
    decode_weekly,
    parse_daily,
    parse_monthly,
    parse_weekly,
)
from .series import normalize_daily, normalize_monthly, normalize_weekly, window

__all__ = [
    # Engine
    "UsageMonitor",
    "HISTORY_PERIODS",
    # Acquisition
    "ExecutableLocator",
    "version_sort_key",
    "ProcessInvoker",
    "InvocationResult",
    "build_search_path",
    # Parsing
    "DailyReport",
    "WeeklyReport",
    "MonthlyReport",
    "decode_daily",
    "decode_weekly",
    "decode_monthly",
    "parse_daily",
    "parse_weekly",
    "parse_monthly",
    # Series
    "normalize_daily",
    "normalize_weekly",
    "normalize_monthly",
    "window",
    # Published types
    "SeriesPoint",
    "ModelBreakdown",
    "MonitorState",
    "Loading",
    "Loaded",
    "Failed",
    "UsageError",
    "ErrorKind",
    "state_to_dict",
]
