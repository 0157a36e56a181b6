"""
Burnwatch - Server

FastMCP server using stdio transport (Model Context Protocol).
Exposes the usage monitor's published state and the budget configuration
as MCP tools.

- Startup loads settings, installs JSON logging, loads the budget config and
  starts the monitor; shutdown stops it.
- Every tool input is validated through a Pydantic schema.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from . import __version__
from .budget import BudgetConfig, ConfigStore, PlanTier, describe_burn
from .config import load_config
from .errors import ErrorCode, make_error_response
from .observability import get_observability, initialize_observability
from .usage import Failed, Loaded, UsageMonitor
from .validation import validate_input
from .validation.tool_schemas import (
    CheckStatusInput,
    GetBudgetConfigInput,
    GetTodayUsageInput,
    GetUsageHistoryInput,
    RefreshUsageInput,
    SaveBudgetConfigInput,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def server_lifespan(server: Any) -> Any:
    """Server lifespan manager (startup/shutdown)."""
    await initialize_server()
    try:
        yield
    finally:
        await cleanup_server()


mcp = FastMCP("Burnwatch - Subscription Burn Monitor", lifespan=server_lifespan)

# Global state
_monitor: UsageMonitor | None = None
_config_store: ConfigStore | None = None


def _not_running() -> dict[str, Any]:
    return make_error_response(ErrorCode.INTERNAL_ERROR, "Usage monitor is not running")


def _budget_payload(store: ConfigStore) -> dict[str, Any]:
    config = store.config
    if config is None:
        return {"needs_setup": True, "config": None}
    return {
        "needs_setup": store.needs_setup,
        "config": config.model_dump(mode="json", by_alias=True),
        "plan_label": config.plan.label,
        "effective_daily_budget": config.effective_daily_budget,
        "effective_daily_target": config.effective_daily_target,
        "monthly_budget": config.monthly_budget,
    }


@mcp.tool()
@validate_input(CheckStatusInput)
async def check_status(include_details: bool = False) -> dict[str, Any]:
    """
    Check server health and monitor status.

    Args:
        include_details: Include metrics and monitor settings

    Returns:
        Status information
    """
    obs = get_observability()
    obs.increment("tools.check_status")

    status: dict[str, Any] = {
        "status": "healthy" if _monitor is not None and _monitor.running else "stopped",
        "service": "burnwatch",
        "version": __version__,
        "needs_setup": _config_store.needs_setup if _config_store else True,
    }

    if include_details:
        status["metrics"] = obs.get_metrics()
        if _monitor is not None:
            status["monitor"] = {
                "settings": _monitor.settings.model_dump(),
                "in_flight": _monitor.in_flight,
            }

    return status


@mcp.tool()
@validate_input(GetTodayUsageInput)
async def get_today_usage() -> dict[str, Any]:
    """
    Get today's spend, per-model breakdown and burn tier.

    Returns:
        Current monitor state; includes tier and budget figures once the
        cost is loaded and a budget config exists. A failed fetch returns
        an error response carrying the failure code.
    """
    if _monitor is None:
        return _not_running()

    get_observability().increment("tools.get_today_usage")

    state = _monitor.state
    if isinstance(state, Failed):
        return make_error_response(state.error.code, state.error.description, _monitor.snapshot())

    result: dict[str, Any] = {"success": True, **_monitor.snapshot()}
    if isinstance(state, Loaded) and _config_store is not None and _config_store.config is not None:
        result["burn"] = describe_burn(state.cost, _config_store.config)

    return result


@mcp.tool()
@validate_input(GetUsageHistoryInput)
async def get_usage_history(period: str = "daily", days: int | None = None) -> dict[str, Any]:
    """
    Get a history series for charting.

    Args:
        period: 'daily', 'weekly' or 'monthly'
        days: Trailing days of the daily series (e.g. 7 for a week view)

    Returns:
        Series points (label, cost, ISO date) in chronological order
    """
    if _monitor is None:
        return _not_running()

    get_observability().increment("tools.get_usage_history", tags={"period": period})

    series = _monitor.daily_window(days) if days is not None else _monitor.series(period)
    return {
        "success": True,
        "period": period,
        "points": [
            {
                "label": point.label,
                "cost": point.cost,
                "date": point.date.isoformat() if point.date else None,
            }
            for point in series
        ],
    }


@mcp.tool()
@validate_input(RefreshUsageInput)
async def refresh_usage(wait: bool = False) -> dict[str, Any]:
    """
    Trigger a fetch cycle outside the periodic schedule.

    Args:
        wait: Wait for the cycle to finish and return the new state

    Returns:
        Acknowledgement, or the refreshed snapshot when wait is set
    """
    if _monitor is None:
        return _not_running()

    task = _monitor.refresh()
    if not wait:
        return {"success": True, "triggered": True}

    await task
    return {"success": True, "triggered": True, **_monitor.snapshot()}


@mcp.tool()
@validate_input(GetBudgetConfigInput)
async def get_budget_config() -> dict[str, Any]:
    """
    Get the active budget configuration and derived budget figures.

    Returns:
        Persisted config, needs-setup flag and effective values
    """
    if _config_store is None:
        return _not_running()

    if _config_store.needs_setup:
        return make_error_response(
            ErrorCode.NEEDS_SETUP,
            "Budget configuration required; call save_budget_config",
            _budget_payload(_config_store),
        )

    return {"success": True, **_budget_payload(_config_store)}


@mcp.tool()
@validate_input(SaveBudgetConfigInput)
async def save_budget_config(
    plan: PlanTier,
    custom_daily_budget: float | None = None,
    daily_target: float | None = None,
) -> dict[str, Any]:
    """
    Save a new budget configuration.

    Args:
        plan: Subscription plan (pro, max5x, max20x, custom)
        custom_daily_budget: Daily budget in USD for the custom plan
        daily_target: Daily spend target in USD

    Returns:
        The stored configuration, or an error if it could not be written
    """
    if _config_store is None:
        return _not_running()

    new_config = BudgetConfig(plan=plan, custom_daily_budget=custom_daily_budget, daily_target=daily_target)
    if not _config_store.save(new_config):
        return make_error_response(
            ErrorCode.CONFIG_WRITE_FAILED,
            "Failed to write budget configuration",
            {"path": str(_config_store.path)},
        )

    get_observability().event("budget_config_saved", {"plan": new_config.plan.value})
    return {"success": True, **_budget_payload(_config_store)}


async def initialize_server() -> None:
    """Initialize server resources on startup."""
    global _monitor, _config_store

    if _monitor is not None:
        return

    config = load_config()
    obs = initialize_observability(log_level=config.log_level)
    logger.info(f"Initializing Burnwatch server (environment={config.environment})")

    _config_store = ConfigStore(config.config_path)
    if _config_store.load() is None:
        logger.info("Budget config missing or unreadable; save_budget_config completes setup")

    _monitor = UsageMonitor(config.monitor, observability=obs)
    _monitor.start()

    obs.event(
        "server_started",
        {
            "environment": config.environment,
            "refresh_interval": config.monitor.refresh_interval,
            "needs_setup": _config_store.needs_setup,
        },
    )


async def cleanup_server() -> None:
    """Cleanup server resources on shutdown."""
    global _monitor, _config_store

    if _monitor is None:
        return

    logger.info("Stopping Burnwatch server...")
    try:
        await _monitor.stop()
    finally:
        _monitor = None
        _config_store = None
        get_observability().event("server_stopped", {})


def main() -> None:
    """CLI entry point for the burnwatch command."""
    mcp.run()


if __name__ == "__main__":
    main()
