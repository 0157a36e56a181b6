"""
Usage Monitor Example

Demonstrates how to use the usage monitor outside the MCP server.

This example shows:
- Locating npx and running a single fetch cycle
- Subscribing to published state changes
- Classifying today's spend against a budget
- Reading the weekly view of the daily series
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add src to path for local development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from burnwatch import BudgetConfig, Failed, Loaded, MonitorSettings, PlanTier, UsageMonitor
from burnwatch.budget import describe_burn

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def example_single_cycle():
    """Example: One fetch cycle with change notifications."""
    logger.info("=" * 60)
    logger.info("Example 1: Single Fetch Cycle")
    logger.info("=" * 60)

    monitor = UsageMonitor(MonitorSettings(offline=True))
    monitor.subscribe(lambda field, m: logger.info(f"Updated: {field}"))

    await monitor.fetch_all()

    state = monitor.state
    if isinstance(state, Failed):
        logger.error(f"Fetch failed: {state.error.description}")
        return

    assert isinstance(state, Loaded)
    config = BudgetConfig(plan=PlanTier.MAX5X, daily_target=40.0)
    burn = describe_burn(state.cost, config)

    logger.info(f"Today: ${state.cost:.2f} ({burn['tier']})")
    logger.info(burn["message"])
    for breakdown in monitor.model_breakdowns:
        logger.info(f"  {breakdown.short_name}: ${breakdown.cost:.2f}")


async def example_week_view():
    """Example: Last seven days from the daily series."""
    logger.info("\n" + "=" * 60)
    logger.info("Example 2: Week View")
    logger.info("=" * 60)

    monitor = UsageMonitor()
    await monitor.fetch_history()

    for point in monitor.daily_window(7):
        logger.info(f"{point.label} {point.date}: ${point.cost:.2f}")


async def main():
    """Run all examples."""
    await example_single_cycle()
    await example_week_view()


if __name__ == "__main__":
    asyncio.run(main())
