"""
Usage Monitor

Orchestrates report fetches and publishes the resulting state.

A fetch cycle is the primary fetch (today's cost) followed by a concurrent
fan-out of the daily, weekly and monthly history fetches. Cycles start
once on start(), then on every timer tick and on each manual refresh().
Overlapping cycles are allowed and are neither deduplicated nor cancelled:
the last cycle to finish wins, field by field.

All state lives on the event loop. Subprocess waits are the only await
points, and every mutation happens on the loop after they resolve, so no
locking is needed.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from typing import Any

from ..config.schemas import MonitorSettings
from ..errors import BurnwatchError, ReportDecodeError, ToolExitError, ToolNotFoundError, extract_error_code
from ..observability import ObservabilityAdapter, get_observability
from .invoker import InvocationResult, ProcessInvoker
from .locator import ExecutableLocator
from .models import (
    Failed,
    Loaded,
    Loading,
    ModelBreakdown,
    MonitorState,
    SeriesPoint,
    UsageError,
    state_to_dict,
)
from .parser import decode_daily, parse_daily, parse_monthly, parse_weekly
from .series import normalize_daily, normalize_monthly, normalize_weekly, window

logger = logging.getLogger(__name__)

Subscriber = Callable[[str, "UsageMonitor"], None]

HISTORY_PERIODS = ("daily", "weekly", "monthly")


class UsageMonitor:
    """
    Observable usage state backed by periodic ccusage runs.

    Published fields (read-only properties, replaced wholesale):
        state, model_breakdowns, last_update, daily, weekly, monthly

    Subscribers are called with (field_name, monitor) after each change.
    """

    def __init__(
        self,
        settings: MonitorSettings | None = None,
        locator: ExecutableLocator | None = None,
        invoker: ProcessInvoker | None = None,
        today: Callable[[], date] | None = None,
        observability: ObservabilityAdapter | None = None,
    ):
        """
        Initialize usage monitor.

        Args:
            settings: Monitor settings (default: MonitorSettings())
            locator: npx locator (default: searches standard installs)
            invoker: Subprocess runner
            today: Clock returning the current local date
            observability: Metrics/trace adapter (default: global adapter)
        """
        self.settings = settings or MonitorSettings()
        self.locator = locator or ExecutableLocator(explicit_path=self.settings.npx_path)
        self.invoker = invoker or ProcessInvoker()
        self._today = today or date.today
        self._obs = observability

        self._state: MonitorState = Loading()
        self._model_breakdowns: tuple[ModelBreakdown, ...] = ()
        self._last_update: datetime | None = None
        self._daily: tuple[SeriesPoint, ...] = ()
        self._weekly: tuple[SeriesPoint, ...] = ()
        self._monthly: tuple[SeriesPoint, ...] = ()

        self._subscribers: list[Subscriber] = []
        self._timer_task: asyncio.Task[None] | None = None
        self._cycles: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Published state
    # ------------------------------------------------------------------

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def model_breakdowns(self) -> tuple[ModelBreakdown, ...]:
        return self._model_breakdowns

    @property
    def last_update(self) -> datetime | None:
        return self._last_update

    @property
    def daily(self) -> tuple[SeriesPoint, ...]:
        return self._daily

    @property
    def weekly(self) -> tuple[SeriesPoint, ...]:
        return self._weekly

    @property
    def monthly(self) -> tuple[SeriesPoint, ...]:
        return self._monthly

    @property
    def running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    @property
    def in_flight(self) -> int:
        """Number of fetch cycles currently running."""
        return len(self._cycles)

    @property
    def obs(self) -> ObservabilityAdapter:
        if self._obs is None:
            self._obs = get_observability()
        return self._obs

    def series(self, period: str) -> tuple[SeriesPoint, ...]:
        """
        Get a stored history series.

        Args:
            period: 'daily', 'weekly' or 'monthly'

        Returns:
            The current series for that period
        """
        if period not in HISTORY_PERIODS:
            raise ValueError(f"Unknown history period: {period}")
        return getattr(self, f"_{period}")

    def daily_window(self, days: int) -> tuple[SeriesPoint, ...]:
        """Trailing days of the daily series (e.g. 7 for the week view)."""
        return window(self._daily, days)

    def snapshot(self) -> dict[str, Any]:
        """Current published state as plain data."""
        return {
            **state_to_dict(self._state),
            "model_breakdowns": [
                {"model": b.short_name, "model_name": b.model_name, "cost": b.cost} for b in self._model_breakdowns
            ],
            "last_update": self._last_update.isoformat() if self._last_update else None,
            "series_lengths": {period: len(self.series(period)) for period in HISTORY_PERIODS},
            "in_flight": self.in_flight,
        }

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change callback.

        Args:
            callback: Called with (field_name, monitor) after each change

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, field: str, value: Any) -> None:
        setattr(self, f"_{field}", value)
        for callback in list(self._subscribers):
            try:
                callback(field, self)
            except Exception as e:
                logger.error(f"Subscriber failed on '{field}' update: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start(self) -> None:
        """
        Start fetching: one cycle now, then one per refresh interval.

        Must be called from a running event loop.
        """
        if self.running:
            return

        logger.info(
            f"Starting usage monitor (refresh every {self.settings.refresh_interval:.0f}s)",
            extra={"package_spec": self.settings.package_spec},
        )
        self._spawn_cycle()
        self._timer_task = asyncio.create_task(self._run_timer(), name="burnwatch-timer")

    async def stop(self) -> None:
        """Cancel the timer and any fetch cycles in flight."""
        tasks = list(self._cycles)
        if self._timer_task is not None:
            tasks.append(self._timer_task)
            self._timer_task = None

        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Usage monitor stopped")

    def refresh(self) -> asyncio.Task[None]:
        """
        Trigger a manual fetch cycle.

        Does not cancel or wait for cycles already running.

        Returns:
            Task running the new cycle
        """
        self.obs.increment("refresh.manual")
        return self._spawn_cycle()

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self.settings.refresh_interval)
            logger.debug("Periodic refresh")
            self.obs.increment("refresh.periodic")
            self._spawn_cycle()

    def _spawn_cycle(self) -> asyncio.Task[None]:
        task = asyncio.create_task(self.fetch_all(), name="burnwatch-fetch-cycle")
        self._cycles.add(task)
        task.add_done_callback(self._cycle_done)
        return task

    def _cycle_done(self, task: asyncio.Task[None]) -> None:
        self._cycles.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Fetch cycle crashed: {error}", exc_info=error)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch_all(self) -> None:
        """Run one full cycle: primary fetch, then history fan-out."""
        self.obs.generate_trace_id()
        await self.fetch_today()
        await self.fetch_history()

    async def fetch_today(self) -> None:
        """
        Fetch today's total cost and model breakdown.

        Failures replace the state with Failed; success replaces it with
        Loaded and refreshes the breakdown and last-update time.
        """
        today = self._today()
        try:
            result = await self._run_report("daily", since=today)
            report = decode_daily(result.stdout)
        except ToolNotFoundError as e:
            logger.warning(f"Primary fetch failed: {e.message}")
            self.obs.increment("fetch.primary.failure", tags={"reason": "not_found"})
            self._publish("state", Failed(UsageError.not_found()))
            return
        except (ToolExitError, ReportDecodeError) as e:
            logger.warning(f"Primary fetch failed: {e.message}", extra=e.details)
            self.obs.increment("fetch.primary.failure", tags={"reason": type(e).__name__})
            self._publish("state", Failed(UsageError.fetch_failed(e.message, extract_error_code(e))))
            return

        self.obs.increment("fetch.primary.success")
        self._publish("state", Loaded(report.total_cost))
        self._publish("last_update", datetime.now(UTC))
        self._publish("model_breakdowns", tuple(report.first_breakdowns()))
        logger.info(f"Today's cost: ${report.total_cost:.2f}")

    async def fetch_history(self) -> None:
        """
        Fetch the daily, weekly and monthly series concurrently.

        Each fetch fills its own result slot; only successful slots replace
        their stored series once all three have finished.
        """
        results = await asyncio.gather(
            self._fetch_daily_series(),
            self._fetch_weekly_series(),
            self._fetch_monthly_series(),
            return_exceptions=True,
        )

        for period, result in zip(HISTORY_PERIODS, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(f"History fetch '{period}' crashed: {result}", exc_info=result)
                continue
            if result is None:
                self.obs.increment("fetch.history.skipped", tags={"period": period})
                continue
            self.obs.increment("fetch.history.success", tags={"period": period})
            self._publish(period, result)

    async def _fetch_daily_series(self) -> tuple[SeriesPoint, ...] | None:
        today = self._today()
        window_days = self.settings.daily_window_days
        stdout = await self._history_output("daily", since=today - timedelta(days=window_days))
        if stdout is None:
            return None
        report = parse_daily(stdout)
        if report is None:
            return None
        return normalize_daily(report.rows, window_days, today)

    async def _fetch_weekly_series(self) -> tuple[SeriesPoint, ...] | None:
        since = self._today() - timedelta(days=self.settings.weekly_window_days)
        stdout = await self._history_output("weekly", since=since)
        if stdout is None:
            return None
        report = parse_weekly(stdout)
        if report is None:
            return None
        return normalize_weekly(report.rows)

    async def _fetch_monthly_series(self) -> tuple[SeriesPoint, ...] | None:
        stdout = await self._history_output("monthly", since=None)
        if stdout is None:
            return None
        report = parse_monthly(stdout)
        if report is None:
            return None
        return normalize_monthly(report.rows)

    async def _history_output(self, subcommand: str, since: date | None) -> bytes | None:
        try:
            result = await self._run_report(subcommand, since=since)
        except BurnwatchError as e:
            logger.debug(f"History fetch '{subcommand}' skipped: {e.message}")
            return None
        return result.stdout

    def report_args(self, subcommand: str, since: date | None) -> list[str]:
        """
        Build the argument list for a report subcommand.

        Args:
            subcommand: 'daily', 'weekly' or 'monthly'
            since: First day of the report (None = full history)

        Returns:
            Arguments passed after the npx executable
        """
        args = [self.settings.package_spec, subcommand]
        if since is not None:
            args.extend(["--since", since.strftime("%Y%m%d")])
        args.append("--json")
        if self.settings.offline:
            args.append("--offline")
        return args

    async def _run_report(self, subcommand: str, since: date | None) -> InvocationResult:
        npx = self.locator.locate()
        if npx is None:
            raise ToolNotFoundError(reason="no usable npx located")

        with self.obs.trace(f"ccusage.{subcommand}"):
            result = await self.invoker.invoke(npx, self.report_args(subcommand, since))

        if not result.ok:
            raise ToolExitError(result.exit_code, details={"subcommand": subcommand})
        return result
