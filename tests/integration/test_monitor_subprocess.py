"""
Burnwatch - Monitor Integration Tests

Runs full fetch cycles against a fake npx script located through the real
ExecutableLocator and executed through the real ProcessInvoker.
"""

import asyncio
import os
from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest

from burnwatch.config.schemas import MonitorSettings
from burnwatch.usage.invoker import ProcessInvoker
from burnwatch.usage.locator import ExecutableLocator
from burnwatch.usage.models import Failed, Loaded, UsageError
from burnwatch.usage.monitor import UsageMonitor

TODAY = date(2024, 3, 15)

FAKE_NPX = """#!/bin/sh
echo "npm notice: fetching package" >&2
case "$2" in
  daily)
    echo '{"daily":[{"date":"2024-03-15","totalCost":4.5,"modelBreakdowns":[{"modelName":"claude-sonnet-4-20250514","cost":4.5}]},{"date":"2024-03-14","totalCost":2.0}],"totals":{"totalCost":6.5}}'
    ;;
  weekly)
    echo '{"weekly":[{"weekStart":"2024-03-10","totalCost":6.5}],"totals":{"totalCost":6.5}}'
    ;;
  monthly)
    echo '{"monthly":[{"month":"2024-03","totalCost":6.5}],"totals":{"totalCost":6.5}}'
    ;;
  *)
    exit 3
    ;;
esac
"""


def _locator(tmp_path: Path) -> ExecutableLocator:
    return ExecutableLocator(
        fnm_roots=[tmp_path / "fnm" / "node-versions"],
        fixed_candidates=[tmp_path / "fixed" / "npx"],
        nvm_roots=[tmp_path / "nvm" / "versions" / "node"],
    )


class TestMonitorWithSubprocess:
    """End-to-end fetch cycles."""

    @pytest.fixture
    def monitor(self, tmp_path: Path) -> UsageMonitor:
        return UsageMonitor(
            settings=MonitorSettings(),
            locator=_locator(tmp_path),
            invoker=ProcessInvoker(extra_dirs=[]),
            today=lambda: TODAY,
        )

    async def test_full_cycle(self, monitor: UsageMonitor, make_executable: Callable[..., Path]) -> None:
        make_executable("fnm/node-versions/v20.11.0/installation/bin/npx", FAKE_NPX)

        await monitor.fetch_all()

        assert monitor.state == Loaded(6.5)
        assert [b.short_name for b in monitor.model_breakdowns] == ["sonnet-4"]
        assert len(monitor.daily) == 30
        assert [p.cost for p in monitor.daily[-2:]] == [2.0, 4.5]
        assert [p.cost for p in monitor.weekly] == [6.5]
        assert [p.label for p in monitor.monthly] == ["Mar"]

    async def test_no_executable(self, monitor: UsageMonitor) -> None:
        await monitor.fetch_all()

        assert monitor.state == Failed(UsageError.not_found())
        assert monitor.daily == ()

    async def test_tool_exit(self, monitor: UsageMonitor, make_executable: Callable[..., Path]) -> None:
        make_executable("fixed/npx", "#!/bin/sh\nexit 1\n")

        await monitor.fetch_all()

        assert monitor.state == Failed(UsageError.fetch_failed("tool exit 1"))
        assert monitor.weekly == ()

    async def test_refresh_after_recovery(self, monitor: UsageMonitor, make_executable: Callable[..., Path]) -> None:
        broken = make_executable("fixed/npx", "#!/bin/sh\nexit 1\n")
        await monitor.refresh()
        assert isinstance(monitor.state, Failed)

        broken.write_text(FAKE_NPX)
        await monitor.refresh()

        assert monitor.state == Loaded(6.5)

    async def test_stop_kills_running_report(
        self, monitor: UsageMonitor, tmp_path: Path, make_executable: Callable[..., Path]
    ) -> None:
        """Test stopping mid-fetch leaves no report tool behind."""
        pid_file = tmp_path / "pid"
        make_executable("fixed/npx", f"#!/bin/sh\necho $$ > '{pid_file}'\nexec sleep 30\n")

        monitor.start()
        for _ in range(250):
            if pid_file.exists() and pid_file.read_text().strip():
                break
            await asyncio.sleep(0.02)
        pid = int(pid_file.read_text())

        await monitor.stop()

        assert not monitor.running
        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)
