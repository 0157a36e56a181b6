"""
Burnwatch - Process Invoker Integration Tests

Runs real /bin/sh scripts through ProcessInvoker.
"""

import asyncio
import json
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from burnwatch.errors import ToolNotFoundError
from burnwatch.usage.invoker import ProcessInvoker

ECHO_ARGS = """#!/bin/sh
echo "this goes nowhere" >&2
printf '%s\\n' "$@"
"""


class TestProcessInvoker:
    """Test suite for subprocess execution."""

    @pytest.fixture
    def invoker(self) -> ProcessInvoker:
        return ProcessInvoker(extra_dirs=[])

    async def test_captures_stdout_only(self, invoker: ProcessInvoker, make_executable: Callable[..., Path]) -> None:
        script = make_executable("bin/npx", ECHO_ARGS)

        result = await invoker.invoke(str(script), ["ccusage@latest", "daily", "--json"])

        assert result.ok
        assert result.exit_code == 0
        assert result.stdout.decode().splitlines() == ["ccusage@latest", "daily", "--json"]

    async def test_nonzero_exit(self, invoker: ProcessInvoker, make_executable: Callable[..., Path]) -> None:
        script = make_executable("bin/npx", "#!/bin/sh\necho partial\nexit 7\n")

        result = await invoker.invoke(str(script), [])

        assert not result.ok
        assert result.exit_code == 7
        assert result.stdout == b"partial\n"

    async def test_large_output(
        self, invoker: ProcessInvoker, tmp_path: Path, make_executable: Callable[..., Path]
    ) -> None:
        """Test output beyond the pipe buffer is read to EOF."""
        rows = [{"date": f"2024-01-{day:02d}", "totalCost": day * 1.5} for day in range(1, 29)] * 200
        payload = json.dumps({"daily": rows, "totals": {"totalCost": 1.0}})
        data_file = tmp_path / "data.json"
        data_file.write_text(payload)
        script = make_executable("bin/npx", f"#!/bin/sh\ncat '{data_file}'\n")

        result = await invoker.invoke(str(script), [])

        assert result.ok
        assert result.stdout.decode() == payload

    async def test_path_augmented(self, make_executable: Callable[..., Path]) -> None:
        script = make_executable("node/bin/npx", '#!/bin/sh\necho "$PATH"\n')
        invoker = ProcessInvoker(extra_dirs=["/opt/extra"])

        result = await invoker.invoke(str(script), [], env={"PATH": "/usr/bin:/bin", "HOME": "/tmp"})

        parts = result.stdout.decode().strip().split(os.pathsep)
        assert parts[0] == str(script.parent)
        assert parts[1] == "/opt/extra"
        assert parts[-2:] == ["/usr/bin", "/bin"]

    async def test_env_passed_through(self, invoker: ProcessInvoker, make_executable: Callable[..., Path]) -> None:
        script = make_executable("bin/npx", '#!/bin/sh\necho "$BURNWATCH_PROBE"\n')

        result = await invoker.invoke(str(script), [], env={"BURNWATCH_PROBE": "hello", "PATH": "/usr/bin:/bin"})

        assert result.stdout == b"hello\n"

    async def test_missing_executable(self, invoker: ProcessInvoker, tmp_path: Path) -> None:
        with pytest.raises(ToolNotFoundError) as exc_info:
            await invoker.invoke(str(tmp_path / "nope" / "npx"), ["daily"])

        assert exc_info.value.details["executable"] == str(tmp_path / "nope" / "npx")
        assert exc_info.value.reason

    async def test_non_executable_file(self, invoker: ProcessInvoker, tmp_path: Path) -> None:
        target = tmp_path / "npx"
        target.write_text("#!/bin/sh\necho hi\n")
        target.chmod(0o644)

        with pytest.raises(ToolNotFoundError):
            await invoker.invoke(str(target), [])

    async def test_cancellation_kills_child(
        self, invoker: ProcessInvoker, tmp_path: Path, make_executable: Callable[..., Path]
    ) -> None:
        """Test a cancelled wait does not leave the report tool running."""
        pid_file = tmp_path / "pid"
        script = make_executable("bin/npx", f"#!/bin/sh\necho $$ > '{pid_file}'\nexec sleep 30\n")

        task = asyncio.create_task(invoker.invoke(str(script), ["daily"]))
        pid = await _wait_for_pid(pid_file)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)


async def _wait_for_pid(pid_file: Path, timeout: float = 5.0) -> int:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        text = pid_file.read_text().strip() if pid_file.exists() else ""
        if text:
            return int(text)
        await asyncio.sleep(0.02)
    raise AssertionError(f"child never wrote {pid_file}")
