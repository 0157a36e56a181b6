"""
Process Invoker

Runs the report tool as an asyncio subprocess with an augmented PATH.
The wait for the child is the only suspension point in a fetch; it never
blocks the event loop, so periodic timers stay responsive.
"""

import asyncio
import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import ToolNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/usr/bin:/bin"


@dataclass(frozen=True)
class InvocationResult:
    """Exit status and captured stdout of a finished subprocess."""

    exit_code: int
    stdout: bytes

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def common_install_dirs(home: Path | None = None) -> list[str]:
    home_dir = home or Path.home()
    return [
        "/usr/local/bin",
        "/opt/homebrew/bin",
        str(home_dir / ".bun" / "bin"),
        "/usr/bin",
    ]


def build_search_path(
    executable: str,
    inherited: str | None,
    extra_dirs: Sequence[str] | None = None,
) -> str:
    """
    Build the PATH handed to the child.

    npx is a script that re-resolves `node` through PATH, so the launcher's
    own directory must come first.

    Args:
        executable: Resolved launcher path
        inherited: Current PATH value (None falls back to /usr/bin:/bin)
        extra_dirs: Common install directories (default: common_install_dirs())

    Returns:
        PATH string: launcher dir, common dirs, then the inherited value
    """
    dirs = [str(Path(executable).parent)]
    dirs.extend(extra_dirs if extra_dirs is not None else common_install_dirs())
    dirs.append(inherited or DEFAULT_PATH)
    return os.pathsep.join(dirs)


def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        # exited between the check and the signal
        return
    logger.debug(f"Killed report tool (pid {process.pid}) after cancellation")


class ProcessInvoker:
    """Launches the report tool and collects its output."""

    def __init__(self, extra_dirs: Sequence[str] | None = None):
        """
        Initialize invoker.

        Args:
            extra_dirs: Directories prepended to PATH after the launcher's own
        """
        self.extra_dirs = list(extra_dirs) if extra_dirs is not None else None

    async def invoke(
        self,
        executable: str,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> InvocationResult:
        """
        Run executable with args and wait for it to finish.

        stderr is discarded; stdout is read to EOF. If the caller is
        cancelled while waiting, the child is killed and reaped first.

        Args:
            executable: Path to the launcher
            args: Arguments after the executable
            env: Base environment (default: os.environ)

        Returns:
            InvocationResult with exit code and stdout

        Raises:
            ToolNotFoundError: If the subprocess cannot be started
        """
        child_env = dict(os.environ if env is None else env)
        child_env["PATH"] = build_search_path(executable, child_env.get("PATH"), self.extra_dirs)

        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                env=child_env,
            )
        except OSError as e:
            logger.warning(
                f"Failed to launch {executable}: {e}",
                extra={"executable": executable, "error": str(e)},
            )
            raise ToolNotFoundError(reason=str(e), details={"executable": executable}) from e

        try:
            stdout, _ = await process.communicate()
        except asyncio.CancelledError:
            _kill(process)
            await process.wait()
            raise
        exit_code = process.returncode if process.returncode is not None else -1

        logger.debug(
            f"{Path(executable).name} {' '.join(args)} exited {exit_code}",
            extra={"exit_code": exit_code, "stdout_bytes": len(stdout)},
        )
        return InvocationResult(exit_code=exit_code, stdout=stdout)
