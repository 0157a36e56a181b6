"""
Executable Locator

Finds a usable npx launcher across the common Node.js installation managers.
GUI and service launches rarely inherit a shell PATH, so the search probes
known install locations directly instead of relying on PATH lookup.

Search order:
1. Explicit override path (if configured)
2. fnm-managed versions, newest first
3. Fixed install locations (Homebrew, /usr/local, bun, /usr/bin)
4. nvm-managed versions, newest first
"""

import logging
import os
import re
from collections.abc import Iterator, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

_VERSION_CHUNKS = re.compile(r"(\d+)")


def version_sort_key(name: str) -> list[tuple[int, int | str]]:
    """
    Sort key that orders embedded numbers numerically.

    "v20.11.0" sorts after "v9.8.1"; for equal-width version strings this
    is the same as plain string ordering.
    """
    key: list[tuple[int, int | str]] = []
    for chunk in _VERSION_CHUNKS.split(name):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((1, int(chunk)))
        else:
            key.append((0, chunk.lower()))
    return key


def is_executable_file(path: Path) -> bool:
    try:
        return path.is_file() and os.access(path, os.X_OK)
    except OSError:
        return False


class ExecutableLocator:
    """
    Locates the npx executable.

    All roots are injectable so the search can be exercised against a
    temporary directory tree.
    """

    def __init__(
        self,
        home: str | Path | None = None,
        explicit_path: str | None = None,
        fnm_roots: Sequence[str | Path] | None = None,
        fixed_candidates: Sequence[str | Path] | None = None,
        nvm_roots: Sequence[str | Path] | None = None,
        executable_name: str = "npx",
    ):
        """
        Initialize locator.

        Args:
            home: Home directory used to derive default roots
            explicit_path: Path checked before any search
            fnm_roots: Directories holding fnm version subdirectories
            fixed_candidates: Absolute executable paths to probe
            nvm_roots: Directories holding nvm version subdirectories
            executable_name: Launcher file name
        """
        home_dir = Path(home) if home else Path.home()
        self.executable_name = executable_name
        self.explicit_path = explicit_path

        if fnm_roots is None:
            fnm_roots = [
                home_dir / "Library" / "Application Support" / "fnm" / "node-versions",
                home_dir / ".local" / "share" / "fnm" / "node-versions",
            ]
        if fixed_candidates is None:
            fixed_candidates = [
                Path("/opt/homebrew/bin") / executable_name,
                Path("/usr/local/bin") / executable_name,
                home_dir / ".bun" / "bin" / executable_name,
                Path("/usr/bin") / executable_name,
            ]
        if nvm_roots is None:
            nvm_roots = [home_dir / ".nvm" / "versions" / "node"]

        self.fnm_roots = [Path(p) for p in fnm_roots]
        self.fixed_candidates = [Path(p) for p in fixed_candidates]
        self.nvm_roots = [Path(p) for p in nvm_roots]

    def candidates(self) -> Iterator[Path]:
        """Yield candidate paths in priority order."""
        if self.explicit_path:
            yield Path(self.explicit_path)

        for root in self.fnm_roots:
            for version in self._versions(root):
                yield root / version / "installation" / "bin" / self.executable_name

        yield from self.fixed_candidates

        for root in self.nvm_roots:
            for version in self._versions(root):
                yield root / version / "bin" / self.executable_name

    def locate(self) -> str | None:
        """
        Find the first usable executable.

        Returns:
            Path to the executable, or None if nothing qualifies
        """
        for candidate in self.candidates():
            if is_executable_file(candidate):
                logger.debug(f"Located {self.executable_name} at {candidate}")
                return str(candidate)

        logger.debug(f"No usable {self.executable_name} found")
        return None

    @staticmethod
    def _versions(root: Path) -> list[str]:
        """Version subdirectory names under root, greatest first."""
        try:
            names = [entry.name for entry in root.iterdir() if entry.is_dir()]
        except OSError:
            return []
        return sorted(names, key=version_sort_key, reverse=True)
