"""
Usage Models

Normalized series points, per-model breakdowns and the monitor's
observable state.
"""

import datetime as dt
import re
from dataclasses import dataclass, field
from enum import Enum

from ..errors import ErrorCode

_DATE_SUFFIX = re.compile(r"-\d{8}$")


@dataclass(frozen=True)
class SeriesPoint:
    """One bar of a chart series."""

    label: str
    cost: float
    date: dt.date | None = None


@dataclass(frozen=True)
class ModelBreakdown:
    """Cost attributed to a single model in today's report."""

    model_name: str
    cost: float

    @property
    def short_name(self) -> str:
        """Model name without the vendor prefix and release date stamp."""
        name = self.model_name.removeprefix("claude-")
        return _DATE_SUFFIX.sub("", name)


class ErrorKind(str, Enum):
    """Failure classes surfaced by the primary fetch."""

    NOT_FOUND = "not_found"
    FETCH_FAILED = "fetch_failed"


@dataclass(frozen=True)
class UsageError:
    """
    A primary fetch failure.

    `code` records the underlying failure class for tool responses; two
    errors of the same kind and message compare equal regardless of it.
    """

    kind: ErrorKind
    message: str = ""
    code: ErrorCode = field(default=ErrorCode.INTERNAL_ERROR, compare=False)

    @classmethod
    def not_found(cls) -> "UsageError":
        return cls(ErrorKind.NOT_FOUND, code=ErrorCode.TOOL_NOT_FOUND)

    @classmethod
    def fetch_failed(cls, message: str, code: ErrorCode = ErrorCode.TOOL_EXIT_NONZERO) -> "UsageError":
        return cls(ErrorKind.FETCH_FAILED, message, code)

    @property
    def description(self) -> str:
        if self.kind == ErrorKind.NOT_FOUND:
            return "Node.js not found"
        return self.message


@dataclass(frozen=True)
class Loading:
    """No fetch has resolved yet."""


@dataclass(frozen=True)
class Loaded:
    """Today's total cost from the latest successful primary fetch."""

    cost: float


@dataclass(frozen=True)
class Failed:
    """The latest primary fetch failed."""

    error: UsageError


MonitorState = Loading | Loaded | Failed


def state_to_dict(state: MonitorState) -> dict[str, object]:
    """Flatten a monitor state for tool responses."""
    if isinstance(state, Loaded):
        return {"status": "loaded", "cost": state.cost}
    if isinstance(state, Failed):
        return {
            "status": "error",
            "error_kind": state.error.kind.value,
            "error_code": state.error.code.value,
            "message": state.error.description,
        }
    return {"status": "loading"}
