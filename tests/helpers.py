"""
Shared test doubles and report payload builders.
"""

import json
from collections.abc import Sequence
from typing import Any

from burnwatch.usage.invoker import InvocationResult


class FakeLocator:
    """Locator returning a fixed path (or None)."""

    def __init__(self, path: str | None = "/fake/bin/npx"):
        self.path = path
        self.calls = 0

    def locate(self) -> str | None:
        self.calls += 1
        return self.path


class FakeInvoker:
    """
    Invoker answering per subcommand.

    Responses are InvocationResult instances or exceptions to raise.
    Subcommands without a response exit 1.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses: dict[str, Any] = responses or {}
        self.calls: list[tuple[str, list[str]]] = []

    def set(self, subcommand: str, response: Any) -> None:
        self.responses[subcommand] = response

    async def invoke(self, executable: str, args: Sequence[str], env: Any = None) -> InvocationResult:
        self.calls.append((executable, list(args)))
        response = self.responses.get(args[1])
        if response is None:
            return InvocationResult(exit_code=1, stdout=b"")
        if isinstance(response, BaseException):
            raise response
        return response

    def args_for(self, subcommand: str) -> list[list[str]]:
        return [args for _, args in self.calls if args[1] == subcommand]


def ok(payload: dict[str, Any] | str) -> InvocationResult:
    """Successful invocation with a JSON (or raw string) stdout."""
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return InvocationResult(exit_code=0, stdout=body.encode())


def daily_payload(rows: list[dict[str, Any]], total: float | None = None) -> dict[str, Any]:
    if total is None:
        total = sum(row["totalCost"] for row in rows)
    return {"daily": rows, "totals": {"totalCost": total}}


def weekly_payload(rows: list[dict[str, Any]]) -> dict[str, Any]:
    return {"weekly": rows, "totals": {"totalCost": sum(row["totalCost"] for row in rows)}}


def monthly_payload(rows: list[dict[str, Any]]) -> dict[str, Any]:
    return {"monthly": rows, "totals": {"totalCost": sum(row["totalCost"] for row in rows)}}
