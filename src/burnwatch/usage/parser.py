"""
Report Parser

Decodes the ccusage JSON report shapes (daily, weekly, monthly).

The `decode_*` functions raise ReportDecodeError with a readable message;
the `parse_*` functions return None instead, for best-effort callers.
Unknown fields are ignored. The report's own `totals.totalCost` is the
authoritative aggregate and is never recomputed from the rows.
"""

import logging
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ReportDecodeError
from .models import ModelBreakdown

logger = logging.getLogger(__name__)


class _ReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RawModelBreakdown(_ReportModel):
    model_name: str = Field(alias="modelName")
    cost: float = Field(ge=0.0)

    def to_breakdown(self) -> ModelBreakdown:
        return ModelBreakdown(model_name=self.model_name, cost=self.cost)


class DailyRow(_ReportModel):
    date: str
    total_cost: float = Field(alias="totalCost", ge=0.0)
    model_breakdowns: list[RawModelBreakdown] | None = Field(default=None, alias="modelBreakdowns")

    @property
    def key(self) -> str:
        return self.date

    def breakdowns(self) -> list[ModelBreakdown]:
        return [b.to_breakdown() for b in self.model_breakdowns or []]


class WeeklyRow(_ReportModel):
    week_start: str = Field(alias="weekStart")
    total_cost: float = Field(alias="totalCost", ge=0.0)

    @property
    def key(self) -> str:
        return self.week_start


class MonthlyRow(_ReportModel):
    month: str
    total_cost: float = Field(alias="totalCost", ge=0.0)

    @property
    def key(self) -> str:
        return self.month


class Totals(_ReportModel):
    total_cost: float = Field(alias="totalCost", ge=0.0)


class DailyReport(_ReportModel):
    daily: list[DailyRow]
    totals: Totals

    @property
    def total_cost(self) -> float:
        return self.totals.total_cost

    @property
    def rows(self) -> list[DailyRow]:
        return self.daily

    def first_breakdowns(self) -> list[ModelBreakdown]:
        """Model breakdowns of the first row (empty when absent)."""
        if not self.daily:
            return []
        return self.daily[0].breakdowns()


class WeeklyReport(_ReportModel):
    weekly: list[WeeklyRow]
    totals: Totals

    @property
    def total_cost(self) -> float:
        return self.totals.total_cost

    @property
    def rows(self) -> list[WeeklyRow]:
        return self.weekly


class MonthlyReport(_ReportModel):
    monthly: list[MonthlyRow]
    totals: Totals

    @property
    def total_cost(self) -> float:
        return self.totals.total_cost

    @property
    def rows(self) -> list[MonthlyRow]:
        return self.monthly


ReportT = TypeVar("ReportT", DailyReport, WeeklyReport, MonthlyReport)


def _describe(error: ValidationError) -> str:
    first = error.errors()[0] if error.error_count() else None
    if first is None:
        return "Invalid report"
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"Invalid report at '{location}': {first['msg']}"
    return f"Invalid report: {first['msg']}"


def _decode(model: type[ReportT], raw: bytes | str) -> ReportT:
    if not raw or not raw.strip():
        raise ReportDecodeError("Empty report output")
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise ReportDecodeError(_describe(e), details={"report": model.__name__}) from e


def _parse(model: type[ReportT], raw: bytes | str) -> ReportT | None:
    try:
        return _decode(model, raw)
    except ReportDecodeError as e:
        logger.debug(f"Ignoring undecodable {model.__name__}: {e.message}")
        return None


def decode_daily(raw: bytes | str) -> DailyReport:
    return _decode(DailyReport, raw)


def decode_weekly(raw: bytes | str) -> WeeklyReport:
    return _decode(WeeklyReport, raw)


def decode_monthly(raw: bytes | str) -> MonthlyReport:
    return _decode(MonthlyReport, raw)


def parse_daily(raw: bytes | str) -> DailyReport | None:
    return _parse(DailyReport, raw)


def parse_weekly(raw: bytes | str) -> WeeklyReport | None:
    return _parse(WeeklyReport, raw)


def parse_monthly(raw: bytes | str) -> MonthlyReport | None:
    return _parse(MonthlyReport, raw)
