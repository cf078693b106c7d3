"""
pm_engines.earned_value -- Earned-value analysis for a project's tasks.

Responsibility:
    Aggregate per-task planned value (PV), earned value (EV) and actual
    cost (AC) into project totals, derive the cost and schedule performance
    indices (CPI = EV / AC, SPI = EV / PV) and variances (CV = EV - AC,
    SV = EV - PV), and classify them for display.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pm_kernel.

Invariants enforced:
    - Purity: no clock access, no I/O; identical inputs give identical
      outputs.
    - Decimal-only arithmetic; money stays paired with its currency.
    - Order independence: totals are plain sums, so any permutation or
      partition of the task list gives the same result.  Task dependencies
      are not evaluated.
    - Variances are total-additive: the sum of per-task variances equals
      the variance of the totals.

Zero-denominator policy (CPI, SPI and percent complete):
    - numerator 0, denominator 0  -> Decimal("1")  (nothing planned, nothing
      earned: on plan)
    - numerator > 0, denominator 0 -> Decimal("Infinity")
    - NaN is never produced.

Failure modes:
    - CurrencyMismatchError when Money operands carry different currencies.

Usage:
    from pm_engines.earned_value import (
        aggregate_values, cost_performance_index, classify_index,
    )

    totals = aggregate_values(project.tasks, currency=project.currency)
    cpi = cost_performance_index(totals.earned_value, totals.actual_cost)
    classify_index(cpi)   # PerformanceRating.ACCEPTABLE
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from pm_kernel.domain.entities import Task
from pm_kernel.domain.values import Money
from pm_kernel.exceptions import CurrencyMismatchError
from pm_kernel.logging_config import get_logger
from pm_engines.tracer import traced_engine

logger = get_logger("engines.earned_value")

Amount = Money | Decimal | int

EXCELLENT_THRESHOLD = Decimal("1.10")
GOOD_THRESHOLD = Decimal("1.00")
ACCEPTABLE_THRESHOLD = Decimal("0.90")

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


class PerformanceRating(str, Enum):
    """Display band for a CPI or SPI value."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    ACCEPTABLE = "Acceptable"
    POOR = "Poor"


class VarianceTrend(str, Enum):
    """Sign of a cost or schedule variance."""

    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    ON_TRACK = "On Track"


class BudgetPosition(str, Enum):
    UNDER_BUDGET = "Under Budget"
    OVER_BUDGET = "Over Budget"


class SchedulePosition(str, Enum):
    AHEAD_OF_SCHEDULE = "Ahead of Schedule"
    BEHIND_SCHEDULE = "Behind Schedule"


@dataclass(frozen=True)
class EarnedValueTotals:
    """Sums of the three earned-value fields across a task list."""

    planned_value: Money
    earned_value: Money
    actual_cost: Money


@dataclass(frozen=True)
class EarnedValueSummary:
    """
    Project-level earned-value metrics, ready for display.

    Contract:
        Built by ``summarize_earned_value``; every field is derived from
        ``totals`` with the functions of this module.
    """

    totals: EarnedValueTotals
    cost_performance_index: Decimal
    schedule_performance_index: Decimal
    cost_variance: Money
    schedule_variance: Money
    cpi_rating: PerformanceRating
    spi_rating: PerformanceRating
    cost_variance_trend: VarianceTrend
    schedule_variance_trend: VarianceTrend
    percent_complete: Decimal
    budget_position: BudgetPosition
    schedule_position: SchedulePosition


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_decimal(value: Amount | float) -> Decimal:
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _check_same_currency(a: Amount, b: Amount) -> None:
    if isinstance(a, Money) and isinstance(b, Money) and a.currency != b.currency:
        raise CurrencyMismatchError(a.currency.code, b.currency.code)


def _ratio(numerator: Amount, denominator: Amount) -> Decimal:
    """numerator / denominator under the module's zero-denominator policy."""
    _check_same_currency(numerator, denominator)
    num = _to_decimal(numerator)
    den = _to_decimal(denominator)
    if den == _ZERO:
        if num == _ZERO:
            return _ONE
        logger.debug("ratio_zero_denominator", extra={"numerator": str(num)})
        return Decimal("Infinity") if num > _ZERO else Decimal("-Infinity")
    return num / den


def _difference(minuend: Amount, subtrahend: Amount) -> Money | Decimal:
    if isinstance(minuend, Money) and isinstance(subtrahend, Money):
        return minuend - subtrahend
    if isinstance(minuend, Money):
        return Money(minuend.amount - _to_decimal(subtrahend), minuend.currency)
    if isinstance(subtrahend, Money):
        return Money(_to_decimal(minuend) - subtrahend.amount, subtrahend.currency)
    return _to_decimal(minuend) - _to_decimal(subtrahend)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


@traced_engine("earned_value", "1.0", fingerprint_fields=("tasks", "currency"))
def aggregate_values(tasks: Sequence[Task], currency: str = "USD") -> EarnedValueTotals:
    """
    Sum planned value, earned value and actual cost across ``tasks``.

    Postconditions:
        Empty input returns zeros in ``currency``.  Otherwise each total
        is the plain sum of the corresponding task field.

    Raises:
        CurrencyMismatchError: If tasks carry different currencies.
    """
    planned = earned = actual = Money.zero(tasks[0].planned_value.currency if tasks else currency)
    for task in tasks:
        planned = planned + task.planned_value
        earned = earned + task.earned_value
        actual = actual + task.actual_cost

    logger.debug("earned_value_aggregated", extra={
        "task_count": len(tasks),
        "planned_value": str(planned.amount),
        "earned_value": str(earned.amount),
        "actual_cost": str(actual.amount),
        "currency": planned.currency.code,
    })

    return EarnedValueTotals(
        planned_value=planned,
        earned_value=earned,
        actual_cost=actual,
    )


def cost_performance_index(earned_value: Amount, actual_cost: Amount) -> Decimal:
    """CPI = EV / AC.  See the module docstring for the zero-AC policy."""
    return _ratio(earned_value, actual_cost)


def schedule_performance_index(earned_value: Amount, planned_value: Amount) -> Decimal:
    """SPI = EV / PV.  See the module docstring for the zero-PV policy."""
    return _ratio(earned_value, planned_value)


def cost_variance(earned_value: Amount, actual_cost: Amount) -> Money | Decimal:
    """CV = EV - AC.  Money in, Money out."""
    return _difference(earned_value, actual_cost)


def schedule_variance(earned_value: Amount, planned_value: Amount) -> Money | Decimal:
    """SV = EV - PV.  Money in, Money out."""
    return _difference(earned_value, planned_value)


def percent_complete(earned_value: Amount, planned_value: Amount) -> Decimal:
    """Earned value as a percentage of planned value (EV / PV * 100)."""
    return _ratio(earned_value, planned_value) * _HUNDRED


def classify_index(value: Decimal | float | int) -> PerformanceRating:
    """
    Classify a CPI or SPI value.

    Bands (lower bound inclusive):
        value > 1.10           -> EXCELLENT
        1.00 <= value <= 1.10  -> GOOD
        0.90 <= value < 1.00   -> ACCEPTABLE
        value < 0.90           -> POOR
    """
    value = _to_decimal(value)
    if value.is_nan():
        return PerformanceRating.POOR
    if value > EXCELLENT_THRESHOLD:
        return PerformanceRating.EXCELLENT
    if value >= GOOD_THRESHOLD:
        return PerformanceRating.GOOD
    if value >= ACCEPTABLE_THRESHOLD:
        return PerformanceRating.ACCEPTABLE
    return PerformanceRating.POOR


def classify_variance(value: Amount | float) -> VarianceTrend:
    """Positive above zero, Negative below, On Track at exactly zero."""
    amount = _to_decimal(value)
    if amount.is_nan():
        return VarianceTrend.ON_TRACK
    if amount > _ZERO:
        return VarianceTrend.POSITIVE
    if amount < _ZERO:
        return VarianceTrend.NEGATIVE
    return VarianceTrend.ON_TRACK


def is_favorable_index(value: Decimal | float | int) -> bool:
    """True when an index shows performance at or better than plan."""
    return _to_decimal(value) >= _ONE


def is_favorable_variance(value: Amount | float) -> bool:
    return _to_decimal(value) >= _ZERO


def budget_position(cpi: Decimal | float | int) -> BudgetPosition:
    """Under budget only when CPI is strictly above 1."""
    if _to_decimal(cpi) > _ONE:
        return BudgetPosition.UNDER_BUDGET
    return BudgetPosition.OVER_BUDGET


def schedule_position(spi: Decimal | float | int) -> SchedulePosition:
    """Ahead of schedule only when SPI is strictly above 1."""
    if _to_decimal(spi) > _ONE:
        return SchedulePosition.AHEAD_OF_SCHEDULE
    return SchedulePosition.BEHIND_SCHEDULE


@traced_engine("earned_value", "1.0", fingerprint_fields=("tasks", "currency"))
def summarize_earned_value(tasks: Sequence[Task], currency: str = "USD") -> EarnedValueSummary:
    """
    Compute every project-level earned-value metric in one pass.

    Preconditions:
        All tasks share one currency.

    Postconditions:
        Each field equals the result of the corresponding single-metric
        function applied to ``aggregate_values(tasks, currency)``.
    """
    totals = aggregate_values(tasks, currency=currency)
    ev, ac, pv = totals.earned_value, totals.actual_cost, totals.planned_value

    cpi = cost_performance_index(ev, ac)
    spi = schedule_performance_index(ev, pv)
    cv = cost_variance(ev, ac)
    sv = schedule_variance(ev, pv)

    summary = EarnedValueSummary(
        totals=totals,
        cost_performance_index=cpi,
        schedule_performance_index=spi,
        cost_variance=cv,
        schedule_variance=sv,
        cpi_rating=classify_index(cpi),
        spi_rating=classify_index(spi),
        cost_variance_trend=classify_variance(cv),
        schedule_variance_trend=classify_variance(sv),
        percent_complete=percent_complete(ev, pv),
        budget_position=budget_position(cpi),
        schedule_position=schedule_position(spi),
    )

    logger.info("earned_value_summarized", extra={
        "task_count": len(tasks),
        "cpi": str(cpi),
        "spi": str(spi),
        "cost_variance": str(cv.amount),
        "schedule_variance": str(sv.amount),
        "cpi_rating": summary.cpi_rating.value,
        "spi_rating": summary.spi_rating.value,
    })

    return summary
