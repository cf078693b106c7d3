"""
Hypothesis property tests for the metrics engines.

Properties checked:
- Earned-value totals are order independent and partition additive
- Indices never produce NaN, including zero denominators
- risk_score stays within [0, 100] and is monotonic in each argument
- risk_score is zero whenever either factor is zero
- risk_level classifies every Decimal, NaN and infinities included
- average_utilization lies between the smallest and largest rate
- days_until is antisymmetric
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from pm_engines.earned_value import (
    aggregate_values,
    cost_performance_index,
    schedule_performance_index,
)
from pm_engines.milestones import days_until
from pm_engines.resources import average_utilization
from pm_engines.risk import RiskLevel, risk_level, risk_score
from pm_kernel.domain.entities import Resource, Task, TaskPriority, TaskStatus
from pm_kernel.domain.values import Money

amounts = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("10000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
percentages = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("100"),
    places=1,
    allow_nan=False,
    allow_infinity=False,
)
dates = st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 12, 31))


@composite
def tasks(draw, index=st.integers(min_value=0, max_value=10_000)):
    n = draw(index)
    return Task(
        id=f"task-{n}",
        title=f"Task {n}",
        description="",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 2, 1),
        duration=31,
        progress=Decimal("0"),
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.MEDIUM,
        planned_value=Money(draw(amounts), "USD"),
        earned_value=Money(draw(amounts), "USD"),
        actual_cost=Money(draw(amounts), "USD"),
    )


@composite
def resources(draw):
    return Resource(
        id="res",
        name="Resource",
        role="",
        department="",
        capacity=Decimal("40"),
        allocated=Decimal("0"),
        utilization_rate=draw(percentages),
        cost=Money.zero("USD"),
    )


class TestEarnedValueProperties:

    @given(st.lists(tasks(), max_size=20), st.randoms())
    @settings(max_examples=100)
    def test_order_independent(self, task_list, rnd):
        shuffled = list(task_list)
        rnd.shuffle(shuffled)

        assert aggregate_values(task_list) == aggregate_values(shuffled)

    @given(st.lists(tasks(), max_size=20), st.integers(min_value=0, max_value=20))
    @settings(max_examples=100)
    def test_partition_additive(self, task_list, cut):
        head, tail = task_list[:cut], task_list[cut:]

        whole = aggregate_values(task_list)
        left = aggregate_values(head)
        right = aggregate_values(tail)

        assert left.earned_value + right.earned_value == whole.earned_value
        assert left.actual_cost + right.actual_cost == whole.actual_cost
        assert left.planned_value + right.planned_value == whole.planned_value

    @given(amounts, amounts)
    def test_indices_never_nan(self, numerator, denominator):
        ev = Money(numerator, "USD")
        other = Money(denominator, "USD")

        assert not cost_performance_index(ev, other).is_nan()
        assert not schedule_performance_index(ev, other).is_nan()


class TestRiskScoreProperties:

    @given(percentages, percentages)
    def test_bounded(self, probability, impact):
        score = risk_score(probability, impact)

        assert Decimal("0") <= score <= Decimal("100")

    @given(percentages, percentages, percentages)
    def test_monotonic_in_probability(self, p1, p2, impact):
        lo, hi = sorted((p1, p2))

        assert risk_score(lo, impact) <= risk_score(hi, impact)

    @given(percentages, percentages, percentages)
    def test_monotonic_in_impact(self, probability, i1, i2):
        lo, hi = sorted((i1, i2))

        assert risk_score(probability, lo) <= risk_score(probability, hi)

    @given(st.decimals(allow_nan=False, allow_infinity=False))
    def test_zero_factor_scores_zero(self, other):
        assert risk_score(0, other) == 0
        assert risk_score(other, 0) == 0

    @given(st.decimals())
    def test_level_total_over_any_decimal(self, score):
        assert risk_level(score) in set(RiskLevel)


class TestUtilizationProperties:

    @given(st.lists(resources(), min_size=1, max_size=30))
    def test_average_within_range(self, resource_list):
        rates = [r.utilization_rate for r in resource_list]

        avg = average_utilization(resource_list)

        assert min(rates) <= avg <= max(rates)


class TestDaysUntilProperties:

    @given(dates, dates)
    def test_antisymmetric(self, a, b):
        assert days_until(a, b) == -days_until(b, a)

    @given(dates, st.integers(min_value=-3650, max_value=3650))
    def test_offset_round_trip(self, today, offset):
        assert days_until(today + timedelta(days=offset), today) == offset
