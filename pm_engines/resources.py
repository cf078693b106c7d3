"""
pm_engines.resources -- Resource capacity and utilization aggregation.

Responsibility:
    Compute team-level capacity statistics (total capacity, allocated
    hours, cost, average utilization) and classify each resource's stored
    utilization rate.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pm_kernel and sibling engine modules.

Invariants enforced:
    - ``utilization_rate`` is an authoritative stored input; it is never
      recomputed from ``allocated / capacity``.
    - Empty input is well defined: totals are zero and the average
      utilization is Decimal("0"); nothing raises and no NaN is produced.
    - Classification is exposed as data (``UtilizationLevel``), not as a
      rendering side effect.

Usage:
    from pm_engines.resources import average_utilization, classify_utilization

    avg = average_utilization(project.resources)     # Decimal("85.6")
    classify_utilization(Decimal("91"))              # UtilizationLevel.CRITICAL
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from pm_kernel.domain.entities import Resource
from pm_kernel.domain.values import Money
from pm_kernel.logging_config import get_logger
from pm_engines.references import RecordIndex, resolve_many, resolve_or_default
from pm_engines.tracer import traced_engine

logger = get_logger("engines.resources")

UTILIZATION_CRITICAL_THRESHOLD = Decimal("90")
UTILIZATION_HIGH_THRESHOLD = Decimal("80")

ResourceIndex = RecordIndex[Resource]


class UtilizationLevel(str, Enum):
    """Load band of a resource's utilization rate."""

    CRITICAL = "Critical"  # over-allocated
    HIGH = "High"
    NORMAL = "Normal"


@dataclass(frozen=True)
class CapacityTotals:
    total_capacity: Decimal
    total_allocated: Decimal
    total_cost: Money


@traced_engine("resources", "1.0", fingerprint_fields=("resources", "currency"))
def aggregate_capacity(resources: Sequence[Resource], currency: str = "USD") -> CapacityTotals:
    """
    Sum capacity hours, allocated hours and cost across ``resources``.

    Postconditions:
        Empty input returns zero hours and zero cost in ``currency``.

    Raises:
        CurrencyMismatchError: If resource costs carry different currencies.
    """
    total_capacity = Decimal("0")
    total_allocated = Decimal("0")
    total_cost = Money.zero(resources[0].cost.currency if resources else currency)

    for resource in resources:
        total_capacity += resource.capacity
        total_allocated += resource.allocated
        total_cost = total_cost + resource.cost

    logger.debug("capacity_aggregated", extra={
        "resource_count": len(resources),
        "total_capacity": str(total_capacity),
        "total_allocated": str(total_allocated),
        "total_cost": str(total_cost.amount),
    })

    return CapacityTotals(
        total_capacity=total_capacity,
        total_allocated=total_allocated,
        total_cost=total_cost,
    )


@traced_engine("resources", "1.0", fingerprint_fields=("resources",))
def average_utilization(resources: Sequence[Resource]) -> Decimal:
    """
    Arithmetic mean of the stored ``utilization_rate`` values.

    Returns Decimal("0") for an empty list.
    """
    if not resources:
        logger.debug("average_utilization_no_resources", extra={})
        return Decimal("0")

    total = sum((r.utilization_rate for r in resources), Decimal("0"))
    return total / Decimal(len(resources))


def classify_utilization(rate: Decimal | float | int) -> UtilizationLevel:
    """
    Classify a utilization percentage.

        rate >= 90        -> CRITICAL
        80 <= rate < 90   -> HIGH
        rate < 80         -> NORMAL
        NaN               -> NORMAL
    """
    rate = rate if isinstance(rate, Decimal) else Decimal(str(rate))
    if rate.is_nan():
        return UtilizationLevel.NORMAL
    if rate >= UTILIZATION_CRITICAL_THRESHOLD:
        return UtilizationLevel.CRITICAL
    if rate >= UTILIZATION_HIGH_THRESHOLD:
        return UtilizationLevel.HIGH
    return UtilizationLevel.NORMAL


def utilization_headroom(resource: Resource) -> Decimal:
    """Unallocated hours (``capacity - allocated``); negative when over-allocated."""
    return resource.capacity - resource.allocated


def over_allocated(resources: Iterable[Resource]) -> tuple[Resource, ...]:
    """Resources whose stored rate falls in the CRITICAL band."""
    return tuple(
        r for r in resources
        if classify_utilization(r.utilization_rate) == UtilizationLevel.CRITICAL
    )


def resolve_resource_name(
    resources: Iterable[Resource] | ResourceIndex,
    resource_id: str,
) -> str:
    """Name of the resource with ``resource_id``, or "Unknown"."""
    return resolve_or_default(resources, resource_id)


def resolve_assignee_names(
    resources: Iterable[Resource] | ResourceIndex,
    resource_ids: Iterable[str],
) -> tuple[str, ...]:
    """Names for a task's ``assigned_to`` list, in order; dangling ids -> "Unknown"."""
    return resolve_many(resources, resource_ids)
