"""
Module: pm_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    metrics engine sub-modules.  This is the canonical import surface for
    the presentation layer (pm_services, scripts).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pm_kernel (and sibling engine modules).
    MUST NOT import pm_config or pm_services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates must be passed in as explicit parameters.
    - Decimal-only arithmetic: monetary amounts use ``Money``; rates and
      indices are ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.
    - Fault tolerance: dangling ids resolve to "Unknown" and zero
      denominators resolve to defined values; nothing raises for
      well-typed single-currency input.

Usage:
    from pm_engines import summarize_earned_value, average_utilization
    from pm_engines import risk_score, risk_level, days_until
"""

from pm_kernel.logging_config import get_logger

logger = get_logger("engines")

from pm_engines.earned_value import (
    BudgetPosition,
    EarnedValueSummary,
    EarnedValueTotals,
    PerformanceRating,
    SchedulePosition,
    VarianceTrend,
    aggregate_values,
    budget_position,
    classify_index,
    classify_variance,
    cost_performance_index,
    cost_variance,
    is_favorable_index,
    is_favorable_variance,
    percent_complete,
    schedule_performance_index,
    schedule_position,
    schedule_variance,
    summarize_earned_value,
)
from pm_engines.milestones import (
    BadgeKind,
    MilestoneBadge,
    count_achieved,
    days_until,
    milestone_badge,
)
from pm_engines.references import (
    UNKNOWN,
    RecordIndex,
    resolve_many,
    resolve_or_default,
)
from pm_engines.resources import (
    CapacityTotals,
    ResourceIndex,
    UtilizationLevel,
    aggregate_capacity,
    average_utilization,
    classify_utilization,
    over_allocated,
    resolve_assignee_names,
    resolve_resource_name,
    utilization_headroom,
)
from pm_engines.risk import (
    RiskAssessment,
    RiskLevel,
    assess_risk,
    assess_risks,
    count_by_rag_status,
    resolve_owner_name,
    risk_level,
    risk_score,
)

__all__ = [
    # Earned value
    "EarnedValueTotals",
    "EarnedValueSummary",
    "PerformanceRating",
    "VarianceTrend",
    "BudgetPosition",
    "SchedulePosition",
    "aggregate_values",
    "cost_performance_index",
    "schedule_performance_index",
    "cost_variance",
    "schedule_variance",
    "percent_complete",
    "classify_index",
    "classify_variance",
    "is_favorable_index",
    "is_favorable_variance",
    "budget_position",
    "schedule_position",
    "summarize_earned_value",
    # Resources
    "CapacityTotals",
    "ResourceIndex",
    "UtilizationLevel",
    "aggregate_capacity",
    "average_utilization",
    "classify_utilization",
    "utilization_headroom",
    "over_allocated",
    "resolve_resource_name",
    "resolve_assignee_names",
    # Risk
    "RiskLevel",
    "RiskAssessment",
    "risk_score",
    "risk_level",
    "assess_risk",
    "assess_risks",
    "count_by_rag_status",
    "resolve_owner_name",
    # Milestones
    "BadgeKind",
    "MilestoneBadge",
    "days_until",
    "milestone_badge",
    "count_achieved",
    # References
    "UNKNOWN",
    "RecordIndex",
    "resolve_or_default",
    "resolve_many",
]

logger.debug("engines_package_loaded", extra={
    "modules": ["earned_value", "resources", "risk", "milestones", "references"],
})
