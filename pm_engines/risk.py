"""
pm_engines.risk -- Risk scoring and severity aggregation.

Responsibility:
    Derive a numeric score and categorical level for each risk from its
    probability and impact, and count risks by their authored RAG tag.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pm_kernel and sibling engine modules.

Invariants enforced:
    - ``risk_score`` stays within [0, 100] for inputs in [0, 100] and is
      monotonic non-decreasing in each argument.
    - ``count_by_rag_status`` groups by the authored ``rag_status`` tag,
      never by the computed ``risk_level``.  The two signals may disagree
      and both are kept as-is.
    - Counts are sparse: a tag with no risks has no key.

Usage:
    from pm_engines.risk import risk_score, risk_level

    score = risk_score(Decimal("70"), Decimal("90"))   # Decimal("63")
    risk_level(score)                                  # RiskLevel.HIGH
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from pm_kernel.domain.entities import RagStatus, Resource, Risk
from pm_kernel.logging_config import get_logger
from pm_engines.references import RecordIndex, resolve_or_default
from pm_engines.tracer import traced_engine

logger = get_logger("engines.risk")

RISK_CRITICAL_THRESHOLD = Decimal("70")
RISK_HIGH_THRESHOLD = Decimal("50")
RISK_MEDIUM_THRESHOLD = Decimal("30")

_HUNDRED = Decimal("100")


class RiskLevel(str, Enum):
    """Computed severity band of a risk score."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True)
class RiskAssessment:
    """A risk paired with its computed score and level."""

    risk: Risk
    score: Decimal
    level: RiskLevel

    @property
    def rag_status(self) -> RagStatus:
        return self.risk.rag_status


def _as_decimal(value: Decimal | float | int) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def risk_score(probability: Decimal | float | int, impact: Decimal | float | int) -> Decimal:
    """Score = probability * impact / 100."""
    return _as_decimal(probability) * _as_decimal(impact) / _HUNDRED


def risk_level(score: Decimal | float | int) -> RiskLevel:
    """
    Classify a risk score.

        score >= 70        -> CRITICAL
        50 <= score < 70   -> HIGH
        30 <= score < 50   -> MEDIUM
        score < 30         -> LOW
        NaN                -> LOW
    """
    score = _as_decimal(score)
    if score.is_nan():
        return RiskLevel.LOW
    if score >= RISK_CRITICAL_THRESHOLD:
        return RiskLevel.CRITICAL
    if score >= RISK_HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if score >= RISK_MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def assess_risk(risk: Risk) -> RiskAssessment:
    score = risk_score(risk.probability, risk.impact)
    return RiskAssessment(risk=risk, score=score, level=risk_level(score))


@traced_engine("risk", "1.0", fingerprint_fields=("risks",))
def assess_risks(risks: Sequence[Risk]) -> tuple[RiskAssessment, ...]:
    """Assess every risk, preserving input order."""
    assessments = tuple(assess_risk(r) for r in risks)

    divergent = [
        a.risk.id for a in assessments
        if _tag_band(a.rag_status) != _level_band(a.level)
    ]
    if divergent:
        logger.debug("risk_rag_level_divergence", extra={
            "risk_ids": divergent,
        })

    return assessments


@traced_engine("risk", "1.0", fingerprint_fields=("risks",))
def count_by_rag_status(risks: Iterable[Risk]) -> dict[RagStatus, int]:
    """
    Count risks per authored RAG tag.

    Postconditions:
        Keys appear in order of first occurrence; tags with zero risks are
        absent.
    """
    counts: dict[RagStatus, int] = {}
    for risk in risks:
        counts[risk.rag_status] = counts.get(risk.rag_status, 0) + 1
    return counts


def resolve_owner_name(
    resources: Iterable[Resource] | RecordIndex[Resource],
    owner_id: str,
) -> str:
    """Name of the owning resource, or "Unknown"."""
    return resolve_or_default(resources, owner_id)


# Coarse bands used only to flag tag/level disagreement in logs.
def _tag_band(tag: RagStatus) -> int:
    return {RagStatus.GREEN: 0, RagStatus.AMBER: 1, RagStatus.RED: 2}[tag]


def _level_band(level: RiskLevel) -> int:
    return {
        RiskLevel.LOW: 0,
        RiskLevel.MEDIUM: 1,
        RiskLevel.HIGH: 1,
        RiskLevel.CRITICAL: 2,
    }[level]
