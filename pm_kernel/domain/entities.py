"""
Entities -- Immutable records for a single project.

Responsibility:
    Defines the Project aggregate root and the four record types it owns
    (Resource, Task, Milestone, Risk), plus the closed enumerations used for
    their status, priority and severity fields.

Architecture position:
    Kernel > Domain -- pure records, zero I/O.
    Constructed once by ``pm_config.loader`` and read by ``pm_engines``.

Invariants enforced:
    - All records are frozen; collections are tuples.
    - Monetary fields are Money; hours and percentages are Decimal.

Non-goals:
    - No business validation at construction.  Referential ids
      (``assigned_to``, ``owner``, ``dependencies``, ``dependent_tasks``)
      may dangle; ``allocated`` may exceed ``capacity``; dates may be
      inverted.  Engines compute on the values as given.
    - ``utilization_rate``, ``progress`` and ``rag_status`` are authored
      inputs, never recomputed from other fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from pm_kernel.domain.values import Money


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class MilestoneStatus(str, Enum):
    """Delivery status of a milestone."""

    UPCOMING = "upcoming"
    ACHIEVED = "achieved"
    DELAYED = "delayed"
    AT_RISK = "at-risk"


class RagStatus(str, Enum):
    """Red/Amber/Green severity tag authored per risk."""

    RED = "red"
    AMBER = "amber"
    GREEN = "green"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Resource:
    """
    A team member available to the project.

    ``capacity`` and ``allocated`` are hours per period.  ``utilization_rate``
    is a stored percentage and is authoritative: it is not derived from
    ``allocated / capacity``.
    """

    id: str
    name: str
    role: str
    department: str
    capacity: Decimal
    allocated: Decimal
    utilization_rate: Decimal
    cost: Money
    skills: tuple[str, ...] = ()
    avatar: str | None = None


@dataclass(frozen=True)
class Task:
    """
    A unit of scheduled work with its earned-value fields.

    ``planned_value``, ``earned_value`` and ``actual_cost`` are authored
    independently; none is derived from ``progress``.  ``duration`` is a
    stored day count and need not equal ``end_date - start_date``.
    """

    id: str
    title: str
    description: str
    start_date: date
    end_date: date
    duration: int
    progress: Decimal
    status: TaskStatus
    priority: TaskPriority
    planned_value: Money
    earned_value: Money
    actual_cost: Money
    assigned_to: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class Milestone:
    id: str
    title: str
    description: str
    target_date: date
    status: MilestoneStatus
    progress: Decimal
    actual_date: date | None = None
    dependent_tasks: tuple[str, ...] = ()

    @property
    def is_achieved(self) -> bool:
        return self.status == MilestoneStatus.ACHIEVED


@dataclass(frozen=True)
class Risk:
    """
    An identified project risk.

    ``rag_status`` is authored by the risk owner and may disagree with the
    level computed from ``probability`` and ``impact``; both signals are
    kept.
    """

    id: str
    title: str
    description: str
    category: str
    probability: Decimal
    impact: Decimal
    rag_status: RagStatus
    owner: str
    mitigation_plan: str
    date_identified: date


@dataclass(frozen=True)
class Project:
    """
    Aggregate root: one project and everything it owns.

    Contract:
        Loaded once and never mutated.  ``progress`` is an authored rollup
        and is not computed from task progress.
    """

    id: str
    name: str
    description: str
    start_date: date
    end_date: date
    budget: Money
    status: ProjectStatus
    progress: Decimal
    tasks: tuple[Task, ...] = ()
    resources: tuple[Resource, ...] = ()
    milestones: tuple[Milestone, ...] = ()
    risks: tuple[Risk, ...] = ()

    @property
    def currency(self) -> str:
        """ISO 4217 code the project is budgeted in."""
        return self.budget.currency.code
