"""
pm_services.dashboard_service -- Per-view dashboard snapshots.

Responsibility:
    Assembles the plain data each dashboard view displays by calling the
    metrics engines on the project record: the header summary, resource
    overview, task timeline, milestone tracker, risk register and
    earned-value analytics.  Every call recomputes from the record.

Architecture position:
    Services -- composes pure engines (pm_engines) over kernel records
    (pm_kernel).  The only layer that reads the clock, and only through
    an injected ``Clock``.

Invariants enforced:
    - No caching: identical record and date give identical snapshots.
    - No rendering: snapshots carry numbers, enum tags and strings only.
      Colours, icons and currency formatting belong to the renderer.
    - The project record is never mutated.

Failure modes:
    - UnknownViewError from ``render`` for an unknown view id.
    - CurrencyMismatchError if the record mixes currencies.

Usage:
    from pm_config import get_active_project
    from pm_kernel.domain.clock import SystemClock
    from pm_services import DashboardService, DashboardState

    service = DashboardService(get_active_project(), SystemClock())
    state = DashboardState()
    state.select("risks")
    snapshot = service.render(state.active_view)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from pm_engines import (
    BudgetPosition,
    CapacityTotals,
    EarnedValueSummary,
    MilestoneBadge,
    RecordIndex,
    RiskAssessment,
    SchedulePosition,
    UtilizationLevel,
    aggregate_capacity,
    assess_risks,
    average_utilization,
    classify_utilization,
    count_achieved,
    count_by_rag_status,
    days_until,
    milestone_badge,
    resolve_assignee_names,
    resolve_many,
    resolve_owner_name,
    summarize_earned_value,
    utilization_headroom,
)
from pm_kernel.domain.clock import Clock
from pm_kernel.domain.entities import (
    Milestone,
    Project,
    ProjectStatus,
    RagStatus,
    Resource,
    Task,
)
from pm_kernel.domain.values import Money
from pm_kernel.logging_config import LogContext, get_logger
from pm_services.dashboard_state import DashboardView, parse_view

logger = get_logger("services.dashboard")


# ---------------------------------------------------------------------------
# Snapshot records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeaderSnapshot:
    """Project banner and the four headline cards."""

    project_id: str
    name: str
    description: str
    status: ProjectStatus
    progress: Decimal
    start_date: date
    end_date: date
    budget: Money
    earned_value: Money
    cost_performance_index: Decimal
    schedule_performance_index: Decimal
    budget_position: BudgetPosition
    schedule_position: SchedulePosition


@dataclass(frozen=True)
class ResourceRow:
    resource: Resource
    utilization_level: UtilizationLevel
    headroom: Decimal


@dataclass(frozen=True)
class ResourceOverview:
    member_count: int
    totals: CapacityTotals
    average_utilization: Decimal
    rows: tuple[ResourceRow, ...]


@dataclass(frozen=True)
class TaskRow:
    task: Task
    assignee_names: tuple[str, ...]
    dependency_titles: tuple[str, ...]


@dataclass(frozen=True)
class MilestoneRow:
    milestone: Milestone
    days_until: int
    badge: MilestoneBadge


@dataclass(frozen=True)
class MilestoneTracker:
    achieved_count: int
    total_count: int
    rows: tuple[MilestoneRow, ...]


@dataclass(frozen=True)
class RiskRow:
    assessment: RiskAssessment
    owner_name: str


@dataclass(frozen=True)
class RiskRegister:
    rag_counts: dict[RagStatus, int]
    rows: tuple[RiskRow, ...]


@dataclass(frozen=True)
class DashboardSnapshot:
    """
    Everything one view displays.

    Sections a view does not show are None.  The overview shows resources,
    earned value and risks; each other view shows one section.
    """

    view: DashboardView
    as_of: date
    header: HeaderSnapshot
    resources: ResourceOverview | None = None
    tasks: tuple[TaskRow, ...] | None = None
    milestones: MilestoneTracker | None = None
    risks: RiskRegister | None = None
    earned_value: EarnedValueSummary | None = None


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class DashboardService:
    """
    Builds dashboard snapshots for one project.

    Contract:
        Holds the project record and a clock; every method recomputes its
        result from the record through the engines.
    Guarantees:
        - Methods are idempotent for a fixed record and clock date.
        - Dangling ids show as "Unknown"; nothing raises on them.
    Non-goals:
        - Does not format currency, pick colours or render text.
    """

    def __init__(self, project: Project, clock: Clock):
        self._project = project
        self._clock = clock

    @property
    def project(self) -> Project:
        return self._project

    def today(self) -> date:
        return self._clock.today()

    def earned_value(self) -> EarnedValueSummary:
        return summarize_earned_value(self._project.tasks, currency=self._project.currency)

    def header(self, summary: EarnedValueSummary | None = None) -> HeaderSnapshot:
        p = self._project
        summary = summary or self.earned_value()
        return HeaderSnapshot(
            project_id=p.id,
            name=p.name,
            description=p.description,
            status=p.status,
            progress=p.progress,
            start_date=p.start_date,
            end_date=p.end_date,
            budget=p.budget,
            earned_value=summary.totals.earned_value,
            cost_performance_index=summary.cost_performance_index,
            schedule_performance_index=summary.schedule_performance_index,
            budget_position=summary.budget_position,
            schedule_position=summary.schedule_position,
        )

    def resource_overview(self) -> ResourceOverview:
        resources = self._project.resources
        rows = tuple(
            ResourceRow(
                resource=r,
                utilization_level=classify_utilization(r.utilization_rate),
                headroom=utilization_headroom(r),
            )
            for r in resources
        )
        return ResourceOverview(
            member_count=len(resources),
            totals=aggregate_capacity(resources, currency=self._project.currency),
            average_utilization=average_utilization(resources),
            rows=rows,
        )

    def task_timeline(self) -> tuple[TaskRow, ...]:
        resources = RecordIndex(self._project.resources)
        tasks = RecordIndex(self._project.tasks)
        return tuple(
            TaskRow(
                task=t,
                assignee_names=resolve_assignee_names(resources, t.assigned_to),
                dependency_titles=resolve_many(tasks, t.dependencies, attribute="title"),
            )
            for t in self._project.tasks
        )

    def milestone_tracker(self, today: date | None = None) -> MilestoneTracker:
        today = today or self.today()
        milestones = self._project.milestones
        rows = tuple(
            MilestoneRow(
                milestone=m,
                days_until=days_until(m.target_date, today),
                badge=milestone_badge(m, today),
            )
            for m in milestones
        )
        return MilestoneTracker(
            achieved_count=count_achieved(milestones),
            total_count=len(milestones),
            rows=rows,
        )

    def risk_register(self) -> RiskRegister:
        resources = RecordIndex(self._project.resources)
        rows = tuple(
            RiskRow(assessment=a, owner_name=resolve_owner_name(resources, a.risk.owner))
            for a in assess_risks(self._project.risks)
        )
        return RiskRegister(
            rag_counts=count_by_rag_status(self._project.risks),
            rows=rows,
        )

    def render(self, view: DashboardView | str) -> DashboardSnapshot:
        """
        Build the snapshot for one view.

        Raises:
            UnknownViewError: If ``view`` is not a dashboard tab.
        """
        view = parse_view(view)
        t0 = time.monotonic()

        with LogContext.bind(project_id=self._project.id, view=view.value):
            today = self.today()
            summary = self.earned_value()
            header = self.header(summary)

            if view == DashboardView.OVERVIEW:
                snapshot = DashboardSnapshot(
                    view=view,
                    as_of=today,
                    header=header,
                    resources=self.resource_overview(),
                    earned_value=summary,
                    risks=self.risk_register(),
                )
            elif view == DashboardView.RESOURCES:
                snapshot = DashboardSnapshot(
                    view=view, as_of=today, header=header,
                    resources=self.resource_overview(),
                )
            elif view == DashboardView.TASKS:
                snapshot = DashboardSnapshot(
                    view=view, as_of=today, header=header,
                    tasks=self.task_timeline(),
                )
            elif view == DashboardView.MILESTONES:
                snapshot = DashboardSnapshot(
                    view=view, as_of=today, header=header,
                    milestones=self.milestone_tracker(today),
                )
            elif view == DashboardView.RISKS:
                snapshot = DashboardSnapshot(
                    view=view, as_of=today, header=header,
                    risks=self.risk_register(),
                )
            else:
                snapshot = DashboardSnapshot(
                    view=view, as_of=today, header=header,
                    earned_value=summary,
                )

            duration_ms = round((time.monotonic() - t0) * 1000, 2)
            logger.info("dashboard_view_rendered", extra={
                "as_of": today.isoformat(),
                "duration_ms": duration_ms,
            })

        return snapshot
