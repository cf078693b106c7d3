"""
Pytest fixtures for the project metrics test suite.

Provides:
- Structured logging setup and log capture
- The bundled Digital Transformation Initiative project
- Deterministic clocks
- Record factories for hand-built tasks, resources, milestones and risks
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from pm_config import get_active_project
from pm_kernel.domain.clock import DeterministicClock
from pm_kernel.domain.entities import (
    Milestone,
    MilestoneStatus,
    Project,
    ProjectStatus,
    RagStatus,
    Resource,
    Risk,
    Task,
    TaskPriority,
    TaskStatus,
)
from pm_kernel.domain.values import Money
from pm_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture pm_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, project):
            summarize_earned_value(project.tasks)
            logs = captured_logs()
            assert any(r["message"] == "earned_value_summarized" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("pm_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Project fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project() -> Project:
    """The bundled Digital Transformation Initiative."""
    return get_active_project()


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock()


@pytest.fixture
def mid_project_clock():
    """Clock fixed on 2024-08-01, between the beta and launch milestones."""
    return DeterministicClock.on(date(2024, 8, 1))


# =============================================================================
# Record factories
# =============================================================================


@pytest.fixture
def make_task():
    """Build a Task with only the earned-value fields that matter to a test."""

    def _make(
        planned_value="0",
        earned_value="0",
        actual_cost="0",
        *,
        id="task-x",
        title="Task",
        currency="USD",
        assigned_to=(),
        dependencies=(),
        status=TaskStatus.IN_PROGRESS,
    ) -> Task:
        return Task(
            id=id,
            title=title,
            description="",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 2, 1),
            duration=31,
            progress=Decimal("50"),
            status=status,
            priority=TaskPriority.MEDIUM,
            planned_value=Money.of(planned_value, currency),
            earned_value=Money.of(earned_value, currency),
            actual_cost=Money.of(actual_cost, currency),
            assigned_to=tuple(assigned_to),
            dependencies=tuple(dependencies),
        )

    return _make


@pytest.fixture
def make_resource():
    def _make(
        utilization_rate="80",
        *,
        id="res-x",
        name="Resource",
        capacity="40",
        allocated="32",
        cost="1000",
        currency="USD",
    ) -> Resource:
        return Resource(
            id=id,
            name=name,
            role="Engineer",
            department="Engineering",
            capacity=Decimal(capacity),
            allocated=Decimal(allocated),
            utilization_rate=Decimal(utilization_rate),
            cost=Money.of(cost, currency),
        )

    return _make


@pytest.fixture
def make_risk():
    def _make(
        probability="50",
        impact="50",
        *,
        id="risk-x",
        rag_status=RagStatus.AMBER,
        owner="res-x",
    ) -> Risk:
        return Risk(
            id=id,
            title=f"Risk {id}",
            description="",
            category="Technical",
            probability=Decimal(probability),
            impact=Decimal(impact),
            rag_status=rag_status,
            owner=owner,
            mitigation_plan="",
            date_identified=date(2024, 1, 1),
        )

    return _make


@pytest.fixture
def make_milestone():
    def _make(
        target_date=date(2024, 9, 30),
        status=MilestoneStatus.UPCOMING,
        *,
        id="mile-x",
        actual_date=None,
    ) -> Milestone:
        return Milestone(
            id=id,
            title=f"Milestone {id}",
            description="",
            target_date=target_date,
            status=status,
            progress=Decimal("0"),
            actual_date=actual_date,
        )

    return _make


@pytest.fixture
def empty_project() -> Project:
    """A project with no tasks, resources, milestones or risks."""
    return Project(
        id="proj-empty",
        name="Empty",
        description="",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        budget=Money.of("0", "USD"),
        status=ProjectStatus.PLANNING,
        progress=Decimal("0"),
    )
