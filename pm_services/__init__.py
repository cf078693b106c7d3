"""
pm_services -- Package init and public API.

Responsibility:
    Presentation-side assembly over the pure metrics engines: dashboard
    view selection and per-view snapshots.  This is the only layer that
    reads the current date, and only through an injected Clock.

Architecture position:
    Services -- composes engines + kernel records.

    Dependency direction (enforced by tests/architecture/test_import_boundaries.py):
        pm_services/ -> pm_engines/  (allowed)
        pm_services/ -> pm_kernel/   (allowed)
        pm_engines/  -> pm_services/ (FORBIDDEN)
        pm_kernel/   -> pm_services/ (FORBIDDEN)
"""

from pm_kernel.logging_config import get_logger

logger = get_logger("services")

from pm_services.dashboard_service import (
    DashboardService,
    DashboardSnapshot,
    HeaderSnapshot,
    MilestoneRow,
    MilestoneTracker,
    ResourceOverview,
    ResourceRow,
    RiskRegister,
    RiskRow,
    TaskRow,
)
from pm_services.dashboard_state import (
    DEFAULT_VIEW,
    DashboardState,
    DashboardView,
    parse_view,
)

__all__ = [
    "DEFAULT_VIEW",
    "DashboardService",
    "DashboardSnapshot",
    "DashboardState",
    "DashboardView",
    "HeaderSnapshot",
    "MilestoneRow",
    "MilestoneTracker",
    "ResourceOverview",
    "ResourceRow",
    "RiskRegister",
    "RiskRow",
    "TaskRow",
    "parse_view",
]
