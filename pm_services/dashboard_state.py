"""
pm_services.dashboard_state -- Dashboard view selection.

Responsibility:
    Holds the presentation layer's one piece of transient state: which
    dashboard view (tab) is active.  The views form a closed enumeration.

Architecture position:
    Services -- presentation-side state.  Owned by the caller; the engines
    never see it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pm_kernel.exceptions import UnknownViewError
from pm_kernel.logging_config import get_logger

logger = get_logger("services.dashboard_state")


class DashboardView(str, Enum):
    """The dashboard tabs, in display order."""

    OVERVIEW = "overview"
    RESOURCES = "resources"
    TASKS = "tasks"
    MILESTONES = "milestones"
    RISKS = "risks"
    ANALYTICS = "analytics"

    @property
    def label(self) -> str:
        return self.value.capitalize()


DEFAULT_VIEW = DashboardView.OVERVIEW


def parse_view(view: DashboardView | str) -> DashboardView:
    """
    Coerce a view id to ``DashboardView``.

    Raises:
        UnknownViewError: If ``view`` is not one of the dashboard tabs.
    """
    if isinstance(view, DashboardView):
        return view
    try:
        return DashboardView(view.strip().lower())
    except (ValueError, AttributeError) as e:
        raise UnknownViewError(str(view)) from e


@dataclass
class DashboardState:
    """Active-view selector.  Starts on the overview."""

    active_view: DashboardView = DEFAULT_VIEW

    def select(self, view: DashboardView | str) -> DashboardView:
        """Switch the active view; unknown ids raise and leave state unchanged."""
        selected = parse_view(view)
        if selected != self.active_view:
            logger.debug("dashboard_view_selected", extra={
                "previous_view": self.active_view.value,
                "view": selected.value,
            })
        self.active_view = selected
        return selected

    def is_active(self, view: DashboardView | str) -> bool:
        return parse_view(view) == self.active_view
