#!/usr/bin/env python3
"""
View the project dashboard in the terminal.

Loads a project definition (the bundled Digital Transformation Initiative
by default), computes the metrics for one dashboard view and prints them
as plain text.

Usage:
    python3 scripts/view_dashboard.py
    python3 scripts/view_dashboard.py --view risks
    python3 scripts/view_dashboard.py --view milestones --today 2024-06-01
    python3 scripts/view_dashboard.py --project path/to/project.yaml --log-level DEBUG
"""

import argparse
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from pm_config import DEFAULT_PROJECT_FILE, get_active_project
from pm_engines import BadgeKind
from pm_kernel.domain.clock import DeterministicClock, SystemClock
from pm_kernel.exceptions import ProjectKernelError
from pm_kernel.logging_config import configure_logging
from pm_services import DashboardService, DashboardState, DashboardView


# ===================================================================
# Pretty-print helpers
# ===================================================================

W = 72  # total line width
VAL_W = 20  # value column width


def _hdr(title: str, subtitle: str = "") -> str:
    lines = ["", "=" * W, title.center(W)]
    if subtitle:
        lines.append(subtitle.center(W))
    lines.append("=" * W)
    return "\n".join(lines)


def _section(title: str) -> str:
    return f"\n  {title}\n  {'-' * len(title)}"


def _row(label: str, value: object, indent: int = 0) -> str:
    name = f"{'  ' * indent}{label}"
    return f"  {name:<{W - VAL_W - 2}}{str(value):>{VAL_W}}"


def _money(m) -> str:
    """Format Money as $1,234,567.00 (negatives in parentheses)."""
    if not m.amount.is_finite():
        return str(m.amount)
    formatted = f"{m.currency.symbol}{abs(m.round()).amount:,}"
    return f"({formatted})" if m.is_negative else formatted


def _num(d: Decimal, places: int = 2) -> str:
    if not d.is_finite():
        return str(d)
    return f"{d:.{places}f}"


def _pct(d: Decimal) -> str:
    return "n/a" if not d.is_finite() else f"{d:.1f}%"


# ===================================================================
# View printers
# ===================================================================


def print_header(h) -> None:
    print(_hdr(h.name.upper(), h.description))
    print(_row("Status", h.status.value))
    print(_row("Progress", _pct(h.progress)))
    print(_row("Period", f"{h.start_date} .. {h.end_date}"))
    print(_row("Budget", _money(h.budget)))
    print(_row("Earned value", _money(h.earned_value)))
    print(_row("CPI", f"{_num(h.cost_performance_index)} {h.budget_position.value}"))
    print(_row("SPI", f"{_num(h.schedule_performance_index)} {h.schedule_position.value}"))


def print_resources(r) -> None:
    print(_section(f"RESOURCES ({r.member_count} members)"))
    print(_row("Total capacity (h)", _num(r.totals.total_capacity, 0)))
    print(_row("Total allocated (h)", _num(r.totals.total_allocated, 0)))
    print(_row("Total cost", _money(r.totals.total_cost)))
    print(_row("Average utilization", _pct(r.average_utilization)))
    for row in r.rows:
        res = row.resource
        print(_row(
            f"{res.name} ({res.role})",
            f"{_pct(res.utilization_rate)} {row.utilization_level.value}",
            indent=1,
        ))


def print_earned_value(ev) -> None:
    t = ev.totals
    print(_section("EARNED VALUE"))
    print(_row("Planned value", _money(t.planned_value)))
    print(_row("Earned value", _money(t.earned_value)))
    print(_row("Actual cost", _money(t.actual_cost)))
    print(_row("CPI", f"{_num(ev.cost_performance_index)} {ev.cpi_rating.value}"))
    print(_row("SPI", f"{_num(ev.schedule_performance_index)} {ev.spi_rating.value}"))
    print(_row("Cost variance", f"{_money(ev.cost_variance)} {ev.cost_variance_trend.value}"))
    print(_row(
        "Schedule variance",
        f"{_money(ev.schedule_variance)} {ev.schedule_variance_trend.value}",
    ))
    print(_row("Percent complete", _pct(ev.percent_complete)))


def print_risks(reg) -> None:
    counts = ", ".join(f"{tag.value}={n}" for tag, n in reg.rag_counts.items())
    print(_section(f"RISKS ({counts})"))
    for row in reg.rows:
        a = row.assessment
        print(_row(
            f"[{a.rag_status.value.upper()}] {a.risk.title}",
            f"{_num(a.score, 1)} {a.level.value}",
        ))
        print(_row(f"owner: {row.owner_name}", "", indent=1))


def print_tasks(rows) -> None:
    print(_section(f"TASKS ({len(rows)})"))
    for row in rows:
        t = row.task
        print(_row(t.title, f"{_pct(t.progress)} {t.status.value}"))
        print(_row(f"{t.start_date} .. {t.end_date}", t.priority.value, indent=1))
        if row.assignee_names:
            print(_row("assigned: " + ", ".join(row.assignee_names), "", indent=1))
        if row.dependency_titles:
            print(_row("after: " + ", ".join(row.dependency_titles), "", indent=1))


def _badge_text(badge) -> str:
    if badge.kind == BadgeKind.DAYS_REMAINING:
        return f"{badge.days_remaining} days left"
    if badge.kind == BadgeKind.COMPLETED_ON:
        return f"done {badge.completed_on}"
    return ""


def print_milestones(tracker) -> None:
    print(_section(f"MILESTONES ({tracker.achieved_count}/{tracker.total_count} achieved)"))
    for row in tracker.rows:
        m = row.milestone
        print(_row(f"{m.title} ({m.target_date})", m.status.value))
        badge = _badge_text(row.badge)
        if badge:
            print(_row(badge, "", indent=1))


def print_snapshot(snapshot) -> None:
    print_header(snapshot.header)
    print(_row("View", snapshot.view.label))
    print(_row("As of", snapshot.as_of.isoformat()))
    if snapshot.resources is not None:
        print_resources(snapshot.resources)
    if snapshot.earned_value is not None:
        print_earned_value(snapshot.earned_value)
    if snapshot.risks is not None:
        print_risks(snapshot.risks)
    if snapshot.tasks is not None:
        print_tasks(snapshot.tasks)
    if snapshot.milestones is not None:
        print_milestones(snapshot.milestones)
    print()


# ===================================================================
# Entry point
# ===================================================================


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Project metrics dashboard")
    parser.add_argument("--view", default=DashboardView.OVERVIEW.value,
                        choices=[v.value for v in DashboardView],
                        help="Dashboard tab to print")
    parser.add_argument("--project", type=Path, default=DEFAULT_PROJECT_FILE,
                        help="Project definition YAML")
    parser.add_argument("--today", type=str, default=None,
                        help="Evaluate as of this date (YYYY-MM-DD)")
    parser.add_argument("--log-level", default="WARNING",
                        help="Structured log level written to stderr")
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)

    if args.today:
        try:
            clock = DeterministicClock.on(date.fromisoformat(args.today))
        except ValueError:
            print(f"  ERROR: --today must be YYYY-MM-DD, got {args.today!r}", file=sys.stderr)
            return 2
    else:
        clock = SystemClock()

    try:
        project = get_active_project(args.project)
    except FileNotFoundError:
        print(f"  ERROR: project file not found: {args.project}", file=sys.stderr)
        return 1
    except ProjectKernelError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1

    state = DashboardState()
    state.select(args.view)
    print_snapshot(DashboardService(project, clock).render(state.active_view))
    return 0


if __name__ == "__main__":
    sys.exit(main())
