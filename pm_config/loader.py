"""
Project Loader (``pm_config.loader``).

Responsibility
--------------
Loads a YAML project definition and parses it into the frozen entity
records of ``pm_kernel.domain.entities``.  The single public entry point
for callers is ``pm_config.get_active_project()``; the parse functions
here are exposed for tests and tooling.

Architecture position
---------------------
**Config layer** -- the only code that reads files.  Depends on
``pm_kernel`` only; the engines never import it.

Invariants enforced
-------------------
* Shape only: required keys present, enum values recognised, dates parse.
  Business rules (allocated <= capacity, end >= start, probability in
  range, referential ids) are NOT checked; engines tolerate them.
* Numbers become ``Decimal`` via ``str()``; floats never reach arithmetic.
  NaN and infinities are rejected.
* Every parsed object is a frozen dataclass; collections are tuples.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required key  -> ``MissingFieldError``.
* Unknown status/priority/tag  -> ``InvalidEnumValueError``.
* Unparseable date  -> ``InvalidDateError``.
* Unsupported currency  -> ``InvalidCurrencyError``.
* Non-numeric, non-finite or fractional-where-whole value, or a document
  that is not a mapping  -> ``ProjectDefinitionError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

import yaml

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
from pm_kernel.domain.values import Currency, Money
from pm_kernel.exceptions import (
    InvalidDateError,
    InvalidEnumValueError,
    MissingFieldError,
    ProjectDefinitionError,
)

E = TypeVar("E", bound=Enum)

DEFAULT_CURRENCY = "USD"


def load_yaml_file(path: Path) -> Any:
    """
    Load a single YAML file and return its parsed contents (empty dict for an empty file).

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _require(data: dict[str, Any], field: str, entity: str) -> Any:
    if field not in data or data[field] is None:
        raise MissingFieldError(entity, field, entity_id=data.get("id"))
    return data[field]


def parse_date(value: Any, field: str = "date") -> date:
    """Parse a date from YAML (ISO string or date object)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as e:
            raise InvalidDateError(field, value) from e
    raise InvalidDateError(field, value)


def parse_decimal(value: Any, field: str = "value") -> Decimal:
    """
    Convert a YAML scalar to Decimal through its string form.

    Raises:
        ProjectDefinitionError: for booleans, text, ``.nan`` and ``.inf``.
    """
    if isinstance(value, bool):
        raise ProjectDefinitionError(f"Expected a number for '{field}', got {value!r}")
    try:
        number = Decimal(str(value))
    except InvalidOperation as e:
        raise ProjectDefinitionError(f"Expected a number for '{field}', got {value!r}") from e
    if not number.is_finite():
        raise ProjectDefinitionError(f"Expected a finite number for '{field}', got {value!r}")
    return number


def parse_int(value: Any, field: str = "value") -> int:
    """Parse a whole number; ``5.0`` is accepted, ``5.5`` is not."""
    number = parse_decimal(value, field)
    if number != number.to_integral_value():
        raise ProjectDefinitionError(f"Expected a whole number for '{field}', got {value!r}")
    return int(number)


def parse_enum(enum_cls: type[E], value: Any, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError as e:
        raise InvalidEnumValueError(
            field, value, tuple(member.value for member in enum_cls)
        ) from e


def _ids(data: dict[str, Any], field: str) -> tuple[str, ...]:
    return tuple(str(v) for v in (data.get(field) or ()))


# ---------------------------------------------------------------------------
# Entity parsers
# ---------------------------------------------------------------------------


def parse_resource(data: dict[str, Any], currency: Currency) -> Resource:
    """Parse a Resource from a dict."""
    return Resource(
        id=str(_require(data, "id", "resource")),
        name=_require(data, "name", "resource"),
        role=data.get("role", ""),
        department=data.get("department", ""),
        capacity=parse_decimal(_require(data, "capacity", "resource"), "capacity"),
        allocated=parse_decimal(data.get("allocated", 0), "allocated"),
        utilization_rate=parse_decimal(
            _require(data, "utilization_rate", "resource"), "utilization_rate"
        ),
        cost=Money(parse_decimal(data.get("cost", 0), "cost"), currency),
        skills=tuple(data.get("skills") or ()),
        avatar=data.get("avatar"),
    )


def parse_task(data: dict[str, Any], currency: Currency) -> Task:
    """
    Parse a Task from a dict.

    Raises:
        MissingFieldError: if id, title, dates, status or any of the three
            earned-value fields is missing.
    """
    entity = "task"
    return Task(
        id=str(_require(data, "id", entity)),
        title=_require(data, "title", entity),
        description=data.get("description", ""),
        assigned_to=_ids(data, "assigned_to"),
        start_date=parse_date(_require(data, "start_date", entity), "start_date"),
        end_date=parse_date(_require(data, "end_date", entity), "end_date"),
        duration=parse_int(data.get("duration", 0), "duration"),
        progress=parse_decimal(data.get("progress", 0), "progress"),
        status=parse_enum(TaskStatus, _require(data, "status", entity), "status"),
        priority=parse_enum(TaskPriority, data.get("priority", "medium"), "priority"),
        dependencies=_ids(data, "dependencies"),
        planned_value=Money(
            parse_decimal(_require(data, "planned_value", entity), "planned_value"), currency
        ),
        earned_value=Money(
            parse_decimal(_require(data, "earned_value", entity), "earned_value"), currency
        ),
        actual_cost=Money(
            parse_decimal(_require(data, "actual_cost", entity), "actual_cost"), currency
        ),
    )


def parse_milestone(data: dict[str, Any]) -> Milestone:
    entity = "milestone"
    actual = data.get("actual_date")
    return Milestone(
        id=str(_require(data, "id", entity)),
        title=_require(data, "title", entity),
        description=data.get("description", ""),
        target_date=parse_date(_require(data, "target_date", entity), "target_date"),
        actual_date=parse_date(actual, "actual_date") if actual else None,
        status=parse_enum(MilestoneStatus, _require(data, "status", entity), "status"),
        progress=parse_decimal(data.get("progress", 0), "progress"),
        dependent_tasks=_ids(data, "dependent_tasks"),
    )


def parse_risk(data: dict[str, Any]) -> Risk:
    entity = "risk"
    return Risk(
        id=str(_require(data, "id", entity)),
        title=_require(data, "title", entity),
        description=data.get("description", ""),
        category=data.get("category", ""),
        probability=parse_decimal(_require(data, "probability", entity), "probability"),
        impact=parse_decimal(_require(data, "impact", entity), "impact"),
        rag_status=parse_enum(RagStatus, _require(data, "rag_status", entity), "rag_status"),
        owner=str(_require(data, "owner", entity)),
        mitigation_plan=data.get("mitigation_plan", ""),
        date_identified=parse_date(
            _require(data, "date_identified", entity), "date_identified"
        ),
    )


def parse_project(data: dict[str, Any]) -> Project:
    """
    Parse a Project and all of its collections from a dict.

    Preconditions:
        - ``data`` is the mapping under the top-level ``project`` key.

    Postconditions:
        - Every monetary field is Money in the project currency.
        - Collection order matches the document order.
    """
    entity = "project"
    currency = Currency(data.get("currency", DEFAULT_CURRENCY))

    return Project(
        id=str(_require(data, "id", entity)),
        name=_require(data, "name", entity),
        description=data.get("description", ""),
        start_date=parse_date(_require(data, "start_date", entity), "start_date"),
        end_date=parse_date(_require(data, "end_date", entity), "end_date"),
        budget=Money(parse_decimal(_require(data, "budget", entity), "budget"), currency),
        status=parse_enum(ProjectStatus, _require(data, "status", entity), "status"),
        progress=parse_decimal(data.get("progress", 0), "progress"),
        resources=tuple(parse_resource(r, currency) for r in data.get("resources") or ()),
        tasks=tuple(parse_task(t, currency) for t in data.get("tasks") or ()),
        milestones=tuple(parse_milestone(m) for m in data.get("milestones") or ()),
        risks=tuple(parse_risk(r) for r in data.get("risks") or ()),
    )


def load_project_file(path: Path) -> tuple[Project, str]:
    """
    Load and parse a project definition file.

    Returns:
        (project, checksum) where checksum identifies the raw definition.
    """
    raw = load_yaml_file(path)
    if not isinstance(raw, dict):
        raise ProjectDefinitionError(
            f"Expected a mapping at the top of {path}, got {type(raw).__name__}"
        )
    project_data = _require(raw, "project", str(path))
    if not isinstance(project_data, dict):
        raise ProjectDefinitionError(
            f"Expected a mapping under 'project' in {path}, got {type(project_data).__name__}"
        )
    return parse_project(project_data), compute_checksum(raw)
