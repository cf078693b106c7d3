"""
Typed Exception Hierarchy for the Project Kernel.

===============================================================================
WHERE EXCEPTIONS SURFACE
===============================================================================

The metrics engines are display-oriented and fault tolerant: a dangling
resource id resolves to "Unknown", a zero denominator resolves to a defined
index value. No engine operation raises for well-typed input.

Exceptions surface at the edges instead:
  - Loading a project definition (missing keys, unknown enum values,
    unparseable dates)
  - Value-object construction (unknown ISO 4217 code, mixed currencies)
  - Dashboard view selection (unknown view id)

Every exception has a CODE class attribute (machine-readable) and carries
its context as attributes, so callers catch by type and read fields rather
than parsing messages:

    try:
        project = get_active_project(path)
    except InvalidEnumValueError as e:
        print(f"{e.field}: {e.value!r} not in {e.allowed}")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ProjectKernelError (base)
    |
    +-- ProjectDefinitionError
    |   +-- MissingFieldError
    |   +-- InvalidEnumValueError
    |   +-- InvalidDateError
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- DashboardError
        +-- UnknownViewError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Definition      | MISSING_FIELD               | Required key absent from a record
                | INVALID_ENUM_VALUE          | Status/priority/tag not recognised
                | INVALID_DATE                | Date value is not ISO 8601
----------------|-----------------------------|-----------------------------------------
Currency        | INVALID_CURRENCY            | Not a supported ISO 4217 code
                | CURRENCY_MISMATCH           | Mixed currencies in one operation
----------------|-----------------------------|-----------------------------------------
Dashboard       | UNKNOWN_VIEW                | View id not one of the dashboard tabs
"""

from __future__ import annotations


class ProjectKernelError(Exception):
    """
    Base exception for all project kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "PROJECT_KERNEL_ERROR"


# Project definition exceptions


class ProjectDefinitionError(ProjectKernelError):
    """Base exception for malformed project definitions."""

    code: str = "PROJECT_DEFINITION_INVALID"


class MissingFieldError(ProjectDefinitionError):
    """A required field is missing from an entity record."""

    code: str = "MISSING_FIELD"

    def __init__(self, entity: str, field: str, entity_id: str | None = None):
        self.entity = entity
        self.field = field
        self.entity_id = entity_id
        where = f"{entity} {entity_id}" if entity_id else entity
        super().__init__(f"Missing required field '{field}' on {where}")


class InvalidEnumValueError(ProjectDefinitionError):
    """A closed-enumeration field holds an unrecognised value."""

    code: str = "INVALID_ENUM_VALUE"

    def __init__(self, field: str, value: object, allowed: tuple[str, ...]):
        self.field = field
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid value {value!r} for '{field}'; "
            f"expected one of: {', '.join(allowed)}"
        )


class InvalidDateError(ProjectDefinitionError):
    """A date field could not be parsed."""

    code: str = "INVALID_DATE"

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Cannot parse date for '{field}' from {value!r}")


# Currency exceptions


class CurrencyError(ProjectKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Invalid ISO 4217 currency code provided."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: '{currency}'")


class CurrencyMismatchError(CurrencyError):
    """Attempted operation on mismatched currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, currency1: str, currency2: str):
        self.currency1 = currency1
        self.currency2 = currency2
        super().__init__(f"Currency mismatch: {currency1} vs {currency2}")


# Dashboard exceptions


class DashboardError(ProjectKernelError):
    """Base exception for dashboard view errors."""

    code: str = "DASHBOARD_ERROR"


class UnknownViewError(DashboardError):
    """Requested dashboard view does not exist."""

    code: str = "UNKNOWN_VIEW"

    def __init__(self, view: str):
        self.view = view
        super().__init__(f"Unknown dashboard view: '{view}'")
