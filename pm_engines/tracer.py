"""
pm_engines.tracer -- PM_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps a pure engine function and, after each call,
    logs one PM_ENGINE_TRACE record naming the engine, its version, a
    fingerprint of the selected inputs and the call duration.  Two calls
    with equal inputs log the same fingerprint, so a dashboard figure can
    be matched to the data that produced it.

Architecture position:
    Engines -- support code.  Emits a log record only; never touches the
    arguments or the return value.

Invariants enforced:
    - Fingerprints are SHA-256 over a canonical text form of the selected
      arguments (mapping keys sorted, sequence order kept), truncated to
      16 hex characters.
    - Positional and keyword calls bind to the same parameter names, so
      ``f(tasks)`` and ``f(tasks=tasks)`` fingerprint alike.
    - A selected parameter that was not passed counts as "null".
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

_logger = logging.getLogger("pm_kernel.engines.tracer")

TRACE_TYPE = "PM_ENGINE_TRACE"
FINGERPRINT_LENGTH = 16


def _canonicalize(value: Any) -> str:
    """Stable text form of an argument for hashing."""
    match value:
        case None:
            return "null"
        case Enum():
            return str(value.value)
        case str():
            return value
        case bool() | int() | float() | Decimal():
            return str(value)
        case Mapping():
            pairs = sorted(value.items(), key=lambda kv: str(kv[0]))
            return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in pairs) + "}"
        case list() | tuple():
            return "[" + ",".join(_canonicalize(v) for v in value) + "]"
        case _:
            # Frozen entity records have deterministic dataclass reprs.
            return repr(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Hash the named arguments; names not in ``arguments`` hash as null."""
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine function to log PM_ENGINE_TRACE after each call.

    Args:
        engine_name: Engine module identifier, e.g. "earned_value".
        engine_version: Version of the engine's formulas, e.g. "1.0".
        fingerprint_fields: Parameter names hashed into ``input_fingerprint``.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

            _logger.info(TRACE_TYPE, extra={
                "trace_type": TRACE_TYPE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": elapsed_ms,
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
