"""
Project Kernel

Immutable domain records and value objects for a single project's
resources, tasks, milestones and risks, plus the shared infrastructure
used by the metrics engines:
- Money and Currency value objects (Decimal-only arithmetic)
- Injectable clock
- Typed exception hierarchy
- Structured JSON logging
"""

__version__ = "0.1.0"
