"""
pm_config -- single public entrypoint for project data.

Responsibility:
    Provides the ONLY way to obtain a ``Project`` record at runtime through
    ``get_active_project()``.  No other component reads project files.  YAML
    parsing lives in ``pm_config.loader``.

Architecture position:
    Configuration -- sits above ``pm_kernel`` and beside ``pm_engines``.
    The engines MUST NEVER import from ``pm_config``; they receive records
    as arguments.

Failure modes:
    - ``FileNotFoundError`` -- the project file does not exist.
    - ``ProjectDefinitionError`` subclasses -- the file is malformed.

Audit relevance:
    Every successful ``get_active_project()`` call emits a
    ``PM_CONFIG_TRACE`` log entry with the project id, source path,
    checksum and collection sizes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pm_config.loader import load_project_file
from pm_kernel.domain.entities import Project

_logger = logging.getLogger("pm_kernel.config")

# Bundled project definitions
_DEFAULT_SETS_DIR = Path(__file__).parent / "sets"
DEFAULT_PROJECT_FILE = _DEFAULT_SETS_DIR / "digital_transformation.yaml"


def available_projects(sets_dir: Path | None = None) -> list[Path]:
    """Project definition files shipped in ``sets_dir`` (sorted)."""
    return sorted((sets_dir or _DEFAULT_SETS_DIR).glob("*.yaml"))


def get_active_project(path: Path | str | None = None) -> Project:
    """The ONLY public project-loading entrypoint.

    Args:
        path: Project definition file.  Defaults to the bundled
            Digital Transformation Initiative.

    Returns:
        The frozen ``Project`` record.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ProjectDefinitionError: If the definition is malformed.
    """
    source = Path(path) if path is not None else DEFAULT_PROJECT_FILE
    project, checksum = load_project_file(source)

    _logger.info(
        "PM_CONFIG_TRACE",
        extra={
            "trace_type": "PM_CONFIG_TRACE",
            "project_id": project.id,
            "source": str(source),
            "checksum": checksum,
            "task_count": len(project.tasks),
            "resource_count": len(project.resources),
            "milestone_count": len(project.milestones),
            "risk_count": len(project.risks),
        },
    )
    return project


__all__ = [
    "DEFAULT_PROJECT_FILE",
    "available_projects",
    "get_active_project",
]
