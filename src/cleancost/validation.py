"""Input checks applied before a job reaches the calculator."""

from __future__ import annotations

from typing import List

from .models import CleaningType, JobDescription, PressureWashSurface, ProjectType
from .rates import URGENCY_MULTIPLIERS

_NON_NEGATIVE_FIELDS = (
    "square_footage",
    "distance_miles",
    "nights",
    "pressure_washing_area",
    "standard_windows",
    "large_windows",
    "high_access_windows",
    "display_cases",
)


class JobValidationError(ValueError):
    """Raised when a job description breaks the input contract."""

    def __init__(self, problems: List[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid job description: " + "; ".join(self.problems))


def _is_member(enum_cls, value) -> bool:
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True


def _number(value) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_job(job: JobDescription) -> JobDescription:
    """Return ``job`` unchanged or raise :class:`JobValidationError` listing every problem."""

    problems: List[str] = []

    if not _is_member(ProjectType, job.project_type):
        problems.append(f"unknown project type '{job.project_type}'")
    if not _is_member(CleaningType, job.cleaning_type):
        problems.append(f"unknown cleaning type '{job.cleaning_type}'")

    for name in _NON_NEGATIVE_FIELDS:
        value = _number(getattr(job, name))
        if value is None:
            problems.append(f"{name} must be a number")
        elif value < 0:
            problems.append(f"{name} must not be negative (got {value:g})")

    crew = _number(job.crew_size)
    if crew is None or crew < 1 or not crew.is_integer():
        problems.append(f"crew_size must be a whole number of at least 1 (got {job.crew_size!r})")

    urgency = _number(job.urgency_level)
    if urgency is None or not urgency.is_integer() or int(urgency) not in URGENCY_MULTIPLIERS:
        lo, hi = min(URGENCY_MULTIPLIERS), max(URGENCY_MULTIPLIERS)
        problems.append(f"urgency_level must be a whole number between {lo} and {hi} (got {job.urgency_level!r})")

    for surface, area in (job.pressure_washing_services or {}).items():
        name = getattr(surface, "value", surface)
        if not _is_member(PressureWashSurface, surface):
            problems.append(f"unknown pressure washing surface '{name}'")
        value = _number(area)
        if value is None or value < 0:
            problems.append(f"pressure washing area for '{name}' must be a non-negative number")

    if problems:
        raise JobValidationError(problems)
    return job


__all__ = ["JobValidationError", "validate_job"]
