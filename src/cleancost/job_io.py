"""Reading and writing job descriptions as plain JSON-compatible dicts."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .config import _flag, _to_float
from .models import JobDescription, PressureWashSurface
from .project_meta import normalize_cleaning_type, normalize_project_type, recommended_crew_size
from .validation import JobValidationError, validate_job

logger = logging.getLogger(__name__)

# Field names used by the web form's saved drafts.
FIELD_ALIASES: Dict[str, str] = {
    "projectType": "project_type",
    "cleaningType": "cleaning_type",
    "squareFootage": "square_footage",
    "hasVCT": "has_vct",
    "distanceFromOffice": "distance_miles",
    "applyMarkup": "apply_markup",
    "stayingOvernight": "staying_overnight",
    "numberOfNights": "nights",
    "numberOfCleaners": "crew_size",
    "urgencyLevel": "urgency_level",
    "needsPressureWashing": "needs_pressure_washing",
    "pressureWashingArea": "pressure_washing_area",
    "pressureWashingServiceAreas": "pressure_washing_services",
    "pressureWashingServices": "selected_surfaces",
    "needsWindowCleaning": "needs_window_cleaning",
    "chargeForWindowCleaning": "charge_for_window_cleaning",
    "numberOfWindows": "standard_windows",
    "numberOfLargeWindows": "large_windows",
    "numberOfHighAccessWindows": "high_access_windows",
    "numberOfDisplayCases": "display_cases",
    "clientName": "client_name",
    "projectName": "project_name",
}

_FLAG_FIELDS = (
    "has_vct",
    "apply_markup",
    "staying_overnight",
    "needs_pressure_washing",
    "needs_window_cleaning",
)
_AMOUNT_FIELDS = ("square_footage", "distance_miles", "pressure_washing_area")
_COUNT_FIELDS = (
    "nights",
    "urgency_level",
    "standard_windows",
    "large_windows",
    "high_access_windows",
    "display_cases",
)


def _canonical_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in payload.items():
        out[FIELD_ALIASES.get(key, key)] = value
    return out


def _count(value: object) -> Optional[float | int]:
    number = _to_float(value)
    if number is None:
        return None
    return int(number) if number.is_integer() else number


def _surface_areas(raw: object, selected: object) -> Dict[Any, float]:
    if not isinstance(raw, Mapping):
        return {}
    areas: Dict[Any, float] = {}
    keys = list(selected) if isinstance(selected, (list, tuple)) else list(raw)
    for key in keys:
        name = str(key).strip().lower()
        try:
            surface: Any = PressureWashSurface(name)
        except ValueError:
            surface = name  # rejected by validate_job with a readable message
        area = _to_float(raw.get(key))
        areas[surface] = area if area is not None else 0.0
    return areas


def job_from_dict(payload: Mapping[str, Any]) -> JobDescription:
    """Build and validate a :class:`JobDescription` from a form payload.

    Both snake_case field names and the web form's camelCase names are
    accepted. A missing crew size defaults to the recommended crew for the
    job's area.
    """

    data = _canonical_keys(payload)
    problems = []

    project_type = normalize_project_type(data.get("project_type"))
    if project_type is None:
        problems.append(f"unknown project type '{data.get('project_type')}'")
    cleaning_type = normalize_cleaning_type(data.get("cleaning_type"))
    if cleaning_type is None:
        problems.append(f"unknown cleaning type '{data.get('cleaning_type')}'")
    if problems:
        raise JobValidationError(problems)

    kwargs: Dict[str, Any] = {"project_type": project_type, "cleaning_type": cleaning_type}
    for name in _AMOUNT_FIELDS:
        value = _to_float(data.get(name))
        kwargs[name] = value if value is not None else 0.0
    for name in _COUNT_FIELDS:
        value = _count(data.get(name))
        if value is not None:
            kwargs[name] = value
    for name in _FLAG_FIELDS:
        kwargs[name] = _flag(data.get(name))
    if "charge_for_window_cleaning" in data:
        kwargs["charge_for_window_cleaning"] = _flag(data.get("charge_for_window_cleaning"))

    crew = _count(data.get("crew_size"))
    if crew is None or crew == 0:
        crew = recommended_crew_size(kwargs["square_footage"])
        logger.debug("crew_size not supplied; using recommended crew of %s", crew)
    kwargs["crew_size"] = crew

    kwargs["pressure_washing_services"] = _surface_areas(
        data.get("pressure_washing_services"), data.get("selected_surfaces")
    )
    kwargs["client_name"] = str(data.get("client_name") or "").strip()
    kwargs["project_name"] = str(data.get("project_name") or "").strip()

    return validate_job(JobDescription(**kwargs))


def load_job(path: Path) -> JobDescription:
    """Read a job description from the JSON file at ``path``."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise JobValidationError([f"{path} does not contain a JSON object"])
    return job_from_dict(payload)


def job_to_dict(job: JobDescription) -> Dict[str, Any]:
    """Plain snake_case dict for ``job``; round-trips through :func:`job_from_dict`."""

    data = asdict(job)
    data["project_type"] = job.project_type.value
    data["cleaning_type"] = job.cleaning_type.value
    data["pressure_washing_services"] = {
        getattr(surface, "value", surface): area for surface, area in job.pressure_washing_services.items()
    }
    return data


__all__ = ["FIELD_ALIASES", "job_from_dict", "load_job", "job_to_dict"]
