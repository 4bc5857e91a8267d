"""
Shared metadata for job-level inputs surfaced by the form layer.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .models import CleaningType, ProjectType

# Keep tuple structure to preserve order for UI display
PROJECT_TYPE_CHOICES: Tuple[Tuple[ProjectType, str], ...] = (
    (ProjectType.OFFICE, "Office"),
    (ProjectType.RETAIL, "Retail"),
    (ProjectType.MEDICAL, "Medical"),
    (ProjectType.SCHOOL, "School"),
    (ProjectType.INDUSTRIAL, "Industrial"),
    (ProjectType.RESTAURANT, "Restaurant"),
    (ProjectType.GYM, "Gym"),
    (ProjectType.CHURCH, "Church"),
    (ProjectType.THEATER, "Theater"),
    (ProjectType.HOTEL, "Hotel"),
    (ProjectType.APARTMENT, "Apartment"),
    (ProjectType.JEWELRY_STORE, "Jewelry Store"),
)

CLEANING_TYPE_CHOICES: Tuple[Tuple[CleaningType, str], ...] = (
    (CleaningType.POST_CONSTRUCTION, "Post Construction"),
    (CleaningType.ROUGH, "Rough Clean"),
    (CleaningType.FINAL, "Final Clean"),
    (CleaningType.TOUCHUP, "Touch-up Clean"),
    (CleaningType.ROUGH_FINAL_TOUCHUP, "Rough, Final & Touch-up"),
    (CleaningType.PRESSURE_WASHING_ONLY, "Pressure Washing Only"),
    (CleaningType.WINDOW_CLEANING_ONLY, "Window Cleaning Only"),
)

PROJECT_TYPE_LABELS = {member: label for member, label in PROJECT_TYPE_CHOICES}
CLEANING_TYPE_LABELS = {member: label for member, label in CLEANING_TYPE_CHOICES}

# (exclusive upper bound in sq ft, recommended crew size)
CREW_SIZE_THRESHOLDS: Tuple[Tuple[float, int], ...] = (
    (2000, 2),
    (5000, 3),
    (10000, 4),
    (20000, 6),
    (40000, 8),
    (60000, 10),
    (80000, 12),
)
MAX_RECOMMENDED_CREW = 15


def project_type_display_strings() -> List[str]:
    """Return labels like ``"Jewelry Store"`` in dropdown order."""

    return [label for _, label in PROJECT_TYPE_CHOICES]


def cleaning_type_display_strings() -> List[str]:
    return [label for _, label in CLEANING_TYPE_CHOICES]


def _key(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch.isalnum())


def _normalize(value: object, choices: Iterable[Tuple[object, str]]):
    if value is None:
        return None
    candidate = _key(str(getattr(value, "value", value)))
    if not candidate:
        return None
    for member, label in choices:
        if candidate in (_key(member.value), _key(label)):
            return member
    return None


def normalize_project_type(value: object) -> Optional[ProjectType]:
    """
    Normalize a project type string into a :class:`ProjectType`.

    Accepts the enum value (``"jewelry_store"``), the display label
    (``"Jewelry Store"``) or spacing/case variants. Returns ``None`` if the
    value cannot be mapped.
    """

    return _normalize(value, PROJECT_TYPE_CHOICES)


def normalize_cleaning_type(value: object) -> Optional[CleaningType]:
    return _normalize(value, CLEANING_TYPE_CHOICES)


def recommended_crew_size(square_footage: float) -> int:
    """Crew size suggested for a job of ``square_footage``."""

    for upper, crew in CREW_SIZE_THRESHOLDS:
        if square_footage < upper:
            return crew
    return MAX_RECOMMENDED_CREW
