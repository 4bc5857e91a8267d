"""Static rate and multiplier tables used by the estimator.

All lookups fail loudly: an unknown project type, cleaning type, urgency level,
surface or window tier raises :class:`UnknownRateError` instead of falling back
to a neutral value.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Type, TypeVar

from .models import CleaningType, PressureWashSurface, ProjectType, WindowTier

E = TypeVar("E", bound=Enum)


class UnknownRateError(KeyError):
    """Raised when a rate table has no entry for the requested key."""

    def __str__(self) -> str:  # KeyError repr-quotes its message otherwise
        return str(self.args[0]) if self.args else ""


# ----------------------------- BASE RATES -----------------------------

BASE_RATE_PER_SQFT = 0.18
VCT_COST_PER_SQFT = 0.15
TRAVEL_COST_PER_MILE = 1.25  # applied to round-trip miles
HOTEL_COST_PER_NIGHT = 150.0
PER_DIEM_PER_DAY = 50.0

SALES_TAX_RATE = 0.07
PROFESSIONAL_MARKUP_RATE = 0.50

# Share of the window line's adjustment moved onto the base price.
WINDOW_BALANCE_SHARE = 0.50

# ---------------------------- MULTIPLIERS -----------------------------

PROJECT_TYPE_MULTIPLIERS: Mapping[ProjectType, float] = MappingProxyType({
    ProjectType.OFFICE: 1.0,
    ProjectType.RETAIL: 1.1,
    ProjectType.MEDICAL: 1.3,
    ProjectType.SCHOOL: 1.2,
    ProjectType.INDUSTRIAL: 0.9,
    ProjectType.RESTAURANT: 1.4,
    ProjectType.GYM: 1.2,
    ProjectType.CHURCH: 1.1,
    ProjectType.THEATER: 1.2,
    ProjectType.HOTEL: 1.3,
    ProjectType.APARTMENT: 1.2,
    ProjectType.JEWELRY_STORE: 1.5,
})

CLEANING_TYPE_MULTIPLIERS: Mapping[CleaningType, float] = MappingProxyType({
    CleaningType.POST_CONSTRUCTION: 1.0,
    CleaningType.ROUGH: 0.7,
    CleaningType.FINAL: 0.8,
    CleaningType.TOUCHUP: 0.5,
    CleaningType.ROUGH_FINAL_TOUCHUP: 1.8,
    CleaningType.PRESSURE_WASHING_ONLY: 1.0,
    CleaningType.WINDOW_CLEANING_ONLY: 1.0,
})

URGENCY_MULTIPLIERS: Mapping[int, float] = MappingProxyType({
    1: 1.00,   # normal scheduling
    2: 1.05,
    3: 1.10,
    4: 1.15,
    5: 1.20,
    6: 1.25,
    7: 1.30,
    8: 1.35,
    9: 1.40,
    10: 1.50,  # maximum urgency
})

# ------------------------- SPECIALTY SERVICES -------------------------

PRESSURE_WASH_RATES: Mapping[PressureWashSurface, float] = MappingProxyType({
    surface: 0.25 for surface in PressureWashSurface
})
DEFAULT_PRESSURE_WASH_RATE = 0.25
PRESSURE_WASH_EQUIPMENT_FEE = 150.0

WINDOW_RATES: Mapping[WindowTier, float] = MappingProxyType({
    WindowTier.STANDARD: 5.0,
    WindowTier.LARGE: 8.0,
    WindowTier.HIGH_ACCESS: 12.0,
})

DISPLAY_CASE_RATE = 25.0
DISPLAY_CASE_PROJECT_TYPES = frozenset({ProjectType.JEWELRY_STORE})
DISPLAY_CASE_ROUNDING_STEP = 5

# ---------------------------- PRODUCTIVITY ----------------------------

SQFT_PER_CREW_HOUR = 500.0
VCT_SQFT_PER_CREW_HOUR = 1000.0
PRESSURE_WASH_SQFT_PER_HOUR = 1000.0
WINDOWS_PER_HOUR = 20.0
HOURS_PER_DISPLAY_CASE = 0.5


def _member(enum_cls: Type[E], key: object, label: str) -> E:
    if isinstance(key, enum_cls):
        return key
    try:
        return enum_cls(key)
    except ValueError:
        raise UnknownRateError(f"Unknown {label} '{key}' in rate tables") from None


def _lookup(table: Mapping, key: object, label: str) -> float:
    try:
        return float(table[key])
    except KeyError:
        raise UnknownRateError(f"Missing {label} rate for '{key}'") from None


def project_type_multiplier(project_type: ProjectType | str) -> float:
    member = _member(ProjectType, project_type, "project type")
    return _lookup(PROJECT_TYPE_MULTIPLIERS, member, "project type")


def cleaning_type_multiplier(cleaning_type: CleaningType | str) -> float:
    member = _member(CleaningType, cleaning_type, "cleaning type")
    return _lookup(CLEANING_TYPE_MULTIPLIERS, member, "cleaning type")


def urgency_multiplier(level: int) -> float:
    """Return the multiplier for an urgency level in ``1..10``.

    Non-integral levels are rejected rather than truncated.
    """

    try:
        whole = not isinstance(level, bool) and float(level).is_integer()
    except (TypeError, ValueError):
        whole = False
    if not whole:
        raise UnknownRateError(f"Urgency level must be a whole number, got '{level}'")
    return _lookup(URGENCY_MULTIPLIERS, int(float(level)), "urgency level")


def is_display_case_project(project_type: ProjectType | str) -> bool:
    return _member(ProjectType, project_type, "project type") in DISPLAY_CASE_PROJECT_TYPES


def pressure_wash_rate(surface: PressureWashSurface | str) -> float:
    member = _member(PressureWashSurface, surface, "pressure washing surface")
    return _lookup(PRESSURE_WASH_RATES, member, "pressure washing surface")


def window_rate(tier: WindowTier | str) -> float:
    member = _member(WindowTier, tier, "window tier")
    return _lookup(WINDOW_RATES, member, "window tier")


__all__ = [
    "UnknownRateError",
    "BASE_RATE_PER_SQFT",
    "VCT_COST_PER_SQFT",
    "TRAVEL_COST_PER_MILE",
    "HOTEL_COST_PER_NIGHT",
    "PER_DIEM_PER_DAY",
    "SALES_TAX_RATE",
    "PROFESSIONAL_MARKUP_RATE",
    "WINDOW_BALANCE_SHARE",
    "PROJECT_TYPE_MULTIPLIERS",
    "CLEANING_TYPE_MULTIPLIERS",
    "URGENCY_MULTIPLIERS",
    "PRESSURE_WASH_RATES",
    "DEFAULT_PRESSURE_WASH_RATE",
    "PRESSURE_WASH_EQUIPMENT_FEE",
    "WINDOW_RATES",
    "DISPLAY_CASE_RATE",
    "DISPLAY_CASE_PROJECT_TYPES",
    "DISPLAY_CASE_ROUNDING_STEP",
    "SQFT_PER_CREW_HOUR",
    "VCT_SQFT_PER_CREW_HOUR",
    "PRESSURE_WASH_SQFT_PER_HOUR",
    "WINDOWS_PER_HOUR",
    "HOURS_PER_DISPLAY_CASE",
    "project_type_multiplier",
    "cleaning_type_multiplier",
    "urgency_multiplier",
    "is_display_case_project",
    "pressure_wash_rate",
    "window_rate",
]
