from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


class ProjectType(str, Enum):
    OFFICE = "office"
    RETAIL = "retail"
    MEDICAL = "medical"
    SCHOOL = "school"
    INDUSTRIAL = "industrial"
    RESTAURANT = "restaurant"
    GYM = "gym"
    CHURCH = "church"
    THEATER = "theater"
    HOTEL = "hotel"
    APARTMENT = "apartment"
    JEWELRY_STORE = "jewelry_store"


class CleaningType(str, Enum):
    POST_CONSTRUCTION = "post_construction"
    ROUGH = "rough"
    FINAL = "final"
    TOUCHUP = "touchup"
    ROUGH_FINAL_TOUCHUP = "rough_final_touchup"
    PRESSURE_WASHING_ONLY = "pressure_washing_only"
    WINDOW_CLEANING_ONLY = "window_cleaning_only"


class ServiceCategory(str, Enum):
    STANDARD = "standard"
    PRESSURE_WASHING_ONLY = "pressure_washing_only"
    WINDOW_CLEANING_ONLY = "window_cleaning_only"
    COMBINATION = "combination"


class PressureWashSurface(str, Enum):
    CONCRETE = "concrete"
    BRICK = "brick"
    SIDING = "siding"
    DECK = "deck"
    FENCE = "fence"
    DRIVEWAY = "driveway"
    SIDEWALK = "sidewalk"
    PATIO = "patio"


class WindowTier(str, Enum):
    STANDARD = "standard"
    LARGE = "large"
    HIGH_ACCESS = "high_access"


class LineItem(str, Enum):
    """Closed set of priced components on an estimate."""

    BASE_PRICE = "base_price"
    VCT_COST = "vct_cost"
    TRAVEL_COST = "travel_cost"
    OVERNIGHT_COST = "overnight_cost"
    PRESSURE_WASHING_COST = "pressure_washing_cost"
    WINDOW_CLEANING_COST = "window_cleaning_cost"
    DISPLAY_CASE_COST = "display_case_cost"
    URGENCY_COST = "urgency_cost"


class AdjustmentDirection(str, Enum):
    MARKUP = "markup"
    MARKDOWN = "markdown"


# display_case_cost is already folded into base_price, so it is reported but
# never summed into totals.
BILLABLE_ITEMS: Tuple[LineItem, ...] = tuple(
    item for item in LineItem if item is not LineItem.DISPLAY_CASE_COST
)

LINE_ITEM_LABELS: Dict[LineItem, str] = {
    LineItem.BASE_PRICE: "Base Cleaning",
    LineItem.VCT_COST: "VCT Flooring",
    LineItem.TRAVEL_COST: "Travel",
    LineItem.OVERNIGHT_COST: "Overnight Stay",
    LineItem.PRESSURE_WASHING_COST: "Pressure Washing",
    LineItem.WINDOW_CLEANING_COST: "Window Cleaning",
    LineItem.DISPLAY_CASE_COST: "Display Cases (included in base)",
    LineItem.URGENCY_COST: "Urgency Adjustment",
}


@dataclass(frozen=True)
class JobDescription:
    """Immutable description of one cleaning job as supplied by the form layer.

    Quantities attached to a disabled service flag are carried along for
    display but ignored by the calculator.
    """

    project_type: ProjectType
    cleaning_type: CleaningType
    square_footage: float
    has_vct: bool = False
    distance_miles: float = 0.0
    apply_markup: bool = False
    staying_overnight: bool = False
    nights: int = 0
    crew_size: int = 1
    urgency_level: int = 1
    needs_pressure_washing: bool = False
    pressure_washing_area: float = 0.0
    pressure_washing_services: Mapping[PressureWashSurface, float] = field(default_factory=dict)
    needs_window_cleaning: bool = False
    charge_for_window_cleaning: bool = True
    standard_windows: int = 0
    large_windows: int = 0
    high_access_windows: int = 0
    display_cases: int = 0
    client_name: str = ""
    project_name: str = ""

    @property
    def service_category(self) -> ServiceCategory:
        if self.cleaning_type == CleaningType.PRESSURE_WASHING_ONLY:
            return ServiceCategory.PRESSURE_WASHING_ONLY
        if self.cleaning_type == CleaningType.WINDOW_CLEANING_ONLY:
            return ServiceCategory.WINDOW_CLEANING_ONLY
        if self.needs_pressure_washing or self.needs_window_cleaning:
            return ServiceCategory.COMBINATION
        return ServiceCategory.STANDARD

    @property
    def total_windows(self) -> int:
        return self.standard_windows + self.large_windows + self.high_access_windows

    @property
    def pressure_washing_total_area(self) -> float:
        """Per-surface areas summed when supplied, else the aggregate area."""

        if self.pressure_washing_services:
            return float(sum(self.pressure_washing_services.values()))
        return float(self.pressure_washing_area)


@dataclass(frozen=True)
class ServiceDetail:
    """Display-only row for one pressure-washing surface."""

    area: float
    rate: float
    cost: float


@dataclass(frozen=True)
class EstimateBreakdown:
    """Canonical, read-only result of pricing one job."""

    line_items: Mapping[LineItem, float]
    participating: Tuple[LineItem, ...]
    project_type_multiplier: float
    cleaning_type_multiplier: float
    urgency_multiplier: float
    total_before_markup: float
    markup_amount: float
    sales_tax: float
    total_price: float
    estimated_hours: int
    price_per_square_foot: float
    effective_area: float
    service_category: ServiceCategory
    window_charged: bool = False
    window_counts: Mapping[WindowTier, int] = field(default_factory=dict)
    pressure_washing_details: Mapping[PressureWashSurface, ServiceDetail] = field(default_factory=dict)

    def billable_items(self) -> Dict[LineItem, float]:
        return {item: self.line_items[item] for item in BILLABLE_ITEMS}

    def adjustable_items(self) -> Dict[LineItem, float]:
        return {item: self.line_items[item] for item in self.participating}

    def as_dict(self) -> dict:
        return {
            "line_items": {item.value: value for item, value in self.line_items.items()},
            "participating": [item.value for item in self.participating],
            "project_type_multiplier": self.project_type_multiplier,
            "cleaning_type_multiplier": self.cleaning_type_multiplier,
            "urgency_multiplier": self.urgency_multiplier,
            "total_before_markup": self.total_before_markup,
            "markup_amount": self.markup_amount,
            "sales_tax": self.sales_tax,
            "total_price": self.total_price,
            "estimated_hours": self.estimated_hours,
            "price_per_square_foot": self.price_per_square_foot,
            "effective_area": self.effective_area,
            "service_category": self.service_category.value,
            "window_charged": self.window_charged,
            "window_counts": {tier.value: count for tier, count in self.window_counts.items()},
            "pressure_washing_details": {
                surface.value: {"area": d.area, "rate": d.rate, "cost": d.cost}
                for surface, d in self.pressure_washing_details.items()
            },
        }


@dataclass(frozen=True)
class AdjustmentResult:
    """Line items after a markup/markdown pass plus the recomputed totals."""

    line_items: Mapping[LineItem, float]
    percent: float
    direction: AdjustmentDirection
    signed_percent: float
    adjustment_amount: float
    subtotal: float
    sales_tax: float
    total_price: float
    transfer_amount: float = 0.0
    note: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "line_items": {item.value: value for item, value in self.line_items.items()},
            "percent": self.percent,
            "direction": self.direction.value,
            "signed_percent": self.signed_percent,
            "adjustment_amount": self.adjustment_amount,
            "transfer_amount": self.transfer_amount,
            "subtotal": self.subtotal,
            "sales_tax": self.sales_tax,
            "total_price": self.total_price,
            "note": self.note,
        }


__all__ = [
    "ProjectType",
    "CleaningType",
    "ServiceCategory",
    "PressureWashSurface",
    "WindowTier",
    "LineItem",
    "AdjustmentDirection",
    "BILLABLE_ITEMS",
    "LINE_ITEM_LABELS",
    "JobDescription",
    "ServiceDetail",
    "EstimateBreakdown",
    "AdjustmentResult",
]
