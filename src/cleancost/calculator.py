"""Deterministic pricing of a :class:`JobDescription`.

The order of the steps matters: the urgency line is derived from the sum of
every service line, and the markup, tax and total are derived from the
rounded line items so the totals reconcile to the cent.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Tuple

from . import rates
from .models import (
    BILLABLE_ITEMS,
    EstimateBreakdown,
    JobDescription,
    LineItem,
    PressureWashSurface,
    ServiceCategory,
    ServiceDetail,
    WindowTier,
)

logger = logging.getLogger(__name__)


def _cents(value: float) -> float:
    return round(float(value), 2)


def _round_up_to_step(value: float, step: int) -> float:
    # Snap to cents first so float noise (990.0000001) does not jump a step.
    return float(math.ceil(_cents(value) / step) * step)


def _base_price(job: JobDescription, project_mult: float, cleaning_mult: float) -> Tuple[float, float]:
    base_price = job.square_footage * rates.BASE_RATE_PER_SQFT * project_mult * cleaning_mult
    display_case_cost = 0.0
    if rates.is_display_case_project(job.project_type) and job.display_cases > 0:
        display_case_cost = job.display_cases * rates.DISPLAY_CASE_RATE
        base_price = _round_up_to_step(base_price + display_case_cost, rates.DISPLAY_CASE_ROUNDING_STEP)
    return _cents(base_price), _cents(display_case_cost)


def _pressure_washing(job: JobDescription) -> Tuple[float, Dict[PressureWashSurface, ServiceDetail]]:
    if not job.needs_pressure_washing:
        return 0.0, {}
    details: Dict[PressureWashSurface, ServiceDetail] = {}
    if job.pressure_washing_services:
        cost = 0.0
        for surface, area in job.pressure_washing_services.items():
            rate = rates.pressure_wash_rate(surface)
            surface_cost = _cents(area * rate)
            details[PressureWashSurface(surface)] = ServiceDetail(area=float(area), rate=rate, cost=surface_cost)
            cost += surface_cost
    else:
        cost = job.pressure_washing_area * rates.DEFAULT_PRESSURE_WASH_RATE
    cost += rates.PRESSURE_WASH_EQUIPMENT_FEE
    return _cents(cost), details


def _window_cleaning(job: JobDescription) -> Tuple[float, bool]:
    charged = job.needs_window_cleaning and job.charge_for_window_cleaning
    if not charged:
        return 0.0, False
    cost = (
        job.standard_windows * rates.window_rate(WindowTier.STANDARD)
        + job.large_windows * rates.window_rate(WindowTier.LARGE)
        + job.high_access_windows * rates.window_rate(WindowTier.HIGH_ACCESS)
    )
    return _cents(cost), True


def _estimated_hours(job: JobDescription) -> int:
    """Sum of per-factor hour estimates, each rounded up on its own."""

    crew = job.crew_size
    hours = math.ceil(job.square_footage / (crew * rates.SQFT_PER_CREW_HOUR))
    if job.has_vct:
        hours += math.ceil(job.square_footage / (crew * rates.VCT_SQFT_PER_CREW_HOUR))
    if job.needs_pressure_washing:
        hours += math.ceil(job.pressure_washing_total_area / rates.PRESSURE_WASH_SQFT_PER_HOUR)
    if job.needs_window_cleaning:
        hours += math.ceil(job.total_windows / rates.WINDOWS_PER_HOUR)
    if rates.is_display_case_project(job.project_type) and job.display_cases > 0:
        hours += math.ceil(job.display_cases * rates.HOURS_PER_DISPLAY_CASE)
    return int(hours)


def _effective_area(job: JobDescription) -> float:
    category = job.service_category
    if category == ServiceCategory.PRESSURE_WASHING_ONLY:
        return job.pressure_washing_total_area
    if category == ServiceCategory.WINDOW_CLEANING_ONLY:
        return 0.0
    return float(job.square_footage)


def _participating(job: JobDescription, window_charged: bool, urgency_mult: float) -> Tuple[LineItem, ...]:
    items: List[LineItem] = [LineItem.BASE_PRICE]
    if job.has_vct:
        items.append(LineItem.VCT_COST)
    items.append(LineItem.TRAVEL_COST)
    if job.staying_overnight:
        items.append(LineItem.OVERNIGHT_COST)
    if job.needs_pressure_washing:
        items.append(LineItem.PRESSURE_WASHING_COST)
    if window_charged:
        items.append(LineItem.WINDOW_CLEANING_COST)
    if urgency_mult > 1.0:
        items.append(LineItem.URGENCY_COST)
    return tuple(items)


def compute_estimate(job: JobDescription) -> EstimateBreakdown:
    """Price ``job`` and return the itemized breakdown.

    Unknown enum values or urgency levels raise
    :class:`~cleancost.rates.UnknownRateError`. Negative quantities are not
    special-cased here; reject them with :func:`cleancost.validation.validate_job`.
    """

    project_mult = rates.project_type_multiplier(job.project_type)
    cleaning_mult = rates.cleaning_type_multiplier(job.cleaning_type)
    urgency_mult = rates.urgency_multiplier(job.urgency_level)

    base_price, display_case_cost = _base_price(job, project_mult, cleaning_mult)
    vct_cost = _cents(job.square_footage * rates.VCT_COST_PER_SQFT) if job.has_vct else 0.0
    travel_cost = _cents(job.distance_miles * 2 * rates.TRAVEL_COST_PER_MILE)
    overnight_cost = 0.0
    if job.staying_overnight:
        nightly = rates.HOTEL_COST_PER_NIGHT + rates.PER_DIEM_PER_DAY
        overnight_cost = _cents(nightly * job.nights * job.crew_size)
    pressure_washing_cost, pressure_details = _pressure_washing(job)
    window_cleaning_cost, window_charged = _window_cleaning(job)

    services_total = (
        base_price
        + vct_cost
        + travel_cost
        + overnight_cost
        + pressure_washing_cost
        + window_cleaning_cost
    )
    urgency_cost = _cents(services_total * (urgency_mult - 1.0))

    line_items: Dict[LineItem, float] = {
        LineItem.BASE_PRICE: base_price,
        LineItem.VCT_COST: vct_cost,
        LineItem.TRAVEL_COST: travel_cost,
        LineItem.OVERNIGHT_COST: overnight_cost,
        LineItem.PRESSURE_WASHING_COST: pressure_washing_cost,
        LineItem.WINDOW_CLEANING_COST: window_cleaning_cost,
        LineItem.DISPLAY_CASE_COST: display_case_cost,
        LineItem.URGENCY_COST: urgency_cost,
    }

    total_before_markup = _cents(sum(line_items[item] for item in BILLABLE_ITEMS))
    markup_amount = _cents(total_before_markup * rates.PROFESSIONAL_MARKUP_RATE) if job.apply_markup else 0.0
    sales_tax = _cents((total_before_markup + markup_amount) * rates.SALES_TAX_RATE)
    total_price = _cents(total_before_markup + markup_amount + sales_tax)

    effective_area = _effective_area(job)
    price_per_sqft = round(total_price / effective_area, 4) if effective_area > 0 else 0.0

    window_counts: Dict[WindowTier, int] = {}
    if job.needs_window_cleaning:
        window_counts = {
            WindowTier.STANDARD: int(job.standard_windows),
            WindowTier.LARGE: int(job.large_windows),
            WindowTier.HIGH_ACCESS: int(job.high_access_windows),
        }

    breakdown = EstimateBreakdown(
        line_items=line_items,
        participating=_participating(job, window_charged, urgency_mult),
        project_type_multiplier=project_mult,
        cleaning_type_multiplier=cleaning_mult,
        urgency_multiplier=urgency_mult,
        total_before_markup=total_before_markup,
        markup_amount=markup_amount,
        sales_tax=sales_tax,
        total_price=total_price,
        estimated_hours=_estimated_hours(job),
        price_per_square_foot=price_per_sqft,
        effective_area=effective_area,
        service_category=job.service_category,
        window_charged=window_charged,
        window_counts=window_counts,
        pressure_washing_details=pressure_details,
    )
    logger.debug(
        "estimate %s/%s area=%s => before_markup=%.2f markup=%.2f tax=%.2f total=%.2f hours=%s",
        getattr(job.project_type, "value", job.project_type),
        getattr(job.cleaning_type, "value", job.cleaning_type),
        job.square_footage,
        total_before_markup,
        markup_amount,
        sales_tax,
        total_price,
        breakdown.estimated_hours,
    )
    return breakdown


__all__ = ["compute_estimate"]
