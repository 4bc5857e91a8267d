"""Markup / markdown redistribution across an estimate's line items.

Every call starts from the canonical line items of an
:class:`~cleancost.models.EstimateBreakdown`; results are never fed back in,
so repeated percentage changes do not compound.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional, Tuple

import numpy as np

from . import rates
from .models import AdjustmentDirection, AdjustmentResult, EstimateBreakdown, LineItem

logger = logging.getLogger(__name__)


MIN_PERCENT = 0.0
MAX_PERCENT = 100.0


class AdjustmentError(ValueError):
    """Raised for an adjustment request the engine cannot interpret."""


def _direction(value: AdjustmentDirection | str) -> AdjustmentDirection:
    if isinstance(value, AdjustmentDirection):
        return value
    try:
        return AdjustmentDirection(str(value).strip().lower())
    except ValueError:
        raise AdjustmentError(f"Unknown adjustment direction '{value}' (expected markup or markdown)") from None


def _percent(value: object, label: str = "adjustment") -> float:
    try:
        percent = float(value)
    except (TypeError, ValueError):
        raise AdjustmentError(f"{label} percent must be a number, got {value!r}") from None
    if not MIN_PERCENT <= percent <= MAX_PERCENT:
        raise AdjustmentError(f"{label} percent must be between {MIN_PERCENT:g} and {MAX_PERCENT:g}, got {percent:g}")
    return percent


def signed_percent(percent: float, direction: AdjustmentDirection | str) -> float:
    percent = _percent(percent)
    if _direction(direction) is AdjustmentDirection.MARKDOWN:
        return -percent
    return percent


def direction_for(
    markup_percent: Optional[float],
    markdown_percent: Optional[float],
) -> Tuple[float, AdjustmentDirection]:
    """Resolve a markup/markdown input pair into one ``(percent, direction)``.

    Markup and markdown are mutually exclusive: a non-zero markup wins and the
    markdown is treated as reset to zero. Either percent outside 0..100 raises
    :class:`AdjustmentError`.
    """

    markup = _percent(markup_percent or 0.0, "markup")
    markdown = _percent(markdown_percent or 0.0, "markdown")
    if markup:
        return markup, AdjustmentDirection.MARKUP
    if markdown:
        return markdown, AdjustmentDirection.MARKDOWN
    return 0.0, AdjustmentDirection.MARKUP


def _totals(values: Iterable[float]) -> Tuple[float, float, float]:
    subtotal = round(float(sum(values)), 2)
    sales_tax = round(subtotal * rates.SALES_TAX_RATE, 2)
    return subtotal, sales_tax, round(subtotal + sales_tax, 2)


def apply_adjustment(
    line_items: Mapping[LineItem, float],
    percent: float,
    direction: AdjustmentDirection | str,
    *,
    participating: Optional[Iterable[LineItem]] = None,
    window_charged: bool = True,
) -> AdjustmentResult:
    """Distribute ``percent`` across ``line_items`` in proportion to their value.

    ``participating`` limits which items absorb the adjustment (all keys by
    default); the rest are carried at their original value. When both the
    base price and a charged window line participate, half of the window
    line's share is moved onto the base price.
    """

    direction = _direction(direction)
    signed = signed_percent(percent, direction)
    items: Dict[LineItem, float] = {LineItem(k): float(v) for k, v in line_items.items()}
    keys = [LineItem(k) for k in participating] if participating is not None else list(items)
    keys = [k for k in keys if k in items]

    values = np.array([items[k] for k in keys], dtype=float)
    total = float(values.sum()) if values.size else 0.0
    if total == 0:
        subtotal, sales_tax, total_price = _totals(items.values())
        logger.debug("adjustment skipped: participating total is zero")
        return AdjustmentResult(
            line_items=dict(items),
            percent=float(percent),
            direction=direction,
            signed_percent=signed,
            adjustment_amount=0.0,
            subtotal=subtotal,
            sales_tax=sales_tax,
            total_price=total_price,
            note="No adjustment applied: participating line items total zero.",
        )

    adjustment_amount = total * (signed / 100.0)
    proportions = values / total
    adjusted_values = values + adjustment_amount * proportions
    adjusted = dict(items)
    adjusted.update({k: float(v) for k, v in zip(keys, adjusted_values)})

    transfer = 0.0
    if (
        LineItem.BASE_PRICE in keys
        and items[LineItem.BASE_PRICE] > 0
        and LineItem.WINDOW_CLEANING_COST in keys
        and window_charged
        and signed != 0
    ):
        window_share = float(proportions[keys.index(LineItem.WINDOW_CLEANING_COST)]) * adjustment_amount
        transfer = window_share * rates.WINDOW_BALANCE_SHARE
        # A deep markdown may not pull the base price below zero.
        transfer = max(transfer, -adjusted[LineItem.BASE_PRICE])
        adjusted[LineItem.WINDOW_CLEANING_COST] -= transfer
        adjusted[LineItem.BASE_PRICE] += transfer

    adjusted = {k: round(v, 2) for k, v in adjusted.items()}
    subtotal, sales_tax, total_price = _totals(adjusted.values())
    logger.debug(
        "adjustment %s %.2f%% over %d items: amount=%.2f transfer=%.2f subtotal=%.2f",
        direction.value,
        float(percent),
        len(keys),
        adjustment_amount,
        transfer,
        subtotal,
    )
    return AdjustmentResult(
        line_items=adjusted,
        percent=float(percent),
        direction=direction,
        signed_percent=signed,
        adjustment_amount=round(adjustment_amount, 2),
        subtotal=subtotal,
        sales_tax=sales_tax,
        total_price=total_price,
        transfer_amount=round(transfer, 2),
    )


def adjust_estimate(
    breakdown: EstimateBreakdown,
    percent: float,
    direction: AdjustmentDirection | str,
) -> AdjustmentResult:
    """Apply an adjustment to the canonical billable items of ``breakdown``."""

    return apply_adjustment(
        breakdown.billable_items(),
        percent,
        direction,
        participating=breakdown.participating,
        window_charged=breakdown.window_charged,
    )


__all__ = [
    "AdjustmentError",
    "apply_adjustment",
    "adjust_estimate",
    "direction_for",
    "signed_percent",
]
