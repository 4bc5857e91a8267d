from __future__ import annotations

from typing import Optional

import pandas as pd

from .models import LINE_ITEM_LABELS, AdjustmentResult, EstimateBreakdown, LineItem


def line_item_frame(breakdown: EstimateBreakdown, adjustment: Optional[AdjustmentResult] = None) -> pd.DataFrame:
    rows = []
    for item in LineItem:
        row = {
            "LINE_ITEM": item.value,
            "LABEL": LINE_ITEM_LABELS[item],
            "AMOUNT": float(breakdown.line_items.get(item, 0.0)),
            "PARTICIPATING": item in breakdown.participating,
        }
        if adjustment is not None:
            row["ADJUSTED_AMOUNT"] = float(adjustment.line_items.get(item, row["AMOUNT"]))
        rows.append(row)
    return pd.DataFrame(rows)


def totals_frame(breakdown: EstimateBreakdown, adjustment: Optional[AdjustmentResult] = None) -> pd.DataFrame:
    rows = [
        ("Total Before Markup", breakdown.total_before_markup),
        ("Professional Markup", breakdown.markup_amount),
        ("Sales Tax", breakdown.sales_tax),
        ("Total Price", breakdown.total_price),
        ("Price Per Sq Ft", breakdown.price_per_square_foot),
        ("Estimated Hours", float(breakdown.estimated_hours)),
    ]
    if adjustment is not None:
        label = "Markup" if adjustment.signed_percent >= 0 else "Markdown"
        rows.extend(
            [
                (f"{label} Percent", adjustment.percent),
                (f"{label} Amount", adjustment.adjustment_amount),
                ("Adjusted Subtotal", adjustment.subtotal),
                ("Adjusted Sales Tax", adjustment.sales_tax),
                ("Adjusted Total Price", adjustment.total_price),
            ]
        )
    return pd.DataFrame(rows, columns=["METRIC", "VALUE"])


def pressure_washing_frame(breakdown: EstimateBreakdown) -> pd.DataFrame:
    rows = [
        {"SURFACE": surface.value, "AREA": d.area, "RATE": d.rate, "COST": d.cost}
        for surface, d in breakdown.pressure_washing_details.items()
    ]
    return pd.DataFrame(rows, columns=["SURFACE", "AREA", "RATE", "COST"])


def make_summary_text(breakdown: EstimateBreakdown, adjustment: Optional[AdjustmentResult] = None) -> str:
    items = line_item_frame(breakdown, adjustment)
    priced = items[items["AMOUNT"] > 0]
    shown = ["LABEL", "AMOUNT"] + (["ADJUSTED_AMOUNT"] if adjustment is not None else [])
    table = priced[shown].to_string(index=False) if not priced.empty else "(no priced line items)"
    text = (
        f"Service category: {breakdown.service_category.value}.\n"
        f"Line items:\n{table}\n"
        f"Total before markup: ${breakdown.total_before_markup:,.2f}; "
        f"sales tax ${breakdown.sales_tax:,.2f}; total ${breakdown.total_price:,.2f}.\n"
        f"Estimated hours: {breakdown.estimated_hours}; "
        f"price per sq ft: ${breakdown.price_per_square_foot:,.4f}.\n"
    )
    if adjustment is not None:
        if adjustment.note:
            text += f"{adjustment.note}\n"
        else:
            text += (
                f"{adjustment.direction.value.title()} {adjustment.percent:g}%: "
                f"subtotal ${adjustment.subtotal:,.2f}, tax ${adjustment.sales_tax:,.2f}, "
                f"total ${adjustment.total_price:,.2f}.\n"
            )
    return text
