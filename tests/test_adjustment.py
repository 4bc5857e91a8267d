import numpy as np
import pytest

from cleancost.adjustment import (
    AdjustmentError,
    adjust_estimate,
    apply_adjustment,
    direction_for,
    signed_percent,
)
from cleancost.calculator import compute_estimate
from cleancost.models import (
    AdjustmentDirection,
    CleaningType,
    JobDescription,
    LineItem,
    ProjectType,
)


def _windows_job(**overrides) -> JobDescription:
    fields = {
        "project_type": ProjectType.RETAIL,
        "cleaning_type": CleaningType.FINAL,
        "square_footage": 8000,
        "distance_miles": 15,
        "needs_window_cleaning": True,
        "standard_windows": 30,
        "large_windows": 6,
    }
    fields.update(overrides)
    return JobDescription(**fields)


def test_markup_moves_half_of_window_share_onto_base_price():
    result = apply_adjustment(
        {LineItem.BASE_PRICE: 800.0, LineItem.WINDOW_CLEANING_COST: 200.0},
        10,
        AdjustmentDirection.MARKUP,
    )

    assert result.adjustment_amount == pytest.approx(100.0)
    assert result.transfer_amount == pytest.approx(10.0)
    assert result.line_items[LineItem.BASE_PRICE] == pytest.approx(890.0)
    assert result.line_items[LineItem.WINDOW_CLEANING_COST] == pytest.approx(210.0)
    assert result.subtotal == pytest.approx(1100.0)
    assert result.sales_tax == pytest.approx(77.0)
    assert result.total_price == pytest.approx(1177.0)
    assert result.note is None


def test_markdown_is_signed_negative():
    result = apply_adjustment(
        {LineItem.BASE_PRICE: 800.0, LineItem.WINDOW_CLEANING_COST: 200.0},
        10,
        "markdown",
    )
    assert result.signed_percent == -10
    assert result.line_items[LineItem.BASE_PRICE] == pytest.approx(710.0)
    assert result.line_items[LineItem.WINDOW_CLEANING_COST] == pytest.approx(190.0)
    assert result.subtotal == pytest.approx(900.0)


def test_zero_total_returns_items_unchanged():
    zeros = {item: 0.0 for item in LineItem}
    result = apply_adjustment(zeros, 25, AdjustmentDirection.MARKUP)

    assert result.line_items == zeros
    assert result.adjustment_amount == 0.0
    assert result.subtotal == 0.0
    assert result.total_price == 0.0
    assert result.note


def test_zero_percent_returns_canonical_values():
    breakdown = compute_estimate(_windows_job(urgency_level=2))
    result = adjust_estimate(breakdown, 0, AdjustmentDirection.MARKUP)

    assert result.line_items == breakdown.billable_items()
    assert result.transfer_amount == 0.0
    assert result.subtotal == pytest.approx(breakdown.total_before_markup)


def test_non_participating_items_keep_their_value():
    items = {
        LineItem.BASE_PRICE: 500.0,
        LineItem.TRAVEL_COST: 100.0,
        LineItem.WINDOW_CLEANING_COST: 0.0,
        LineItem.OVERNIGHT_COST: 0.0,
    }
    result = apply_adjustment(
        items,
        20,
        AdjustmentDirection.MARKUP,
        participating=[LineItem.BASE_PRICE],
    )
    assert result.line_items[LineItem.BASE_PRICE] == pytest.approx(600.0)
    assert result.line_items[LineItem.TRAVEL_COST] == pytest.approx(100.0)
    assert result.subtotal == pytest.approx(700.0)


def test_no_transfer_when_windows_are_not_charged():
    items = {LineItem.BASE_PRICE: 800.0, LineItem.WINDOW_CLEANING_COST: 200.0}
    result = apply_adjustment(items, 10, AdjustmentDirection.MARKUP, window_charged=False)
    assert result.transfer_amount == 0.0
    assert result.line_items[LineItem.BASE_PRICE] == pytest.approx(880.0)
    assert result.line_items[LineItem.WINDOW_CLEANING_COST] == pytest.approx(220.0)


@pytest.mark.parametrize("percent", [2.5, 10, 33.3, 75])
@pytest.mark.parametrize("direction", [AdjustmentDirection.MARKUP, AdjustmentDirection.MARKDOWN])
def test_adjustment_conserves_the_participating_total(percent, direction):
    breakdown = compute_estimate(_windows_job(has_vct=True, urgency_level=5))
    result = adjust_estimate(breakdown, percent, direction)

    participating_total = sum(breakdown.line_items[item] for item in breakdown.participating)
    expected = participating_total * (1 + signed_percent(percent, direction) / 100)
    adjusted_total = sum(result.line_items[item] for item in breakdown.participating)
    # one cent of rounding per participating line
    assert np.isclose(adjusted_total, expected, atol=0.01 * len(breakdown.participating))
    assert result.transfer_amount != 0.0


def test_repeated_adjustments_do_not_compound():
    breakdown = compute_estimate(_windows_job())
    first = adjust_estimate(breakdown, 10, AdjustmentDirection.MARKUP)
    adjust_estimate(breakdown, 40, AdjustmentDirection.MARKDOWN)
    again = adjust_estimate(breakdown, 10, AdjustmentDirection.MARKUP)
    assert first == again


def test_display_case_line_never_absorbs_adjustment():
    breakdown = compute_estimate(
        JobDescription(
            project_type=ProjectType.JEWELRY_STORE,
            cleaning_type=CleaningType.POST_CONSTRUCTION,
            square_footage=1000,
            display_cases=4,
        )
    )
    result = adjust_estimate(breakdown, 10, AdjustmentDirection.MARKUP)
    assert LineItem.DISPLAY_CASE_COST not in result.line_items
    assert result.subtotal == pytest.approx(round(breakdown.total_before_markup * 1.1, 2))


def test_unknown_direction_is_rejected():
    with pytest.raises(AdjustmentError):
        apply_adjustment({LineItem.BASE_PRICE: 100.0}, 5, "sideways")
    with pytest.raises(ValueError):
        signed_percent(5, "up")


@pytest.mark.parametrize(
    "markup, markdown, expected",
    [
        (10, 0, (10.0, AdjustmentDirection.MARKUP)),
        (0, 15, (15.0, AdjustmentDirection.MARKDOWN)),
        (10, 15, (10.0, AdjustmentDirection.MARKUP)),
        (None, None, (0.0, AdjustmentDirection.MARKUP)),
        (0, 0, (0.0, AdjustmentDirection.MARKUP)),
    ],
)
def test_direction_for_resolves_mutually_exclusive_inputs(markup, markdown, expected):
    assert direction_for(markup, markdown) == expected


def test_window_only_markdown_keeps_every_line_non_negative():
    breakdown = compute_estimate(
        JobDescription(
            project_type=ProjectType.OFFICE,
            cleaning_type=CleaningType.WINDOW_CLEANING_ONLY,
            square_footage=0,
            distance_miles=20,
            needs_window_cleaning=True,
            standard_windows=40,
        )
    )
    result = adjust_estimate(breakdown, 10, AdjustmentDirection.MARKDOWN)

    assert all(value >= 0 for value in result.line_items.values())
    assert result.line_items[LineItem.BASE_PRICE] == 0.0
    assert result.transfer_amount == 0.0
    assert result.line_items[LineItem.TRAVEL_COST] == pytest.approx(45.0)
    assert result.line_items[LineItem.WINDOW_CLEANING_COST] == pytest.approx(180.0)
    assert result.subtotal == pytest.approx(225.0)


def test_deep_markdown_transfer_stops_at_zero_base_price():
    result = apply_adjustment(
        {LineItem.BASE_PRICE: 800.0, LineItem.WINDOW_CLEANING_COST: 200.0},
        90,
        AdjustmentDirection.MARKDOWN,
    )
    assert result.line_items[LineItem.BASE_PRICE] == pytest.approx(0.0)
    assert result.line_items[LineItem.WINDOW_CLEANING_COST] == pytest.approx(100.0)
    assert result.transfer_amount == pytest.approx(-80.0)
    assert result.subtotal == pytest.approx(100.0)


@pytest.mark.parametrize("percent", [-5, 100.01, 150, "lots"])
def test_percent_outside_zero_to_hundred_is_rejected(percent):
    with pytest.raises(AdjustmentError):
        apply_adjustment({LineItem.BASE_PRICE: 100.0}, percent, AdjustmentDirection.MARKUP)


@pytest.mark.parametrize("markup, markdown", [(-5, None), (None, 150), (101, 0)])
def test_direction_for_rejects_out_of_range_inputs(markup, markdown):
    with pytest.raises(AdjustmentError):
        direction_for(markup, markdown)
