"""Unit tests for rounding, formatting and amount normalisation helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from naijatax.backend.app.models import (
    CalculationInput,
    CalculationResult,
    TaxpayerCategory,
    normalise_amount,
)
from naijatax.backend.app.services.calculation_service import compute_tax
from naijatax.backend.app.services.calculators import (
    display_values,
    format_money,
    format_percentage,
    format_result,
    round_currency,
    round_rate,
)

D = Decimal


def _raw_result(**overrides) -> CalculationResult:
    values = {
        "category": TaxpayerCategory.SMALL_BUSINESS,
        "gross_amount": D("100"),
        "reliefs": D("0"),
        "taxable_amount": D("100"),
        "base_tax": D("0.125"),
        "levy": D("0.125"),
        "total_tax": D("0.25"),
        "monthly_equivalent": None,
        "exemption_applied": False,
    }
    values.update(overrides)
    return CalculationResult(**values)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (D("0.125"), D("0.13")),
        (D("0.135"), D("0.14")),
        (D("1166.6666"), D("1166.67")),
        (D("2.004"), D("2.00")),
    ],
)
def test_round_currency_rounds_half_up(value: Decimal, expected: Decimal) -> None:
    assert round_currency(value) == expected


def test_round_rate_uses_four_decimals() -> None:
    assert round_rate(D("0.014")) == D("0.0140")
    assert round_rate(D("0.123456")) == D("0.1235")


def test_total_is_sum_of_rounded_components() -> None:
    formatted = format_result(_raw_result())

    assert formatted.base_tax == D("0.13")
    assert formatted.levy == D("0.13")
    assert formatted.total_tax == D("0.26")


def test_format_result_is_idempotent() -> None:
    once = format_result(_raw_result(monthly_equivalent=D("1.23456")))
    twice = format_result(once)

    assert once == twice
    assert twice.monthly_equivalent == D("1.23")


def test_engine_output_is_already_formatted() -> None:
    result = compute_tax("individual", 3_333_333.33, 123.45)

    assert format_result(result) == result
    assert result.total_tax == result.base_tax + result.levy


def test_format_money_groups_thousands() -> None:
    assert format_money(D("1166.666"), "₦") == "₦1,166.67"
    assert format_money(D("0")) == "0.00"
    assert format_money(D("20000000"), "₦") == "₦20,000,000.00"


@pytest.mark.parametrize(
    ("rate", "label"),
    [(D("0.07"), "7%"), (D("0.0"), "0%"), (D("0.075"), "7.50%"), (D("0.34"), "34%")],
)
def test_format_percentage(rate: Decimal, label: str) -> None:
    assert format_percentage(rate) == label


def test_display_values_skip_absent_monthly_equivalent() -> None:
    display = display_values(format_result(_raw_result()), "₦")

    assert display["total_tax"] == "₦0.26"
    assert "monthly_equivalent" not in display


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, D("0")),
        (-10, D("0")),
        (True, D("0")),
        ("12.50", D("12.50")),
        (" 7 ", D("7")),
        ("abc", D("0")),
        (float("nan"), D("0")),
        (float("inf"), D("0")),
        (0.1, D("0.1")),
        (D("-0.01"), D("0")),
        ([1], D("0")),
    ],
)
def test_normalise_amount_clamps_irregular_values(value, expected: Decimal) -> None:
    assert normalise_amount(value) == expected


def test_calculation_input_clamps_and_floors_taxable_base() -> None:
    payload = CalculationInput.build("individual", -50, 10)

    assert payload.gross_amount == D("0")
    assert payload.reliefs == D("10")
    assert payload.taxable_base == D("0")
