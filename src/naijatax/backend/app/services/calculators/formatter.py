"""Rounding and display helpers for calculation results."""

from __future__ import annotations

from decimal import Decimal

from naijatax.backend.app.models import CalculationResult

from .utils import format_money, money_context, round_currency


def _sum(*amounts: Decimal) -> Decimal:
    with money_context(*amounts):
        return sum(amounts, Decimal("0"))


def format_result(result: CalculationResult) -> CalculationResult:
    """Round every monetary field to minor units.

    Components are rounded before ``total_tax`` is summed so the total always
    equals its displayed parts. Applying the formatter twice is a no-op.
    """

    base_tax = round_currency(result.base_tax)
    levy = round_currency(result.levy)
    monthly = result.monthly_equivalent

    return result.model_copy(
        update={
            "gross_amount": round_currency(result.gross_amount),
            "reliefs": round_currency(result.reliefs),
            "taxable_amount": round_currency(result.taxable_amount),
            "base_tax": base_tax,
            "levy": levy,
            "total_tax": _sum(base_tax, levy),
            "monthly_equivalent": round_currency(monthly) if monthly is not None else None,
        }
    )


def display_values(result: CalculationResult, symbol: str) -> dict[str, str]:
    """Return currency strings for each monetary field present in ``result``."""

    amounts: dict[str, Decimal | None] = {
        "gross_amount": result.gross_amount,
        "reliefs": result.reliefs,
        "taxable_amount": result.taxable_amount,
        "base_tax": result.base_tax,
        "levy": result.levy,
        "total_tax": result.total_tax,
        "monthly_equivalent": result.monthly_equivalent,
    }
    return {
        field: format_money(amount, symbol)
        for field, amount in amounts.items()
        if amount is not None
    }


__all__ = ["display_values", "format_result"]
