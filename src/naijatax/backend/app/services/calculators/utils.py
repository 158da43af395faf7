"""Utility helpers for calculator modules."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Context, Decimal, localcontext

from naijatax.backend.config.schedule_config import BracketSchedule

ZERO = Decimal("0")
CENT = Decimal("0.01")
RATE_QUANTUM = Decimal("0.0001")
# Digits kept beyond the integer part: cents plus the rate scale.
WORKING_DIGITS = 12


@contextmanager
def money_context(*amounts: Decimal) -> Iterator[Context]:
    """Widen the decimal context so arithmetic on ``amounts`` stays exact to the cent."""

    with localcontext() as context:
        digits = max((amount.adjusted() for amount in amounts), default=0)
        context.prec = max(context.prec, digits + WORKING_DIGITS)
        context.Emax = MAX_EMAX
        context.Emin = MIN_EMIN
        yield context


def format_percentage(value: Decimal) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = value * 100
    if percentage == percentage.to_integral_value():
        return f"{int(percentage)}%"
    return f"{percentage.quantize(CENT, rounding=ROUND_HALF_UP)}%"


def format_money(value: Decimal, symbol: str = "") -> str:
    """Render ``value`` with thousands separators and two decimals."""

    return f"{symbol}{round_currency(value):,.2f}"


def bracket_index(amount: Decimal, schedule: BracketSchedule) -> int:
    """Return the index of the bracket that taxes the last unit of ``amount``.

    Amounts sitting exactly on a boundary belong to the lower bracket.
    """

    if amount <= ZERO:
        return 0
    return bisect_left(schedule.lower_bounds, amount) - 1


def calculate_progressive_tax(amount: Decimal, schedule: BracketSchedule) -> Decimal:
    """Calculate progressive tax for ``amount`` using ``schedule``."""

    if amount <= ZERO:
        return ZERO

    index = bracket_index(amount, schedule)
    lower = schedule.lower_bounds[index]
    rate = schedule.brackets[index].rate
    return schedule.cumulative_tax[index] + (amount - lower) * rate


def round_currency(value: Decimal) -> Decimal:
    """Round monetary amounts to two decimals, halves away from zero."""

    with money_context(value):
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    """Round rate values to four decimals."""

    return value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)
