"""Domain-specific calculation helpers."""

from .formatter import display_values, format_result
from .policies import CategoryPolicy, IndividualPolicy, SmallBusinessPolicy, policy_for
from .utils import (
    calculate_progressive_tax,
    format_money,
    format_percentage,
    money_context,
    round_currency,
    round_rate,
)

__all__ = [
    "CategoryPolicy",
    "IndividualPolicy",
    "SmallBusinessPolicy",
    "calculate_progressive_tax",
    "display_values",
    "format_money",
    "format_percentage",
    "format_result",
    "money_context",
    "policy_for",
    "round_currency",
    "round_rate",
]
