"""Category policies layered on top of the generic bracket evaluator.

Individuals and small businesses diverge in one structural way: individuals
are exempt based on their taxable base, while small businesses are exempt
based on gross turnover even though tax and levy are charged on the net
base. Everything else is parameterised by the schedule configuration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import ClassVar

from naijatax.backend.app.models import CalculationInput, InvalidCategory, TaxpayerCategory
from naijatax.backend.config.schedule_config import (
    BracketSchedule,
    CategoryConfig,
    ScheduleConfiguration,
)

from .utils import ZERO, bracket_index, calculate_progressive_tax

MONTHS_PER_YEAR = Decimal("12")


class CategoryPolicy(ABC):
    """Shared interface for taxpayer category rules."""

    category: ClassVar[TaxpayerCategory]

    def __init__(self, config: CategoryConfig) -> None:
        self.config = config

    @property
    def schedule(self) -> BracketSchedule:
        return self.config.schedule

    def taxable_base(self, payload: CalculationInput) -> Decimal:
        return payload.taxable_base

    @abstractmethod
    def compute_exemption(self, payload: CalculationInput) -> bool:
        """Return ``True`` when the exemption threshold applies."""

    @abstractmethod
    def compute_base_tax(self, taxable_base: Decimal) -> Decimal:
        """Return the unrounded base tax for a non-exempt ``taxable_base``."""

    def compute_levy(self, taxable_base: Decimal) -> Decimal:
        return ZERO

    def compute_monthly(self, total_tax: Decimal) -> Decimal | None:
        return None

    @abstractmethod
    def marginal_rate(self, taxable_base: Decimal, exempt: bool) -> Decimal:
        """Return the rate applied to the next unit of taxable base."""


class IndividualPolicy(CategoryPolicy):
    """Progressive personal income tax with a taxable-base exemption."""

    category = TaxpayerCategory.INDIVIDUAL

    def compute_exemption(self, payload: CalculationInput) -> bool:
        return self.taxable_base(payload) <= self.config.exemption_threshold

    def compute_base_tax(self, taxable_base: Decimal) -> Decimal:
        return calculate_progressive_tax(taxable_base, self.schedule)

    def compute_monthly(self, total_tax: Decimal) -> Decimal | None:
        return total_tax / MONTHS_PER_YEAR

    def marginal_rate(self, taxable_base: Decimal, exempt: bool) -> Decimal:
        # The zero band already covers the exemption range.
        return self.schedule.brackets[bracket_index(taxable_base, self.schedule)].rate


class SmallBusinessPolicy(CategoryPolicy):
    """Flat corporate rate plus development levy above a turnover threshold."""

    category = TaxpayerCategory.SMALL_BUSINESS

    def compute_exemption(self, payload: CalculationInput) -> bool:
        # Turnover test on gross revenue, not on the relieved base.
        return payload.gross_amount <= self.config.exemption_threshold

    def compute_base_tax(self, taxable_base: Decimal) -> Decimal:
        return taxable_base * self.schedule.top_rate

    def compute_levy(self, taxable_base: Decimal) -> Decimal:
        return taxable_base * self.config.levy_rate

    def marginal_rate(self, taxable_base: Decimal, exempt: bool) -> Decimal:
        if exempt:
            return ZERO
        return self.schedule.top_rate + self.config.levy_rate


POLICIES: dict[TaxpayerCategory, type[CategoryPolicy]] = {
    TaxpayerCategory.INDIVIDUAL: IndividualPolicy,
    TaxpayerCategory.SMALL_BUSINESS: SmallBusinessPolicy,
}


def policy_for(category: TaxpayerCategory, config: ScheduleConfiguration) -> CategoryPolicy:
    """Return the policy for ``category`` bound to its configured schedule."""

    policy_class = POLICIES.get(category)
    if policy_class is None:
        raise InvalidCategory(category)
    return policy_class(config.for_category(policy_class.category.value))


__all__ = [
    "CategoryPolicy",
    "IndividualPolicy",
    "POLICIES",
    "SmallBusinessPolicy",
    "policy_for",
]
