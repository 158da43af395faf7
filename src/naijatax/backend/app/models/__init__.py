"""Typed engine inputs and results shared across the calculation services.

The engine works on two immutable records: :class:`CalculationInput`, which
clamps whatever the caller supplied into non-negative decimal amounts, and
:class:`CalculationResult`, which the formatter assembles once per call.
Amounts are :class:`~decimal.Decimal` throughout so that rounding at the
minor-unit level is reproducible; floats only appear at the JSON boundary.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from .api import (
    CalculationRequest,
    CalculationResponse,
    ResponseMeta,
    ResultLabels,
    Summary,
    format_validation_error,
)

__all__ = [
    "CalculationInput",
    "CalculationRequest",
    "CalculationResponse",
    "CalculationResult",
    "InvalidCategory",
    "ResponseMeta",
    "ResultLabels",
    "Summary",
    "TaxpayerCategory",
    "format_validation_error",
    "normalise_amount",
]

_ZERO = Decimal("0")

_CATEGORY_ALIASES = {
    "business": "small_business",
    "small-business": "small_business",
    "smallbusiness": "small_business",
}


class InvalidCategory(ValueError):
    """Raised when a taxpayer category is not one of the supported variants."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Unknown taxpayer category: {value!r}")
        self.value = value


class TaxpayerCategory(str, Enum):
    """Taxpayer variants; each selects one schedule and one policy."""

    INDIVIDUAL = "individual"
    SMALL_BUSINESS = "small_business"

    @classmethod
    def parse(cls, value: Any) -> TaxpayerCategory:
        """Resolve ``value`` to a category or raise :class:`InvalidCategory`."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidCategory(value)
        key = value.strip().lower()
        key = _CATEGORY_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError as exc:
            raise InvalidCategory(value) from exc


def normalise_amount(value: Any) -> Decimal:
    """Clamp ``value`` to a non-negative decimal amount.

    Missing, negative, non-finite or unparseable values become ``0``. Callers
    are expected to have shown validation messages to the user already.
    """

    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation:
            return _ZERO
    else:
        return _ZERO

    if not amount.is_finite() or amount < _ZERO:
        return _ZERO
    return amount


class CalculationInput(BaseModel):
    """Validated and clamped input for a single calculation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_amount: Decimal = _ZERO
    reliefs: Decimal = _ZERO
    category: TaxpayerCategory

    def __init__(self, **data: Any) -> None:
        # Unknown categories raise InvalidCategory, not a ValidationError.
        if "category" in data:
            data["category"] = TaxpayerCategory.parse(data["category"])
        super().__init__(**data)

    @field_validator("gross_amount", "reliefs", mode="before")
    @classmethod
    def _clamp_amounts(cls, value: Any) -> Decimal:
        return normalise_amount(value)

    @classmethod
    def build(
        cls,
        category: Any,
        gross_amount: Any = None,
        reliefs: Any = None,
    ) -> CalculationInput:
        """Construct an input, raising :class:`InvalidCategory` for unknown categories."""

        return cls(gross_amount=gross_amount, reliefs=reliefs, category=category)

    @property
    def taxable_base(self) -> Decimal:
        taxable = self.gross_amount - self.reliefs
        return taxable if taxable > _ZERO else _ZERO


class CalculationResult(BaseModel):
    """Rounded outcome of a calculation, handed to display and storage layers."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    category: TaxpayerCategory
    gross_amount: Decimal
    reliefs: Decimal
    taxable_amount: Decimal
    base_tax: Decimal
    levy: Decimal
    total_tax: Decimal
    monthly_equivalent: Decimal | None = None
    exemption_applied: bool
