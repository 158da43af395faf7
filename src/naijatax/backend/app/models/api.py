"""Pydantic models describing the public API surface."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

__all__ = [
    "CalculationRequest",
    "ResultLabels",
    "Summary",
    "ResponseMeta",
    "CalculationResponse",
    "format_validation_error",
]


class CalculationRequest(BaseModel):
    """Raw calculation payload submitted by the client.

    Amounts are kept as submitted; clamping and decimal conversion happen when
    the engine input is built so the permissive policy lives in one place.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    category: Any = Field(
        default=None,
        validation_alias=AliasChoices("category", "user_type", "userType"),
    )
    gross_amount: Any = Field(
        default=None,
        validation_alias=AliasChoices(
            "gross_amount", "grossAmount", "income", "annual_income", "revenue"
        ),
    )
    reliefs: Any = None
    year: int | None = Field(default=None, ge=1900, le=2100)


class ResultLabels(BaseModel):
    """Display labels for result fields, taken from the schedule configuration."""

    model_config = ConfigDict(extra="forbid")

    title: str
    gross_amount: str
    reliefs: str
    taxable_amount: str
    base_tax: str
    levy: str | None = None
    total_tax: str
    monthly_equivalent: str | None = None
    exemption: str | None = None


class Summary(BaseModel):
    """Derived figures for the summary card."""

    model_config = ConfigDict(extra="forbid")

    effective_tax_rate: Decimal
    marginal_rate: Decimal


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    category: str
    currency: str
    currency_symbol: str
    legislation: str | None = None


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    result: dict[str, Any]
    summary: Summary
    display: dict[str, str]
    labels: ResultLabels
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
