"""Orchestrate request validation, policy selection, and result formatting.

The calculation service ties the clamped engine input, the YAML-backed
schedule configuration and the category policies together so that each
policy can focus on its own arithmetic. Profiling hooks live here to give
the rest of the application a simple ``calculate_tax`` entry point.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from decimal import Decimal
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from naijatax.backend.app.models import (
    CalculationInput,
    CalculationRequest,
    CalculationResponse,
    CalculationResult,
    TaxpayerCategory,
    format_validation_error,
)
from naijatax.backend.config.schedule_config import (
    ScheduleConfiguration,
    default_year,
    load_schedule_configuration,
)

from .calculators import (
    display_values,
    format_percentage,
    format_result,
    money_context,
    policy_for,
    round_currency,
    round_rate,
)
from .calculators.utils import ZERO

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("NAIJATAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def compute(
    payload: CalculationInput, config: ScheduleConfiguration | None = None
) -> CalculationResult:
    """Run the engine for ``payload`` and return the rounded result.

    Exemption is decided first, base tax and levy are only computed for
    non-exempt taxpayers, and rounding happens last.
    """

    if config is None:
        config = load_schedule_configuration(default_year())

    policy = policy_for(payload.category, config)

    with money_context(payload.gross_amount, payload.reliefs):
        taxable_base = policy.taxable_base(payload)
        exempt = policy.compute_exemption(payload)

        if exempt:
            base_tax = ZERO
            levy = ZERO
        else:
            base_tax = policy.compute_base_tax(taxable_base)
            levy = policy.compute_levy(taxable_base)

        total_tax = round_currency(base_tax) + round_currency(levy)

        result = CalculationResult(
            category=payload.category,
            gross_amount=payload.gross_amount,
            reliefs=payload.reliefs,
            taxable_amount=taxable_base,
            base_tax=base_tax,
            levy=levy,
            total_tax=total_tax,
            monthly_equivalent=policy.compute_monthly(total_tax),
            exemption_applied=exempt,
        )
        return format_result(result)


def compute_tax(
    category: Any,
    gross_amount: Any = None,
    reliefs: Any = None,
    config: ScheduleConfiguration | None = None,
) -> CalculationResult:
    """Convenience wrapper building the input before calling :func:`compute`."""

    return compute(CalculationInput.build(category, gross_amount, reliefs), config)


def _validate_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def calculate_tax(payload: Mapping[str, Any] | CalculationRequest) -> dict[str, Any]:
    """Compute the tax result and display payload for a raw request."""

    request_model = _validate_request(payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    category = TaxpayerCategory.parse(request_model.category)
    year = request_model.year if request_model.year is not None else default_year()
    config = load_schedule_configuration(year)
    category_config = config.for_category(category.value)

    with _profile_section("normalise_payload", timings):
        engine_input = CalculationInput.build(
            category, request_model.gross_amount, request_model.reliefs
        )

    with _profile_section("compute", timings):
        result = compute(engine_input, config)

    policy = policy_for(category, config)
    effective_rate: Decimal = ZERO
    if result.gross_amount > ZERO:
        with money_context(result.gross_amount):
            effective_rate = result.total_tax / result.gross_amount
    marginal_rate = policy.marginal_rate(result.taxable_amount, result.exemption_applied)

    _LOGGER.debug(
        "Calculated %s tax for schedule %s (exempt=%s, total=%s)",
        category.value,
        year,
        result.exemption_applied,
        result.total_tax,
    )

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    symbol = config.meta.currency_symbol
    display = display_values(result, symbol)
    display["effective_tax_rate"] = format_percentage(round_rate(effective_rate))
    display["marginal_rate"] = format_percentage(marginal_rate)

    labels = category_config.labels.model_dump()
    if not result.exemption_applied:
        labels["exemption"] = None

    response_model = CalculationResponse.model_validate(
        {
            "result": result.model_dump(mode="json", exclude_none=True),
            "summary": {
                "effective_tax_rate": round_rate(effective_rate),
                "marginal_rate": marginal_rate,
            },
            "display": display,
            "labels": labels,
            "meta": {
                "year": config.year,
                "category": category.value,
                "currency": config.meta.currency,
                "currency_symbol": symbol,
                "legislation": config.meta.legislation,
            },
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


__all__ = ["calculate_tax", "compute", "compute_tax"]
