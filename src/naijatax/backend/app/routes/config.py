"""Expose schedule configuration consumed by the mobile client.

These endpoints bridge the YAML-backed bracket schedules and the client so
that forms and info cards can show bands, thresholds and labels without
duplicating business rules.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from naijatax.backend.app.http import problem_response
from naijatax.backend.app.services.calculators import format_money, format_percentage
from naijatax.backend.config.schedule_config import (
    CategoryConfig,
    available_years,
    default_year,
    load_manifest,
    load_schedule_configuration,
)
from naijatax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    supported_years = list(available_years())
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": supported_years[-1] if supported_years else None,
    }


def _serialise_category(category: CategoryConfig, symbol: str) -> dict[str, Any]:
    schedule = category.schedule
    brackets: list[dict[str, Any]] = []
    for lower, bracket in zip(schedule.lower_bounds, schedule.brackets):
        upper = bracket.upper_bound
        brackets.append(
            {
                "lower": str(lower),
                "upper": str(upper) if upper is not None else None,
                "rate": str(bracket.rate),
                "rate_label": format_percentage(bracket.rate),
                "range_label": (
                    f"{format_money(lower, symbol)} – {format_money(upper, symbol)}"
                    if upper is not None
                    else f"Above {format_money(lower, symbol)}"
                ),
            }
        )

    return {
        "exemption_threshold": str(category.exemption_threshold),
        "levy_rate": str(category.levy_rate),
        "brackets": brackets,
        "labels": category.labels.model_dump(exclude_none=True),
    }


@blueprint.get("/years")
def list_years():
    """Return the schedule versions declared in the manifest."""

    manifest = load_manifest()
    years = [
        entry.model_dump(include={"year", "status", "notes_url"}, exclude_none=True)
        for entry in sorted(manifest.years, key=lambda item: item.year)
    ]
    return jsonify({"years": years, "default_year": default_year()})


@blueprint.get("/schedules")
def get_schedules():
    """Return bracket schedules and policy parameters for one version."""

    year = request.args.get("year", type=int)
    if year is None:
        year = default_year()

    try:
        configuration = load_schedule_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    symbol = configuration.meta.currency_symbol
    payload = {
        "year": configuration.year,
        "meta": configuration.meta.model_dump(exclude_none=True),
        "categories": {
            "individual": _serialise_category(configuration.individual, symbol),
            "small_business": _serialise_category(configuration.small_business, symbol),
        },
    }
    return jsonify(payload)
