"""REST endpoints for tax calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from naijatax.backend.app.services.calculation_service import calculate_tax
from naijatax.backend.services.request_parser import parse_calculation_payload
from naijatax.backend.services.response_builder import build_calculation_response

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Create a tax calculation using the submitted JSON payload."""

    payload = parse_calculation_payload(request)
    result = calculate_tax(payload)

    return build_calculation_response(result)
