"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest


def _resolve_category(req: Request, payload: dict[str, Any]) -> None:
    """Fall back to the ``category`` query parameter when the body omits it."""

    if any(payload.get(key) for key in ("category", "user_type", "userType")):
        return

    category_param = req.args.get("category")
    if category_param:
        payload["category"] = category_param


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract and validate a JSON payload from ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_category(req, payload)

    return payload
