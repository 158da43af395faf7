"""Utilities for serialising calculation responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Response, jsonify


def build_calculation_response(payload: Mapping[str, Any]) -> tuple[Response, int]:
    """Return a JSON response for ``payload`` that clients must not cache.

    Results describe one user's finances; the client stores them explicitly
    through the records API when the user asks to save a calculation.
    """

    response = jsonify(payload)
    response.headers["Cache-Control"] = "no-store"
    return response, 200
