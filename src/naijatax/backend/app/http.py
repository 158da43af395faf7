"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import jsonify

from naijatax.backend.app.models import InvalidCategory
from naijatax.backend.config.schedule_config import ConfigurationError


@dataclass(frozen=True)
class ProblemResponse:
    """Lightweight representation of an RFC 7807-style error payload."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Convenience factory mirroring Flask's ``jsonify`` interface."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


def problem_for_exception(error: Exception) -> ProblemResponse:
    """Map engine and configuration errors onto problem responses."""

    if isinstance(error, InvalidCategory):
        return problem_response(
            "invalid_category",
            status=400,
            message=str(error),
            supported_categories=["individual", "small_business"],
        )
    if isinstance(error, FileNotFoundError):
        return problem_response("not_found", status=404, message=str(error))
    if isinstance(error, ConfigurationError):
        return problem_response(
            "configuration_error", status=500, message="Tax schedule configuration is invalid"
        )
    return problem_response("validation_error", status=400, message=str(error))


__all__ = ["ProblemResponse", "problem_for_exception", "problem_response"]
