"""Request and response helpers wrapping the calculation service."""

from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "parse_calculation_payload",
    "build_calculation_response",
]
