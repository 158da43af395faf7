"""Application factory for NaijaTax backend services."""

import os
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from naijatax.backend.config.schedule_config import available_years, load_schedule_configuration

from .http import problem_for_exception, problem_response
from .routes import register_routes
from .routes.config import get_configuration_metadata


def _parse_allowed_origins(raw: str | None) -> set[str]:
    """Convert an environment variable into a normalised set of origins."""

    if not raw:
        return set()

    return {origin.strip() for origin in raw.split(",") if origin.strip()}


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    # Malformed bracket tables fail here rather than on the first request.
    for year in available_years():
        load_schedule_configuration(year)

    app = Flask(__name__)

    allowed_origins = _parse_allowed_origins(os.getenv("NAIJATAX_ALLOWED_ORIGINS"))

    if not allowed_origins:
        warn(
            "No allowed origins configured; cross-origin requests will be rejected.",
            stacklevel=1,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(FileNotFoundError)
    def handle_missing_schedule(error: FileNotFoundError):
        """Report unknown schedule versions as missing resources."""

        return problem_for_exception(error).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Surface category and payload errors to clients."""

        app.logger.info("Rejected calculation request: %s", error)
        return problem_for_exception(error).to_response()

    return app
