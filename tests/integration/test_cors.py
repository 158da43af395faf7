"""Integration tests covering CORS behaviour for API endpoints."""

import pytest
from flask.testing import FlaskClient

from naijatax.backend.app import create_app

ALLOWED_ORIGIN = "https://app.naijatax.test"
ALLOWED_EMBEDDER = "https://embedder.test"
DISALLOWED_ORIGIN = "https://blocked.test"


@pytest.fixture()
def cors_client(monkeypatch: pytest.MonkeyPatch) -> FlaskClient:
    """Return a client configured with a known CORS allow-list."""

    monkeypatch.setenv(
        "NAIJATAX_ALLOWED_ORIGINS",
        ",".join([ALLOWED_ORIGIN, ALLOWED_EMBEDDER]),
    )

    app = create_app()
    app.config.update(TESTING=True)

    with app.test_client() as client:
        yield client


def test_calculation_endpoint_includes_cors_headers(cors_client: FlaskClient) -> None:
    response = cors_client.post(
        "/api/v1/calculations",
        json={"category": "individual", "gross_amount": 1_000_000},
        headers={"Origin": ALLOWED_ORIGIN},
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == ALLOWED_ORIGIN


def test_preflight_request_returns_success(cors_client: FlaskClient) -> None:
    """Preflight checks should succeed for allowed origins."""

    response = cors_client.options(
        "/api/v1/calculations",
        headers={
            "Origin": ALLOWED_EMBEDDER,
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == ALLOWED_EMBEDDER
    assert "POST" in response.headers.get("Access-Control-Allow-Methods", "")


def test_disallowed_origin_does_not_receive_cors_headers(
    cors_client: FlaskClient,
) -> None:
    response = cors_client.get(
        "/api/v1/config/years",
        headers={"Origin": DISALLOWED_ORIGIN},
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") is None


def test_parse_allowed_origins_ignores_blank_entries(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NAIJATAX_ALLOWED_ORIGINS", f" {ALLOWED_ORIGIN} , ,")

    app = create_app()
    response = app.test_client().get(
        "/api/v1/config/years", headers={"Origin": ALLOWED_ORIGIN}
    )

    assert response.headers.get("Access-Control-Allow-Origin") == ALLOWED_ORIGIN
