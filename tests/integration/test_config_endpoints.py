"""Integration tests for the schedule configuration endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask.testing import FlaskClient


def test_years_endpoint_lists_manifest_entries(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/years")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert [entry["year"] for entry in payload["years"]] == [2025]
    assert payload["years"][0]["status"] == "active"
    assert payload["default_year"] == 2025


def test_schedules_endpoint_exposes_individual_bands(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/schedules")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["year"] == 2025
    assert payload["meta"]["currency"] == "NGN"

    individual = payload["categories"]["individual"]
    brackets = individual["brackets"]
    assert len(brackets) == 7
    assert [bracket["rate_label"] for bracket in brackets] == [
        "0%",
        "7%",
        "11%",
        "15%",
        "19%",
        "21%",
        "25%",
    ]
    assert brackets[0]["lower"] == "0"
    assert brackets[-1]["upper"] is None
    assert brackets[1]["range_label"] == "₦800,000.00 – ₦1,500,000.00"
    assert brackets[-1]["range_label"] == "Above ₦20,000,000.00"
    assert individual["exemption_threshold"] == "800000"
    assert "levy" not in individual["labels"]


def test_schedules_endpoint_exposes_business_policy(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/schedules?year=2025")

    business = response.get_json()["categories"]["small_business"]
    assert business["exemption_threshold"] == "50000000"
    assert business["levy_rate"] == "0.04"
    assert [bracket["rate_label"] for bracket in business["brackets"]] == ["0%", "30%"]


def test_schedules_endpoint_unknown_year(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/schedules?year=1999")

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json()["error"] == "not_found"
