import logging
import re
from unittest.mock import patch

import pytest
from starlette.requests import Request

from config import Settings
from errors import UpstreamError
from server import create_app, get_query_runner
from validation import REQUIRED_FIELDS, resolve_date_range, validate_credentials

REPORT_PATHS = ["/api/keywords", "/api/demographics", "/api/geographic"]


# =============================================================================
# Authentication
# =============================================================================

@pytest.mark.parametrize("path", REPORT_PATHS)
@pytest.mark.parametrize("headers", [{}, {"x-api-key": "wrong"}, {"x-api-key": ""}, {"x-api-key": "TEST-SECRET"}])
def test_bad_api_key_is_rejected_before_upstream(client, runner, credentials_body, path, headers):
    resp = client.post(path, json=credentials_body, headers=headers)

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Unauthorized", "details": []}
    assert runner.calls == []


def test_bad_api_key_wins_over_missing_fields(client, runner):
    resp = client.post("/api/keywords", json={}, headers={"x-api-key": "nope"})

    assert resp.status_code == 401
    assert runner.calls == []


def test_unset_secret_denies_everything(runner, credentials_body):
    from fastapi.testclient import TestClient

    app = create_app(Settings(api_key=""))
    app.dependency_overrides[get_query_runner] = lambda: runner
    resp = TestClient(app).post("/api/keywords", json=credentials_body, headers={"x-api-key": ""})

    assert resp.status_code == 401
    assert runner.calls == []


# =============================================================================
# Credential validation
# =============================================================================

@pytest.mark.parametrize("path", REPORT_PATHS)
@pytest.mark.parametrize("omitted", list(REQUIRED_FIELDS))
def test_missing_field_lists_full_required_set(client, runner, auth_headers, credentials_body, path, omitted):
    del credentials_body[omitted]

    resp = client.post(path, json=credentials_body, headers=auth_headers)

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Missing required fields"
    assert body["required"] == list(REQUIRED_FIELDS)
    assert body["missing"] == [omitted]
    assert runner.calls == []


def test_empty_body_is_missing_everything(client, runner, auth_headers):
    resp = client.post("/api/demographics", headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["missing"] == list(REQUIRED_FIELDS)
    assert runner.calls == []


def test_access_token_is_optional(client, runner, auth_headers, credentials_body):
    credentials_body["accessToken"] = "ya29.token"

    resp = client.post("/api/keywords", json=credentials_body, headers=auth_headers)

    assert resp.status_code == 200
    credentials, _ = runner.calls[0]
    assert credentials.access_token == "ya29.token"


def test_non_object_body_is_400(client, runner, auth_headers):
    resp = client.post("/api/keywords", json=["not", "an", "object"], headers=auth_headers)

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Invalid request body"
    assert body["details"]
    assert runner.calls == []


# =============================================================================
# Date range
# =============================================================================

@pytest.mark.parametrize(
    "path, expected",
    [
        ("/api/keywords", "LAST_7_DAYS"),
        ("/api/demographics", "LAST_30_DAYS"),
        ("/api/geographic", "LAST_30_DAYS"),
    ],
)
def test_default_date_range(client, runner, auth_headers, credentials_body, path, expected):
    resp = client.post(path, json=credentials_body, headers=auth_headers)

    assert resp.status_code == 200
    _, query = runner.calls[0]
    assert f"segments.date DURING {expected}" in query


def test_explicit_date_range_is_used(client, runner, auth_headers, credentials_body):
    credentials_body["dateRange"] = "LAST_14_DAYS"

    client.post("/api/geographic", json=credentials_body, headers=auth_headers)

    _, query = runner.calls[0]
    assert "segments.date DURING LAST_14_DAYS" in query


def test_injected_date_range_is_rejected(client, runner, auth_headers, credentials_body):
    credentials_body["dateRange"] = "LAST_7_DAYS OR campaign.status = REMOVED"

    resp = client.post("/api/keywords", json=credentials_body, headers=auth_headers)

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "LAST_7_DAYS" in body["allowed"]
    assert runner.calls == []


# =============================================================================
# Success envelopes
# =============================================================================

@pytest.mark.parametrize("n", [0, 1, 5])
def test_count_matches_payload_length(client, runner, auth_headers, credentials_body, keyword_row, n):
    runner.rows = [keyword_row] * n

    resp = client.post("/api/keywords", json=credentials_body, headers=auth_headers)

    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["count"] == n
    assert len(body["keywords"]) == n


def test_customer_id_is_echoed_from_request(client, runner, auth_headers, credentials_body):
    resp = client.post("/api/demographics", json=credentials_body, headers=auth_headers)

    assert resp.json()["customerId"] == "123-456-7890"


def test_numeric_customer_id_is_accepted(client, runner, auth_headers, credentials_body):
    credentials_body["customerId"] = 1234567890

    resp = client.post("/api/geographic", json=credentials_body, headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json()["customerId"] == "1234567890"


def test_keywords_payload_shape(client, runner, auth_headers, credentials_body, keyword_row):
    runner.rows = [keyword_row]

    resp = client.post("/api/keywords", json=credentials_body, headers=auth_headers)

    assert resp.json()["keywords"][0] == {
        "criterionId": "111",
        "keywordText": "running shoes",
        "matchType": "EXACT",
        "status": "ENABLED",
        "maxCpcMicros": "1500000",
        "qualityScore": 7,
        "campaignId": "10",
        "campaignName": "Search - Shoes",
        "adGroupId": "20",
        "adGroupName": "Running",
        "date": "2026-10-01",
        "metrics": {
            "impressions": 1200,
            "clicks": 34,
            "costMicros": 5600000,
            "conversions": 2.5,
            "conversionsValue": 180.75,
        },
    }


def test_demographics_payload_field(client, runner, auth_headers, credentials_body):
    runner.rows = [{"campaign": {"id": "1", "name": "C"}, "ad_group_criterion": {"age_range": {"type": "AGE_RANGE_25_34"}}}]

    body = client.post("/api/demographics", json=credentials_body, headers=auth_headers).json()

    assert body["count"] == 1
    record = body["demographics"][0]
    assert record["ageRange"] == "AGE_RANGE_25_34"
    assert record["gender"] == "UNKNOWN"


def test_geographic_payload_field(client, runner, auth_headers, credentials_body):
    runner.rows = [{"campaign": {"id": "1"}, "geographic_view": {"country_criterion_id": "2840", "location_type": "AREA_OF_INTEREST"}}]

    body = client.post("/api/geographic", json=credentials_body, headers=auth_headers).json()

    record = body["geographic"][0]
    assert record["countryCriterionId"] == "2840"
    assert record["locationType"] == "AREA_OF_INTEREST"


# =============================================================================
# Upstream failures
# =============================================================================

def test_upstream_error_is_500_with_details(client, runner, auth_headers, credentials_body):
    runner.error = UpstreamError("Customer not found", [{"message": "Customer not found"}])

    resp = client.post("/api/keywords", json=credentials_body, headers=auth_headers)

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": "Customer not found",
        "details": [{"message": "Customer not found"}],
    }


def test_unexpected_error_is_500_with_message(client, runner, auth_headers, credentials_body):
    runner.error = RuntimeError("connection reset")

    resp = client.post("/api/geographic", json=credentials_body, headers=auth_headers)

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "connection reset", "details": []}


# =============================================================================
# Health
# =============================================================================

def test_health_needs_no_key(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", body["timestamp"])


def test_date_range_is_resolved_once(client, runner, auth_headers, credentials_body):
    credentials_body["dateRange"] = "last_month"

    with patch("server.resolve_date_range", wraps=resolve_date_range) as resolve, patch(
        "queries.resolve_date_range", side_effect=AssertionError("resolved twice")
    ):
        resp = client.post("/api/keywords", json=credentials_body, headers=auth_headers)

    assert resp.status_code == 200
    assert resolve.call_count == 1
    _, query = runner.calls[0]
    assert "segments.date DURING LAST_MONTH" in query


def test_upstream_error_is_not_logged_again(client, runner, auth_headers, credentials_body, caplog):
    runner.error = UpstreamError("quota exhausted")

    with caplog.at_level(logging.INFO, logger="server"):
        resp = client.post("/api/keywords", json=credentials_body, headers=auth_headers)

    assert resp.status_code == 500
    assert [r for r in caplog.records if r.name == "server" and r.levelno >= logging.ERROR] == []


def test_unexpected_error_is_logged_once(client, runner, auth_headers, credentials_body, caplog):
    runner.error = RuntimeError("socket closed")

    with caplog.at_level(logging.INFO, logger="server"):
        client.post("/api/keywords", json=credentials_body, headers=auth_headers)

    errors = [r for r in caplog.records if r.name == "server" and r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert errors[0].exc_info is not None


# =============================================================================
# Upstream runner wiring
# =============================================================================

def test_query_runner_passes_settings_to_run_query(credentials_body):
    app = create_app(Settings(api_key="k", google_ads_timeout_seconds=12.5, google_ads_login_customer_id="9998887777"))
    request = Request({"type": "http", "app": app})
    credentials = validate_credentials(credentials_body)

    with patch("server.run_query", return_value=[{"campaign": {"id": "1"}}]) as run_query:
        rows = get_query_runner(request)(credentials, "SELECT campaign.id FROM campaign")

    assert rows == [{"campaign": {"id": "1"}}]
    run_query.assert_called_once_with(
        credentials,
        "SELECT campaign.id FROM campaign",
        timeout=12.5,
        login_customer_id="9998887777",
    )
