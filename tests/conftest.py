# Shared fixtures for the proxy tests. The Google Ads API is never contacted:
# report endpoints get a FakeRunner through app.dependency_overrides.

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from config import Settings
from server import create_app, get_query_runner

API_KEY = "test-secret"


class FakeRunner:
    """Stands in for the upstream query call; records (credentials, query) pairs."""

    def __init__(self) -> None:
        self.rows: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None
        self.calls: List[tuple] = []

    def __call__(self, credentials, query: str) -> List[Dict[str, Any]]:
        self.calls.append((credentials, query))
        if self.error is not None:
            raise self.error
        return list(self.rows)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def app(runner):
    app = create_app(Settings(api_key=API_KEY))
    app.dependency_overrides[get_query_runner] = lambda: runner
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"x-api-key": API_KEY}


@pytest.fixture
def credentials_body() -> Dict[str, Any]:
    return {
        "customerId": "123-456-7890",
        "refreshToken": "refresh",
        "developerToken": "dev",
        "clientId": "client-id",
        "clientSecret": "client-secret",
    }


@pytest.fixture
def keyword_row() -> Dict[str, Any]:
    return {
        "ad_group_criterion": {
            "criterion_id": "111",
            "keyword": {"text": "running shoes", "match_type": "EXACT"},
            "status": "ENABLED",
            "effective_cpc_bid_micros": "1500000",
            "quality_info": {"quality_score": 7},
        },
        "campaign": {"id": "10", "name": "Search - Shoes"},
        "ad_group": {"id": "20", "name": "Running"},
        "segments": {"date": "2026-10-01"},
        "metrics": {
            "impressions": "1200",
            "clicks": "34",
            "cost_micros": "5600000",
            "conversions": 2.5,
            "conversions_value": 180.75,
        },
    }
