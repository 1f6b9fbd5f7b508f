"""
Ads Report Proxy – Google Ads API calls with per-request credentials.
"""

import logging
from typing import Any, Dict, List, Optional

from google.ads.googleads.client import GoogleAdsClient
from google.ads.googleads.errors import GoogleAdsException

from config import normalize_customer_id
from errors import UpstreamError
from models import CredentialSet

logger = logging.getLogger(__name__)


def build_client(credentials: CredentialSet, login_customer_id: str = "") -> GoogleAdsClient:
    """GoogleAdsClient for one request; OAuth access tokens are refreshed by the library."""
    config: Dict[str, Any] = {
        "developer_token": credentials.developer_token,
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "refresh_token": credentials.refresh_token,
        "use_proto_plus": True,
    }
    if login_customer_id:
        config["login_customer_id"] = normalize_customer_id(login_customer_id)
    return GoogleAdsClient.load_from_dict(config)


def _row_to_dict(row: Any) -> Dict[str, Any]:
    """Nested dict of a GoogleAdsRow; enums as names, unset sub-messages omitted."""
    return type(row).to_dict(row, use_integers_for_enums=False, preserving_proto_field_name=True)


def _failure_details(ex: GoogleAdsException) -> List[Dict[str, Any]]:
    details: List[Dict[str, Any]] = []
    failure = getattr(ex, "failure", None)
    for error in getattr(failure, "errors", None) or []:
        entry: Dict[str, Any] = {"message": getattr(error, "message", "")}
        code = getattr(error, "error_code", None)
        if code is not None:
            kind = type(code).pb(code).WhichOneof("error_code")
            if kind:
                value = getattr(code, kind)
                entry["errorCode"] = {kind: getattr(value, "name", None) or str(value)}
        details.append(entry)
    return details


def _failure_message(ex: GoogleAdsException, details: List[Dict[str, Any]]) -> str:
    if details and details[0].get("message"):
        return details[0]["message"]
    return f"Google Ads request failed (request_id={getattr(ex, 'request_id', None)})"


def run_query(
    credentials: CredentialSet,
    query: str,
    *,
    timeout: Optional[float] = None,
    login_customer_id: str = "",
) -> List[Dict[str, Any]]:
    """Run a GAQL query via search_stream and return every row as a nested dict."""
    customer_id_clean = normalize_customer_id(credentials.customer_id)
    try:
        client = build_client(credentials, login_customer_id=login_customer_id)
        ga_service = client.get_service("GoogleAdsService")
        stream = ga_service.search_stream(customer_id=customer_id_clean, query=query, timeout=timeout)
        rows_out: List[Dict[str, Any]] = []
        for batch in stream:
            for row in batch.results:
                rows_out.append(_row_to_dict(row))
    except GoogleAdsException as ex:
        details = _failure_details(ex)
        logger.error("Google Ads API error (request_id=%s): %s", getattr(ex, "request_id", None), details)
        raise UpstreamError(_failure_message(ex, details), details) from ex
    except Exception as ex:
        logger.error("Google Ads call failed: %s", type(ex).__name__)
        raise UpstreamError(str(ex) or type(ex).__name__) from ex
    return rows_out
