"""
Ads Report Proxy – request body checks: required credentials and the dateRange token.
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from errors import InvalidDateRangeError, MissingFieldsError
from models import CredentialSet, ReportRequest

REQUIRED_FIELDS = ("customerId", "refreshToken", "developerToken", "clientId", "clientSecret")

# GAQL predefined date ranges accepted after DURING
DATE_RANGES = (
    "TODAY",
    "YESTERDAY",
    "LAST_7_DAYS",
    "LAST_14_DAYS",
    "LAST_30_DAYS",
    "LAST_BUSINESS_WEEK",
    "LAST_WEEK_SUN_SAT",
    "LAST_WEEK_MON_SUN",
    "THIS_WEEK_SUN_TODAY",
    "THIS_WEEK_MON_TODAY",
    "THIS_MONTH",
    "LAST_MONTH",
)
_DATE_RANGE_SET = frozenset(DATE_RANGES)


def _as_mapping(body: Union[ReportRequest, Mapping[str, Any], None]) -> Mapping[str, Any]:
    if body is None:
        return {}
    if isinstance(body, ReportRequest):
        return body.model_dump(by_alias=True)
    return body


def missing_fields(
    body: Union[ReportRequest, Mapping[str, Any], None],
    required: Sequence[str] = REQUIRED_FIELDS,
) -> List[str]:
    """Required names whose value is absent, None or empty."""
    data = _as_mapping(body)
    return [name for name in required if not data.get(name)]


def validate_credentials(
    body: Union[ReportRequest, Mapping[str, Any], None],
    required: Sequence[str] = REQUIRED_FIELDS,
) -> CredentialSet:
    """Return the credential set, or raise MissingFieldsError listing the full required set."""
    missing = missing_fields(body, required)
    if missing:
        raise MissingFieldsError(required=required, missing=missing)
    data = _as_mapping(body)
    return CredentialSet(
        customer_id=str(data["customerId"]),
        refresh_token=str(data["refreshToken"]),
        developer_token=str(data["developerToken"]),
        client_id=str(data["clientId"]),
        client_secret=str(data["clientSecret"]),
        access_token=data.get("accessToken") or None,
    )


def resolve_date_range(value: Optional[str], default: str) -> str:
    """Apply the endpoint default and check the token against DATE_RANGES."""
    if value is None or (isinstance(value, str) and not value.strip()):
        token = default
    elif isinstance(value, str):
        token = value.strip().upper()
    else:
        raise InvalidDateRangeError(value, DATE_RANGES)
    if token not in _DATE_RANGE_SET:
        raise InvalidDateRangeError(value, DATE_RANGES)
    return token
