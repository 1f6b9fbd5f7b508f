"""
Ads Report Proxy – JSON envelopes returned by every endpoint.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence


def success_envelope(customer_id: Any, payload_field: str, records: Sequence[Any]) -> Dict[str, Any]:
    """{"success": true, "customerId", "count", <payload_field>: records}; count is len(records)."""
    records = list(records)
    return {
        "success": True,
        "customerId": customer_id,
        "count": len(records),
        payload_field: records,
    }


def error_envelope(message: str, details: Optional[List[Any]] = None, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "success": False,
        "error": message,
        "details": list(details or []),
    }
    body.update(extra)
    return body


def health_payload(now: Optional[datetime] = None) -> Dict[str, str]:
    """Static liveness body with an ISO-8601 UTC timestamp (milliseconds, Z suffix)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {"status": "ok", "timestamp": stamp}
