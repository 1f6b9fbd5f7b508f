"""
Ads Report Proxy – error types. Each maps to one HTTP status and one error envelope.
"""

from typing import Any, Dict, List, Optional, Sequence


class ProxyError(Exception):
    """Base for errors that end a request with an error envelope."""

    status_code = 500

    def __init__(self, message: str, details: Optional[List[Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: List[Any] = list(details or [])

    def extra(self) -> Dict[str, Any]:
        """Additional envelope keys for this error (none by default)."""
        return {}


class AuthError(ProxyError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class BadRequestError(ProxyError):
    status_code = 400


class MissingFieldsError(BadRequestError):
    """Required credential fields are absent. `required` is always the full list."""

    def __init__(self, required: Sequence[str], missing: Sequence[str]) -> None:
        super().__init__("Missing required fields")
        self.required = list(required)
        self.missing = list(missing)

    def extra(self) -> Dict[str, Any]:
        return {"required": self.required, "missing": self.missing}


class InvalidDateRangeError(BadRequestError):
    def __init__(self, value: Any, allowed: Sequence[str]) -> None:
        super().__init__(f"Invalid dateRange: {value!r}")
        self.value = value
        self.allowed = list(allowed)

    def extra(self) -> Dict[str, Any]:
        return {"allowed": self.allowed}


class UpstreamError(ProxyError):
    """Failure raised by the Google Ads API call (auth, transport, bad query)."""

    status_code = 500
