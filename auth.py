"""
Ads Report Proxy – shared-secret check on the x-api-key header.
"""

import hmac
import logging
from typing import Optional

from fastapi import Header, Request

from config import Settings
from errors import AuthError

logger = logging.getLogger(__name__)


def is_authorized(supplied: Optional[str], secret: Optional[str]) -> bool:
    """True iff the header is present and byte-for-byte equal to a configured secret."""
    if not supplied or not secret:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), secret.encode("utf-8"))


def require_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(None, alias="x-api-key"),
) -> None:
    """FastAPI dependency: reject the request before any body handling when the key is wrong."""
    settings: Settings = request.app.state.settings
    if not is_authorized(x_api_key, settings.api_key):
        logger.warning("Rejected %s %s: bad or missing x-api-key", request.method, request.url.path)
        raise AuthError()
