"""
Ads Report Proxy – config (from .env in this folder, then the environment).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

# Load .env from this project folder
_ROOT = Path(__file__).resolve().parent
_ENV_FILE = _ROOT / ".env"
if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE)

# Server
PORT = int(os.getenv("PORT", "3000"))
# Shared secret expected in the x-api-key header. Empty = every data request is rejected.
API_KEY = os.getenv("API_KEY", "")
CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS", "*")
LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()

# Google Ads (per-request credentials come from the body; these only tune the call)
GOOGLE_ADS_TIMEOUT_SECONDS = float(os.getenv("GOOGLE_ADS_TIMEOUT_SECONDS", "120"))
GOOGLE_ADS_LOGIN_CUSTOMER_ID = os.getenv("GOOGLE_ADS_LOGIN_CUSTOMER_ID", "")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, fixed at startup."""

    api_key: str = field(default="", repr=False)
    port: int = 3000
    google_ads_timeout_seconds: float = 120.0
    google_ads_login_customer_id: str = ""
    cors_allow_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def _split_origins(raw: str) -> Tuple[str, ...]:
    origins = tuple(o.strip() for o in (raw or "").split(",") if o.strip())
    return origins or ("*",)


def load_settings() -> Settings:
    """Build Settings from the values read at import."""
    return Settings(
        api_key=API_KEY,
        port=PORT,
        google_ads_timeout_seconds=GOOGLE_ADS_TIMEOUT_SECONDS,
        google_ads_login_customer_id=normalize_customer_id(GOOGLE_ADS_LOGIN_CUSTOMER_ID),
        cors_allow_origins=_split_origins(CORS_ALLOW_ORIGINS),
        log_level=LOG_LEVEL,
    )


def normalize_customer_id(customer_id: Optional[str]) -> str:
    """Normalize Google Ads customer ID for the API (no dashes)."""
    if not customer_id:
        return ""
    return str(customer_id).replace("-", "").strip()
