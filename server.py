"""
Ads Report Proxy – FastAPI server.

Authenticated proxy in front of the Google Ads API. Each report endpoint takes the
caller's Google Ads credentials in the body, runs a fixed GAQL report and returns
flattened rows.

  pip install -e .
  uvicorn server:app --host 0.0.0.0 --port 3000

  Required .env / environment: API_KEY (value expected in the x-api-key header).
  Optional: PORT, GOOGLE_ADS_TIMEOUT_SECONDS, GOOGLE_ADS_LOGIN_CUSTOMER_ID, CORS_ALLOW_ORIGINS, LOG_LEVEL.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import require_api_key
from config import LOG_LEVEL, Settings, load_settings
from errors import BadRequestError, ProxyError, UpstreamError
from google_ads_client import run_query
from models import CredentialSet, ReportRequest
from normalize import normalize_rows
from queries import ReportKind, get_report, render_query
from responses import error_envelope, health_payload, success_envelope
from validation import resolve_date_range, validate_credentials

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

QueryRunner = Callable[[CredentialSet, str], List[Dict[str, Any]]]


def get_query_runner(request: Request) -> QueryRunner:
    """Upstream call bound to this app's timeout and login customer id."""
    settings: Settings = request.app.state.settings

    def _run(credentials: CredentialSet, query: str) -> List[Dict[str, Any]]:
        return run_query(
            credentials,
            query,
            timeout=settings.google_ads_timeout_seconds,
            login_customer_id=settings.google_ads_login_customer_id,
        )

    return _run


def _run_report(kind: ReportKind, body: Optional[ReportRequest], runner: QueryRunner) -> Dict[str, Any]:
    report = get_report(kind)
    credentials = validate_credentials(body)
    date_range = resolve_date_range(body.date_range if body else None, report.default_date_range)
    query = render_query(report, date_range)
    logger.info("Running %s report (%s)", kind.value, date_range)
    try:
        rows = runner(credentials, query)
        records = normalize_rows(kind, rows)
    except UpstreamError:
        # already logged by google_ads_client
        raise
    except Exception as e:
        logger.exception("Error fetching %s: %s", kind.value, e)
        raise UpstreamError(str(e) or type(e).__name__) from e
    logger.info("%s report: %s rows", kind.value, len(records))
    return success_envelope(credentials.customer_id, report.payload_field, records)


router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])


@router.post("/keywords")
def keywords(
    body: Optional[ReportRequest] = Body(None),
    runner: QueryRunner = Depends(get_query_runner),
):
    """Keyword performance (keyword_view); dateRange defaults to LAST_7_DAYS."""
    return _run_report(ReportKind.KEYWORDS, body, runner)


@router.post("/demographics")
def demographics(
    body: Optional[ReportRequest] = Body(None),
    runner: QueryRunner = Depends(get_query_runner),
):
    """Age range / gender performance (age_range_view); dateRange defaults to LAST_30_DAYS."""
    return _run_report(ReportKind.DEMOGRAPHICS, body, runner)


@router.post("/geographic")
def geographic(
    body: Optional[ReportRequest] = Body(None),
    runner: QueryRunner = Depends(get_query_runner),
):
    """Country / location performance (geographic_view); dateRange defaults to LAST_30_DAYS."""
    return _run_report(ReportKind.GEOGRAPHIC, body, runner)


async def _proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.message, exc.details, **exc.extra()),
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [{"loc": [str(p) for p in e.get("loc", ())], "message": e.get("msg", "")} for e in exc.errors()]
    return await _proxy_error_handler(request, BadRequestError("Invalid request body", details))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(
        title="Ads Report Proxy",
        description="Authenticated proxy for Google Ads keyword, demographic and geographic reports.",
    )
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ProxyError, _proxy_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    @app.get("/health")
    def health():
        """Health check for load balancers / readiness. No auth."""
        return health_payload()

    app.include_router(router)
    if not settings.api_key:
        logger.warning("API_KEY is not set; every /api request will be rejected")
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings: Settings = app.state.settings
    logger.info("Ads Report Proxy running on port %s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
