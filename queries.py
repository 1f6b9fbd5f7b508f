"""
Ads Report Proxy – GAQL for the three report kinds.

Projection and filters are fixed per report; only the DURING token varies, and it is
checked against the predefined date ranges before it is put in the WHERE clause.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from validation import resolve_date_range

_METRICS = (
    "metrics.impressions",
    "metrics.clicks",
    "metrics.cost_micros",
    "metrics.conversions",
)


class ReportKind(str, Enum):
    KEYWORDS = "keywords"
    DEMOGRAPHICS = "demographics"
    GEOGRAPHIC = "geographic"


@dataclass(frozen=True)
class ReportDefinition:
    kind: ReportKind
    resource: str
    fields: Tuple[str, ...]
    filters: Tuple[str, ...]
    default_date_range: str

    @property
    def payload_field(self) -> str:
        """Envelope key holding the records."""
        return self.kind.value


REPORTS: Dict[ReportKind, ReportDefinition] = {
    ReportKind.KEYWORDS: ReportDefinition(
        kind=ReportKind.KEYWORDS,
        resource="keyword_view",
        fields=(
            "ad_group_criterion.criterion_id",
            "ad_group_criterion.keyword.text",
            "ad_group_criterion.keyword.match_type",
            "ad_group_criterion.status",
            "ad_group_criterion.effective_cpc_bid_micros",
            "ad_group_criterion.quality_info.quality_score",
            "campaign.id",
            "campaign.name",
            "ad_group.id",
            "ad_group.name",
            "segments.date",
        ) + _METRICS + ("metrics.conversions_value",),
        filters=(
            "ad_group_criterion.type = KEYWORD",
            "campaign.status = ENABLED",
            "ad_group.status = ENABLED",
        ),
        default_date_range="LAST_7_DAYS",
    ),
    ReportKind.DEMOGRAPHICS: ReportDefinition(
        kind=ReportKind.DEMOGRAPHICS,
        resource="age_range_view",
        fields=(
            "campaign.id",
            "campaign.name",
            "ad_group.id",
            "ad_group.name",
            "ad_group_criterion.age_range.type",
            "ad_group_criterion.gender.type",
            "segments.date",
        ) + _METRICS,
        filters=("campaign.status = ENABLED",),
        default_date_range="LAST_30_DAYS",
    ),
    ReportKind.GEOGRAPHIC: ReportDefinition(
        kind=ReportKind.GEOGRAPHIC,
        resource="geographic_view",
        fields=(
            "campaign.id",
            "campaign.name",
            "geographic_view.country_criterion_id",
            "geographic_view.location_type",
            "segments.date",
        ) + _METRICS,
        filters=("campaign.status = ENABLED",),
        default_date_range="LAST_30_DAYS",
    ),
}


def get_report(kind: Union[ReportKind, str]) -> ReportDefinition:
    return REPORTS[ReportKind(kind)]


def render_query(report: ReportDefinition, token: str) -> str:
    """GAQL for a report with an already checked DURING token."""
    fields = ",\n       ".join(report.fields)
    where = "\n  AND ".join((f"segments.date DURING {token}",) + report.filters)
    return f"SELECT {fields}\nFROM {report.resource}\nWHERE {where}"


def build_query(kind: Union[ReportKind, str], date_range: Optional[str] = None) -> str:
    """Render the GAQL for a report kind; date_range defaults per report."""
    report = get_report(kind)
    return render_query(report, resolve_date_range(date_range, report.default_date_range))
