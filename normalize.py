"""
Ads Report Proxy – raw GAQL rows -> flat output records.

Rows are handled one at a time, in order. Bad or missing metric values become zero,
never null, and never fail the request.
"""

import math
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from models import (
    DemographicRecord,
    GeographicRecord,
    KeywordMetrics,
    KeywordRecord,
    Metrics,
    RawAdGroupCriterion,
    RawMetrics,
    RawResultRow,
)
from queries import ReportKind

_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

RowLike = Union[RawResultRow, Mapping[str, Any]]


def _unwrap(val: Any) -> Any:
    # proto wrapper types carry the number in .value
    while hasattr(val, "value") and not isinstance(val, (str, bytes, int, float)):
        val = getattr(val, "value")
    return val


def to_float(val: Any) -> float:
    """Parse a metric as float; anything unparseable or non-finite is 0.0."""
    val = _unwrap(val)
    if val is None or isinstance(val, bool):
        return 0.0
    if isinstance(val, (int, float)):
        result = float(val)
    elif isinstance(val, str):
        match = _FLOAT_PREFIX.match(val)
        if not match:
            return 0.0
        try:
            result = float(match.group(0))
        except ValueError:
            return 0.0
    else:
        return 0.0
    return result if math.isfinite(result) else 0.0


def to_int(val: Any) -> int:
    """Parse a metric as int (leading digits; floats truncate); unparseable is 0."""
    val = _unwrap(val)
    if val is None or isinstance(val, bool):
        return 0
    if isinstance(val, int):
        return val
    if isinstance(val, float):
        return int(val) if math.isfinite(val) else 0
    if isinstance(val, str):
        match = _INT_PREFIX.match(val)
        if not match:
            return 0
        try:
            return int(match.group(0))
        except ValueError:
            return 0
    return 0


def _text(val: Any) -> Optional[str]:
    return None if val is None else str(val)


def _as_row(row: RowLike) -> RawResultRow:
    if isinstance(row, RawResultRow):
        return row
    return RawResultRow.model_validate(row)


def _metrics(raw: Optional[RawMetrics]) -> Dict[str, Any]:
    raw = raw or RawMetrics()
    return {
        "impressions": max(to_int(raw.impressions), 0),
        "clicks": max(to_int(raw.clicks), 0),
        "cost_micros": max(to_int(raw.cost_micros), 0),
        "conversions": max(to_float(raw.conversions), 0.0),
    }


def _quality_score(criterion: RawAdGroupCriterion) -> Optional[int]:
    # 0 and absence both mean "no score", unlike the metrics
    info = criterion.quality_info
    if info is None or not info.quality_score:
        return None
    return to_int(info.quality_score) or None


def normalize_keyword_row(row: RowLike) -> KeywordRecord:
    raw = _as_row(row)
    criterion = raw.ad_group_criterion or RawAdGroupCriterion()
    keyword = criterion.keyword
    metrics = raw.metrics or RawMetrics()
    return KeywordRecord(
        criterion_id=criterion.criterion_id,
        keyword_text=_text(keyword.text) if keyword else None,
        match_type=keyword.match_type if keyword else None,
        status=criterion.status,
        max_cpc_micros=criterion.effective_cpc_bid_micros,
        quality_score=_quality_score(criterion),
        campaign_id=raw.campaign.id if raw.campaign else None,
        campaign_name=_text(raw.campaign.name) if raw.campaign else None,
        ad_group_id=raw.ad_group.id if raw.ad_group else None,
        ad_group_name=_text(raw.ad_group.name) if raw.ad_group else None,
        date=_text(raw.segments.date) if raw.segments else None,
        metrics=KeywordMetrics(
            **_metrics(metrics),
            conversions_value=to_float(metrics.conversions_value),
        ),
    )


def normalize_demographic_row(row: RowLike) -> DemographicRecord:
    raw = _as_row(row)
    criterion = raw.ad_group_criterion or RawAdGroupCriterion()
    age_range = criterion.age_range.type if criterion.age_range else None
    gender = criterion.gender.type if criterion.gender else None
    return DemographicRecord(
        campaign_id=raw.campaign.id if raw.campaign else None,
        campaign_name=_text(raw.campaign.name) if raw.campaign else None,
        ad_group_id=raw.ad_group.id if raw.ad_group else None,
        ad_group_name=_text(raw.ad_group.name) if raw.ad_group else None,
        age_range=age_range or "UNKNOWN",
        gender=gender or "UNKNOWN",
        date=_text(raw.segments.date) if raw.segments else None,
        metrics=Metrics(**_metrics(raw.metrics)),
    )


def normalize_geographic_row(row: RowLike) -> GeographicRecord:
    raw = _as_row(row)
    geo = raw.geographic_view
    # No "UNKNOWN" fallback here: absent geo fields stay null
    return GeographicRecord(
        campaign_id=raw.campaign.id if raw.campaign else None,
        campaign_name=_text(raw.campaign.name) if raw.campaign else None,
        country_criterion_id=geo.country_criterion_id if geo else None,
        location_type=geo.location_type if geo else None,
        date=_text(raw.segments.date) if raw.segments else None,
        metrics=Metrics(**_metrics(raw.metrics)),
    )


NORMALIZERS: Dict[ReportKind, Callable[[RowLike], Any]] = {
    ReportKind.KEYWORDS: normalize_keyword_row,
    ReportKind.DEMOGRAPHICS: normalize_demographic_row,
    ReportKind.GEOGRAPHIC: normalize_geographic_row,
}


def normalize_rows(kind: Union[ReportKind, str], rows: Iterable[RowLike]) -> List[Dict[str, Any]]:
    """Normalize each row independently and return JSON-ready dicts (camelCase keys)."""
    normalizer = NORMALIZERS[ReportKind(kind)]
    return [normalizer(row).model_dump(by_alias=True) for row in rows]
