"""
Ads Report Proxy – request, raw row and output record models (pydantic).

Raw rows mirror the nested GAQL result shape (campaign, ad_group, ad_group_criterion,
geographic_view, segments, metrics). Every level is optional: the API omits sub-messages
that have no value, and the normalizer decides the fallback for each field.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Ids, enum names and the like: copied through as the API returns them
Passthrough = Optional[Union[str, int]]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Request ----------


class ReportRequest(_CamelModel):
    """Body of the report endpoints. Presence of required fields is checked by validation.py."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    customer_id: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    developer_token: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    date_range: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _numbers_as_strings(cls, v: Any) -> Any:
        # customerId is often sent as a JSON number
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class CredentialSet(_CamelModel):
    """Validated per-request Google Ads credentials. Secrets are kept out of repr."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    customer_id: str
    refresh_token: str = Field(repr=False)
    developer_token: str = Field(repr=False)
    client_id: str
    client_secret: str = Field(repr=False)
    access_token: Optional[str] = Field(default=None, repr=False)


# ---------- Raw GAQL rows ----------


class _RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RawCampaign(_RawModel):
    id: Any = None
    name: Any = None


class RawAdGroup(_RawModel):
    id: Any = None
    name: Any = None


class RawKeywordInfo(_RawModel):
    text: Any = None
    match_type: Any = None


class RawQualityInfo(_RawModel):
    quality_score: Any = None


class RawTypeInfo(_RawModel):
    """age_range / gender criterion info: just the enum name."""

    type: Any = None


class RawAdGroupCriterion(_RawModel):
    criterion_id: Any = None
    status: Any = None
    effective_cpc_bid_micros: Any = None
    keyword: Optional[RawKeywordInfo] = None
    quality_info: Optional[RawQualityInfo] = None
    age_range: Optional[RawTypeInfo] = None
    gender: Optional[RawTypeInfo] = None


class RawGeographicView(_RawModel):
    country_criterion_id: Any = None
    location_type: Any = None


class RawSegments(_RawModel):
    date: Any = None


class RawMetrics(_RawModel):
    impressions: Any = None
    clicks: Any = None
    cost_micros: Any = None
    conversions: Any = None
    conversions_value: Any = None


class RawResultRow(_RawModel):
    campaign: Optional[RawCampaign] = None
    ad_group: Optional[RawAdGroup] = None
    ad_group_criterion: Optional[RawAdGroupCriterion] = None
    geographic_view: Optional[RawGeographicView] = None
    segments: Optional[RawSegments] = None
    metrics: Optional[RawMetrics] = None


# ---------- Output records ----------


class Metrics(_CamelModel):
    impressions: int = 0
    clicks: int = 0
    cost_micros: int = 0
    conversions: float = 0.0


class KeywordMetrics(Metrics):
    conversions_value: float = 0.0


class KeywordRecord(_CamelModel):
    criterion_id: Passthrough = None
    keyword_text: Optional[str] = None
    match_type: Passthrough = None
    status: Passthrough = None
    max_cpc_micros: Passthrough = None
    quality_score: Optional[int] = None
    campaign_id: Passthrough = None
    campaign_name: Optional[str] = None
    ad_group_id: Passthrough = None
    ad_group_name: Optional[str] = None
    date: Optional[str] = None
    metrics: KeywordMetrics = Field(default_factory=KeywordMetrics)


class DemographicRecord(_CamelModel):
    campaign_id: Passthrough = None
    campaign_name: Optional[str] = None
    ad_group_id: Passthrough = None
    ad_group_name: Optional[str] = None
    age_range: Union[str, int] = "UNKNOWN"
    gender: Union[str, int] = "UNKNOWN"
    date: Optional[str] = None
    metrics: Metrics = Field(default_factory=Metrics)


class GeographicRecord(_CamelModel):
    campaign_id: Passthrough = None
    campaign_name: Optional[str] = None
    country_criterion_id: Passthrough = None
    location_type: Passthrough = None
    date: Optional[str] = None
    metrics: Metrics = Field(default_factory=Metrics)
