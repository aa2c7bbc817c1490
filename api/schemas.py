from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RangeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[float] = Field(default=None, alias="from")
    to: Optional[float] = None
    label: str = ""


class BucketModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field: str = ""
    type: str = Field(default="terms", validation_alias=AliasChoices("type", "kind"))
    order: str = "desc"
    size: Optional[int] = None
    min_doc_count: Optional[int] = Field(default=None, validation_alias=AliasChoices("min_doc_count", "minDocCount"))
    interval: Optional[float] = None
    date_interval: Optional[str] = Field(default=None, validation_alias=AliasChoices("date_interval", "dateInterval"))
    ranges: List[RangeModel] = Field(default_factory=list)
    split_kind: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("split_kind", "splitKind", "splitType", "split_type")
    )
    label: str = ""

    def to_raw(self) -> Dict[str, Any]:
        raw = self.model_dump(exclude_none=True)
        raw["kind"] = raw.pop("type", "terms")
        raw["ranges"] = [{"from": r.from_, "to": r.to, "label": r.label} for r in self.ranges]
        return raw


class MetricModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field: str = ""
    aggregation: str = Field(default="sum", alias="agg")
    label: str = ""


class SettingsModel(BaseModel):
    terms_size: int = 10
    histogram_size: int = 50
    date_histogram_size: int = 100
    min_doc_count: int = 1
    locale: str = "en_US"
    total_label: str = "Total"


class AggregateRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    buckets: List[BucketModel] = Field(default_factory=list)
    metrics: List[MetricModel] = Field(default_factory=list)
    settings: SettingsModel = Field(default_factory=SettingsModel)
    include_members: bool = False


class KpiRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    metric: Optional[MetricModel] = None


class ValidateRequest(BaseModel):
    buckets: List[Dict[str, Any]] = Field(default_factory=list)
    metrics: List[Dict[str, Any]] = Field(default_factory=list)


class OptionModel(BaseModel):
    value: str
    label: str
    description: str = ""


class MetaOptionsResponse(BaseModel):
    bucket_kinds: List[OptionModel]
    date_intervals: List[OptionModel]
    sort_orders: List[OptionModel]
    aggregations: List[OptionModel]
