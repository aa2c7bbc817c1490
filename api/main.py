from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import (
    AggregateRequest,
    KpiRequest,
    MetaOptionsResponse,
    OptionModel,
    SettingsModel,
    ValidateRequest,
)
from buckets.config import EngineSettings, normalize_settings
from buckets.definitions import BUCKET_KIND_LABELS, AggregationPolicy, DateInterval, SortOrder
from buckets.extractor import extract_all, extract_split_series
from buckets.frames import levels_frame, series_frame
from buckets.kpi import kpi_trend, kpi_value
from buckets.pipeline import run
from buckets.validation import validate_bucket, validate_metrics


app = FastAPI(title="Bucket Aggregation API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

DATE_INTERVAL_LABELS = {
    DateInterval.MINUTE: "Minute",
    DateInterval.HOUR: "Hour",
    DateInterval.DAY: "Day",
    DateInterval.WEEK: "Week",
    DateInterval.MONTH: "Month",
    DateInterval.YEAR: "Year",
}
SORT_ORDER_LABELS = {SortOrder.ASC: "Ascending", SortOrder.DESC: "Descending"}
AGGREGATION_LABELS = {
    AggregationPolicy.SUM: "Sum",
    AggregationPolicy.AVERAGE: "Average",
    AggregationPolicy.MIN: "Minimum",
    AggregationPolicy.MAX: "Maximum",
    AggregationPolicy.COUNT: "Count",
    AggregationPolicy.REPRESENTATIVE: "Value",
}


def _settings_from_model(model: SettingsModel) -> EngineSettings:
    return normalize_settings(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/options")
def meta_options():
    payload = MetaOptionsResponse(
        bucket_kinds=[
            OptionModel(value=kind.value, label=label, description=desc)
            for kind, (label, desc) in BUCKET_KIND_LABELS.items()
        ],
        date_intervals=[OptionModel(value=k.value, label=v) for k, v in DATE_INTERVAL_LABELS.items()],
        sort_orders=[OptionModel(value=k.value, label=v) for k, v in SORT_ORDER_LABELS.items()],
        aggregations=[OptionModel(value=k.value, label=v) for k, v in AGGREGATION_LABELS.items()],
    )
    return _json(payload.model_dump())


@app.post("/aggregate")
def aggregate(body: AggregateRequest):
    try:
        settings = _settings_from_model(body.settings)
        result = run(body.records, [b.to_raw() for b in body.buckets], settings=settings)
        metrics = [m.model_dump() for m in body.metrics]
        payload = result.to_dict(include_members=body.include_members)
        payload["series"] = extract_all(result, result.surviving_records, metrics)
        payload["split_series"] = extract_split_series(result, metrics[0]) if metrics else []
        return _json(payload)
    except Exception as exc:
        logger.exception("aggregate failed")
        return _error(exc)


@app.post("/kpi")
def kpi(body: KpiRequest):
    try:
        metric = body.metric.model_dump() if body.metric else None
        return _json({
            "value": kpi_value(body.records, metric),
            "trend": kpi_trend(body.records, metric).to_dict(),
        })
    except Exception as exc:
        logger.exception("kpi failed")
        return _error(exc)


@app.post("/validate")
def validate(body: ValidateRequest):
    try:
        buckets = [validate_bucket(b).to_dict() for b in body.buckets]
        metrics = validate_metrics(body.metrics).to_dict()
        is_valid = metrics["is_valid"] and all(b["is_valid"] for b in buckets)
        return _json({"is_valid": is_valid, "buckets": buckets, "metrics": metrics})
    except Exception as exc:
        logger.exception("validate failed")
        return _error(exc)


@app.post("/export/{page}")
def export_page(page: str, body: AggregateRequest):
    settings = _settings_from_model(body.settings)
    result = run(body.records, [b.to_raw() for b in body.buckets], settings=settings)

    filename = f"{page}.csv"
    if page == "levels":
        export_df = levels_frame(result)
    elif page == "series":
        metrics = [m.model_dump() for m in body.metrics]
        export_df = series_frame(result.labels, extract_all(result, result.surviving_records, metrics))
    else:
        export_df = pd.DataFrame()

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
