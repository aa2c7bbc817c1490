"""pandas bridge: DataFrames in, record tuples through the engine, DataFrames out."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from buckets.results import PipelineResult, Record

LEVEL_COLUMNS = ["depth", "field", "kind", "key", "label", "count"]


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            df[col] = series.replace({"nan": pd.NA, "None": pd.NA, "": pd.NA})
    return df


def records_from_frame(
    df: Optional[pd.DataFrame],
    *,
    numeric_cols: Iterable[str] = (),
    text_cols: Iterable[str] = (),
) -> List[Dict[str, Any]]:
    """Turn a DataFrame into plain records; every missing cell becomes None."""
    if df is None or df.empty:
        return []
    out = df.loc[:, ~df.columns.duplicated()].copy()
    out = numericize(out, numeric_cols)
    out = coerce_str_safe(out, text_cols)
    out = out.astype(object).where(out.notna(), None)
    return out.to_dict(orient="records")


def frame_from_records(records: Sequence[Record]) -> pd.DataFrame:
    return pd.DataFrame([dict(r) for r in records])


def levels_frame(result: PipelineResult) -> pd.DataFrame:
    rows = [
        {
            "depth": level.depth,
            "field": level.definition.field,
            "kind": level.definition.kind.value,
            "key": item.key,
            "label": item.label,
            "count": item.count,
        }
        for level in result.levels
        for item in level.items
    ]
    return pd.DataFrame(rows, columns=LEVEL_COLUMNS)


def series_frame(labels: Sequence[str], series: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """One row per label, one column per metric series (as built by ``extract_all``)."""
    df = pd.DataFrame({"label": list(labels)})
    for s in series:
        values = list(s.get("values", []))
        if len(values) == len(df):
            df[s["label"]] = values
    return df
