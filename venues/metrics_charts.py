from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

import pandas as pd

from venues.charts import horizontal_bar, to_vega_spec
from venues.filters import FilterCriteria
from venues.records import CanonicalRecord, records_frame

NO_TYPE_LABEL = "Sin tipo"
DEFAULT_TOP_N = 5


def _pairs(series: pd.Series, label: str, value: str) -> pd.DataFrame:
    out = series.reset_index()
    out.columns = [label, value]
    return out.sort_values(value, ascending=False, kind="stable").reset_index(drop=True)


def count_by_type(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["type", "records"])
    types = df["type"].replace("", NO_TYPE_LABEL)
    return _pairs(types.value_counts(sort=False), "type", "records")


def count_by_route_tag(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["route_tag", "records"])
    tags = df["route_tags"].explode().dropna()
    tags = tags[tags != ""]
    if tags.empty:
        return pd.DataFrame(columns=["route_tag", "records"])
    return _pairs(tags.value_counts(sort=False), "route_tag", "records")


def mean_by_type(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Mean of ``column`` per type; unknown (NaN) values are skipped."""
    if df.empty:
        return pd.DataFrame(columns=["type", column])
    known = df.assign(type=df["type"].replace("", NO_TYPE_LABEL))
    known[column] = pd.to_numeric(known[column], errors="coerce")
    known = known.dropna(subset=[column])
    if known.empty:
        return pd.DataFrame(columns=["type", column])
    return _pairs(known.groupby("type", sort=False)[column].mean(), "type", column)


def compute_charts(filters: FilterCriteria, ctx: Dict[str, Any], *, top_n: int = DEFAULT_TOP_N) -> Dict[str, Any]:
    filtered: List[CanonicalRecord] = ctx.get("filtered_records", [])
    df = records_frame(filtered, ["type", "route_tags", "rating", "review_count"])
    top_n = max(1, int(top_n))

    tables = {
        "by_type": count_by_type(df),
        "by_route_tag": count_by_route_tag(df),
        "rating_by_type": mean_by_type(df, "rating"),
        "review_count_by_type": mean_by_type(df, "review_count"),
    }

    charts: Dict[str, Any] = {}
    if not tables["by_type"].empty:
        charts["by_type"] = to_vega_spec(
            horizontal_bar(tables["by_type"], label="type", value="records", title="Registros por tipo")
        )
    if not tables["by_route_tag"].empty:
        charts["by_route_tag"] = to_vega_spec(
            horizontal_bar(tables["by_route_tag"], label="route_tag", value="records", title="Registros por Camino de Santiago", color="#3b82f6")
        )
    if not tables["rating_by_type"].empty:
        charts["rating_by_type"] = to_vega_spec(
            horizontal_bar(tables["rating_by_type"], label="type", value="rating", title="Promedio de calificación", value_format=".2f", color="#f59e0b")
        )
    if not tables["review_count_by_type"].empty:
        charts["review_count_by_type"] = to_vega_spec(
            horizontal_bar(tables["review_count_by_type"], label="type", value="review_count", title="Promedio de opiniones", color="#a855f7")
        )

    return {
        "filters": asdict(filters),
        "empty": not filtered,
        "tables": {name: t.to_dict(orient="records") for name, t in tables.items()},
        "top": {name: t.head(top_n).to_dict(orient="records") for name, t in tables.items()},
        "totals": {name: int(len(t)) for name, t in tables.items()},
        "charts": charts,
    }
