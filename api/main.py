from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import math
from typing import Any, Callable, Dict

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import FilterCriteriaModel
from venues.config import get_settings
from venues.data import DatasetLoadError, prepare_context
from venues.export import export_filename, to_csv
from venues.filters import RATING_MAX, RATING_MIN
from venues.metrics_charts import DEFAULT_TOP_N, compute_charts
from venues.metrics_map import compute_map
from venues.metrics_overview import compute_overview
from venues.metrics_words import compute_word_analysis
from venues.store import DatasetStore

logger = logging.getLogger(__name__)

store = DatasetStore()


@asynccontextmanager
async def lifespan(_: FastAPI):
    try:
        await store.load()
    except DatasetLoadError:
        logger.exception("initial dataset load failed; serving 503 until /reload succeeds")
    yield


app = FastAPI(title="Venues Dashboard API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


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
            },
        )
    )


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _unavailable() -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"error": f"dataset not loaded from {store.source}", "type": "DatasetNotLoaded"},
    )


def _compute(name: str, filters: FilterCriteriaModel, fn: Callable[..., Dict[str, Any]], **kwargs: Any) -> JSONResponse:
    if not store.is_loaded:
        return _unavailable()
    try:
        ctx = prepare_context(filters.model_dump(), store.context)
        return _json(fn(ctx["filters"], ctx, **kwargs))
    except Exception as exc:
        logger.exception("%s failed", name)
        return _error(exc)


@app.get("/meta/types")
def meta_types():
    if not store.is_loaded:
        return _unavailable()
    return _json({"values": store.context.get("available_types", [])})


@app.get("/meta/route-tags")
def meta_route_tags():
    if not store.is_loaded:
        return _unavailable()
    return _json({"values": store.context.get("available_route_tags", [])})


@app.get("/meta/bounds")
def meta_bounds():
    if not store.is_loaded:
        return _unavailable()
    return _json(
        {
            "rating": [RATING_MIN, RATING_MAX],
            "review_count": [0.0, float(store.context.get("review_count_max", 0.0) or 0.0)],
        }
    )


@app.post("/records")
def records(filters: FilterCriteriaModel):
    if not store.is_loaded:
        return _unavailable()
    try:
        ctx = prepare_context(filters.model_dump(), store.context)
        rows = [r.to_dict() for r in ctx["filtered_records"]]
        return _json({"count": len(rows), "empty": not rows, "records": rows})
    except Exception as exc:
        logger.exception("records failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: FilterCriteriaModel):
    return _compute("overview", filters, compute_overview)


@app.post("/charts")
def charts(filters: FilterCriteriaModel, top_n: int = Query(default=DEFAULT_TOP_N, ge=1, le=200)):
    return _compute("charts", filters, compute_charts, top_n=top_n)


@app.post("/words")
def words(filters: FilterCriteriaModel):
    return _compute("words", filters, compute_word_analysis)


@app.post("/map")
def map_view(filters: FilterCriteriaModel):
    return _compute("map", filters, compute_map)


@app.post("/export/{view}")
def export_view(view: str, filters: FilterCriteriaModel):
    if not store.is_loaded:
        return _unavailable()
    ctx = prepare_context(filters.model_dump(), store.context)
    csv_bytes = to_csv(ctx["filtered_records"]).encode("utf-8")
    filename = export_filename(view)
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})


@app.post("/reload")
async def reload():
    try:
        ctx = await store.reload()
    except DatasetLoadError as exc:
        logger.exception("reload failed")
        return _error(exc, status_code=502)
    return _json({"source": ctx["source"], "records": len(ctx["records"]), "dropped_rows": ctx["dropped_rows"]})
