from __future__ import annotations

import io
import logging
from dataclasses import asdict
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd
import requests

from venues.config import get_settings
from venues.facets import build_facets
from venues.filters import FilterCriteria, filter_records, normalize_filters
from venues.records import CanonicalRecord, normalize_rows

logger = logging.getLogger(__name__)

Source = Union[str, Path]
SourceSignature = Tuple[str, Optional[float]]


class DatasetLoadError(RuntimeError):
    """The spreadsheet could not be fetched or decoded."""

    def __init__(self, source: Source, message: str):
        super().__init__(f"{source}: {message}")
        self.source = str(source)


def is_remote(source: Source) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def source_signature(source: Source) -> SourceSignature:
    """Cache key for a source: local files include their mtime."""
    if is_remote(source):
        return str(source), None
    path = Path(source)
    mtime = path.stat().st_mtime if path.exists() else None
    return str(path), mtime


# ---------------- Fetch / decode ----------------
def fetch_workbook_bytes(source: Source, *, timeout: Optional[float] = None) -> bytes:
    if is_remote(source):
        timeout = get_settings().http_timeout if timeout is None else timeout
        try:
            resp = requests.get(str(source), timeout=timeout, headers={"Cache-Control": "no-store"})
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise DatasetLoadError(source, f"fetch failed ({exc})") from exc
        return resp.content
    path = Path(source)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise DatasetLoadError(source, f"cannot read file ({exc})") from exc


def pick_sheet(sheet_names: Sequence[str], candidates: Sequence[str]) -> str:
    for name in candidates:
        if name in sheet_names:
            return name
    return sheet_names[0]


def decode_rows(content: bytes, *, source: Source = "<bytes>", candidates: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    """Decode workbook bytes into one dict per sheet row, empty cells as ``""``."""
    candidates = get_settings().sheet_names if candidates is None else candidates
    try:
        book = pd.ExcelFile(io.BytesIO(content))
    except Exception as exc:
        raise DatasetLoadError(source, f"not a readable spreadsheet ({exc})") from exc
    with book:
        if not book.sheet_names:
            raise DatasetLoadError(source, "workbook has no sheets")
        sheet = pick_sheet(book.sheet_names, candidates)
        try:
            df = book.parse(sheet_name=sheet, dtype=object, keep_default_na=False, na_values=[])
        except Exception as exc:
            raise DatasetLoadError(source, f"cannot decode sheet {sheet!r} ({exc})") from exc
    df.columns = [str(c).strip() for c in df.columns]
    df = df.astype(object).where(pd.notna(df), "")
    logger.debug("Decoded %d rows from sheet %r of %s", len(df), sheet, source)
    return df.to_dict(orient="records")


def load_dataset(source: Optional[Source] = None) -> Tuple[Tuple[CanonicalRecord, ...], int]:
    """Fetch, decode and normalize ``source``; returns (records, dropped_rows)."""
    source = get_settings().data_source if source is None else source
    rows = decode_rows(fetch_workbook_bytes(source), source=source)
    records, dropped = normalize_rows(rows)
    logger.info("Loaded %s: %d rows, %d kept, %d dropped", source, len(rows), len(records), dropped)
    return records, dropped


def build_context(records: Sequence[CanonicalRecord], *, source: str = "", dropped_rows: int = 0) -> Dict[str, object]:
    facets = build_facets(records)
    return {
        "source": source,
        "records": tuple(records),
        "total_rows": len(records) + dropped_rows,
        "dropped_rows": dropped_rows,
        **asdict(facets),
    }


def empty_context(source: str = "") -> Dict[str, object]:
    return build_context((), source=source)


# ---------------- Public API (Streamlit parity + FastAPI use) ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(signature: SourceSignature) -> Dict[str, object]:
    source, _ = signature
    records, dropped = load_dataset(source)
    return build_context(records, source=source, dropped_rows=dropped)


def load_dashboard_data(source: Optional[Source] = None) -> Dict[str, object]:
    source = get_settings().data_source if source is None else source
    return _load_dashboard_data_cached(source_signature(source))


def reload_dashboard_data(source: Optional[Source] = None) -> Dict[str, object]:
    _load_dashboard_data_cached.cache_clear()
    return load_dashboard_data(source)


def prepare_context(filters: Union[Mapping[str, Any], FilterCriteria], data_ctx: Dict[str, object]) -> Dict[str, object]:
    records: Tuple[CanonicalRecord, ...] = data_ctx.get("records", ())  # type: ignore[assignment]
    review_count_max = data_ctx.get("review_count_max")
    filt = filters if isinstance(filters, FilterCriteria) else normalize_filters(dict(filters), review_count_max=review_count_max)
    filtered = filter_records(records, filt)
    return {
        "filters": filt,
        "records": records,
        "filtered_records": filtered,
        "available_types": data_ctx.get("available_types", []),
        "available_route_tags": data_ctx.get("available_route_tags", []),
        "review_count_max": review_count_max,
    }
