from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from venues.parsers import format_value
from venues.records import FIELD_NAMES, CanonicalRecord


RATING_MIN = 1.0
RATING_MAX = 5.0
REVIEW_COUNT_MIN = 0.0

Range = Tuple[float, float]


@dataclass(frozen=True)
class FilterCriteria:
    search_term: str = ""
    selected_types: List[str] = field(default_factory=list)
    selected_route_tags: List[str] = field(default_factory=list)
    rating_range: Range = (RATING_MIN, RATING_MAX)
    review_count_range: Range = (REVIEW_COUNT_MIN, math.inf)


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s and s not in out:
            out.append(s)
    return out


def _as_range(value: object, default: Range, *, lo: float, hi: float) -> Range:
    if value is None or isinstance(value, (str, bytes)):
        return default
    try:
        low, high = (float(v) for v in value)  # type: ignore[union-attr]
    except (TypeError, ValueError):
        return default
    if math.isnan(low) or math.isnan(high):
        return default
    if low > high:
        low, high = high, low
    return max(lo, low), min(hi, high)


def normalize_filters(raw: dict, *, review_count_max: Optional[float] = None) -> FilterCriteria:
    search_term = str(raw.get("search_term") or "").strip()
    selected_types = _as_str_list(raw.get("selected_types"))
    selected_route_tags = _as_str_list(raw.get("selected_route_tags"))

    rating_range = _as_range(
        raw.get("rating_range"), (RATING_MIN, RATING_MAX), lo=RATING_MIN, hi=RATING_MAX
    )

    upper = review_count_max if review_count_max is not None and math.isfinite(review_count_max) else math.inf
    review_count_range = _as_range(
        raw.get("review_count_range"), (REVIEW_COUNT_MIN, upper), lo=REVIEW_COUNT_MIN, hi=math.inf
    )

    return FilterCriteria(
        search_term=search_term,
        selected_types=selected_types,
        selected_route_tags=selected_route_tags,
        rating_range=rating_range,
        review_count_range=review_count_range,
    )


# ---------------- Predicates ----------------
def matches_search(record: CanonicalRecord, term: str) -> bool:
    needle = term.strip().casefold()
    if not needle:
        return True
    return any(needle in format_value(getattr(record, name)).casefold() for name in FIELD_NAMES)


def matches_type(record: CanonicalRecord, selected_types: Sequence[str]) -> bool:
    return not selected_types or record.type in selected_types


def matches_route_tags(record: CanonicalRecord, selected_route_tags: Sequence[str]) -> bool:
    return set(selected_route_tags).issubset(record.route_tags)


def in_range(value: float, bounds: Range) -> bool:
    # Unknown values are never excluded by a range.
    if not math.isfinite(value):
        return True
    return bounds[0] <= value <= bounds[1]


def record_matches(record: CanonicalRecord, criteria: FilterCriteria) -> bool:
    return (
        matches_search(record, criteria.search_term)
        and matches_type(record, criteria.selected_types)
        and matches_route_tags(record, criteria.selected_route_tags)
        and in_range(record.rating, criteria.rating_range)
        and in_range(record.review_count, criteria.review_count_range)
    )


def filter_records(records: Sequence[CanonicalRecord], criteria: FilterCriteria) -> List[CanonicalRecord]:
    return [r for r in records if record_matches(r, criteria)]
