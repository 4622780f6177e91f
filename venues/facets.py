from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from venues.records import CanonicalRecord


@dataclass(frozen=True)
class Facets:
    available_types: List[str] = field(default_factory=list)
    available_route_tags: List[str] = field(default_factory=list)
    review_count_max: float = 0.0


def _unique_sorted(values: Iterable[str]) -> List[str]:
    return sorted({v for v in values if v})


def available_types(records: Sequence[CanonicalRecord]) -> List[str]:
    return _unique_sorted(r.type for r in records)


def available_route_tags(records: Sequence[CanonicalRecord]) -> List[str]:
    return _unique_sorted(tag for r in records for tag in r.route_tags)


def review_count_max(records: Sequence[CanonicalRecord]) -> float:
    known = [r.review_count for r in records if math.isfinite(r.review_count)]
    return float(max(known)) if known else 0.0


def build_facets(records: Sequence[CanonicalRecord]) -> Facets:
    """Option sets for the categorical filters, computed over the full dataset."""
    return Facets(
        available_types=available_types(records),
        available_route_tags=available_route_tags(records),
        review_count_max=review_count_max(records),
    )
