from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from venues.filters import FilterCriteria
from venues.records import CanonicalRecord


def compute_overview(filters: FilterCriteria, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: List[CanonicalRecord] = ctx.get("filtered_records", [])
    route_tags: List[str] = ctx.get("available_route_tags", [])
    return {
        "filters": asdict(filters),
        "empty": not filtered,
        "kpis": {
            "total_records": len(filtered),
            "unique_types": len({r.type for r in filtered if r.type}),
            "route_tags": len(route_tags),
            "dataset_records": len(ctx.get("records", ())),
        },
    }
