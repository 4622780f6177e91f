from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class FilterCriteriaModel(BaseModel):
    search_term: str = ""
    selected_types: List[str] = Field(default_factory=list)
    selected_route_tags: List[str] = Field(default_factory=list)
    rating_range: Tuple[float, float] = (1.0, 5.0)
    review_count_range: Optional[Tuple[float, float]] = None
