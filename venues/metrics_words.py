from __future__ import annotations

import re
from collections import Counter
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Tuple

import pandas as pd

from venues.charts import horizontal_bar, to_vega_spec
from venues.filters import FilterCriteria
from venues.records import CanonicalRecord

STOP_WORDS = frozenset(
    {
        "del", "de", "la", "los", "las", "en", "el", "y",
        "san", "santa", "ruta", "turismo", "rioblanco", "hermosas",
    }
)
MIN_WORD_LENGTH = 4
CLOUD_SIZE = 80
BAR_SIZE = 15

_NON_LETTER = re.compile(r"[^\w\s]|[\d_]")


def tokenize(text: str) -> List[str]:
    """Lower-cased letter-only words longer than three characters, minus stop words."""
    cleaned = _NON_LETTER.sub("", (text or "").lower())
    return [w for w in cleaned.split() if len(w) >= MIN_WORD_LENGTH and w not in STOP_WORDS]


def word_counts(names: Iterable[str]) -> List[Tuple[str, int]]:
    counts: Counter = Counter()
    for name in names:
        counts.update(tokenize(name))
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)


def compute_word_analysis(filters: FilterCriteria, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: List[CanonicalRecord] = ctx.get("filtered_records", [])
    counts = word_counts(r.name for r in filtered)
    words = [{"text": w, "value": n} for w, n in counts]

    charts: Dict[str, Any] = {}
    bar_words = words[:BAR_SIZE]
    if bar_words:
        charts["top_words"] = to_vega_spec(
            horizontal_bar(pd.DataFrame(bar_words), label="text", value="value", title="Frecuencia de palabras")
        )

    return {
        "filters": asdict(filters),
        "empty": not filtered,
        "cloud_words": words[:CLOUD_SIZE],
        "bar_words": bar_words,
        "charts": charts,
    }
