from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def horizontal_bar(df: pd.DataFrame, *, label: str, value: str, title: str, value_format: str = ",.0f", color: str = "#10b981") -> alt.Chart:
    return (
        alt.Chart(df)
        .mark_bar(color=color, cornerRadiusEnd=4)
        .encode(
            x=alt.X(f"{value}:Q", title=title, axis=alt.Axis(format=value_format, gridDash=[4, 4])),
            y=alt.Y(f"{label}:N", title=None, sort="-x"),
            tooltip=[alt.Tooltip(f"{label}:N"), alt.Tooltip(f"{value}:Q", format=value_format)],
        )
    )
