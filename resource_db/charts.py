from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

from resource_db.tags import record_tags

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def tag_frequency(records: pd.DataFrame, tag_column: str = "Keywords") -> pd.DataFrame:
    if records.empty:
        return pd.DataFrame(columns=["tag", "count"])
    exploded = record_tags(records, tag_column).explode().dropna()
    if exploded.empty:
        return pd.DataFrame(columns=["tag", "count"])
    counts = exploded.value_counts().rename_axis("tag").reset_index(name="count")
    return counts.sort_values(["count", "tag"], ascending=[False, True]).reset_index(drop=True)


def tag_frequency_chart(freq: pd.DataFrame, *, top_n: int = 20) -> alt.Chart:
    data = freq.head(max(1, top_n))
    return (
        alt.Chart(data)
        .mark_bar(color="#2563eb")
        .encode(
            x=alt.X("count:Q", title="Resources"),
            y=alt.Y("tag:N", sort="-x", title="Tag"),
            tooltip=["tag", alt.Tooltip("count:Q", title="Resources", format=",")],
        )
    )
