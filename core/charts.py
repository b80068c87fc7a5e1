from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

from core.records import MONTHS_ORDER

alt.data_transformers.disable_max_rows()

PALETTE = ["#6366f1", "#8b5cf6", "#ec4899", "#10b981", "#f59e0b", "#3b82f6"]
GAP_COLORS = ["#10b981", "#f59e0b", "#ef4444"]


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def dev_type_donut(distribution: List[Dict[str, object]]) -> alt.Chart:
    df = pd.DataFrame(distribution, columns=["name", "value"])
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color("name:N", title="ประเภทการพัฒนา", scale=alt.Scale(range=PALETTE)),
            tooltip=[alt.Tooltip("name:N", title="ประเภท"), alt.Tooltip("value:Q", title="จำนวน")],
        )
    )


def gap_bar(buckets: List[Dict[str, object]]) -> alt.Chart:
    df = pd.DataFrame(buckets, columns=["bucket", "name", "value"])
    order = df["name"].tolist()
    return (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4)
        .encode(
            x=alt.X("name:N", title=None, sort=order, axis=alt.Axis(labelAngle=0)),
            y=alt.Y("value:Q", title="จำนวนรายการ", axis=alt.Axis(format="d", gridDash=[4, 4])),
            color=alt.Color("name:N", legend=None, scale=alt.Scale(domain=order, range=GAP_COLORS)),
            tooltip=[alt.Tooltip("name:N", title="ระดับ Gap"), alt.Tooltip("value:Q", title="จำนวน")],
        )
    )


def monthly_line(activity: List[Dict[str, object]]) -> alt.Chart:
    df = pd.DataFrame(activity, columns=["month", "value"])
    return (
        alt.Chart(df)
        .mark_line(point={"filled": True}, color=PALETTE[0])
        .encode(
            x=alt.X("month:N", title=None, sort=MONTHS_ORDER, axis=alt.Axis(labelAngle=-45)),
            y=alt.Y("value:Q", title="จำนวน", axis=alt.Axis(format="d", gridDash=[4, 4])),
            tooltip=[alt.Tooltip("month:N", title="เดือน"), alt.Tooltip("value:Q", title="จำนวน")],
        )
    )
