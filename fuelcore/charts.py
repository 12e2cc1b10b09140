from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

BAR_COLOR = "#4f46e5"
LINE_COLOR = "rgba(234, 208, 37, 1)"
PIE_COLORS: List[str] = [
    "rgba(79, 70, 229, 1)",
    "rgba(6, 182, 212, 1)",
    "rgba(245, 158, 11, 1)",
    "rgba(147, 51, 234, 1)",
    "#10b981",
]

DARK_THEME = {"background": "#1f2937", "text": "#e5e7eb", "grid": "#374151"}
CHART_HEIGHT = 300


def _with_columns(df: pd.DataFrame, cols: List[str]) -> pd.DataFrame:
    """Copy of ``df`` guaranteed to carry ``cols`` so encodings always resolve."""
    out = df.copy()
    for col in cols:
        if col not in out.columns:
            out[col] = pd.Series(dtype=object if col == "Registration" else float)
    return out


def top10_bar_chart(top10: pd.DataFrame, title: str = "Top 10 Vehicles by Fuel Usage") -> alt.Chart:
    data = _with_columns(top10, ["Registration", "Litres"])
    return (
        alt.Chart(data)
        .mark_bar(color=BAR_COLOR)
        .encode(
            x=alt.X("Registration:N", sort=None, title="Registration"),
            y=alt.Y("Litres:Q", title="Litres", axis=alt.Axis(gridDash=[3, 3])),
            tooltip=["Registration", alt.Tooltip("Litres:Q", format=",.2f")],
        )
        .properties(title=title, height=CHART_HEIGHT)
    )


def distance_line_chart(fleet: pd.DataFrame, title: str = "Distance vs Fuel Usage") -> alt.Chart:
    # Distance is a category axis: ticks evenly spaced in file order.
    data = _with_columns(fleet, ["Registration", "Distance", "Litres"]).assign(row=lambda d: range(len(d)))
    return (
        alt.Chart(data)
        .mark_line(color=LINE_COLOR, strokeWidth=2, interpolate="monotone", point=False)
        .encode(
            x=alt.X("Distance:O", sort=None, title="Distance", axis=alt.Axis(gridDash=[3, 3], labelAngle=0)),
            y=alt.Y("Litres:Q", title="Litres", axis=alt.Axis(gridDash=[3, 3])),
            order=alt.Order("row:Q"),
            tooltip=["Registration", alt.Tooltip("Distance:Q", format=","), alt.Tooltip("Litres:Q", format=",.2f")],
        )
        .properties(title=title, height=CHART_HEIGHT)
    )


def cost_pie_chart(top5: pd.DataFrame, title: str = "Fuel Cost Distribution (Top 5 Vehicles)") -> alt.LayerChart:
    data = _with_columns(top5, ["Registration", "Cost"]).assign(slice=lambda d: range(len(d)))
    base = alt.Chart(data).encode(
        theta=alt.Theta("Cost:Q", stack=True),
        color=alt.Color("Registration:N", sort=None, scale=alt.Scale(range=PIE_COLORS), title="Registration"),
        order=alt.Order("slice:Q"),
        tooltip=["Registration", alt.Tooltip("Cost:Q", format=",.2f")],
    )
    pie = base.mark_arc(outerRadius=100)
    labels = base.mark_text(radius=120).encode(text=alt.Text("Cost:Q", format=",.2f"))
    return (pie + labels).properties(title=title, height=CHART_HEIGHT)


def apply_theme(chart: alt.TopLevelMixin, theme: str = "light") -> alt.TopLevelMixin:
    if theme != "dark":
        return chart
    return (
        chart.configure(background=DARK_THEME["background"])
        .configure_axis(labelColor=DARK_THEME["text"], titleColor=DARK_THEME["text"], gridColor=DARK_THEME["grid"])
        .configure_legend(labelColor=DARK_THEME["text"], titleColor=DARK_THEME["text"])
        .configure_title(color=DARK_THEME["text"])
        .configure_view(stroke=None)
    )


def to_vega_spec(chart: alt.TopLevelMixin, theme: str = "light") -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return apply_theme(chart, theme).to_dict()
