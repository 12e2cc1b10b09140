from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Dict, List, Optional

import pandas as pd

from fuelcore.charts import apply_theme, cost_pie_chart, distance_line_chart, to_vega_spec, top10_bar_chart
from fuelcore.data import NUMERIC_COLUMNS, RECOGNIZED_COLUMNS, coerce_numeric
from fuelcore.settings import DashboardSettings

logger = logging.getLogger(__name__)

_FIXED_CONTEXT = Context(prec=64)

RECOMMENDATIONS: List[str] = [
    "Optimize routes for high-fuel routes.",
    "Replace or maintain vehicles older than 8 years.",
    "Conduct driver training for efficient driving.",
    "Monitor load balancing across vehicles.",
    "Switch to hybrid or low-consumption models.",
]


@dataclass(frozen=True)
class SummaryMetrics:
    total_litres: float
    total_cost: float
    average_mpg: float

    def formatted(self, decimals: int = 2) -> Dict[str, str]:
        return {
            "total_litres": format_fixed(self.total_litres, decimals),
            "total_cost": format_fixed(self.total_cost, decimals),
            "average_mpg": format_fixed(self.average_mpg, decimals),
        }


def format_fixed(value: object, decimals: int = 2) -> str:
    """Format like ``Number.prototype.toFixed``.

    Rounds the exact binary value half away from zero, so 0.125 gives "0.13".
    NaN renders as "NaN" rather than raising.
    """
    if value is None or pd.isna(value):
        return "NaN"
    number = float(value)
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if abs(number) >= 1e21:
        return repr(number)
    if number == 0:
        number = 0.0
    quantum = Decimal(1).scaleb(-decimals)
    return f"{Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT):f}"


def _as_fleet(fleet: pd.DataFrame) -> pd.DataFrame:
    if all(col in fleet.columns and pd.api.types.is_float_dtype(fleet[col]) for col in NUMERIC_COLUMNS):
        return fleet
    return coerce_numeric(fleet)


def _sum_as_zero(series: pd.Series) -> float:
    return float(series.fillna(0).sum())


def compute_top10(fleet: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """Fleet ordered by Litres descending, ties kept in file order, first ``n`` rows."""
    fleet = _as_fleet(fleet)
    return (
        fleet.sort_values("Litres", ascending=False, kind="stable", na_position="last")
        .head(n)
        .reset_index(drop=True)
    )


def compute_top5_for_cost(top10: pd.DataFrame, n: int = 5) -> pd.DataFrame:
    # Slice of the volume ranking; deliberately not re-ranked by Cost.
    return top10.head(n).reset_index(drop=True)


def compute_summary(fleet: pd.DataFrame) -> SummaryMetrics:
    fleet = _as_fleet(fleet)
    count = len(fleet)
    total_litres = _sum_as_zero(fleet["Litres"])
    total_cost = _sum_as_zero(fleet["Cost"])
    # Unparsed MPG values count as zero and still count toward the divisor.
    average_mpg = _sum_as_zero(fleet["MPG"]) / count if count else float("nan")
    return SummaryMetrics(total_litres=total_litres, total_cost=total_cost, average_mpg=average_mpg)


def compute_data_quality(raw: pd.DataFrame, fleet: Optional[pd.DataFrame] = None) -> Dict[str, Any]:
    fleet = coerce_numeric(raw) if fleet is None else fleet
    missing_columns = [c for c in RECOGNIZED_COLUMNS if c not in raw.columns]
    fields: Dict[str, Dict[str, int]] = {}
    for col in NUMERIC_COLUMNS:
        if col not in raw.columns:
            fields[col] = {"blank": int(len(fleet)), "unparsed": 0}
            continue
        blank = raw[col].isna() | raw[col].astype(str).str.strip().eq("")
        unparsed = fleet[col].isna() & ~blank
        fields[col] = {"blank": int(blank.sum()), "unparsed": int(unparsed.sum())}
    if missing_columns:
        logger.debug("Fleet CSV is missing columns: %s", ", ".join(missing_columns))
    return {
        "row_count": int(len(fleet)),
        "columns": [str(c) for c in raw.columns],
        "missing_columns": missing_columns,
        "fields": fields,
    }


def _ranked_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    ranked = df.reset_index(drop=True)
    ranked.insert(0, "rank", ranked.index + 1)
    return ranked.to_dict(orient="records")


def build_charts(
    fleet: pd.DataFrame,
    settings: Optional[DashboardSettings] = None,
    *,
    top10: Optional[pd.DataFrame] = None,
    top5: Optional[pd.DataFrame] = None,
) -> Dict[str, Any]:
    """Altair charts for the three chart cards, themed for ``settings.theme``."""
    settings = settings or DashboardSettings()
    fleet = _as_fleet(fleet)
    if top10 is None:
        top10 = compute_top10(fleet, settings.top_n)
    if top5 is None:
        top5 = compute_top5_for_cost(top10, settings.cost_top_n)
    charts = {
        "top10_litres": top10_bar_chart(top10, title=f"Top {settings.top_n} Vehicles by Fuel Usage"),
        "distance_vs_litres": distance_line_chart(fleet),
        "cost_distribution": cost_pie_chart(top5, title=f"Fuel Cost Distribution (Top {settings.cost_top_n} Vehicles)"),
    }
    return {key: apply_theme(chart, settings.theme) for key, chart in charts.items()}


def compute_dashboard(
    fleet: pd.DataFrame,
    settings: Optional[DashboardSettings] = None,
    *,
    raw: Optional[pd.DataFrame] = None,
) -> Dict[str, Any]:
    settings = settings or DashboardSettings()
    raw = fleet if raw is None else raw
    fleet = _as_fleet(fleet)

    top10 = compute_top10(fleet, settings.top_n)
    top5 = compute_top5_for_cost(top10, settings.cost_top_n)
    summary = compute_summary(fleet)
    text = summary.formatted(settings.decimals)

    cards = [
        {"key": "total_litres", "title": "Total Fuel Used", "value": summary.total_litres, "display": f"{text['total_litres']} Litres"},
        {"key": "average_mpg", "title": "Average Efficiency", "value": summary.average_mpg, "display": f"{text['average_mpg']} MPG"},
        {"key": "total_cost", "title": "Total Fuel Cost", "value": summary.total_cost, "display": f"{settings.currency_symbol}{text['total_cost']}"},
    ]

    charts = {key: to_vega_spec(chart) for key, chart in build_charts(fleet, settings, top10=top10, top5=top5).items()}

    return {
        "settings": asdict(settings),
        "summary": asdict(summary),
        "summary_display": text,
        "cards": cards,
        "fleet": fleet.to_dict(orient="records"),
        "top10": _ranked_records(top10),
        "top5_cost": _ranked_records(top5),
        "charts": charts,
        "recommendations": list(RECOMMENDATIONS),
        "quality": compute_data_quality(raw, fleet),
    }
