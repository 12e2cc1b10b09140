from __future__ import annotations

import math

import pandas as pd
import pytest

from fuelcore.data import coerce_numeric
from fuelcore.metrics import (
    RECOMMENDATIONS,
    SummaryMetrics,
    build_charts,
    compute_dashboard,
    compute_data_quality,
    compute_summary,
    compute_top5_for_cost,
    compute_top10,
    format_fixed,
)
from fuelcore.settings import DashboardSettings


def test_average_mpg_counts_unparsed_values_as_zero(raw_frame):
    fleet = coerce_numeric(raw_frame([{"MPG": "30"}, {"MPG": "bad"}, {"MPG": "40"}]))
    summary = compute_summary(fleet)
    assert summary.average_mpg == pytest.approx(70 / 3)
    assert summary.formatted()["average_mpg"] == "23.33"


def test_totals_treat_unparsed_values_as_zero(raw_frame):
    fleet = coerce_numeric(
        raw_frame(
            [
                {"Registration": "A", "Litres": "10.5", "Cost": "15"},
                {"Registration": "B", "Litres": "n/a", "Cost": "7.25"},
                {"Registration": "C", "Litres": "4.5", "Cost": ""},
            ]
        )
    )
    summary = compute_summary(fleet)
    assert summary.total_litres == pytest.approx(15.0)
    assert summary.total_cost == pytest.approx(22.25)
    # No MPG column at all: every record contributes zero.
    assert summary.average_mpg == 0.0


def test_empty_fleet_does_not_raise():
    fleet = coerce_numeric(pd.DataFrame())
    summary = compute_summary(fleet)
    assert summary.total_litres == 0
    assert summary.total_cost == 0
    assert math.isnan(summary.average_mpg)
    assert summary.formatted() == {"total_litres": "0.00", "total_cost": "0.00", "average_mpg": "NaN"}
    assert compute_top10(fleet).empty
    assert compute_top5_for_cost(compute_top10(fleet)).empty


def test_summary_accepts_raw_records(raw_frame):
    summary = compute_summary(raw_frame([{"Litres": "2", "Cost": "3", "MPG": "4"}]))
    assert summary == SummaryMetrics(total_litres=2.0, total_cost=3.0, average_mpg=4.0)


def test_top10_is_sorted_and_truncated(litres_fleet):
    top10 = compute_top10(coerce_numeric(litres_fleet))
    assert len(top10) == 10
    litres = top10["Litres"].tolist()
    assert litres == sorted(litres, reverse=True)
    assert litres[0] == 500


def test_top10_keeps_file_order_for_ties(litres_fleet):
    top10 = compute_top10(coerce_numeric(litres_fleet))
    tied = top10[top10["Litres"] == 410]["Registration"].tolist()
    assert tied == ["V04", "V05", "V10"]


def test_top10_shorter_fleet(raw_frame):
    fleet = coerce_numeric(raw_frame([{"Registration": r, "Litres": v} for r, v in [("A", 1), ("B", 3), ("C", 2)]]))
    assert compute_top10(fleet)["Registration"].tolist() == ["B", "C", "A"]


def test_top10_places_unparsed_litres_last(raw_frame):
    fleet = coerce_numeric(
        raw_frame([{"Registration": "A", "Litres": "x"}, {"Registration": "B", "Litres": "1"}, {"Registration": "C", "Litres": "5"}])
    )
    assert compute_top10(fleet)["Registration"].tolist() == ["C", "B", "A"]


def test_top10_does_not_mutate_fleet(litres_fleet):
    fleet = coerce_numeric(litres_fleet)
    before = fleet["Registration"].tolist()
    compute_top10(fleet)
    assert fleet["Registration"].tolist() == before


def test_top5_for_cost_follows_litres_ranking(litres_fleet):
    fleet = coerce_numeric(litres_fleet)
    # Sixth by Litres, but by far the most expensive.
    fleet.loc[fleet["Registration"] == "V02", "Cost"] = 99999.0
    top10 = compute_top10(fleet)
    top5 = compute_top5_for_cost(top10)
    assert top5["Registration"].tolist() == top10["Registration"].head(5).tolist()
    assert top5["Registration"].tolist() == ["V08", "V04", "V05", "V10", "V12"]
    assert "V02" not in top5["Registration"].tolist()


@pytest.mark.parametrize(
    "value, expected",
    [
        (23.333333, "23.33"),
        (0.125, "0.13"),
        (1.005, "1.00"),
        (-1.255, "-1.25"),
        (2.5, "2.50"),
        (-0.0, "0.00"),
        (0, "0.00"),
        (float("nan"), "NaN"),
        (None, "NaN"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
    ],
)
def test_format_fixed(value, expected):
    assert format_fixed(value) == expected


def test_format_fixed_decimals():
    assert format_fixed(2.5, 0) == "3"
    assert format_fixed(1234.5678, 3) == "1234.568"


@pytest.mark.parametrize("value", [0.004, 1.005, 23.3333333, 8426.719999, 1e9 / 7, 12.3456])
def test_format_fixed_round_trip(value):
    assert abs(float(format_fixed(value)) - value) <= 0.005


def test_data_quality_counts(raw_frame):
    raw = raw_frame(
        [
            {"Registration": "A", "Litres": "12", "MPG": "x", "Cost": ""},
            {"Registration": "B", "Litres": "oops", "MPG": "20", "Cost": "5"},
        ]
    )
    quality = compute_data_quality(raw)
    assert quality["row_count"] == 2
    assert quality["missing_columns"] == ["Distance"]
    assert quality["fields"]["Litres"] == {"blank": 0, "unparsed": 1}
    assert quality["fields"]["MPG"] == {"blank": 0, "unparsed": 1}
    assert quality["fields"]["Cost"] == {"blank": 1, "unparsed": 0}
    assert quality["fields"]["Distance"] == {"blank": 2, "unparsed": 0}


def test_dashboard_payload(litres_fleet):
    payload = compute_dashboard(coerce_numeric(litres_fleet), raw=litres_fleet)
    displays = {card["key"]: card["display"] for card in payload["cards"]}
    assert displays["total_litres"].endswith(" Litres")
    assert displays["average_mpg"].endswith(" MPG")
    assert displays["total_cost"].startswith("£")
    assert [r["rank"] for r in payload["top10"]] == list(range(1, 11))
    assert [r["Registration"] for r in payload["top5_cost"]] == [r["Registration"] for r in payload["top10"][:5]]
    assert len(payload["fleet"]) == 15
    assert set(payload["charts"]) == {"top10_litres", "distance_vs_litres", "cost_distribution"}
    assert payload["recommendations"] == RECOMMENDATIONS
    assert payload["quality"]["row_count"] == 15


def test_dashboard_payload_for_empty_fleet():
    payload = compute_dashboard(pd.DataFrame())
    displays = [card["display"] for card in payload["cards"]]
    assert displays == ["0.00 Litres", "NaN MPG", "£0.00"]
    assert payload["top10"] == []
    assert payload["fleet"] == []


def test_dashboard_payload_honours_settings(litres_fleet):
    settings = DashboardSettings(top_n=4, cost_top_n=2, decimals=1, currency_symbol="$")
    payload = compute_dashboard(litres_fleet, settings)
    assert len(payload["top10"]) == 4
    assert len(payload["top5_cost"]) == 2
    assert payload["cards"][2]["display"].startswith("$")
    assert payload["summary_display"]["total_litres"].count(".") == 1
    assert len(payload["summary_display"]["total_litres"].split(".")[1]) == 1


def test_build_charts_match_payload_specs(litres_fleet):
    fleet = coerce_numeric(litres_fleet)
    settings = DashboardSettings(top_n=3, cost_top_n=2, theme="dark")
    charts = build_charts(fleet, settings)
    payload = compute_dashboard(fleet, settings)
    for key, chart in charts.items():
        assert chart.to_dict() == payload["charts"][key]
    bar = payload["charts"]["top10_litres"]
    assert len(list(bar["datasets"].values())[0]) == 3
    assert bar["config"]["background"] == "#1f2937"
