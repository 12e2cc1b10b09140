from __future__ import annotations

from typing import Dict, List

import pandas as pd
import pytest


@pytest.fixture
def write_csv(tmp_path):
    def _write(text: str, name: str = "fleet.csv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def raw_frame():
    """Build string-valued records the way the loader returns them."""

    def _build(rows: List[Dict[str, object]]) -> pd.DataFrame:
        return pd.DataFrame([{k: str(v) for k, v in row.items()} for row in rows])

    return _build


@pytest.fixture
def litres_fleet(raw_frame):
    """Fifteen vehicles; V04, V05 and V10 tie on Litres."""
    litres = [120, 300, 95, 410, 410, 88, 250, 500, 60, 410, 75, 330, 45, 140, 200]
    rows = []
    for i, value in enumerate(litres, start=1):
        rows.append(
            {
                "Registration": f"V{i:02d}",
                "Distance": value * 4,
                "Litres": value,
                "MPG": 20 + i,
                "Cost": value * 1.42,
            }
        )
    return raw_frame(rows)
