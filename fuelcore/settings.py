from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_CSV_NAME = "Cleaned_FleetFuel.csv"
THEMES = ("light", "dark")


@dataclass(frozen=True)
class DashboardSettings:
    csv_path: str = DEFAULT_CSV_NAME
    top_n: int = 10
    cost_top_n: int = 5
    decimals: int = 2
    currency_symbol: str = "£"
    theme: str = "light"


def _as_int(value: object, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except Exception:
        return default


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def normalize_settings(raw: Optional[dict]) -> DashboardSettings:
    raw = raw or {}

    csv_path = str(raw.get("csv_path") or DEFAULT_CSV_NAME).strip() or DEFAULT_CSV_NAME

    top_n = _clamp(_as_int(raw.get("top_n"), 10), 1, 200)
    cost_top_n = _clamp(_as_int(raw.get("cost_top_n"), 5), 1, top_n)
    decimals = _clamp(_as_int(raw.get("decimals"), 2), 0, 10)

    currency_symbol = raw.get("currency_symbol")
    if currency_symbol is None:
        currency_symbol = "£"

    theme = str(raw.get("theme") or "light").strip().lower()
    if theme not in THEMES:
        theme = "light"

    return DashboardSettings(
        csv_path=csv_path,
        top_n=top_n,
        cost_top_n=cost_top_n,
        decimals=decimals,
        currency_symbol=str(currency_symbol),
        theme=theme,
    )
