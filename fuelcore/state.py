from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from fuelcore.data import Source, coerce_numeric, fetch_raw_records
from fuelcore.metrics import build_charts, compute_dashboard
from fuelcore.settings import THEMES, DashboardSettings, normalize_settings

logger = logging.getLogger(__name__)

THEME_LABELS = {"light": "☀️ Light Mode", "dark": "🌙 Dark Mode"}


class DashboardSession:
    """Process-local dashboard state: a theme flag and one fleet snapshot.

    The fleet moves from unloaded to loaded exactly once. Every caller of
    ``load`` awaits the same fetch; a failed fetch still counts as loaded
    and leaves an empty fleet.
    """

    def __init__(self, settings: Optional[DashboardSettings] = None, source: Source = None) -> None:
        self.settings = settings or DashboardSettings()
        self.source = source if source is not None else self.settings.csv_path
        self.theme = self.settings.theme if self.settings.theme in THEMES else "light"
        self._raw = pd.DataFrame()
        self._fleet = coerce_numeric(self._raw)
        self._task: Optional[asyncio.Task] = None
        self.loaded = False

    @property
    def theme_label(self) -> str:
        return THEME_LABELS[self.theme]

    def toggle_theme(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"
        return self.theme

    @property
    def raw(self) -> pd.DataFrame:
        return self._raw

    @property
    def fleet(self) -> pd.DataFrame:
        return self._fleet

    async def _fetch(self) -> pd.DataFrame:
        raw = await fetch_raw_records(self.source)
        self._raw = raw
        self._fleet = coerce_numeric(raw)
        self.loaded = True
        logger.info("Dashboard session loaded %d records", len(self._fleet))
        return self._fleet

    async def load(self) -> pd.DataFrame:
        if self.loaded:
            return self._fleet
        if self._task is None:
            self._task = asyncio.ensure_future(self._fetch())
        return await asyncio.shield(self._task)

    def load_sync(self) -> pd.DataFrame:
        """Run ``load`` to completion from synchronous code (Streamlit, scripts)."""
        if not self.loaded:
            asyncio.run(self.load())
        return self._fleet

    def view_settings(self, overrides: Optional[Dict[str, Any]] = None) -> DashboardSettings:
        """Session settings with UI overrides applied; the theme flag always wins."""
        return normalize_settings({**asdict(self.settings), **(overrides or {}), "theme": self.theme})

    def payload(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return compute_dashboard(self._fleet, self.view_settings(overrides), raw=self._raw)

    def charts(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return build_charts(self._fleet, self.view_settings(overrides))
