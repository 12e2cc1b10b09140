from __future__ import annotations

import asyncio
import logging
import re
import warnings
from functools import lru_cache
from pathlib import Path
from typing import IO, Iterable, Tuple, Union

import numpy as np
import pandas as pd

from fuelcore.settings import DEFAULT_CSV_NAME

logger = logging.getLogger(__name__)

PUBLIC_DIR = Path(__file__).resolve().parents[1] / "public"

REGISTRATION_COLUMN = "Registration"
NUMERIC_COLUMNS: Tuple[str, ...] = ("Distance", "Litres", "MPG", "Cost")
RECOGNIZED_COLUMNS: Tuple[str, ...] = (REGISTRATION_COLUMN,) + NUMERIC_COLUMNS

# Longest leading prefix that parseFloat would accept.
_NUMERIC_PREFIX = r"^\s*([+-]?(?:Infinity|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?))"
_NUMERIC_PREFIX_RE = re.compile(_NUMERIC_PREFIX)

Source = Union[str, Path, IO[str]]


def _is_url(value: str) -> bool:
    return value.lower().startswith(("http://", "https://"))


def resolve_source(source: Union[str, Path, None] = None) -> Union[str, Path]:
    """Resolve a resource name against the public asset root.

    URLs pass through. A leading "/" means the public root, as in a web app
    (``/Cleaned_FleetFuel.csv``), unless it names an existing file.
    """
    if source is None:
        return PUBLIC_DIR / DEFAULT_CSV_NAME
    if isinstance(source, Path):
        return source
    text = str(source).strip()
    if _is_url(text):
        return text
    path = Path(text)
    if path.is_absolute() and path.exists():
        return path
    return PUBLIC_DIR / text.lstrip("/")


def file_signature(path: Path) -> Tuple[str, float]:
    return str(path), path.stat().st_mtime


def _read_csv(source: Union[str, Path, IO[str]]) -> pd.DataFrame:
    # Fields are keyed by header position; extras past the header are dropped.
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", pd.errors.ParserWarning)
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            encoding="utf-8-sig",
        )
    for w in caught:
        if issubclass(w.category, pd.errors.ParserWarning):
            logger.debug("Extra fields ignored in fleet CSV %s: %s", source, w.message)
        else:
            warnings.warn(w.message, w.category)
    return df


@lru_cache(maxsize=4)
def _read_local_cached(path_sig: Tuple[str, float]) -> pd.DataFrame:
    path, _ = path_sig
    return _read_csv(path)


def load_raw_records(source: Source = None) -> pd.DataFrame:
    """Read a CSV resource into string-valued records keyed by the header row.

    Never raises: a missing resource, a network error or undecodable content
    is logged and yields an empty frame.
    """
    if source is not None and hasattr(source, "read"):
        target: Union[str, Path, IO[str]] = source  # type: ignore[assignment]
    else:
        target = resolve_source(source)  # type: ignore[arg-type]

    try:
        if isinstance(target, Path):
            df = _read_local_cached(file_signature(target)).copy()
        else:
            df = _read_csv(target)
    except (OSError, ValueError) as exc:
        logger.warning("Could not load fleet CSV from %s: %s", target, exc)
        return pd.DataFrame()

    logger.info("Loaded %d fleet records from %s", len(df), target)
    return df


async def fetch_raw_records(source: Source = None) -> pd.DataFrame:
    """Asynchronous one-shot fetch; same empty-on-failure contract as ``load_raw_records``."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_raw_records, source)


def parse_float(value: object) -> float:
    """Parse the leading numeric prefix of ``value`` the way parseFloat does.

    >>> parse_float("12.5kg")
    12.5
    >>> parse_float("1,234")
    1.0
    """
    if value is None:
        return float("nan")
    if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
        return float(value)
    match = _NUMERIC_PREFIX_RE.match(str(value))
    if not match:
        return float("nan")
    return float(match.group(1))


def _coerce_series(series: pd.Series) -> pd.Series:
    if pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series):
        return series.astype("float64")
    return series.map(parse_float).astype("float64")


def coerce_numeric(records: pd.DataFrame, cols: Iterable[str] = NUMERIC_COLUMNS) -> pd.DataFrame:
    """Return a new frame with ``cols`` coerced to float; failures become NaN."""
    fleet = records.copy()
    for col in cols:
        if col in fleet.columns:
            fleet[col] = _coerce_series(fleet[col])
        else:
            fleet[col] = np.nan
        failures = int(fleet[col].isna().sum())
        if failures:
            logger.debug("%d of %d values in %s did not parse as numbers", failures, len(fleet), col)
    return fleet


def load_fleet(source: Source = None) -> pd.DataFrame:
    return coerce_numeric(load_raw_records(source))
