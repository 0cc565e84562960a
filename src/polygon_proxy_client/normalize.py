"""Aggregates normalization: turn provider bars into a tidy OHLCV frame."""
from __future__ import annotations

import logging
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

# Provider bar keys -> canonical column names
_BAR_COLUMNS = {
    "t": "as_of_date",
    "o": "open",
    "h": "high",
    "l": "low",
    "c": "close",
    "v": "volume",
}

OHLCV_COLUMNS = ["as_of_date", "open", "high", "low", "close", "volume"]


class NormalizationError(Exception):
    """Raised when an aggregates payload cannot be turned into OHLCV rows."""


def _extract_bars(data: Any) -> list[dict]:
    if isinstance(data, dict):
        bars = data.get("results") or []
    elif isinstance(data, list):
        bars = data
    else:
        raise NormalizationError(f"Unsupported aggregates payload type: {type(data).__name__}")
    if not isinstance(bars, list):
        raise NormalizationError("Aggregates 'results' is not a list")
    return bars


def aggregates_to_frame(data: Any) -> pd.DataFrame:
    """Normalize an aggregates payload into canonical OHLCV columns.

    Accepts either the provider object (``{"results": [...]}``) or a bare
    list of bars. Each bar carries ``t`` (epoch milliseconds), ``o``, ``h``,
    ``l``, ``c`` and ``v``.

    Output columns: as_of_date, open, high, low, close, volume

    Rules applied (in order):
    1. ``t`` → UTC calendar date.
    2. Cast numerics; volume to int.
    3. De-duplicate by ``as_of_date`` (keep last).
    4. Sort ascending by ``as_of_date``.

    An empty payload gives an empty frame with the canonical columns.

    Raises
    ------
    NormalizationError
        If bars are missing required keys or carry a non-numeric ``t``.
    """
    bars = _extract_bars(data)
    if not bars:
        return pd.DataFrame(columns=OHLCV_COLUMNS)

    df = pd.DataFrame(bars)
    missing = set(_BAR_COLUMNS) - set(df.columns)
    if missing:
        raise NormalizationError(f"Missing keys in aggregates bars: {sorted(missing)}")

    out = df[list(_BAR_COLUMNS)].rename(columns=_BAR_COLUMNS)

    # 1. Epoch ms -> date
    try:
        out["as_of_date"] = pd.to_datetime(out["as_of_date"], unit="ms", utc=True).dt.date
    except (ValueError, TypeError, OverflowError) as exc:
        raise NormalizationError(f"Invalid bar timestamp 't': {exc}") from exc

    # 2. Cast numerics
    for col in ("open", "high", "low", "close"):
        out[col] = pd.to_numeric(out[col], errors="coerce")
    out["volume"] = pd.to_numeric(out["volume"], errors="coerce").fillna(0).astype(int)

    before = len(out)
    out = out.dropna(subset=["close"])
    if len(out) < before:
        logger.info("normalize: dropped %d bars with non-numeric close", before - len(out))

    # 3. Dedupe, 4. Sort
    out = out.drop_duplicates(subset=["as_of_date"], keep="last")
    out = out.sort_values("as_of_date").reset_index(drop=True)

    return out[OHLCV_COLUMNS].copy()
