"""Async HTTP client for the polygon proxy endpoint.

Each public method maps to one logical proxy route, unwraps the
``{success, message, data}`` envelope and returns ``data`` untouched.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

import httpx

from ..config.loader import ClientSettings
from ..dates import default_daily_date, default_range
from .base import ProviderError, TransportError

logger = logging.getLogger(__name__)


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


class ProxyClient:
    """Thin async wrapper around the ``/api/polygon-proxy`` routes."""

    def __init__(
        self,
        settings: ClientSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or ClientSettings()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self.settings.timeout_s,
            headers=self.settings.headers,
        )

    async def __aenter__(self) -> "ProxyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Public fetchers
    # ------------------------------------------------------------------

    async def get_stock_aggregates(
        self,
        symbol: str,
        multiplier: int = 1,
        timespan: str = "day",
        from_: date | str | None = None,
        to: date | str | None = None,
    ) -> Any:
        """Return candlestick bars for *symbol* over ``[from_, to]``.

        Missing bounds default to the last 30 days ending today.
        """
        ticker = normalize_symbol(symbol)
        start, end = default_range(from_, to)
        return await self._get_data(
            f"aggregates/{ticker}/{multiplier}/{timespan}/{start}/{end}",
            operation="aggregates",
            symbol=ticker,
            default_message="Failed to fetch aggregate data",
        )

    async def get_daily_open_close(self, symbol: str, date: date | str | None = None) -> Any:
        """Return the open/close summary for one session (default: yesterday)."""
        ticker = normalize_symbol(symbol)
        day = default_daily_date(date)
        return await self._get_data(
            f"daily-open-close/{ticker}/{day}",
            operation="daily open/close",
            symbol=ticker,
            default_message="Failed to fetch daily open/close data",
        )

    async def get_previous_close(self, symbol: str) -> Any:
        ticker = normalize_symbol(symbol)
        return await self._get_data(
            f"previous-close/{ticker}",
            operation="previous close",
            symbol=ticker,
            default_message="Failed to fetch previous close data",
        )

    async def get_ticker_details(self, symbol: str) -> Any:
        ticker = normalize_symbol(symbol)
        return await self._get_data(
            f"ticker-details/{ticker}",
            operation="ticker details",
            symbol=ticker,
            default_message="Failed to fetch ticker details",
        )

    async def get_insider_transactions(self, symbol: str) -> Any:
        ticker = normalize_symbol(symbol)
        return await self._get_data(
            f"insider-transactions/{ticker}",
            operation="insider transactions",
            symbol=ticker,
            default_message="Failed to fetch insider transactions",
        )

    async def get_market_status(self) -> Any:
        return await self._get_data(
            "market-status",
            operation="market status",
            symbol=None,
            default_message="Failed to fetch market status",
        )

    async def get_technical_indicators(
        self,
        symbol: str,
        indicator: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Return an indicator series (``sma``, ``ema``, ``macd``, ``rsi`` ...).

        *params* are forwarded as query parameters without interpretation.
        """
        ticker = normalize_symbol(symbol)
        return await self._get_data(
            f"indicators/{indicator}/{ticker}",
            operation=indicator,
            symbol=ticker,
            default_message="Failed to fetch technical indicators",
            params=dict(params or {}),
        )

    # ------------------------------------------------------------------
    # Envelope handling
    # ------------------------------------------------------------------

    def url_for(self, route: str) -> str:
        return f"{self.settings.proxy_url}/{route}"

    async def _get_data(
        self,
        route: str,
        *,
        operation: str,
        symbol: str | None,
        default_message: str,
        params: dict | None = None,
    ) -> Any:
        """GET *route*, unwrap the envelope and return its ``data`` field."""
        url = self.url_for(route)
        target = f"{operation} for {symbol}" if symbol else operation

        try:
            resp = await self._http.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.error("Error fetching %s: %s", target, exc)
            raise TransportError(
                str(exc) or exc.__class__.__name__,
                operation=operation,
                symbol=symbol,
            ) from exc

        try:
            envelope = resp.json()
        except ValueError as exc:
            logger.error(
                "Error fetching %s: non-JSON response (HTTP %s)", target, resp.status_code
            )
            raise TransportError(
                f"Non-JSON response from {url} (HTTP {resp.status_code})",
                operation=operation,
                symbol=symbol,
                status_code=resp.status_code,
            ) from exc

        if not isinstance(envelope, dict) or not envelope.get("success"):
            message = envelope.get("message") if isinstance(envelope, dict) else None
            message = message or default_message
            logger.error("Error fetching %s: %s", target, message)
            raise ProviderError(
                message,
                operation=operation,
                symbol=symbol,
                status_code=resp.status_code,
            )

        logger.debug("fetched %s (HTTP %s)", target, resp.status_code)
        return envelope.get("data")
