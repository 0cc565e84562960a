"""Error types and client interface for the polygon proxy."""
from __future__ import annotations

from typing import Any, Mapping, Protocol


class ProxyClientError(Exception):
    """Base exception for proxy client failures."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        symbol: str | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.operation = operation
        self.symbol = symbol
        self.status_code = status_code
        super().__init__(message)


class ProviderError(ProxyClientError):
    """The proxy answered with an envelope whose ``success`` flag is falsy."""


class TransportError(ProxyClientError):
    """The request failed or the response body was not JSON."""


class IProxyClient(Protocol):
    """Contract for the single-resource fetchers.

    Every method returns the envelope's ``data`` field unmodified and raises
    :class:`ProviderError` or :class:`TransportError` on failure.
    """

    async def get_stock_aggregates(
        self,
        symbol: str,
        multiplier: int = 1,
        timespan: str = "day",
        from_: Any = None,
        to: Any = None,
    ) -> Any:
        ...

    async def get_daily_open_close(self, symbol: str, date: Any = None) -> Any:
        ...

    async def get_previous_close(self, symbol: str) -> Any:
        ...

    async def get_ticker_details(self, symbol: str) -> Any:
        ...

    async def get_insider_transactions(self, symbol: str) -> Any:
        ...

    async def get_market_status(self) -> Any:
        ...

    async def get_technical_indicators(
        self,
        symbol: str,
        indicator: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        ...
