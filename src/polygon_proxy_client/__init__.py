"""Async client for the polygon proxy endpoint."""

from .clients.base import ProviderError, ProxyClientError, TransportError
from .clients.proxy_client import ProxyClient
from .config.loader import ClientSettings, load_settings
from .fetch.best_effort import (
    UNAVAILABLE,
    AggregateResult,
    Available,
    FetchTask,
    Unavailable,
    best_effort_fetch,
)
from .fetch.comprehensive import ComprehensiveStockData, get_comprehensive_stock_data

__all__ = [
    "AggregateResult",
    "Available",
    "ClientSettings",
    "ComprehensiveStockData",
    "FetchTask",
    "ProviderError",
    "ProxyClient",
    "ProxyClientError",
    "TransportError",
    "UNAVAILABLE",
    "Unavailable",
    "best_effort_fetch",
    "get_comprehensive_stock_data",
    "load_settings",
]
