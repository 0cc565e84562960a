"""Comprehensive stock snapshot: aggregates, ticker details and insider trades in one call."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from ..clients.base import IProxyClient
from .best_effort import FetchTask, best_effort_fetch

logger = logging.getLogger(__name__)

AGGREGATES = "aggregates"
TICKER_DETAILS = "ticker_details"
INSIDER_TRANSACTIONS = "insider_transactions"


@dataclass(frozen=True)
class ComprehensiveStockData:
    symbol: str
    aggregates_data: Any = None
    ticker_details_data: Any = None
    insider_transactions_data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


async def get_comprehensive_stock_data(client: IProxyClient, symbol: str) -> ComprehensiveStockData:
    """Fetch the three snapshot sources for *symbol* concurrently.

    A source that fails is reported as ``None``; the call only returns
    whatever data could be gathered and does not raise for sub-fetch errors.
    """
    result = await best_effort_fetch(
        symbol,
        [
            FetchTask(AGGREGATES, lambda: client.get_stock_aggregates(symbol)),
            FetchTask(TICKER_DETAILS, lambda: client.get_ticker_details(symbol)),
            FetchTask(INSIDER_TRANSACTIONS, lambda: client.get_insider_transactions(symbol)),
        ],
    )

    missing = result.unavailable_names()
    if missing:
        logger.info("comprehensive %s: unavailable sources %s", symbol, missing)

    return ComprehensiveStockData(
        symbol=symbol,
        aggregates_data=result.value(AGGREGATES),
        ticker_details_data=result.value(TICKER_DETAILS),
        insider_transactions_data=result.value(INSIDER_TRANSACTIONS),
    )
