"""Typer CLI entry-point for polygon-proxy-client."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

import typer

from ..clients.base import ProxyClientError
from ..clients.proxy_client import ProxyClient
from ..config.loader import ClientSettings, load_settings
from ..dates import iso_date
from ..fetch.comprehensive import get_comprehensive_stock_data
from ..normalize import NormalizationError, aggregates_to_frame

app = typer.Typer(add_completion=False, help="Query the polygon proxy endpoint.")


def _parse_date(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return iso_date(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid date {value}. Use YYYY-MM-DD") from exc


def _parse_params(items: list[str] | None) -> dict[str, str]:
    """Turn repeated ``key=value`` options into a dict, preserving order."""
    params: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Invalid --param {item!r}. Use key=value")
        params[key] = value
    return params


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, default=str))


def _run(ctx: typer.Context, call: Callable[[ProxyClient], Awaitable[Any]]) -> Any:
    """Open a client for the resolved settings, await *call*, map errors to exit 1."""
    settings: ClientSettings = ctx.obj

    async def _go() -> Any:
        async with ProxyClient(settings) as client:
            return await call(client)

    try:
        return asyncio.run(_go())
    except ProxyClientError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="Path to config YAML"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Proxy host, e.g. http://localhost:3000"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Resolve settings and logging once for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = load_settings(config, base_url=base_url)


@app.command()
def aggregates(
    ctx: typer.Context,
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    multiplier: int = typer.Option(1, help="Bar size multiplier"),
    timespan: str = typer.Option("day", help="minute|hour|day|week|month|quarter|year"),
    from_date: Optional[str] = typer.Option(None, "--from", help="Start date (YYYY-MM-DD), default 30 days ago"),
    to_date: Optional[str] = typer.Option(None, "--to", help="End date (YYYY-MM-DD), default today"),
    table: bool = typer.Option(False, "--table", help="Print bars as an OHLCV table"),
) -> None:
    """Candlestick bars for SYMBOL."""
    start, end = _parse_date(from_date), _parse_date(to_date)
    data = _run(
        ctx,
        lambda c: c.get_stock_aggregates(symbol, multiplier, timespan, from_=start, to=end),
    )
    if not table:
        _echo_json(data)
        return
    try:
        df = aggregates_to_frame(data)
    except NormalizationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    if df.empty:
        typer.echo("No bars returned.")
        return
    typer.echo(df.to_string(index=False))


@app.command("daily-open-close")
def daily_open_close(
    ctx: typer.Context,
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    on: Optional[str] = typer.Option(None, "--date", help="Session date (YYYY-MM-DD), default yesterday"),
) -> None:
    """Open/close summary for a single session."""
    day = _parse_date(on)
    _echo_json(_run(ctx, lambda c: c.get_daily_open_close(symbol, day)))


@app.command("previous-close")
def previous_close(ctx: typer.Context, symbol: str = typer.Argument(..., help="Ticker symbol")) -> None:
    """Prior session close."""
    _echo_json(_run(ctx, lambda c: c.get_previous_close(symbol)))


@app.command("ticker-details")
def ticker_details(ctx: typer.Context, symbol: str = typer.Argument(..., help="Ticker symbol")) -> None:
    """Issuer metadata."""
    _echo_json(_run(ctx, lambda c: c.get_ticker_details(symbol)))


@app.command("insider-transactions")
def insider_transactions(ctx: typer.Context, symbol: str = typer.Argument(..., help="Ticker symbol")) -> None:
    """Insider trade records."""
    _echo_json(_run(ctx, lambda c: c.get_insider_transactions(symbol)))


@app.command("market-status")
def market_status(ctx: typer.Context) -> None:
    """Exchange open/closed state."""
    _echo_json(_run(ctx, lambda c: c.get_market_status()))


@app.command()
def indicators(
    ctx: typer.Context,
    indicator: str = typer.Argument(..., help="Indicator type, e.g. sma, ema, macd, rsi"),
    symbol: str = typer.Argument(..., help="Ticker symbol"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Extra query parameter key=value (repeatable)"),
) -> None:
    """Technical indicator series. Example: indicators sma AAPL -p window=50"""
    params = _parse_params(param)
    _echo_json(_run(ctx, lambda c: c.get_technical_indicators(symbol, indicator, params)))


@app.command()
def comprehensive(ctx: typer.Context, symbol: str = typer.Argument(..., help="Ticker symbol")) -> None:
    """Aggregates, ticker details and insider transactions; failed parts show as null."""
    snapshot = _run(ctx, lambda c: get_comprehensive_stock_data(c, symbol))
    _echo_json(snapshot.to_dict())
