"""Shared fixtures for polygon-proxy-client tests."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from typing import Callable

import httpx

from polygon_proxy_client.clients.proxy_client import ProxyClient
from polygon_proxy_client.config.loader import ClientSettings

BASE_URL = "http://proxy.test"
PROXY_PREFIX = "/api/polygon-proxy"


def envelope(data=None, *, success: bool = True, message: str | None = None) -> dict:
    """Return a proxy response body."""
    body: dict = {"success": success, "data": data}
    if message is not None:
        body["message"] = message
    return body


def make_bars(n: int = 5, start_date: date | None = None, base_close: float = 100.0) -> list[dict]:
    """Return *n* deterministic provider bars (``t`` in epoch ms, one per day).

    close values: base_close, base_close+1, …
    """
    if start_date is None:
        start_date = date(2025, 1, 2)
    bars: list[dict] = []
    for i in range(n):
        d = start_date + timedelta(days=i)
        ts = datetime(d.year, d.month, d.day, 5, tzinfo=timezone.utc)
        c = base_close + i
        bars.append(
            {
                "t": int(ts.timestamp() * 1000),
                "o": c - 0.5,
                "h": c + 2.0,
                "l": c - 2.0,
                "c": c,
                "v": 1_000_000 * (i + 1),
                "vw": c,
                "n": 100 + i,
            }
        )
    return bars


class RecordingHandler:
    """``httpx.MockTransport`` handler that records requests.

    *routes* maps a path suffix (after the proxy prefix) to either a JSON body
    or a callable ``request -> httpx.Response``. Unknown paths get a 404
    envelope.
    """

    def __init__(self, routes: dict[str, object] | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = request.url.path[len(PROXY_PREFIX) + 1:]
        for suffix, reply in self.routes.items():
            if route.startswith(suffix):
                if callable(reply):
                    return reply(request)
                return httpx.Response(200, content=json.dumps(reply).encode(), headers={"content-type": "application/json"})
        return httpx.Response(404, json=envelope(success=False, message=f"no route {route}"))

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> ProxyClient:
    """Build a ProxyClient whose HTTP traffic goes to *handler*."""
    settings = ClientSettings(base_url=BASE_URL, proxy_path=PROXY_PREFIX)
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ProxyClient(settings, http_client=http)
