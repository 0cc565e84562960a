"""YAML + env config loader for polygon-proxy-client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_PROXY_PATH = "/api/polygon-proxy"
DEFAULT_TIMEOUT_S = 10.0


@dataclass(frozen=True)
class ClientSettings:
    """Explicit configuration handed to :class:`ProxyClient`."""

    base_url: str = DEFAULT_BASE_URL
    proxy_path: str = DEFAULT_PROXY_PATH
    timeout_s: float = DEFAULT_TIMEOUT_S
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def proxy_url(self) -> str:
        """Absolute URL of the proxy root, without a trailing slash."""
        path = "/" + self.proxy_path.strip("/") if self.proxy_path.strip("/") else ""
        return f"{self.base_url.rstrip('/')}{path}"


def load_config(path: Path | None = None, default_filename: str = "client.yml") -> dict:
    """Load YAML config and return as dict.

    Precedence: CLI > env vars > YAML > defaults.
    This loader reads YAML and returns a dict; :func:`load_settings` applies
    the remaining layers.
    """
    cfg: dict = {}
    if path:
        p = Path(path)
    else:
        p = Path(__file__).resolve().parents[3] / "config" / default_filename
    if p.exists():
        with p.open("r") as f:
            cfg = yaml.safe_load(f) or {}
    return cfg


def load_settings(
    path: Path | None = None,
    *,
    base_url: str | None = None,
    proxy_path: str | None = None,
    timeout_s: float | None = None,
) -> ClientSettings:
    """Resolve :class:`ClientSettings` from overrides, env, YAML and defaults."""
    client_cfg = load_config(path).get("client", {}) or {}

    resolved_base_url = (
        base_url
        or os.environ.get("POLYGON_PROXY_BASE_URL")
        or client_cfg.get("base_url")
        or DEFAULT_BASE_URL
    )
    resolved_proxy_path = (
        proxy_path
        or os.environ.get("POLYGON_PROXY_PATH")
        or client_cfg.get("proxy_path")
        or DEFAULT_PROXY_PATH
    )
    if timeout_s is None:
        # Empty env values fall through, same as base_url / proxy_path
        env_timeout = os.environ.get("POLYGON_PROXY_TIMEOUT_SECONDS", "").strip()
        timeout_s = float(
            env_timeout
            or client_cfg.get("timeout_seconds")
            or DEFAULT_TIMEOUT_S
        )

    headers = {str(k): str(v) for k, v in (client_cfg.get("headers") or {}).items()}

    return ClientSettings(
        base_url=resolved_base_url,
        proxy_path=resolved_proxy_path,
        timeout_s=timeout_s,
        headers=headers,
    )
