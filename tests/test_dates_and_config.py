"""Date defaults and settings resolution."""

from __future__ import annotations

import re
from datetime import date, datetime

import pytest

from polygon_proxy_client.config.loader import ClientSettings, load_config, load_settings
from polygon_proxy_client.dates import default_daily_date, default_range, iso_date, today_utc

_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# ── dates ────────────────────────────────────────────────────────────


class TestDates:

    def test_default_range_spans_30_days(self):
        assert default_range(today=date(2025, 1, 15)) == ("2024-12-16", "2025-01-15")

    def test_default_range_uses_today_utc(self):
        start, end = default_range()
        assert _ISO_RE.match(start) and _ISO_RE.match(end)
        assert end == today_utc().isoformat()
        assert (date.fromisoformat(end) - date.fromisoformat(start)).days == 30

    def test_from_default_is_30_days_before_to(self):
        assert default_range(to="2024-06-30", today=date(2025, 1, 15)) == ("2024-05-31", "2024-06-30")

    @pytest.mark.parametrize("bad", ["2024/01/02", "20240102", "2024-13-01", "2024-02-30", "../x"])
    def test_malformed_date_strings_rejected(self, bad):
        with pytest.raises(ValueError):
            iso_date(bad)
        with pytest.raises(ValueError):
            default_range(to=bad)

    def test_explicit_values_pass_through(self):
        assert default_range("2024-01-01", date(2024, 2, 1)) == ("2024-01-01", "2024-02-01")

    def test_daily_date_defaults_to_yesterday(self):
        assert default_daily_date(today=date(2025, 3, 1)) == "2025-02-28"
        assert default_daily_date("2025-01-02") == "2025-01-02"

    def test_iso_date_datetime(self):
        assert iso_date(datetime(2025, 5, 6, 23, 59)) == "2025-05-06"


# ── config ───────────────────────────────────────────────────────────


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("POLYGON_PROXY_BASE_URL", "POLYGON_PROXY_PATH", "POLYGON_PROXY_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults_without_yaml(self, clean_env, tmp_path):
        settings = load_settings(tmp_path / "missing.yml")

        assert settings == ClientSettings()
        assert settings.proxy_url == "http://localhost:3000/api/polygon-proxy"

    def test_yaml_values(self, clean_env, tmp_path):
        p = tmp_path / "client.yml"
        p.write_text(
            "client:\n"
            "  base_url: http://yaml.local:9000\n"
            "  proxy_path: /proxy\n"
            "  timeout_seconds: 3\n"
            "  headers:\n"
            "    X-Trace: abc\n"
        )

        settings = load_settings(p)

        assert settings.base_url == "http://yaml.local:9000"
        assert settings.proxy_path == "/proxy"
        assert settings.timeout_s == 3.0
        assert settings.headers == {"X-Trace": "abc"}

    def test_env_overrides_yaml_and_cli_overrides_env(self, clean_env, tmp_path):
        p = tmp_path / "client.yml"
        p.write_text("client:\n  base_url: http://yaml.local\n  timeout_seconds: 3\n")
        clean_env.setenv("POLYGON_PROXY_BASE_URL", "http://env.local")
        clean_env.setenv("POLYGON_PROXY_TIMEOUT_SECONDS", "7.5")

        from_env = load_settings(p)
        assert from_env.base_url == "http://env.local"
        assert from_env.timeout_s == 7.5

        from_cli = load_settings(p, base_url="http://cli.local", timeout_s=1.0)
        assert from_cli.base_url == "http://cli.local"
        assert from_cli.timeout_s == 1.0

    def test_empty_env_values_fall_through(self, clean_env, tmp_path):
        p = tmp_path / "client.yml"
        p.write_text("client:\n  timeout_seconds: 4\n")
        clean_env.setenv("POLYGON_PROXY_TIMEOUT_SECONDS", "")
        clean_env.setenv("POLYGON_PROXY_BASE_URL", "")

        settings = load_settings(p)
        assert settings.timeout_s == 4.0
        assert settings.base_url == "http://localhost:3000"

        assert load_settings(tmp_path / "missing.yml").timeout_s == 10.0

    def test_packaged_default_config(self, clean_env):
        cfg = load_config()
        assert cfg["client"]["proxy_path"] == "/api/polygon-proxy"

    def test_empty_proxy_path(self):
        assert ClientSettings(base_url="http://h/", proxy_path="/").proxy_url == "http://h"
