"""Integration tests for the composition root."""

from __future__ import annotations

from pathlib import Path

import pytest

from surfboard.application.use_cases.addon_aggregator import AggregatorState
from surfboard.infrastructure.common.retry_transport import Backoff
from surfboard.infrastructure.config import AppConfig
from surfboard.infrastructure.config.schema import CINEMETA_MANIFEST_URL, TORRENTIO_MANIFEST_URL
from surfboard.interfaces.composition import build_http_client, build_services

pytestmark = pytest.mark.integration


def _config(tmp_path: Path, **addons: str) -> AppConfig:
    return AppConfig.model_validate(
        {"cache": {"dir": str(tmp_path / "cache")}, "addons": addons}
    )


class TestBuildServices:
    async def test_wires_everything_without_loading(self, tmp_path: Path) -> None:
        config = _config(tmp_path)
        async with build_services(config) as state:
            assert state.config is config
            assert state.aggregator.state is AggregatorState.IDLE
            assert state.aggregator.addons == ()
            assert await state.addon_setup.configured_urls() == [
                CINEMETA_MANIFEST_URL,
                TORRENTIO_MANIFEST_URL,
            ]
            assert await state.continue_watching.list() == []
            assert await state.favorites.list() == []
            http_client = state.http_client

        assert http_client.is_closed
        assert (tmp_path / "cache").is_dir()

    async def test_optional_addon_included_when_configured(self, tmp_path: Path) -> None:
        config = _config(tmp_path, mediafusion="stremio://mediafusion.example/manifest.json")
        async with build_services(config) as state:
            urls = await state.addon_setup.configured_urls()
        assert urls[-1] == "https://mediafusion.example/manifest.json"


class TestBuildHttpClient:
    async def test_client_settings(self) -> None:
        config = AppConfig.model_validate(
            {"http": {"timeout_seconds": 7.5, "user_agent": "UA/1"}}
        )
        client = build_http_client(config)
        try:
            assert client.headers["User-Agent"] == "UA/1"
            assert client.timeout.read == 7.5
            assert client.follow_redirects is True
            assert client._transport._backoff == Backoff(base=0.5, cap=10.0)
        finally:
            await client.aclose()
