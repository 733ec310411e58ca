"""Unit tests for health check routes."""

from pathlib import Path

import pytest
from fastapi import HTTPException

from routes.health_routes import health, ready
from services.redirect_service import LoadState, get_redirect_resolver


@pytest.mark.unit
class TestHealthEndpoint:
    """Tests for GET /health."""

    async def test_health_returns_200_healthy(self):
        """Health endpoint returns status=healthy."""
        result = await health()
        assert result.status == "healthy"
        assert result.service == "video-redirects"


@pytest.mark.unit
class TestReadyEndpoint:
    """Tests for GET /ready."""

    async def test_ready_returns_503_before_load(self, videos_env: Path):
        """Ready does not trigger a load on its own."""
        with pytest.raises(HTTPException) as exc_info:
            await ready()

        assert exc_info.value.status_code == 503
        assert exc_info.value.detail == "Video data not loaded"
        assert get_redirect_resolver().state is LoadState.UNLOADED

    async def test_ready_returns_200_once_loaded(self, videos_env: Path):
        await get_redirect_resolver().ensure_loaded()

        result = await ready()

        assert result.status == "ready"
        assert result.videos_loaded == 3

    async def test_ready_returns_503_after_failed_load(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("VIDEOS_DATA_PATH", str(tmp_path / "missing.json"))
        await get_redirect_resolver().resolve("/v/abc123")

        with pytest.raises(HTTPException) as exc_info:
            await ready()

        assert exc_info.value.status_code == 503
