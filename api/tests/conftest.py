"""Pytest configuration and shared fixtures.

This module provides:
- A videos.json dataset written to a temp directory
- Settings pointed at that dataset via environment variables
- Reset of the process-wide settings and resolver caches between tests
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from core.config import clear_settings_cache
from services.redirect_service import clear_redirect_resolver
from tests.factories import SAMPLE_VIDEOS, write_videos


@pytest.fixture(autouse=True)
def _reset_process_caches() -> Generator[None]:
    """Every test starts with fresh settings and an unloaded resolver."""
    clear_settings_cache()
    clear_redirect_resolver()
    yield
    clear_settings_cache()
    clear_redirect_resolver()


@pytest.fixture
def videos_file(tmp_path: Path) -> Path:
    """A valid videos.json containing SAMPLE_VIDEOS."""
    return write_videos(tmp_path / "public" / "videos.json", SAMPLE_VIDEOS)


@pytest.fixture
def videos_env(
    videos_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point settings at ``videos_file`` and a missing site dir."""
    monkeypatch.setenv("VIDEOS_DATA_PATH", str(videos_file))
    monkeypatch.setenv("SITE_DIR", str(tmp_path / "no-site"))
    clear_settings_cache()
    return videos_file
