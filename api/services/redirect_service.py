"""Legacy video URL redirect resolution service.

Resolves legacy ``/v/{id}`` paths to the canonical ``/{slug}-{id}/`` page
of the video, using an in-memory lookup table built once per process from
the bundled videos.json dataset.

The table is loaded lazily. Concurrent first requests share a single
in-flight load; a failed load leaves the resolver unloaded so the next
request retries it.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from core.config import get_settings
from core.redirects import PASS_THROUGH, Redirect, RedirectDecision
from schemas import VideoRecord
from services.slug_service import slugify

logger = logging.getLogger(__name__)

_legacy_video_path_re = re.compile(r"/v/(?P<video_id>[a-zA-Z0-9_-]+)/?")

_video_records = TypeAdapter(list[VideoRecord])

VideoLoader = Callable[[], Awaitable[list[VideoRecord]]]


class DatasetLoadError(Exception):
    """Raised when the video dataset cannot be read or fails validation."""


class LoadState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


@dataclass(frozen=True)
class LookupEntry:
    id: str
    title: str
    slug: str

    @property
    def canonical_path(self) -> str:
        """``/{slug}-{id}/``, or ``/{id}/`` when the title has no slug."""
        if not self.slug:
            return f"/{self.id}/"
        return f"/{self.slug}-{self.id}/"


def _read_video_records(path: Path) -> list[VideoRecord]:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise DatasetLoadError(f"Cannot read video dataset {path}: {e}") from e

    try:
        return _video_records.validate_json(raw)
    except ValidationError as e:
        raise DatasetLoadError(
            f"Malformed video dataset {path}: {e.error_count()} validation error(s)"
        ) from e


async def load_video_records(path: Path) -> list[VideoRecord]:
    """Read and validate the dataset without blocking the event loop."""
    return await asyncio.to_thread(_read_video_records, path)


def build_lookup_table(records: Iterable[VideoRecord]) -> dict[str, LookupEntry]:
    """Map video id -> LookupEntry. A repeated id keeps the last record."""
    table: dict[str, LookupEntry] = {}
    for record in records:
        table[record.id] = LookupEntry(
            id=record.id,
            title=record.title,
            slug=slugify(record.title),
        )
    return table


def _retrieve_load_error(task: asyncio.Task[None]) -> None:
    # _load logs its own failure. Marking the exception retrieved keeps asyncio
    # quiet when every request awaiting the load was cancelled.
    if not task.cancelled():
        task.exception()


class VideoRedirectResolver:
    """Owns the id -> slug lookup table and its load state.

    Args:
        loader: Coroutine function returning every record of the dataset.
        not_found_path: Redirect target for ids missing from the table.
        load_timeout: Seconds before a single load is abandoned, or None.
    """

    def __init__(
        self,
        loader: VideoLoader,
        not_found_path: str = "/404",
        load_timeout: float | None = None,
    ) -> None:
        self._loader = loader
        self.not_found_path = not_found_path
        self._load_timeout = load_timeout
        self._table: dict[str, LookupEntry] = {}
        self._state = LoadState.UNLOADED
        self._inflight: asyncio.Task[None] | None = None

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def entry_count(self) -> int:
        return len(self._table)

    async def ensure_loaded(self) -> None:
        """Build the lookup table unless it is already built.

        Callers arriving while a load is running await that same load.

        Raises:
            DatasetLoadError: The dataset could not be read or parsed, or
                the load timed out. The resolver stays unloaded.
        """
        if self._state is LoadState.LOADED:
            return

        if self._inflight is None:
            self._state = LoadState.LOADING
            self._inflight = asyncio.create_task(self._load())
            self._inflight.add_done_callback(_retrieve_load_error)

        # A cancelled request must not cancel the load other requests await.
        await asyncio.shield(self._inflight)

    async def _load(self) -> None:
        logger.info("video_data.load.start")
        try:
            try:
                async with asyncio.timeout(self._load_timeout):
                    records = await self._loader()
            except TimeoutError as e:
                raise DatasetLoadError(
                    f"Video dataset load timed out after {self._load_timeout}s"
                ) from e

            table = build_lookup_table(records)
            self._table = table
            self._state = LoadState.LOADED
        except Exception:
            logger.exception("video_data.load.failed")
            raise
        finally:
            self._inflight = None
            if self._state is not LoadState.LOADED:
                self._state = LoadState.UNLOADED

        duplicates = len(records) - len(table)
        if duplicates:
            logger.warning(
                "video_data.duplicate_ids",
                extra={"duplicate_records": duplicates},
            )
        logger.info(
            "video_data.loaded",
            extra={"records": len(records), "entries": len(table)},
        )

    async def lookup(self, video_id: str) -> LookupEntry | None:
        await self.ensure_loaded()
        return self._table.get(video_id)

    async def resolve(self, path: str) -> RedirectDecision:
        """Decide what to do with a request path.

        Returns:
            PASS_THROUGH for anything but ``/v/{id}`` (optional trailing
            slash). Otherwise a 301 to the canonical video page, or a 302
            to the not-found page when the id is unknown or the table
            cannot be loaded.
        """
        match = _legacy_video_path_re.fullmatch(path)
        if not match:
            return PASS_THROUGH

        video_id = match.group("video_id")
        try:
            entry = await self.lookup(video_id)
        except Exception:
            # Already logged by the load; an unavailable table reads as not found.
            logger.warning(
                "legacy_video.table_unavailable", extra={"video_id": video_id}
            )
            entry = None

        if entry is None:
            logger.warning(
                "legacy_video.not_found",
                extra={"video_id": video_id, "to_path": self.not_found_path},
            )
            return Redirect(self.not_found_path, 302)

        return Redirect(entry.canonical_path, 301)

    def reset(self) -> None:
        """Forget the table so the next lookup reloads the dataset.

        A load already in flight still completes and publishes its table.
        """
        self._table = {}
        if self._state is LoadState.LOADED:
            self._state = LoadState.UNLOADED


@lru_cache(maxsize=1)
def get_redirect_resolver() -> VideoRedirectResolver:
    """Process-wide resolver built from settings.

    Note:
        The table is cached for the lifetime of the process. If videos.json
        changes, a restart (or clear_redirect_resolver()) is required.
    """
    settings = get_settings()
    data_file = settings.videos_data_file

    async def _load() -> list[VideoRecord]:
        return await load_video_records(data_file)

    return VideoRedirectResolver(
        loader=_load,
        not_found_path=settings.not_found_path,
        load_timeout=settings.load_timeout_seconds,
    )


def clear_redirect_resolver() -> None:
    """Drop the process-wide resolver. Call in tests after changing settings."""
    get_redirect_resolver.cache_clear()


async def resolve_legacy_video_redirect(path: str) -> RedirectDecision:
    """Resolve ``path`` with the process-wide resolver."""
    return await get_redirect_resolver().resolve(path)
