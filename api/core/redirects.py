"""Legacy /v/{id} URL redirect middleware.

Pure ASGI middleware. The path-resolution coroutine is injected at
construction time so ``core`` never imports from ``services``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal

from fastapi.responses import RedirectResponse
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PassThrough:
    """Not a legacy URL; the next handler should serve it."""


@dataclass(frozen=True)
class Redirect:
    target: str
    status_code: Literal[301, 302]


RedirectDecision = PassThrough | Redirect

PASS_THROUGH = PassThrough()


class LegacyVideoRedirectMiddleware:
    """Redirect legacy /v/{id} URLs to canonical video pages.

    Registered as the outermost middleware so redirects are served before
    static files or routes are consulted.

    Args:
        app: The next ASGI application in the middleware stack.
        resolver: An async callable ``(path: str) -> RedirectDecision``.
    """

    def __init__(
        self,
        app: ASGIApp,
        resolver: Callable[[str], Awaitable[RedirectDecision]] | None = None,
    ) -> None:
        self.app = app
        self._resolve = resolver

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self._resolve is None:
            await self.app(scope, receive, send)
            return

        path: str = scope["path"]
        try:
            decision = await self._resolve(path)
        except Exception:
            logger.exception("legacy_video.resolve_error", extra={"path": path})
            decision = PASS_THROUGH

        if not isinstance(decision, Redirect):
            await self.app(scope, receive, send)
            return

        target_url = decision.target
        # Query strings only carry over to the canonical page.
        if decision.status_code == 301:
            query = scope.get("query_string", b"").decode("latin-1")
            if query:
                target_url = f"{decision.target}?{query}"

        logger.info(
            "legacy_video.redirect",
            extra={
                "from_path": path,
                "to_path": decision.target,
                "status_code": decision.status_code,
            },
        )
        response = RedirectResponse(url=target_url, status_code=decision.status_code)
        await response(scope, receive, send)
