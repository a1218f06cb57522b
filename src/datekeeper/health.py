"""Liveness HTTP endpoint for hosting platforms that ping the process."""

from __future__ import annotations

import logging
import os

from aiohttp import web

log = logging.getLogger(__name__)

DEFAULT_PORT = 3000


async def _handle_root(request: web.Request) -> web.Response:
    return web.Response(text="Up!")


def create_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", _handle_root)
    return app


# ---------------------------------------------------------------------------
# Server lifecycle
# ---------------------------------------------------------------------------

_runner: web.AppRunner | None = None


async def start() -> None:
    """Start the endpoint on 0.0.0.0:$PORT, or DEFAULT_PORT when PORT is unset."""
    global _runner  # noqa: PLW0603
    if _runner is not None:
        return

    port = int(os.environ.get("PORT") or DEFAULT_PORT)
    _runner = web.AppRunner(create_app())
    await _runner.setup()
    site = web.TCPSite(_runner, "0.0.0.0", port)
    await site.start()
    log.info("Liveness endpoint listening on 0.0.0.0:%d", port)


async def stop() -> None:
    global _runner  # noqa: PLW0603
    if _runner:
        await _runner.cleanup()
        _runner = None
        log.info("Liveness endpoint stopped")
