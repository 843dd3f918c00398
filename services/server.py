"""HTTP endpoint exposing the page size gauge."""
from __future__ import annotations

import logging

from aiohttp import web

from services.metrics import PageSizeMetrics

logger = logging.getLogger(__name__)

METRICS_KEY = web.AppKey("metrics", PageSizeMetrics)


async def metrics_handler(request: web.Request) -> web.Response:
    metrics = request.app[METRICS_KEY]
    return web.Response(
        body=metrics.render(),
        headers={"Content-Type": metrics.content_type},
    )


async def health_handler(request: web.Request) -> web.Response:
    return web.Response(text="ok")


def create_app(metrics: PageSizeMetrics, path: str = "/metrics") -> web.Application:
    app = web.Application()
    app[METRICS_KEY] = metrics
    app.router.add_get(path, metrics_handler)
    app.router.add_get("/healthz", health_handler)
    return app


async def start_metrics_server(
    metrics: PageSizeMetrics,
    host: str | None,
    port: int,
    path: str = "/metrics",
) -> web.AppRunner:
    """Start serving metrics and return the runner used to stop it.

    A ``None`` host listens on every interface, IPv4 and IPv6. Raises
    ``OSError`` when the port cannot be bound.
    """
    runner = web.AppRunner(create_app(metrics, path), access_log=None)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    try:
        await site.start()
    except OSError:
        await runner.cleanup()
        raise
    logger.info("Serving metrics on http://%s:%s%s", host or "*", port, path)
    return runner
