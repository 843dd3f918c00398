"""Prometheus gauge holding the latest page size per URL."""
from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Gauge, generate_latest

PAGE_SIZE_METRIC = "website_page_size_bytes"
PAGE_SIZE_HELP = "Size of the website page in bytes"


class PageSizeMetrics:
    """Page size gauge bound to its own registry.

    The registry is created per instance so the monitor and the HTTP handler
    share exactly the store they were given at startup.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self.page_size = Gauge(
            PAGE_SIZE_METRIC,
            PAGE_SIZE_HELP,
            ["url"],
            registry=self.registry,
        )

    def record(self, url: str, size: float) -> None:
        self.page_size.labels(url=url).set(size)

    def value(self, url: str) -> float | None:
        return self.registry.get_sample_value(PAGE_SIZE_METRIC, {"url": url})

    def render(self) -> bytes:
        return generate_latest(self.registry)
