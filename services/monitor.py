"""Monitoring service measuring page sizes."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional, Sequence

import aiohttp

from config import settings
from models import CheckResult, CycleReport
from services.metrics import PageSizeMetrics

logger = logging.getLogger(__name__)


class Monitor:
    """Periodically fetch every monitored URL and record its body size."""

    def __init__(
        self,
        urls: Sequence[str],
        metrics: PageSizeMetrics,
        session: Optional[aiohttp.ClientSession] = None,
        *,
        interval: float | None = None,
        timeout: float | None = None,
        max_concurrency: int | None = None,
        failure_threshold: int | None = None,
    ) -> None:
        self.urls = tuple(urls)
        self.metrics = metrics
        self.session = session
        self._owns_session = session is None
        self.interval = interval if interval is not None else settings.CHECK_INTERVAL_SECONDS
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        if max_concurrency is None:
            max_concurrency = settings.MAX_CONCURRENCY
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None
        self._failure_threshold = (
            failure_threshold if failure_threshold is not None else settings.FAILURE_ALERT_THRESHOLD
        )
        self._failed_pages: dict[str, int] = {}

    async def __aenter__(self) -> "Monitor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                headers=settings.HEADERS,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self.session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    async def run_forever(self) -> None:
        """Check all URLs, sleep for the interval, repeat until cancelled."""
        logger.info(
            "Polling %d URLs every %s seconds", len(self.urls), self.interval
        )
        while True:
            await self.run_cycle()
            await asyncio.sleep(self.interval)

    async def run_cycle(self) -> CycleReport:
        """Check all monitored URLs concurrently and wait for every result."""
        logger.info("Starting page size check…")
        results = await asyncio.gather(*(self._bounded_check(url) for url in self.urls))
        report = CycleReport(tuple(results))
        logger.info(
            "Page size check completed: %d total, %d successful, %d failed",
            report.total, report.successful, report.failed,
        )
        return report

    async def _bounded_check(self, url: str) -> CheckResult:
        if self._semaphore is None:
            return await self.check_page_size(url)
        async with self._semaphore:
            return await self.check_page_size(url)

    async def check_page_size(self, url: str) -> CheckResult:
        """Fetch ``url`` once and record its body size, or 0 on any failure."""
        started = time.monotonic()
        error: Exception | None = None
        size = 0

        try:
            session = await self._get_session()
            async with session.get(url) as response:
                body = await response.read()
            size = len(body)
        except asyncio.CancelledError:
            logger.info("Page size check cancelled for %s", url)
            raise
        except asyncio.TimeoutError as exc:
            error = exc
            logger.warning(
                "Timeout fetching URL %s after %.2fs", url, time.monotonic() - started
            )
        except aiohttp.ClientPayloadError as exc:
            error = exc
            logger.warning(
                "Error reading response body from URL %s after %.2fs: %s",
                url, time.monotonic() - started, exc,
            )
        except aiohttp.ClientError as exc:
            error = exc
            logger.warning(
                "Error fetching URL %s after %.2fs: %s",
                url, time.monotonic() - started, exc,
            )
            logger.debug("Connection error details", exc_info=True)
        except ValueError as exc:
            error = exc
            logger.warning("Invalid URL %s: %s", url, exc)
        except Exception as exc:
            error = exc
            logger.exception("Unexpected error checking URL %s", url)

        self.metrics.record(url, size)
        duration = time.monotonic() - started

        if error is None:
            logger.info("Fetched URL %s, size: %d bytes in %.2fs", url, size, duration)
            self._track_success(url)
        else:
            self._track_failure(url)

        return CheckResult(url=url, size_bytes=size, error=error, duration=duration)

    def _track_success(self, url: str) -> None:
        failures = self._failed_pages.pop(url, 0)
        if failures:
            logger.info("✅ Page %s recovered after %d failed checks", url, failures)

    def _track_failure(self, url: str) -> None:
        """Track consecutive page load failures."""
        failure_count = self._failed_pages.get(url, 0) + 1
        self._failed_pages[url] = failure_count
        if failure_count >= self._failure_threshold:
            logger.error(
                "❌ Page %s has failed %d times in a row - may need attention!",
                url, failure_count
            )

    def failure_count(self, url: str) -> int:
        return self._failed_pages.get(url, 0)
