"""
Data models for page size checks
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of fetching a single monitored page"""
    url: str
    size_bytes: int
    error: BaseException | None = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class CycleReport:
    """Summary of one round of checks over every monitored URL"""
    results: Tuple[CheckResult, ...]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    def get(self, url: str) -> CheckResult | None:
        for result in self.results:
            if result.url == url:
                return result
        return None
