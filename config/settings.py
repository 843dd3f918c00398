"""Configuration helpers for environment-driven settings."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

if os.getenv("PYTEST_CURRENT_TEST") is None:
    load_dotenv()

SCHEDULE_MODES = ("sleep", "fixed_rate")


def _resolve_path(value: str) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


@dataclass(slots=True)
class Settings:
    """Runtime application settings sourced from environment variables."""

    SITES_FILE: Path = field(init=False)
    CHECK_INTERVAL_SECONDS: float = field(init=False)
    REQUEST_TIMEOUT: float = field(init=False)
    MAX_CONCURRENCY: int = field(init=False)
    SCHEDULE_MODE: str = field(init=False)
    METRICS_HOST: str | None = field(init=False)
    METRICS_PORT: int = field(init=False)
    METRICS_PATH: str = field(init=False)
    FAILURE_ALERT_THRESHOLD: int = field(init=False)
    LOG_DIR: Path = field(init=False)
    LOG_LEVEL: str = field(init=False)
    HEADERS: dict[str, str] = field(init=False)

    def __post_init__(self) -> None:
        self.reload()

    def reload(self) -> None:
        self.SITES_FILE = _resolve_path(os.getenv("SITES_FILE", "sites.txt").strip())

        try:
            interval = float(os.getenv("CHECK_INTERVAL_SECONDS", "30"))
        except ValueError as exc:
            raise ValueError("CHECK_INTERVAL_SECONDS must be a number") from exc
        if interval <= 0:
            raise ValueError("CHECK_INTERVAL_SECONDS must be positive")
        self.CHECK_INTERVAL_SECONDS = interval

        try:
            timeout = float(os.getenv("REQUEST_TIMEOUT", "10"))
        except ValueError as exc:
            raise ValueError("REQUEST_TIMEOUT must be a number") from exc
        if timeout <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")
        self.REQUEST_TIMEOUT = timeout

        try:
            concurrency = int(os.getenv("MAX_CONCURRENCY", "0"))
        except ValueError as exc:
            raise ValueError("MAX_CONCURRENCY must be an integer") from exc
        if concurrency < 0:
            raise ValueError("MAX_CONCURRENCY must be zero or positive")
        self.MAX_CONCURRENCY = concurrency

        mode = os.getenv("SCHEDULE_MODE", "sleep").strip().lower()
        if mode not in SCHEDULE_MODES:
            raise ValueError(
                f"SCHEDULE_MODE must be one of: {', '.join(SCHEDULE_MODES)}"
            )
        self.SCHEDULE_MODE = mode

        # empty means every interface, IPv4 and IPv6
        self.METRICS_HOST = os.getenv("METRICS_HOST", "").strip() or None

        try:
            port = int(os.getenv("METRICS_PORT", "9222"))
        except ValueError as exc:
            raise ValueError("METRICS_PORT must be an integer") from exc
        if not 0 < port < 65536:
            raise ValueError("METRICS_PORT must be between 1 and 65535")
        self.METRICS_PORT = port

        path = os.getenv("METRICS_PATH", "/metrics").strip()
        if not path.startswith("/"):
            raise ValueError("METRICS_PATH must start with '/'")
        self.METRICS_PATH = path

        try:
            threshold = int(os.getenv("FAILURE_ALERT_THRESHOLD", "3"))
        except ValueError as exc:
            raise ValueError("FAILURE_ALERT_THRESHOLD must be an integer") from exc
        if threshold <= 0:
            raise ValueError("FAILURE_ALERT_THRESHOLD must be positive")
        self.FAILURE_ALERT_THRESHOLD = threshold

        self.LOG_DIR = _resolve_path(os.getenv("LOG_DIR", "logs").strip())
        level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if level not in logging.getLevelNamesMapping():
            raise ValueError("LOG_LEVEL must be a logging level name")
        self.LOG_LEVEL = level

        self.HEADERS = {
            "User-Agent": "pagesize-exporter/1.0 (+https://prometheus.io)",
        }


settings = Settings()
