"""Loading the list of monitored pages."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


class SiteListError(ValueError):
    """Raised when the site list cannot be used to start monitoring."""


def parse_sites(lines: Iterable[str]) -> list[str]:
    sites: list[str] = []
    for line in lines:
        entry = line.strip()
        if entry and not entry.startswith(COMMENT_PREFIX):
            sites.append(entry)
    return sites


def load_sites(path: Path | str) -> list[str]:
    """Read monitored URLs from a newline-delimited file.

    Blank lines and ``#`` comments are skipped. A missing or unreadable file
    and a file without any URL both raise :class:`SiteListError`.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as handle:
            sites = parse_sites(handle)
    except OSError as exc:
        raise SiteListError(f"Failed to read site list {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise SiteListError(f"Site list {path} is not valid UTF-8") from exc

    if not sites:
        raise SiteListError(f"No URLs found in {path}")

    logger.debug("Loaded %d URLs from %s", len(sites), path)
    return sites
