"""Cache freshness: decide whether freshly fetched data replaces the cache.

refresh(ein, store, fetcher, force):
1. Not forced and a cached snapshot exists -> return it, no network call.
2. Fetch. On FetchError fall back to the cached snapshot (stale) or re-raise.
3. Nothing usable cached (missing, or unreadable: CacheReadError) -> store
   and return the fetched record.
4. Both present -> overwrite iff is_newer(newest(fetched), newest(cached)).

newest() is the max `updated` timestamp across `filings_with_data`; a record
with no (parseable) timestamps has newest() == None. With the default
comparison a fetched record without timestamps never overwrites anything,
while a cached record without timestamps is always replaced.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional

import pandas as pd

from ..errors import CacheReadError, FetchError
from ..storage.backends import CacheStore, LocalStorage

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], dict]
Comparator = Callable[[Optional[pd.Timestamp], Optional[pd.Timestamp]], bool]

SOURCE_CACHE = "cache"
SOURCE_REMOTE = "remote"
SOURCE_STALE = "stale"


@dataclass
class RefreshResult:
    ein: str
    record: dict
    overwritten: bool
    source: str  # cache | remote | stale
    message: Optional[str] = None

    @property
    def stale(self) -> bool:
        return self.source == SOURCE_STALE


def filings_of(record: dict) -> List[dict]:
    filings = record.get("filings_with_data") or []
    return [f for f in filings if isinstance(f, dict)]


def parse_updated(value: Any) -> Optional[pd.Timestamp]:
    if value is None or value == "":
        return None
    try:
        ts = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError):
        return None
    if pd.isna(ts):
        return None
    return ts


def newest_update(record: dict) -> Optional[pd.Timestamp]:
    stamps = [parse_updated(f.get("updated")) for f in filings_of(record)]
    stamps = [s for s in stamps if s is not None]
    return max(stamps) if stamps else None


def fetched_is_newer(fetched: Optional[pd.Timestamp], cached: Optional[pd.Timestamp]) -> bool:
    # FIXME: asymmetric on purpose; a fetch with no filings never wins
    if fetched is None:
        return False
    if cached is None:
        return True
    return fetched > cached


def refresh(
    ein: str,
    store: CacheStore,
    fetcher: Fetcher,
    force: bool = False,
    is_newer: Comparator = fetched_is_newer,
) -> RefreshResult:
    """Return the best available record for `ein` and whether the cache changed.

    Raises FetchError only when the fetch fails and nothing usable is cached.
    An unreadable snapshot counts as having no timestamp: it is never
    served and any successful fetch replaces it.
    """
    unreadable: Optional[CacheReadError] = None
    try:
        cached = store.load(ein)
    except CacheReadError as e:
        logger.warning("Ignoring cached copy of %s: %s", ein, e.message)
        cached, unreadable = None, e
    if cached is not None and not force:
        logger.debug("Cache hit for %s", ein)
        return RefreshResult(ein, cached, False, SOURCE_CACHE)

    try:
        fetched = fetcher(ein)
    except FetchError as e:
        if unreadable is not None:
            raise FetchError(ein, f"{e.message}; cached copy unreadable: {unreadable.message}") from e
        if cached is None:
            raise
        logger.warning("Fetch failed for %s, using cached copy: %s", ein, e.message)
        return RefreshResult(ein, cached, False, SOURCE_STALE, e.message)

    if cached is None:
        store.store(ein, fetched)
        return RefreshResult(ein, fetched, True, SOURCE_REMOTE)

    newdate = newest_update(fetched)
    cachedate = newest_update(cached)
    if is_newer(newdate, cachedate):
        logger.info("Newer filing data for %s (%s > %s)", ein, newdate, cachedate)
        store.store(ein, fetched)
        return RefreshResult(ein, fetched, True, SOURCE_REMOTE)
    logger.debug("No newer filing data for %s (fetched=%s cached=%s)", ein, newdate, cachedate)
    return RefreshResult(ein, cached, False, SOURCE_CACHE)


def cache_org(ein: str, data_dir: str | Path, fetcher: Fetcher) -> bool:
    """Fetch `ein` and cache it under `data_dir`.

    Returns True if the file was (re)written because newer filing data was found.
    """
    return refresh(ein, LocalStorage(data_dir), fetcher, force=True).overwritten
