"""Storage abstractions for cached organization records.

We default to LocalStorage writing `<root>/<EIN>.json` (pretty-printed).
MemoryStorage keeps records in a dict; refresh() works against either, so
tests never touch the disk.
"""
from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import CacheReadError

logger = logging.getLogger(__name__)


class CacheStore:
    """Interface: one serialized record per EIN."""

    def exists(self, ein: str) -> bool:
        raise NotImplementedError

    def load(self, ein: str) -> Optional[dict]:
        """Return the cached record, or None on a cache miss.

        Raises CacheReadError when a snapshot exists but cannot be used.
        """
        raise NotImplementedError

    def store(self, ein: str, record: dict) -> None:
        raise NotImplementedError

    def list_eins(self) -> List[str]:
        raise NotImplementedError


class LocalStorage(CacheStore):
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser()
        # Fatal if the cache directory cannot be created
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, ein: str) -> Path:
        return self.root / f"{ein}.json"

    def exists(self, ein: str) -> bool:
        return self.path_for(ein).exists()

    def load(self, ein: str) -> Optional[dict]:
        p = self.path_for(ein)
        if not p.exists():
            return None
        try:
            record = json.loads(p.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise CacheReadError(ein, f"unreadable cache file {p}: {e}") from e
        if not isinstance(record, dict):
            raise CacheReadError(ein, f"cache file {p} holds a {type(record).__name__}, not an object")
        return record

    def store(self, ein: str, record: dict) -> None:
        p = self.path_for(ein)
        # Whole-file replace, never append
        tmp = p.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(record, indent=2), encoding="utf-8")
        tmp.replace(p)
        logger.info("Wrote cache file %s", p)

    def list_eins(self) -> List[str]:
        return sorted(p.stem for p in self.root.glob("*.json"))


class MemoryStorage(CacheStore):
    def __init__(self, records: Optional[Dict[str, dict]] = None) -> None:
        self._records: Dict[str, dict] = {}
        self.writes: List[str] = []
        for ein, rec in (records or {}).items():
            self._records[ein] = copy.deepcopy(rec)

    def exists(self, ein: str) -> bool:
        return ein in self._records

    def load(self, ein: str) -> Optional[dict]:
        rec = self._records.get(ein)
        if rec is None:
            return None
        if not isinstance(rec, dict):
            raise CacheReadError(ein, f"cached value is a {type(rec).__name__}, not an object")
        return copy.deepcopy(rec)

    def store(self, ein: str, record: dict) -> None:
        self._records[ein] = copy.deepcopy(record)
        self.writes.append(ein)

    def list_eins(self) -> List[str]:
        return sorted(self._records)
