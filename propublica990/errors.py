"""Error taxonomy.

- FetchError: the remote service could not be reached or returned junk.
  Recoverable: callers fall back to the cache or record an error row.
- CacheReadError: a cached snapshot exists but is not a readable JSON object.
  Treated like a snapshot without timestamps, so a good fetch replaces it.
- UnsupportedFormType: no field table for a filing's form type. Recorded
  inline in the output row, never aborts a batch.
- NoFilingsWarning: an organization with zero filings (a warning, not an error).

A cache miss is not an error: storage returns None.
"""
from __future__ import annotations

from typing import Any


class Propublica990Error(Exception):
    pass


class FetchError(Propublica990Error):
    def __init__(self, ein: str, message: str) -> None:
        super().__init__(f"{ein}: {message}")
        self.ein = ein
        self.message = message


class CacheReadError(Propublica990Error):
    def __init__(self, ein: str, message: str) -> None:
        super().__init__(f"{ein}: {message}")
        self.ein = ein
        self.message = message


class UnsupportedFormType(Propublica990Error):
    def __init__(self, formtype: Any) -> None:
        super().__init__(f"unsupported form type {formtype!r}")
        self.formtype = formtype


class NoFilingsWarning(UserWarning):
    pass
