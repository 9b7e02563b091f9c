"""Batch EINs through refresh + flatten and write one CSV.

Each EIN ends up as either OrgOk (a record, possibly a stale cached one) or
OrgErr (nothing available). Errors never stop the batch; they become a row
whose last cell is an error marker so the output keeps one entry per EIN.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from tqdm import tqdm

from ..cache.freshness import Fetcher, filings_of, refresh
from ..errors import FetchError
from ..storage.backends import CacheStore
from ..transform.fields import FIELDS_COMMON
from ..transform.flatten import ABSENT, error_marker, flatten_all, header_row, latest_only, org_prefix
from .csv_exporter import CSVExporter

logger = logging.getLogger(__name__)


@dataclass
class OrgOk:
    ein: str
    record: dict
    overwritten: bool = False
    stale: bool = False
    label: Optional[str] = None
    message: Optional[str] = None
    ok = True

    @property
    def name(self) -> Optional[str]:
        return self.label or (self.record.get("organization") or {}).get("name")


@dataclass
class OrgErr:
    ein: str
    message: str
    label: Optional[str] = None
    ok = False

    @property
    def name(self) -> Optional[str]:
        return self.label


OrgResult = Union[OrgOk, OrgErr]


@dataclass
class ExportReport:
    path: Path
    results: List[OrgResult]
    rows: int
    header: List[str] = field(default_factory=list)

    @property
    def errors(self) -> List[OrgErr]:
        return [r for r in self.results if not r.ok]


def _pairs(eins: Union[Iterable[str], Mapping[str, str]]) -> List[Tuple[str, Optional[str]]]:
    """Ordered (ein, label) pairs from a list of EINs or an {ein: label} mapping."""
    if isinstance(eins, Mapping):
        return [(str(e), lbl) for e, lbl in eins.items()]
    return [(str(e), None) for e in eins]


def collect(
    eins: Union[Iterable[str], Mapping[str, str]],
    store: CacheStore,
    fetcher: Fetcher,
    force: bool = False,
    progress: bool = False,
) -> List[OrgResult]:
    results: List[OrgResult] = []
    pairs = _pairs(eins)
    for ein, label in tqdm(pairs, desc="Organizations", disable=not progress):
        try:
            res = refresh(ein, store, fetcher, force=force)
        except FetchError as e:
            logger.warning("No data for %s: %s", ein, e.message)
            results.append(OrgErr(ein, e.message, label))
            continue
        results.append(OrgOk(ein, res.record, res.overwritten, res.stale, label, res.message))
    return results


def error_row(result: OrgErr, width: int, location: bool = False) -> List[Any]:
    prefix: List[Any] = [result.label or result.ein]
    if location:
        prefix += [ABSENT, ABSENT]
    values: List[Any] = [ABSENT] * width
    values[-1] = error_marker(result.message)
    return prefix + values


def build_rows(
    results: List[OrgResult],
    mapping: Optional[Mapping[str, str]] = None,
    location: bool = False,
    latest: bool = False,
    backups: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Tuple[List[str], List[List[Any]]]:
    """Header plus rows in input order; mapping=None means common fields."""
    header = header_row(mapping, location)
    width = len(FIELDS_COMMON if mapping is None else mapping)
    backups = backups or {}
    rows: List[List[Any]] = []
    for r in results:
        if not r.ok:
            rows.append(error_row(r, width, location))
            continue
        prefix = org_prefix(r.record, location, r.label)
        if latest:
            row = latest_only(r.record, mapping, prefix, backups.get(r.ein))
            if row is not None:
                rows.append(row)
        else:
            rows.extend(flatten_all(r.record, mapping, prefix))
    return header, rows


def export(
    eins: Union[Iterable[str], Mapping[str, str]],
    store: CacheStore,
    fetcher: Fetcher,
    output: str | Path,
    mapping: Optional[Mapping[str, str]] = None,
    force: bool = False,
    location: bool = False,
    latest: bool = False,
    backups: Optional[Dict[str, Dict[str, Any]]] = None,
    progress: bool = False,
) -> ExportReport:
    results = collect(eins, store, fetcher, force=force, progress=progress)
    header, rows = build_rows(results, mapping, location, latest, backups)
    out = Path(output)
    df = CSVExporter.to_frame(header, rows)
    path = CSVExporter.export(df, out.name, str(out.parent))
    ok = sum(1 for r in results if r.ok)
    logger.info("Exported %d rows for %d/%d organizations", len(rows), ok, len(results))
    return ExportReport(path=path, results=results, rows=len(rows), header=header)


def filing_count(result: OrgResult) -> int:
    return len(filings_of(result.record)) if result.ok else 0
