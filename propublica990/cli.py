"""Command line entry point.

Usage examples:
  python -m propublica990.cli cache 470825376 --dir _data --force
  python -m propublica990.cli export --eins 470825376,530196605 --location --output orgs.csv
  python -m propublica990.cli export --eins-file eins.csv --fields 990 --force --summary
  python -m propublica990.cli export --labels-file labels.csv --latest-only --backup backup.json
  python -m propublica990.cli show 470825376
"""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .cache.freshness import newest_update, refresh, filings_of
from .clients.propublica_client import ProPublicaClient, org_page_url
from .config import load_config
from .errors import CacheReadError, FetchError
from .export.aggregator import export
from .export.run_log import RunLog, new_run_id
from .storage.backends import LocalStorage
from .transform.fields import FIELD_SETS, field_set
from .utils.list_loader import load_eins_from_file, load_labels_from_file, normalize_ein

DEFAULT_EIN = "470825376"

logger = logging.getLogger("propublica990")


def _split_eins(s: str) -> List[str]:
    return [normalize_ein(x) for x in s.split(",") if x.strip()]


def _collect_eins(args: argparse.Namespace) -> Union[List[str], Dict[str, str]]:
    eins: List[str] = []
    if args.eins_file:
        eins.extend(load_eins_from_file(args.eins_file))
    if args.eins:
        eins.extend(_split_eins(args.eins))
    if args.labels_file:
        labels = load_labels_from_file(args.labels_file)
        # keyed input: labelled EINs first, then any extra plain EINs
        for e in eins:
            labels.setdefault(e, "")
        return labels
    seen: set[str] = set()
    out: List[str] = []
    for e in eins:
        if e not in seen:
            out.append(e)
            seen.add(e)
    return out


def _cmd_cache(args: argparse.Namespace) -> int:
    cfg = load_config()
    storage = LocalStorage(args.dir or cfg.data_root)
    client = ProPublicaClient(cfg)
    eins = [normalize_ein(e) for e in (args.ein or [DEFAULT_EIN])]
    try:
        for ein in eins:
            logger.debug("Refreshing %s in %s", ein, storage.root)
            try:
                res = refresh(ein, storage, client, force=args.force)
            except FetchError as e:
                print(f"Error fetching {ein}: {e.message}")
                continue
            suffix = " (stale: fetch failed)" if res.stale else ""
            print(f"{ein}: {res.overwritten}{suffix}")
    finally:
        client.close()
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    cfg = load_config()
    eins = _collect_eins(args)
    if not eins:
        print("No EINs given (use --eins, --eins-file or --labels-file).")
        return 1
    mapping = None if args.fields == "common" else field_set(args.fields)
    backups = None
    if args.backup:
        backups = json.loads(Path(args.backup).expanduser().read_text())
    output = Path(args.output) if args.output else Path(cfg.output_dir) / "propublica990.csv"

    storage = LocalStorage(args.dir or cfg.data_root)
    client = ProPublicaClient(cfg)
    print(f"Processing {len(eins)} EINs, fields={args.fields}, cache={storage.root}, force={args.force}")
    try:
        report = export(
            eins,
            storage,
            client,
            output,
            mapping=mapping,
            force=args.force,
            location=args.location,
            latest=args.latest_only,
            backups=backups,
            progress=not args.no_progress,
        )
    finally:
        client.close()

    for r in report.results:
        if not r.ok:
            print(f"  {r.ein}: ERROR {r.message}")
        elif r.stale:
            print(f"  {r.ein}: using stale cache ({r.message})")
        elif r.overwritten:
            print(f"  {r.ein}: updated cache")
    print(f"Saved {report.rows} rows to {report.path} ({len(report.errors)} errors)")

    if args.summary:
        log = RunLog(report.path.parent, new_run_id(), report.path)
        for r in report.results:
            log.record(r)
        log.set_rows(report.rows)
        print(f"Summary: {log.save()}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    cfg = load_config()
    storage = LocalStorage(args.dir or cfg.data_root)
    ein = normalize_ein(args.ein)
    try:
        record = storage.load(ein)
    except CacheReadError as e:
        print(f"{ein}: {e.message}")
        return 1
    if record is None:
        print(f"{ein}: not cached in {storage.root}")
        return 1
    org = record.get("organization") or {}
    print(f"EIN: {ein}")
    print(f"Name: {org.get('name')}")
    if org.get("city") or org.get("state"):
        print(f"Location: {org.get('city')}, {org.get('state')}")
    print(f"Filings: {len(filings_of(record))}")
    print(f"Newest update: {newest_update(record)}")
    print(f"URL: {org_page_url(ein)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="propublica990", description="Fetch, cache and export ProPublica 990 data")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    c = sub.add_parser("cache", help="Refresh cached records; prints True when a file was updated")
    c.add_argument("ein", nargs="*", help=f"EINs to refresh (default: {DEFAULT_EIN})")
    c.add_argument("--dir", default="", help="Cache directory (overrides PP990_DATA_ROOT)")
    c.add_argument("--force", action="store_true", help="Fetch even when a cached copy exists")
    c.set_defaults(func=_cmd_cache)

    e = sub.add_parser("export", help="Export filings for many EINs to one CSV")
    e.add_argument("--eins", default="", help="Comma-separated EINs")
    e.add_argument("--eins-file", default="", help="Path to CSV/TSV/txt with EINs")
    e.add_argument("--labels-file", default="", help="CSV with ein,label columns (label overrides the org name)")
    e.add_argument("--fields", default="common", choices=["common"] + sorted(FIELD_SETS),
                   help="Field table: common (all forms normalized) or a single form's native fields")
    e.add_argument("--location", action="store_true", help="Add City/State columns after the name")
    e.add_argument("--latest-only", action="store_true", help="Only the most recent filing per organization")
    e.add_argument("--backup", default="", help="JSON {ein: {field: value}} used when an org has no filings (with --latest-only)")
    e.add_argument("--force", action="store_true", help="Fetch even when a cached copy exists")
    e.add_argument("--output", default="", help="CSV path (default: <PP990_OUTPUT_DIR>/propublica990.csv)")
    e.add_argument("--dir", default="", help="Cache directory (overrides PP990_DATA_ROOT)")
    e.add_argument("--summary", action="store_true", help="Write export-<run_id>.json next to the CSV")
    e.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    e.set_defaults(func=_cmd_export)

    s = sub.add_parser("show", help="Print a cached organization")
    s.add_argument("ein")
    s.add_argument("--dir", default="", help="Cache directory (overrides PP990_DATA_ROOT)")
    s.set_defaults(func=_cmd_show)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
