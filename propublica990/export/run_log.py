from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import json
import datetime as _dt
from typing import Optional

from .aggregator import OrgResult, filing_count


def _now_iso() -> str:
    now = _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0)
    return now.isoformat().replace("+00:00", "Z")


def new_run_id() -> str:
    # Compact UTC timestamp suitable for filenames
    return _dt.datetime.now(_dt.timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")


@dataclass
class RunTotals:
    ok: int = 0
    error: int = 0
    overwritten: int = 0
    stale: int = 0
    rows: int = 0


class RunLog:
    """Per-run JSON summary of what happened to each EIN.

    File schema:
    {
      "version": 1,
      "run_id": "...",
      "output": "/abs/path/to/export.csv",
      "started_at": "ISO",
      "updated_at": "ISO",
      "totals": {"ok":0,"error":0,"overwritten":0,"stale":0,"rows":0},
      "orgs": {
        "470825376": {"status": "ok", "name": "...", "filings": 12, "overwritten": false, "stale": false, "message": null}
      }
    }
    """

    def __init__(self, root: Path, run_id: str, output: Optional[Path] = None) -> None:
        self.root = Path(root)
        self.run_id = run_id
        self.path = self.root / f"export-{run_id}.json"
        n = 1
        while self.path.exists():
            n += 1
            self.path = self.root / f"export-{run_id}-{n}.json"
        self._data = {
            "version": 1,
            "run_id": run_id,
            "output": str(Path(output).resolve()) if output else None,
            "started_at": _now_iso(),
            "updated_at": _now_iso(),
            "totals": {"ok": 0, "error": 0, "overwritten": 0, "stale": 0, "rows": 0},
            "orgs": {},
        }

    @property
    def totals(self) -> RunTotals:
        return RunTotals(**self._data["totals"])

    def record(self, result: OrgResult) -> None:
        """Idempotent per-EIN update; a repeated EIN replaces its earlier entry."""
        orgs = self._data["orgs"]
        orgs[result.ein] = {
            "status": "ok" if result.ok else "error",
            "name": result.name,
            "filings": filing_count(result),
            "overwritten": bool(getattr(result, "overwritten", False)),
            "stale": bool(getattr(result, "stale", False)),
            "message": result.message,
        }
        totals = self._data["totals"]
        for k in ("ok", "error", "overwritten", "stale"):
            totals[k] = 0
        for entry in orgs.values():
            totals[entry["status"]] += 1
            totals["overwritten"] += int(entry["overwritten"])
            totals["stale"] += int(entry["stale"])

    def set_rows(self, rows: int) -> None:
        self._data["totals"]["rows"] = int(rows)

    def save(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        self._data["updated_at"] = _now_iso()
        self.path.write_text(json.dumps(self._data, indent=2))
        return self.path
