"""Flatten organization records into rows of scalars.

A row is `row_prefix` (display identity) followed by one value per mapping
entry. Missing fields become ABSENT (None, written as an empty CSV cell).
Passing `mapping=None` selects "common" mode: each filing's form type picks
its raw fields via FORM_COMMON_FIELDS so all forms line up in one shape.
"""
from __future__ import annotations

import logging
import warnings
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..cache.freshness import filings_of
from ..errors import NoFilingsWarning, UnsupportedFormType
from .fields import FIELDS_COMMON, LOCATION_LABELS, ORG_LABEL, common_fields

logger = logging.getLogger(__name__)

ABSENT = None
ERROR_PREFIX = "ERROR: "


def get_field(data: Mapping[str, Any], name: str) -> Any:
    """Explicit lookup: ABSENT when the key is missing or null."""
    if name in data and data[name] is not None:
        return data[name]
    return ABSENT


def org_prefix(record: dict, location: bool = False, label: Optional[str] = None) -> List[Any]:
    org = record.get("organization") or {}
    prefix = [label if label else get_field(org, "name")]
    if location:
        prefix += [get_field(org, "city"), get_field(org, "state")]
    return prefix


def prefix_labels(location: bool = False) -> List[str]:
    return [ORG_LABEL] + (list(LOCATION_LABELS) if location else [])


def header_row(mapping: Optional[Mapping[str, str]] = None, location: bool = False) -> List[str]:
    labels = FIELDS_COMMON if mapping is None else mapping
    return prefix_labels(location) + list(labels.values())


def error_marker(message: str) -> str:
    return f"{ERROR_PREFIX}{message}"


def flatten_one(filing: Mapping[str, Any], mapping: Mapping[str, str], row_prefix: Sequence[Any] = ()) -> List[Any]:
    return list(row_prefix) + [get_field(filing, name) for name in mapping]


def flatten_common_one(filing: Mapping[str, Any], row_prefix: Sequence[Any] = ()) -> List[Any]:
    """One filing in the common shape; unknown form types keep the row
    but replace its last value with an error marker."""
    try:
        raw = common_fields(filing.get("formtype"))
    except UnsupportedFormType as e:
        logger.warning("%s (tax period %s)", e, filing.get("tax_prd"))
        values = [get_field(filing, name) for name in FIELDS_COMMON]
        values[-1] = error_marker(str(e))
        return list(row_prefix) + values
    return list(row_prefix) + [get_field(filing, raw[name]) for name in FIELDS_COMMON]


def flatten_all(
    record: dict,
    mapping: Optional[Mapping[str, str]] = None,
    row_prefix: Sequence[Any] = (),
) -> List[List[Any]]:
    """One row per filing, in stored order (latest first)."""
    filings = filings_of(record)
    if not filings:
        name = (record.get("organization") or {}).get("name")
        logger.warning("No filings_with_data for %s", name)
        warnings.warn(f"no filings for {name}", NoFilingsWarning, stacklevel=2)
        return []
    if mapping is None:
        return [flatten_common_one(f, row_prefix) for f in filings]
    return [flatten_one(f, mapping, row_prefix) for f in filings]


def flatten_common(record: dict, row_prefix: Sequence[Any] = ()) -> List[List[Any]]:
    return flatten_all(record, None, row_prefix)


def latest_only(
    record: dict,
    mapping: Optional[Mapping[str, str]] = None,
    row_prefix: Sequence[Any] = (),
    backup: Optional[Dict[str, Any]] = None,
) -> Optional[List[Any]]:
    """Row for the most recent filing.

    Without filings, approximate the row from a manual `backup` of
    field -> value ("" for fields it lacks); None if there is no backup.
    """
    filings = filings_of(record)
    if filings:
        if mapping is None:
            return flatten_common_one(filings[0], row_prefix)
        return flatten_one(filings[0], mapping, row_prefix)
    if backup is None:
        return None
    keys = FIELDS_COMMON if mapping is None else mapping
    logger.info("Using manual backup values for %s", (record.get("organization") or {}).get("name"))
    return list(row_prefix) + [backup.get(k, "") for k in keys]
