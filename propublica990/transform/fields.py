"""Static field tables for ProPublica `filings_with_data` entries.

Form types follow the API's integer `formtype`:
  0 = Form 990, 1 = Form 990-EZ, 2 = Form 990-PF

Two kinds of tables:
- FIELDS_990 / FIELDS_990EZ / FIELDS_990PF: raw API field -> display label,
  for exporting one form's native columns.
- FIELDS_COMMON: canonical name -> display label, plus FORM_COMMON_FIELDS
  which maps each canonical name to the raw field of a given form type.
  This normalizes the three schemas into one comparable row shape.

These are data, not logic: only lookups live here.
"""
from __future__ import annotations

from typing import Any, Dict

from ..errors import UnsupportedFormType

ORG_LABEL = "Organization"
LOCATION_LABELS = ["City", "State"]

FORM_NAMES: Dict[int, str] = {
    0: "990",
    1: "990EZ",
    2: "990PF",
}

FIELDS_990: Dict[str, str] = {
    "tax_prd_yr": "Tax Year",
    "tax_prd": "Tax Period",
    "totrevenue": "Total Revenue",
    "totcntrbgfts": "Contributions and Grants",
    "totprgmrevnue": "Program Service Revenue",
    "invstmntinc": "Investment Income",
    "totfuncexpns": "Total Functional Expenses",
    "compnsatncurrofcr": "Officer Compensation",
    "othrsalwages": "Other Salaries and Wages",
    "totassetsend": "Total Assets (EOY)",
    "totliabend": "Total Liabilities (EOY)",
    "totnetassetend": "Net Assets (EOY)",
    "pdf_url": "PDF",
}

FIELDS_990EZ: Dict[str, str] = {
    "tax_prd_yr": "Tax Year",
    "tax_prd": "Tax Period",
    "totrevnue": "Total Revenue",
    "totcntrbs": "Contributions and Grants",
    "prgmservrev": "Program Service Revenue",
    "totexpns": "Total Expenses",
    "totassetsend": "Total Assets (EOY)",
    "totliabend": "Total Liabilities (EOY)",
    "totnetassetsend": "Net Assets (EOY)",
    "pdf_url": "PDF",
}

FIELDS_990PF: Dict[str, str] = {
    "tax_prd_yr": "Tax Year",
    "tax_prd": "Tax Period",
    "totrcptperbks": "Total Revenue",
    "grscontrgifts": "Contributions Received",
    "netinvstinc": "Net Investment Income",
    "totexpnspbks": "Total Expenses",
    "compofficers": "Officer Compensation",
    "contrpdpbks": "Contributions Paid",
    "fairmrktvalamt": "Fair Market Value of Assets",
    "totassetsend": "Total Assets (EOY)",
    "totliabend": "Total Liabilities (EOY)",
    "pdf_url": "PDF",
}

FORM_FIELDS: Dict[int, Dict[str, str]] = {
    0: FIELDS_990,
    1: FIELDS_990EZ,
    2: FIELDS_990PF,
}

FIELDS_COMMON: Dict[str, str] = {
    "tax_prd_yr": "Tax Year",
    "tax_prd": "Tax Period",
    "formtype": "Form Type",
    "revenue": "Total Revenue",
    "expenses": "Total Expenses",
    "assets": "Total Assets (EOY)",
    "liabilities": "Total Liabilities (EOY)",
    "pdf_url": "PDF",
}

_SHARED = {
    "tax_prd_yr": "tax_prd_yr",
    "tax_prd": "tax_prd",
    "formtype": "formtype",
    "pdf_url": "pdf_url",
}

FORM_COMMON_FIELDS: Dict[int, Dict[str, str]] = {
    0: {**_SHARED, "revenue": "totrevenue", "expenses": "totfuncexpns",
        "assets": "totassetsend", "liabilities": "totliabend"},
    1: {**_SHARED, "revenue": "totrevnue", "expenses": "totexpns",
        "assets": "totassetsend", "liabilities": "totliabend"},
    2: {**_SHARED, "revenue": "totrcptperbks", "expenses": "totexpnspbks",
        "assets": "totassetsend", "liabilities": "totliabend"},
}

# CLI names for --fields
FIELD_SETS: Dict[str, Dict[str, str]] = {
    "990": FIELDS_990,
    "990ez": FIELDS_990EZ,
    "990pf": FIELDS_990PF,
}


def _form_key(formtype: Any) -> int:
    """Accept 0/1/2, "0"/"1"/"2" or "990"/"990EZ"/"990PF"; raise otherwise."""
    if isinstance(formtype, bool):
        raise UnsupportedFormType(formtype)
    if isinstance(formtype, int):
        if formtype in FORM_NAMES:
            return formtype
        raise UnsupportedFormType(formtype)
    if isinstance(formtype, str):
        s = formtype.strip().upper().replace("-", "")
        if s.isdigit() and int(s) in FORM_NAMES:
            return int(s)
        for k, name in FORM_NAMES.items():
            if s == name:
                return k
    raise UnsupportedFormType(formtype)


def form_name(formtype: Any) -> str:
    return FORM_NAMES[_form_key(formtype)]


def form_fields(formtype: Any) -> Dict[str, str]:
    """Raw field -> label table for a form type."""
    return FORM_FIELDS[_form_key(formtype)]


def common_fields(formtype: Any) -> Dict[str, str]:
    """Canonical name -> raw field name for a form type."""
    return FORM_COMMON_FIELDS[_form_key(formtype)]


def field_set(name: str) -> Dict[str, str]:
    key = name.strip().lower().replace("-", "")
    if key not in FIELD_SETS:
        raise KeyError(f"unknown field set {name!r}; expected one of {sorted(FIELD_SETS)}")
    return FIELD_SETS[key]
