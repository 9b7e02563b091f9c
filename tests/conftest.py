from typing import Dict, List, Optional, Union

import pytest

from propublica990.errors import FetchError
from propublica990.storage.backends import MemoryStorage


def make_filing(updated: Optional[str], formtype=0, year=2022, **fields) -> dict:
    f = {"formtype": formtype, "tax_prd_yr": year, "tax_prd": year * 100 + 12, "pdf_url": None}
    if updated is not None:
        f["updated"] = updated
    f.update(fields)
    return f


def make_record(name: str = "Test Org", filings: Optional[List[dict]] = None, city="Springfield", state="IL") -> dict:
    return {
        "organization": {"name": name, "city": city, "state": state, "ein": 123456789},
        "filings_with_data": list(filings or []),
    }


class FakeFetcher:
    """Returns canned records per EIN; Exception values are raised as FetchError."""

    def __init__(self, responses: Dict[str, Union[dict, Exception]]) -> None:
        self.responses = responses
        self.calls: List[str] = []

    def __call__(self, ein: str) -> dict:
        self.calls.append(ein)
        resp = self.responses.get(ein)
        if resp is None:
            raise FetchError(ein, "404 Client Error: Not Found")
        if isinstance(resp, Exception):
            raise FetchError(ein, str(resp))
        return resp


@pytest.fixture
def store():
    return MemoryStorage()


@pytest.fixture
def record_a():
    return make_record(
        "Alpha Foundation, Inc.",
        [
            make_filing("2023-01-01T00:00:00.000Z", 0, 2022, totrevenue=1000, totfuncexpns=800,
                        totassetsend=5000, totliabend=200),
            make_filing("2022-06-01T00:00:00.000Z", 0, 2021, totrevenue=900, totfuncexpns=700,
                        totassetsend=4800, totliabend=250),
        ],
    )
