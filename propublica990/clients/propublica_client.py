"""Thin wrapper around the ProPublica Nonprofit Explorer API v2.

One read-only GET per organization:
  <api_base><EIN><api_suffix>

We keep this small and swappable; anything callable as `fetcher(ein) -> dict`
can stand in for `fetch_org` (tests use plain functions).
"""
from __future__ import annotations

import logging
from typing import Optional

import requests

from ..config import Config, PROPUBLICA_ORG_PAGE, load_config
from ..errors import FetchError

logger = logging.getLogger(__name__)


def org_url(ein: str, cfg: Optional[Config] = None) -> str:
    cfg = cfg or load_config()
    return f"{cfg.api_base}{ein}{cfg.api_suffix}"


def org_page_url(ein: str) -> str:
    """Human-facing ProPublica page for an organization."""
    return f"{PROPUBLICA_ORG_PAGE}{ein}"


def fetch_org(ein: str, cfg: Optional[Config] = None, session: Optional[requests.Session] = None) -> dict:
    """Fetch an org's data from ProPublica.

    Raises FetchError on transport failures, HTTP errors (incl. 404 for
    unknown EINs) and bodies that are not a JSON object. No retries and no
    timeout beyond what requests does by default.
    """
    cfg = cfg or load_config()
    url = org_url(ein, cfg)
    http = session or requests.Session()
    logger.debug("GET %s", url)
    try:
        resp = http.get(url, headers={"User-Agent": cfg.user_agent, "Accept": "application/json"})
        resp.raise_for_status()
        org = resp.json()
    except requests.exceptions.RequestException as e:
        raise FetchError(ein, str(e)) from e
    except ValueError as e:
        raise FetchError(ein, f"invalid JSON from {url}: {e}") from e
    if not isinstance(org, dict):
        raise FetchError(ein, f"unexpected payload type {type(org).__name__} from {url}")
    return org


class ProPublicaClient:
    """Reuses one HTTP session across a batch of EINs."""

    def __init__(self, cfg: Optional[Config] = None, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg or load_config()
        self.session = session or requests.Session()

    def __call__(self, ein: str) -> dict:
        return fetch_org(ein, self.cfg, self.session)

    def close(self) -> None:
        self.session.close()
