"""Centralized configuration for ProPublica fetches and exports.

Defaults can be overridden via environment variables or CLI flags.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field


PROPUBLICA_APIV2 = "https://projects.propublica.org/nonprofits/api/v2/organizations/"
PROPUBLICA_APIV2_JSON = ".json"
PROPUBLICA_ORG_PAGE = "https://projects.propublica.org/nonprofits/organizations/"


@dataclass
class Config:
    # Cache directory: one <EIN>.json per organization
    data_root: str = field(default_factory=lambda: os.getenv("PP990_DATA_ROOT", "_data"))

    # Remote endpoint: <api_base><EIN><api_suffix>
    api_base: str = field(default_factory=lambda: os.getenv("PP990_API_BASE", PROPUBLICA_APIV2))
    api_suffix: str = field(default_factory=lambda: os.getenv("PP990_API_SUFFIX", PROPUBLICA_APIV2_JSON))
    user_agent: str = field(default_factory=lambda: os.getenv("PP990_USER_AGENT", "propublica990"))

    # Where CSV exports (and run summaries) are written
    output_dir: str = field(default_factory=lambda: os.getenv("PP990_OUTPUT_DIR", "."))


def load_config() -> Config:
    return Config()
