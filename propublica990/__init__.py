"""
ProPublica 990 tools (fetch + cache + flatten + export).

Fetch/parse IRS 990 data from the ProPublica Nonprofit Explorer API v2:
  https://projects.propublica.org/nonprofits/api

Layout
- config.py: runtime knobs (API base, cache dir, user agent, output dir)
- errors.py: FetchError / UnsupportedFormType / NoFilingsWarning
- clients/propublica_client.py: one GET per EIN against the API
- storage/backends.py: local JSON cache (default) + in-memory store
- cache/freshness.py: refresh() decides whether fetched data replaces the cache
- transform/: field tables per form type and the row flattener
- export/: batch aggregator, CSV writer, per-run JSON summary
- utils/list_loader.py: EIN lists from CSV/TSV/txt
- cli.py: `cache`, `export` and `show` commands

Note: the cache uses <data_root>/<EIN>.json naming.
"""

__version__ = "0.3.0"
