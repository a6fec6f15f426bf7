"""
HTTP fetching for source adapters.
"""

from .fetcher import FetchResult, build_client, fetch_url

__all__ = ["FetchResult", "build_client", "fetch_url"]
