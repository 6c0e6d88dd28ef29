"""Network layer: polite page fetching and feed discovery."""

from .http import USER_AGENTS, FetchClient, FetchFailed, FetchResult
from .rss import discover_feed_links

__all__ = ["USER_AGENTS", "FetchClient", "FetchFailed", "FetchResult", "discover_feed_links"]
