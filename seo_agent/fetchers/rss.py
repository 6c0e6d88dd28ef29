from __future__ import annotations

from typing import List

import feedparser

from ..models import CompetitorConfig
from ..utils.logging import get_logger
from .http import FetchClient

logger = get_logger("seo.fetchers.rss")


def discover_feed_links(client: FetchClient, competitor: CompetitorConfig) -> List[str]:
    """Return entry links from a competitor's RSS/Atom feed, in feed order.

    The feed is fetched through ``FetchClient`` so it carries the same timeout
    and headers as page fetches; ``feedparser`` handles the feed dialects.
    An unreachable feed yields an empty list.
    """
    if not competitor.feed_url:
        return []

    result = client.fetch(competitor.feed_url, headers=competitor.headers)
    if not result.ok:
        logger.warning("Feed unavailable for %s: %s", competitor.name, result.error)
        return []

    parsed = feedparser.parse(result.body)
    if getattr(parsed, "bozo", False):
        # feedparser flags malformed feeds but usually still parses entries
        logger.debug("Feed 'bozo' flagged for %s: %s", competitor.feed_url, getattr(parsed, "bozo_exception", None))

    links: List[str] = []
    for entry in getattr(parsed, "entries", []) or []:
        link = (getattr(entry, "link", None) or "").strip()
        if link:
            links.append(link)

    logger.info("Feed for %s listed %d entries", competitor.name, len(links))
    return links
