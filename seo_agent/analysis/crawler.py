from __future__ import annotations

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence
from urllib.parse import urljoin

from ..fetchers import FetchClient, discover_feed_links
from ..models import ArticleSignal, CompetitorConfig, CompetitorReport
from ..processors import SignalExtractor, SoupDocument
from ..utils.logging import get_logger, log_event
from .keywords import derive_recommendations, rank_keywords

logger = get_logger("seo.analysis.crawler")

ARTICLE_PATH_MARKERS = ("/blog/", "/article/", "/post/", "/news/")


@dataclass(slots=True, frozen=True)
class CrawlOutcome:
    competitor: str
    report: Optional[CompetitorReport] = None
    error: Optional[str] = None


def discover_article_urls(html: str, base_url: str) -> List[str]:
    """Anchors whose href carries an article path marker, resolved and deduplicated."""
    doc = SoupDocument(html)
    urls: List[str] = []
    for anchor in doc.find_all("a[href]"):
        href = (doc.get_attribute(anchor, "href") or "").strip()
        if not any(marker in href for marker in ARTICLE_PATH_MARKERS):
            continue
        full_url = href if href.startswith(("http://", "https://")) else urljoin(f"{base_url.rstrip('/')}/", href)
        if full_url not in urls:
            urls.append(full_url)
    return urls


def _stopped(cancel: Optional[threading.Event]) -> bool:
    return cancel is not None and cancel.is_set()


class CompetitorCrawler:
    """Crawl competitor blogs politely and build one report per competitor.

    Within one competitor fetches are sequential with a random delay before
    each article. Across competitors up to ``max_workers`` crawls run at once
    and every worker pauses ``competitor_pause`` seconds between two
    competitors.
    """

    def __init__(
        self,
        client: FetchClient,
        extractor: SignalExtractor,
        *,
        max_articles: int = 20,
        delay_range: tuple[float, float] = (1.0, 3.0),
        competitor_pause: float = 5.0,
        max_workers: int = 1,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.client = client
        self.extractor = extractor
        self.max_articles = max_articles
        self.delay_range = delay_range
        self.competitor_pause = competitor_pause
        self.max_workers = max(1, max_workers)
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._rng_lock = threading.Lock()

    def _delay(self) -> float:
        low, high = self.delay_range
        with self._rng_lock:
            return self.rng.uniform(low, high)

    def _candidate_urls(self, competitor: CompetitorConfig) -> Optional[List[str]]:
        """Return discovered URLs, or None when the listing page is unreachable."""
        if competitor.feed_url:
            feed_links = list(dict.fromkeys(discover_feed_links(self.client, competitor)))
            if feed_links:
                return feed_links
            logger.info("Feed for %s empty; falling back to listing page", competitor.name)

        listing = self.client.fetch(competitor.listing_url, headers=competitor.headers)
        if not listing.ok:
            logger.warning("Listing page unavailable for %s: %s", competitor.name, listing.error)
            return None
        return discover_article_urls(listing.body or "", competitor.base_url)

    def _analyze_article(self, url: str, competitor: CompetitorConfig) -> Optional[ArticleSignal]:
        result = self.client.fetch(url, headers=competitor.headers)
        if not result.ok:
            logger.warning("Skipping %s: %s", url, result.error)
            return None
        return self.extractor.extract(
            result.body or "", url, competitor.name, date_selector=competitor.date_selector
        )

    def crawl_detailed(
        self, competitor: CompetitorConfig, cancel: Optional[threading.Event] = None
    ) -> CrawlOutcome:
        logger.info("Analyzing competitor %s", competitor.name)
        urls = self._candidate_urls(competitor)
        if urls is None:
            return CrawlOutcome(competitor.name, error="listing page unavailable")
        if not urls:
            logger.warning("No article links found for %s", competitor.name)
            return CrawlOutcome(competitor.name, error="no article links discovered")

        logger.info("Found %d article links for %s", len(urls), competitor.name)
        articles: List[ArticleSignal] = []
        for url in urls[: self.max_articles]:
            if not _stopped(cancel):
                self.sleep(self._delay())
            if _stopped(cancel):
                logger.info("Crawl of %s cancelled after %d articles", competitor.name, len(articles))
                break
            signal = self._analyze_article(url, competitor)
            if signal is None:
                continue
            articles.append(signal)
            logger.debug("  + %s", signal.title[:50])

        top_keywords = rank_keywords(articles)
        report = CompetitorReport(
            competitor_name=competitor.name,
            scraped_at=self.clock(),
            articles=tuple(articles),
            top_keywords=tuple(top_keywords),
            recommendations=tuple(derive_recommendations(articles, top_keywords)),
        )
        log_event(
            logger,
            logging.INFO,
            "competitor_analyzed",
            competitor=competitor.name,
            links=len(urls),
            articles=report.total_articles,
        )
        return CrawlOutcome(competitor.name, report=report)

    def crawl(
        self, competitor: CompetitorConfig, cancel: Optional[threading.Event] = None
    ) -> Optional[CompetitorReport]:
        return self.crawl_detailed(competitor, cancel).report

    def _crawl_slot(
        self, index: int, competitor: CompetitorConfig, cancel: Optional[threading.Event]
    ) -> CrawlOutcome:
        # the worker that runs this crawl just finished another competitor
        if index >= self.max_workers and self.competitor_pause > 0:
            self.sleep(self.competitor_pause)
        if _stopped(cancel):
            return CrawlOutcome(competitor.name, error="cancelled")
        try:
            return self.crawl_detailed(competitor, cancel)
        except Exception as exc:  # noqa: BLE001 - one competitor never stops the others
            logger.exception("Analysis of %s failed: %s", competitor.name, exc)
            return CrawlOutcome(competitor.name, error=str(exc))

    def analyze_all_detailed(
        self,
        competitors: Sequence[CompetitorConfig],
        cancel: Optional[threading.Event] = None,
    ) -> List[CrawlOutcome]:
        enabled = [c for c in competitors if c.enabled]
        if not enabled:
            return []
        workers = min(self.max_workers, len(enabled))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="crawl") as executor:
            futures = [
                executor.submit(self._crawl_slot, idx, competitor, cancel)
                for idx, competitor in enumerate(enabled)
            ]
            outcomes = [f.result() for f in futures]
        for outcome in outcomes:
            if outcome.error:
                log_event(logger, logging.WARNING, "competitor_failed", competitor=outcome.competitor, error=outcome.error)
        return outcomes

    def analyze_all(
        self,
        competitors: Sequence[CompetitorConfig],
        cancel: Optional[threading.Event] = None,
    ) -> List[CompetitorReport]:
        """Reports of every enabled competitor whose crawl succeeded, in config order."""
        return [o.report for o in self.analyze_all_detailed(competitors, cancel) if o.report is not None]
