from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple


@dataclass(slots=True, frozen=True)
class CompetitorConfig:
    """A competitor blog to crawl.

    ``feed_url`` is optional; when set, article URLs are discovered from the
    RSS/Atom feed before falling back to the listing page anchors.
    """

    name: str
    base_url: str
    listing_path: str
    article_selector: str
    title_selector: str
    description_selector: Optional[str] = None
    date_selector: Optional[str] = None
    feed_url: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    enabled: bool = True

    @property
    def listing_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.listing_path}"


@dataclass(slots=True, frozen=True)
class ArticleSignal:
    source_url: str
    title: str
    source_competitor: str
    description: Optional[str] = None
    headings: Tuple[str, ...] = ()
    # dictionary order, deduplicated
    keywords: Tuple[str, ...] = ()
    word_count: int = 0
    published: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "source_url": self.source_url,
            "title": self.title,
            "source_competitor": self.source_competitor,
            "description": self.description,
            "headings": list(self.headings),
            "keywords": list(self.keywords),
            "word_count": self.word_count,
            "published": self.published,
        }


@dataclass(slots=True, frozen=True)
class CompetitorReport:
    competitor_name: str
    scraped_at: datetime
    articles: Tuple[ArticleSignal, ...]
    top_keywords: Tuple[Tuple[str, int], ...]
    recommendations: Tuple[str, ...]

    @property
    def total_articles(self) -> int:
        return len(self.articles)

    def to_dict(self) -> dict:
        return {
            "competitor": self.competitor_name,
            "scraped_at": self.scraped_at.isoformat(),
            "total_articles": self.total_articles,
            "articles": [a.to_dict() for a in self.articles],
            "top_keywords": [{"keyword": k, "count": c} for k, c in self.top_keywords],
            "recommendations": list(self.recommendations),
        }
