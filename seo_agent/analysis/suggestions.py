from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from ..generation.catalog import DEFAULT_CATALOG, Catalog
from ..models import ArticleSuggestion, CompetitorReport, TopicEntry
from ..processors.normalize import slugify
from ..utils.logging import get_logger

logger = get_logger("seo.analysis.suggestions")

REASON_COVERED = "competitor coverage exists"
REASON_GAP = "keyword gap — opportunity"


class SuggestionEngine:
    """Rank topic-catalog entries against what competitors already cover.

    Works with no reports at all: the catalog alone always yields a full list,
    so content generation keeps going when every crawl was blocked.
    """

    def __init__(
        self,
        catalog: Catalog = DEFAULT_CATALOG,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.catalog = catalog
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @staticmethod
    def _competitor_titles(reports: Sequence[CompetitorReport]) -> List[str]:
        return [a.title.lower() for r in reports for a in r.articles]

    def _suggestion(self, topic: TopicEntry, year: str, titles: Sequence[str]) -> ArticleSuggestion:
        title = topic.title_pattern.replace("{year}", year)
        covered = any(k.lower() in t for t in titles for k in topic.keywords)
        return ArticleSuggestion(
            title=title,
            slug=slugify(title),
            target_keywords=tuple(topic.keywords),
            outline=self.catalog.outline,
            priority=topic.priority,
            reason=REASON_COVERED if covered else REASON_GAP,
        )

    def suggest(self, reports: Sequence[CompetitorReport] = ()) -> List[ArticleSuggestion]:
        year = str(self.clock().year)
        titles = self._competitor_titles(reports)
        suggestions = [self._suggestion(topic, year, titles) for topic in self.catalog.topics]
        # stable: catalog order survives within each priority
        suggestions.sort(key=lambda s: s.rank)
        logger.info(
            "Built %d suggestions from %d report(s); %d cover a keyword gap",
            len(suggestions),
            len(reports),
            sum(1 for s in suggestions if s.reason == REASON_GAP),
        )
        return suggestions
