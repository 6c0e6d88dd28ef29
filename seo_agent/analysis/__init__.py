"""Competitor analysis, keyword ranking and article suggestions."""

from .crawler import ARTICLE_PATH_MARKERS, CompetitorCrawler, CrawlOutcome, discover_article_urls
from .keywords import derive_recommendations, rank_keywords
from .report_export import export_reports_json, export_reports_markdown
from .suggestions import REASON_COVERED, REASON_GAP, SuggestionEngine

__all__ = [
    "ARTICLE_PATH_MARKERS",
    "CompetitorCrawler",
    "CrawlOutcome",
    "discover_article_urls",
    "derive_recommendations",
    "rank_keywords",
    "export_reports_json",
    "export_reports_markdown",
    "REASON_COVERED",
    "REASON_GAP",
    "SuggestionEngine",
]
