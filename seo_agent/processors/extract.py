from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import ArticleSignal
from ..utils.logging import get_logger
from .document import DocumentQuery, SoupDocument
from .normalize import collapse_whitespace, normalize_plain_text, strip_all_whitespace

logger = get_logger("seo.processors.extract")

DESCRIPTION_MAX_CHARS = 200
HEADING_MAX_CHARS = 100
CONTENT_SELECTOR = "article, .content, .post-content, main"
HEADING_SELECTOR = "h1, h2, h3"


def match_keywords(text: str, dictionary: Iterable[str]) -> Tuple[str, ...]:
    """Case-insensitive substring match, deduplicated, in dictionary order."""
    haystack = normalize_plain_text(text).lower()
    found: List[str] = []
    for keyword in dictionary:
        if keyword not in found and keyword.lower() in haystack:
            found.append(keyword)
    return tuple(found)


class SignalExtractor:
    """Turn one fetched page into an ``ArticleSignal``.

    Fallback chains:
      title: first h1 -> <title> -> og:title -> ""
      description: meta description -> og:description -> first paragraph (200 chars)
    A page without a title yields no signal.
    """

    def __init__(self, keyword_dictionary: Sequence[str]) -> None:
        self.keyword_dictionary = tuple(keyword_dictionary)

    def _first_text(self, doc: DocumentQuery, selector: str) -> str:
        node = doc.find_first(selector)
        return collapse_whitespace(doc.get_text(node)) if node is not None else ""

    def _meta(self, doc: DocumentQuery, selector: str) -> str:
        node = doc.find_first(selector)
        if node is None:
            return ""
        return collapse_whitespace(doc.get_attribute(node, "content"))

    def _title(self, doc: DocumentQuery) -> str:
        return (
            self._first_text(doc, "h1")
            or self._first_text(doc, "title")
            or self._meta(doc, 'meta[property="og:title"]')
        )

    def _description(self, doc: DocumentQuery) -> Optional[str]:
        description = (
            self._meta(doc, 'meta[name="description"]')
            or self._meta(doc, 'meta[property="og:description"]')
            or self._first_text(doc, "p")[:DESCRIPTION_MAX_CHARS]
        )
        return description or None

    def _headings(self, doc: DocumentQuery) -> Tuple[str, ...]:
        headings: List[str] = []
        for node in doc.find_all(HEADING_SELECTOR):
            text = collapse_whitespace(doc.get_text(node))
            # long "headings" are usually teaser blocks styled as headings
            if text and len(text) < HEADING_MAX_CHARS:
                headings.append(text)
        return tuple(headings)

    def _body_text(self, doc: DocumentQuery) -> str:
        text = "".join(doc.get_text(node) for node in doc.find_all(CONTENT_SELECTOR))
        if text.strip():
            return text
        body = doc.find_first("body")
        if body is not None:
            return doc.get_text(body)
        return ""

    def _published(self, doc: DocumentQuery, date_selector: Optional[str]) -> Optional[str]:
        if not date_selector:
            return None
        node = doc.find_first(date_selector)
        if node is None:
            return None
        value = doc.get_attribute(node, "datetime") or collapse_whitespace(doc.get_text(node))
        return value or None

    def extract_document(
        self,
        doc: DocumentQuery,
        source_url: str,
        source_competitor: str,
        *,
        date_selector: Optional[str] = None,
    ) -> Optional[ArticleSignal]:
        title = self._title(doc)
        if not title:
            logger.info("ParseEmpty: no title found at %s", source_url)
            return None

        body_text = self._body_text(doc)
        return ArticleSignal(
            source_url=source_url,
            title=title,
            source_competitor=source_competitor,
            description=self._description(doc),
            headings=self._headings(doc),
            keywords=match_keywords(body_text, self.keyword_dictionary),
            # characters without whitespace; CJK text has no word boundaries
            word_count=len(strip_all_whitespace(body_text)),
            published=self._published(doc, date_selector),
        )

    def extract(
        self,
        html: str,
        source_url: str,
        source_competitor: str,
        *,
        date_selector: Optional[str] = None,
    ) -> Optional[ArticleSignal]:
        return self.extract_document(
            SoupDocument(html), source_url, source_competitor, date_selector=date_selector
        )
