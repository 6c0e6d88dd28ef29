"""Processing: document queries, signal extraction, normalization and the create gate."""

from .dedup import Deduplicator
from .document import DocumentQuery, SoupDocument
from .extract import SignalExtractor, match_keywords
from .normalize import collapse_whitespace, normalize_plain_text, slugify

__all__ = [
    "Deduplicator",
    "DocumentQuery",
    "SoupDocument",
    "SignalExtractor",
    "match_keywords",
    "collapse_whitespace",
    "normalize_plain_text",
    "slugify",
]
