from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

Priority = Literal["high", "medium", "low"]

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


@dataclass(slots=True, frozen=True)
class TopicEntry:
    """Catalog entry; ``title_pattern`` may contain ``{year}``."""

    title_pattern: str
    keywords: Tuple[str, ...]
    priority: Priority


@dataclass(slots=True, frozen=True)
class ArticleSuggestion:
    title: str
    slug: str
    target_keywords: Tuple[str, ...]
    outline: Tuple[str, ...]
    priority: Priority
    reason: str

    @property
    def rank(self) -> int:
        return PRIORITY_ORDER[self.priority]
