"""Normalized document-query capability.

Extraction code talks to ``DocumentQuery`` only, so the HTML parser behind it
can be swapped without touching the extraction rules.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from bs4 import BeautifulSoup, Tag


class DocumentQuery(ABC):
    """CSS-selector queries over one parsed document."""

    @abstractmethod
    def find_first(self, selector: str) -> Optional[Any]:
        """Return the first node matching ``selector`` in document order."""

    @abstractmethod
    def find_all(self, selector: str) -> List[Any]:
        """Return every node matching ``selector`` in document order."""

    @abstractmethod
    def get_attribute(self, node: Any, name: str) -> Optional[str]:
        """Return the attribute value of ``node`` or None."""

    @abstractmethod
    def get_text(self, node: Any) -> str:
        """Return the concatenated text content of ``node``."""


class SoupDocument(DocumentQuery):
    def __init__(self, html: str, *, parser: str = "html.parser") -> None:
        self.soup = BeautifulSoup(html or "", parser)

    def find_first(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def find_all(self, selector: str) -> List[Tag]:
        return list(self.soup.select(selector))

    def get_attribute(self, node: Tag, name: str) -> Optional[str]:
        value = node.get(name)
        if isinstance(value, list):
            # multi-valued attributes such as class
            return " ".join(value)
        return value

    def get_text(self, node: Tag) -> str:
        return node.get_text()
