from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(slots=True, frozen=True)
class ArticleTemplate:
    """Parameterized article skeleton.

    Every pattern may contain ``{placeholder}`` tokens such as ``{year}``,
    ``{edition}``, ``{platform}``, ``{theme}``, ``{audience}`` and
    ``{platform_steps}``.
    """

    keyword: str
    title_pattern: str
    body_pattern: str
    description_pattern: str
    tags: Tuple[str, ...]


@dataclass(slots=True, frozen=True)
class GeneratedArticle:
    title: str
    body: str
    description: str
    keyword_tags: Tuple[str, ...]
    slug: str


@dataclass(slots=True, frozen=True)
class Site:
    id: str
    name: str
    domain: str = ""
    status: str = "ACTIVE"


@dataclass(slots=True, frozen=True)
class Identity:
    id: str
    name: str
    role: str = "ADMIN"


@dataclass(slots=True, frozen=True)
class Post:
    title: str
    slug: str
    body: str
    meta_title: str
    meta_description: str
    meta_keywords: Tuple[str, ...]
    site_id: str
    author_id: str
    status: str = "PUBLISHED"
    published_at: Optional[datetime] = None
    id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "body": self.body,
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "meta_keywords": list(self.meta_keywords),
            "status": self.status,
            "site_id": self.site_id,
            "author_id": self.author_id,
            "published_at": self.published_at.isoformat() if self.published_at else None,
        }

    @classmethod
    def from_dict(cls, row: dict) -> "Post":
        published = row.get("published_at")
        return cls(
            id=row.get("id"),
            title=row["title"],
            slug=row["slug"],
            body=row.get("body", ""),
            meta_title=row.get("meta_title", row["title"]),
            meta_description=row.get("meta_description", ""),
            meta_keywords=tuple(row.get("meta_keywords") or ()),
            status=row.get("status", "PUBLISHED"),
            site_id=row["site_id"],
            author_id=row.get("author_id", ""),
            published_at=datetime.fromisoformat(published) if published else None,
        )
