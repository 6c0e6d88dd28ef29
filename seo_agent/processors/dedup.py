from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Callable, Optional

from ..models import GeneratedArticle, Post
from ..storage import PostExists, Store, StoreWriteFailed
from ..utils.logging import get_logger

logger = get_logger("seo.processors.dedup")


class Deduplicator:
    """Existence check in front of every post create.

    A candidate is skipped when its site already has a post with the same
    slug, or a post whose title contains the first ``title_prefix_chars``
    characters of the candidate title. The prefix rule suppresses variants
    rendered from the same template; it can also suppress unrelated articles
    that share an opening phrase.
    """

    def __init__(
        self,
        store: Store,
        *,
        title_prefix_chars: int = 20,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        env_prefix = os.getenv("DEDUP_TITLE_PREFIX_CHARS")
        self.store = store
        self.title_prefix_chars = int(env_prefix) if env_prefix else title_prefix_chars
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def find_existing(self, site_id: str, article: GeneratedArticle) -> Optional[Post]:
        prefix = article.title[: self.title_prefix_chars]
        return self.store.find_post(site_id, slug=article.slug, title_prefix=prefix or None)

    def _to_post(self, site_id: str, author_id: str, article: GeneratedArticle) -> Post:
        return Post(
            title=article.title,
            slug=article.slug,
            body=article.body,
            meta_title=article.title,
            meta_description=article.description,
            meta_keywords=article.keyword_tags,
            status="PUBLISHED",
            site_id=site_id,
            author_id=author_id,
            published_at=self.clock(),
        )

    def try_create(self, site_id: str, author_id: str, article: GeneratedArticle) -> bool:
        """Create ``article`` on ``site_id`` unless a duplicate exists.

        Returns True when a post was created, False when it was skipped.
        Raises ``StoreWriteFailed`` when the store lookup or write fails.
        """
        try:
            existing = self.find_existing(site_id, article)
        except StoreWriteFailed:
            raise
        except Exception as exc:  # noqa: BLE001 - any store error fails this article only
            raise StoreWriteFailed(f"lookup failed for '{article.slug}': {exc}") from exc

        if existing is not None:
            logger.info("Skipping duplicate on site %s: %s", site_id, article.title[:30])
            return False

        try:
            self.store.create_post(self._to_post(site_id, author_id, article))
        except PostExists:
            # a concurrent writer took the slug first
            logger.info("Slug already taken on site %s: %s", site_id, article.slug)
            return False
        except StoreWriteFailed:
            raise
        except Exception as exc:  # noqa: BLE001
            raise StoreWriteFailed(f"create failed for '{article.slug}': {exc}") from exc

        logger.info("Created post on site %s: %s", site_id, article.title[:40])
        return True
