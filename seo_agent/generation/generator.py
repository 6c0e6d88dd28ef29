from __future__ import annotations

import itertools
import random
import re
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ..models import ArticleSuggestion, ArticleTemplate, GeneratedArticle
from ..processors.normalize import SLUG_MAX_LENGTH, slugify
from ..utils.logging import get_logger
from .catalog import DEFAULT_CATALOG, Catalog

logger = get_logger("seo.generation")

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def fill_template(pattern: str, replacements: Dict[str, str]) -> str:
    """Replace ``{name}`` tokens; unknown tokens are left untouched."""
    return _PLACEHOLDER_RE.sub(lambda m: replacements.get(m.group(1), m.group(0)), pattern)


def unresolved_placeholders(text: str) -> List[str]:
    return _PLACEHOLDER_RE.findall(text)


class SlugNonce:
    """Suffix source that never repeats within one process.

    Millisecond timestamp plus a monotonic sequence number, so identical
    titles rendered in the same millisecond still get distinct slugs.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            seq = next(self._counter)
        return f"{int(self._clock() * 1000)}-{seq}"


class ContentGenerator:
    """Expand article templates into concrete articles.

    Variant picks go through ``rng`` so tests can pin them; the year comes
    from ``clock``.
    """

    def __init__(
        self,
        catalog: Catalog = DEFAULT_CATALOG,
        *,
        rng: Optional[random.Random] = None,
        nonce: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not catalog.templates:
            raise ValueError("catalog has no article templates")
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.nonce = nonce or SlugNonce()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _replacements(self) -> Dict[str, str]:
        replacements = {"year": str(self.clock().year)}
        for name, pool in self.catalog.variants.items():
            replacements[name] = self.rng.choice(pool)
        platform = replacements.get("platform", self.catalog.generic_platform)
        steps = self.catalog.platform_steps
        replacements["platform_steps"] = steps.get(platform) or steps.get(self.catalog.generic_platform, "")
        return replacements

    def random_template(self) -> ArticleTemplate:
        return self.rng.choice(self.catalog.templates)

    def match_template(self, suggestion: ArticleSuggestion) -> Optional[ArticleTemplate]:
        """First template whose keyword contains, or is contained in, a target keyword."""
        for template in self.catalog.templates:
            if any(template.keyword in k or k in template.keyword for k in suggestion.target_keywords):
                return template
        return None

    def make_slug(self, title: str) -> str:
        base = slugify(title, max_length=SLUG_MAX_LENGTH)
        suffix = self.nonce()
        return f"{base}-{suffix}" if base else suffix

    def generate(
        self,
        template: ArticleTemplate,
        suggestion: Optional[ArticleSuggestion] = None,
    ) -> GeneratedArticle:
        replacements = self._replacements()
        title = fill_template(template.title_pattern, replacements)
        body = fill_template(template.body_pattern, replacements)
        description = fill_template(template.description_pattern, replacements)
        tags = [fill_template(tag, replacements) for tag in template.tags]

        if suggestion is not None:
            # the longer label is assumed to be the richer one
            if len(suggestion.title) > len(title):
                title = suggestion.title
            tags = list(suggestion.target_keywords) + tags

        keyword_tags = tuple(dict.fromkeys(tags))
        article = GeneratedArticle(
            title=title,
            body=body,
            description=description,
            keyword_tags=keyword_tags,
            slug=self.make_slug(title),
        )
        logger.debug("Rendered '%s' from template '%s'", article.title, template.keyword)
        return article
