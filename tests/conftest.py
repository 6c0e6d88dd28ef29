from __future__ import annotations

import itertools
import random
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import pytest

from seo_agent.fetchers import FetchFailed, FetchResult
from seo_agent.models import ArticleTemplate, GeneratedArticle, Identity, Post, Site
from seo_agent.output import DeployResult, Deployer, ReportSink
from seo_agent.storage import PostExists, Store, StoreWriteFailed

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryStore(Store):
    """Store fake; ``fail_on`` maps a site id to the 1-based create attempt that fails."""

    def __init__(
        self,
        sites: Optional[List[Site]] = None,
        users: Optional[List[Identity]] = None,
        *,
        fail_on: Optional[Dict[str, int]] = None,
        on_create: Optional[Callable[[Post], None]] = None,
    ) -> None:
        self.sites = list(sites or [])
        self.users = list(users or [])
        self.posts: List[Post] = []
        self.fail_on = dict(fail_on or {})
        self.on_create = on_create
        self.attempts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def find_site(self, predicate):
        return next((s for s in self.sites if predicate(s)), None)

    def list_active_sites(self):
        return [s for s in self.sites if s.status == "ACTIVE"]

    def find_admin(self):
        return next((u for u in self.users if u.role == "ADMIN"), None)

    def find_post(self, site_id, *, slug=None, title_prefix=None):
        with self._lock:
            for post in self.posts:
                if post.site_id != site_id:
                    continue
                if slug is not None and post.slug == slug:
                    return post
                if title_prefix and title_prefix in post.title:
                    return post
        return None

    def create_post(self, post):
        with self._lock:
            attempt = self.attempts.get(post.site_id, 0) + 1
            self.attempts[post.site_id] = attempt
            if self.fail_on.get(post.site_id) == attempt:
                raise StoreWriteFailed(f"disk full while writing {post.slug}")
            if any(p.site_id == post.site_id and p.slug == post.slug for p in self.posts):
                raise PostExists(post.site_id, post.slug)
            self.posts.append(post)
        if self.on_create is not None:
            self.on_create(post)
        return post

    def posts_for(self, site_id: str) -> List[Post]:
        return [p for p in self.posts if p.site_id == site_id]


class RecordingSink(ReportSink):
    def __init__(self, *, fail: bool = False) -> None:
        self.artifacts: Dict[str, str] = {}
        self.fail = fail

    def write_artifact(self, name, content):
        if self.fail:
            raise OSError("read-only file system")
        self.artifacts[name] = content
        return f"memory://{name}"

    def names(self, prefix: str) -> List[str]:
        return [n for n in self.artifacts if n.startswith(prefix)]


class FakeDeployer(Deployer):
    def __init__(self, result: Optional[DeployResult] = None, *, error: Optional[Exception] = None) -> None:
        self.result = result or DeployResult(success=True, log=["ok"])
        self.error = error
        self.calls: List[List[str]] = []

    def deploy(self, targets):
        self.calls.append(list(targets))
        if self.error is not None:
            raise self.error
        return self.result


class FakeFetchClient:
    """Serves canned bodies by URL; unknown URLs fail with HTTP 404."""

    def __init__(self, pages: Dict[str, str]) -> None:
        self.pages = pages
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch(self, url, timeout=None, *, headers=None):
        with self._lock:
            self.calls.append(url)
        body = self.pages.get(url)
        if body is None:
            return FetchResult(url=url, error=FetchFailed(url=url, cause="HTTP 404", status_code=404))
        return FetchResult(url=url, body=body)


class SequentialGenerator:
    """Generator stand-in whose titles never share a prefix."""

    template = ArticleTemplate(
        keyword="telegram",
        title_pattern="",
        body_pattern="",
        description_pattern="",
        tags=("telegram",),
    )

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self.seeded: List[str] = []

    def random_template(self):
        return self.template

    def match_template(self, suggestion):
        return self.template

    def generate(self, template, suggestion=None):
        with self._lock:
            n = next(self._counter)
            if suggestion is not None:
                self.seeded.append(suggestion.title)
        return GeneratedArticle(
            title=f"{n:05d} generated article",
            body="body",
            description="description",
            keyword_tags=("telegram",),
            slug=f"generated-article-{n}",
        )


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sleeps():
    """Pass ``sleep=sleeps.append`` to record delays instead of waiting."""
    return []


@pytest.fixture
def admin():
    return Identity(id="u-1", name="admin", role="ADMIN")


@pytest.fixture
def sites():
    return [
        Site(id="a", name="SiteA", domain="a.example"),
        Site(id="b", name="SiteB", domain="b.example"),
        Site(id="c", name="SiteC", domain="c.example"),
    ]
