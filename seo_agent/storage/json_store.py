from __future__ import annotations

import json
import threading
import uuid
from dataclasses import asdict, replace
from pathlib import Path
from typing import Callable, List, Optional

from ..models import Identity, Post, Site
from ..utils.logging import get_logger
from .base import PostExists, Store, StoreWriteFailed

logger = get_logger("seo.storage.json")


class JsonFileStore(Store):
    """File-backed store holding sites, users and posts in one JSON document.

    Layout::

        {"sites": [{"id", "name", "domain", "status"}],
         "users": [{"id", "name", "role"}],
         "posts": [{...Post.to_dict()}]}

    A process-local lock serializes reads and writes, which makes the
    (site_id, slug) uniqueness check and the insert one atomic step.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._sites: List[Site] = []
        self._users: List[Identity] = []
        self._posts: List[Post] = []
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            return
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        self._sites = [Site(**row) for row in data.get("sites", [])]
        self._users = [Identity(**row) for row in data.get("users", [])]
        self._posts = [Post.from_dict(row) for row in data.get("posts", [])]
        logger.debug(
            "Loaded store %s: sites=%d users=%d posts=%d",
            self.path,
            len(self._sites),
            len(self._users),
            len(self._posts),
        )

    def _persist(self) -> None:
        payload = {
            "sites": [asdict(s) for s in self._sites],
            "users": [asdict(u) for u in self._users],
            "posts": [p.to_dict() for p in self._posts],
        }
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def add_site(self, site: Site) -> None:
        with self._lock:
            self._sites.append(site)
            self._persist()

    def add_user(self, user: Identity) -> None:
        with self._lock:
            self._users.append(user)
            self._persist()

    def find_site(self, predicate: Callable[[Site], bool]) -> Optional[Site]:
        with self._lock:
            return next((s for s in self._sites if predicate(s)), None)

    def list_active_sites(self) -> List[Site]:
        with self._lock:
            return [s for s in self._sites if s.status == "ACTIVE"]

    def find_admin(self) -> Optional[Identity]:
        with self._lock:
            return next((u for u in self._users if u.role == "ADMIN"), None)

    def find_post(
        self,
        site_id: str,
        *,
        slug: Optional[str] = None,
        title_prefix: Optional[str] = None,
    ) -> Optional[Post]:
        with self._lock:
            for post in self._posts:
                if post.site_id != site_id:
                    continue
                if slug is not None and post.slug == slug:
                    return post
                if title_prefix and title_prefix in post.title:
                    return post
        return None

    def posts_for_site(self, site_id: str) -> List[Post]:
        with self._lock:
            return [p for p in self._posts if p.site_id == site_id]

    def create_post(self, post: Post) -> Post:
        with self._lock:
            if any(p.site_id == post.site_id and p.slug == post.slug for p in self._posts):
                raise PostExists(post.site_id, post.slug)
            stored = replace(post, id=post.id or uuid.uuid4().hex)
            self._posts.append(stored)
            try:
                self._persist()
            except OSError as exc:
                self._posts.pop()
                raise StoreWriteFailed(f"could not write {self.path}: {exc}") from exc
        return stored
