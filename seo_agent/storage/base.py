from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..models import Identity, Post, Site


class StoreWriteFailed(Exception):
    """A single post could not be written."""


class PostExists(StoreWriteFailed):
    """The (site, slug) pair is already taken."""

    def __init__(self, site_id: str, slug: str) -> None:
        super().__init__(f"post with slug '{slug}' already exists on site {site_id}")
        self.site_id = site_id
        self.slug = slug


class Store(ABC):
    """The operations the agent needs from the content store.

    Schema administration and every other query belong to the surrounding
    application.
    """

    @abstractmethod
    def find_site(self, predicate: Callable[[Site], bool]) -> Optional[Site]:
        """Return the first site matching ``predicate``."""

    @abstractmethod
    def list_active_sites(self) -> List[Site]:
        """Return sites whose status is ACTIVE."""

    @abstractmethod
    def find_admin(self) -> Optional[Identity]:
        """Return one identity with the ADMIN role."""

    @abstractmethod
    def find_post(
        self,
        site_id: str,
        *,
        slug: Optional[str] = None,
        title_prefix: Optional[str] = None,
    ) -> Optional[Post]:
        """Return a post on ``site_id`` whose slug equals ``slug`` or whose
        title contains ``title_prefix``."""

    @abstractmethod
    def create_post(self, post: Post) -> Post:
        """Persist ``post`` and return the stored copy.

        Raises ``PostExists`` when the slug is taken on that site and
        ``StoreWriteFailed`` for any other write error.
        """
