from unittest.mock import MagicMock

import pytest
from conftest import FIXED_NOW, InMemoryStore

from seo_agent.models import GeneratedArticle
from seo_agent.processors import Deduplicator
from seo_agent.storage import PostExists, StoreWriteFailed


def _article(title="Telegram群组管理完整指南 - 新手必看", slug="telegram-group-1"):
    return GeneratedArticle(
        title=title,
        body="# body",
        description="desc",
        keyword_tags=("群组", "telegram"),
        slug=slug,
    )


@pytest.fixture
def store():
    return InMemoryStore()


def test_create_gate_is_idempotent(store):
    gate = Deduplicator(store, clock=lambda: FIXED_NOW)

    assert gate.try_create("a", "u-1", _article()) is True
    assert gate.try_create("a", "u-1", _article()) is False
    assert len(store.posts) == 1


def test_created_post_fields(store):
    Deduplicator(store, clock=lambda: FIXED_NOW).try_create("a", "u-1", _article())
    post = store.posts[0]

    assert post.status == "PUBLISHED"
    assert post.meta_title == post.title
    assert post.meta_description == "desc"
    assert post.meta_keywords == ("群组", "telegram")
    assert post.published_at == FIXED_NOW
    assert (post.site_id, post.author_id) == ("a", "u-1")


def test_title_prefix_suppresses_template_variants(store):
    gate = Deduplicator(store)
    gate.try_create("a", "u-1", _article(title="Telegram群组管理完整指南 - 新手必看", slug="s1"))

    skipped = gate.try_create("a", "u-1", _article(title="Telegram群组管理完整指南 - 新手教程", slug="s2"))
    created = gate.try_create("a", "u-1", _article(title="Telegram频道运营技巧 - 详细步骤", slug="s3"))

    assert (skipped, created) == (False, True)


def test_same_slug_on_another_site_is_not_a_duplicate(store):
    gate = Deduplicator(store)
    assert gate.try_create("a", "u-1", _article())
    assert gate.try_create("b", "u-1", _article())


def test_prefix_length_from_env(store, monkeypatch):
    monkeypatch.setenv("DEDUP_TITLE_PREFIX_CHARS", "40")
    gate = Deduplicator(store)
    gate.try_create("a", "u-1", _article(title="Telegram群组管理完整指南 - 新手必看", slug="s1"))

    assert gate.title_prefix_chars == 40
    assert gate.try_create("a", "u-1", _article(title="Telegram群组管理完整指南 - 新手教程", slug="s2"))


def test_slug_race_is_reported_as_skipped():
    store = MagicMock()
    store.find_post.return_value = None
    store.create_post.side_effect = PostExists("a", "telegram-group-1")

    assert Deduplicator(store).try_create("a", "u-1", _article()) is False


def test_write_failure_raises_store_write_failed(store):
    store.fail_on = {"a": 1}
    with pytest.raises(StoreWriteFailed):
        Deduplicator(store).try_create("a", "u-1", _article())
    assert store.posts == []


def test_unexpected_store_errors_are_wrapped():
    store = MagicMock()
    store.find_post.side_effect = ConnectionError("db down")

    with pytest.raises(StoreWriteFailed, match="db down"):
        Deduplicator(store).try_create("a", "u-1", _article())
