"""
Tests for the draft lifecycle hooks.
"""

from __future__ import annotations

from src.adapters.memory_store import InMemoryContentStore
from src.app_shell.context import ServiceContext
from src.domain.entities import DRAFT_ID_KEY, PUBLISHED_ID_KEY


def _paired(ctx: ServiceContext, store: InMemoryContentStore) -> tuple[int, int]:
    published_id = store.insert({"title": "Live", "status": "published"})
    link = ctx.link(published_id)
    assert link.create() is True
    return published_id, link.draft.id


class TestStatusGuard:
    def test_direct_publish_of_draft_is_reverted(
        self, memory_ctx: ServiceContext, memory_store: InMemoryContentStore
    ) -> None:
        published_id, draft_id = _paired(memory_ctx, memory_store)
        memory_store.update(draft_id, {"status": "published"})

        outcome = memory_ctx.hooks.on_status_transition(draft_id, "published", "draft")

        assert outcome.reverted is True
        assert outcome.message is not None
        assert f"#{draft_id}" in outcome.message
        assert f"#{published_id}" in outcome.message
        assert outcome.redirect_target == "/admin/items?type=post"
        record = memory_store.load(draft_id)
        assert record is not None and record.status == "draft"

    def test_draft_may_stay_draft(
        self, memory_ctx: ServiceContext, memory_store: InMemoryContentStore
    ) -> None:
        _, draft_id = _paired(memory_ctx, memory_store)

        assert memory_ctx.hooks.on_status_transition(draft_id, "draft", "draft").reverted is False

    def test_published_item_may_change_status(
        self, memory_ctx: ServiceContext, memory_store: InMemoryContentStore
    ) -> None:
        published_id, _ = _paired(memory_ctx, memory_store)
        memory_store.update(published_id, {"status": "archived"})

        outcome = memory_ctx.hooks.on_status_transition(published_id, "archived", "published")

        assert outcome.reverted is False
        record = memory_store.load(published_id)
        assert record is not None and record.status == "archived"

    def test_plain_item_is_ignored(
        self, memory_ctx: ServiceContext, memory_store: InMemoryContentStore
    ) -> None:
        item_id = memory_store.insert({"title": "Plain"})

        assert memory_ctx.hooks.on_status_transition(item_id, "published").reverted is False


class TestRemovalHook:
    def test_removing_published_item_discards_draft(
        self, memory_ctx: ServiceContext, memory_store: InMemoryContentStore
    ) -> None:
        published_id, draft_id = _paired(memory_ctx, memory_store)

        assert memory_ctx.hooks.on_item_removed(published_id) is True

        assert memory_store.load(draft_id) is None
        assert DRAFT_ID_KEY not in memory_store.get_all(published_id)

    def test_removing_draft_clears_published_pointer(
        self, memory_ctx: ServiceContext, memory_store: InMemoryContentStore
    ) -> None:
        published_id, draft_id = _paired(memory_ctx, memory_store)

        assert memory_ctx.hooks.on_item_removed(draft_id) is True
        memory_store.delete(draft_id)

        assert memory_store.load(draft_id) is None
        meta = memory_store.get_all(published_id)
        assert DRAFT_ID_KEY not in meta
        assert PUBLISHED_ID_KEY not in meta

    def test_unpaired_item(
        self, memory_ctx: ServiceContext, memory_store: InMemoryContentStore
    ) -> None:
        item_id = memory_store.insert({"title": "Plain"})

        assert memory_ctx.hooks.on_item_removed(item_id) is False
        assert memory_ctx.hooks.on_item_removed(999) is False
