"""
Drafts component unit tests.

Lifecycle of the published/draft pairing against the in-memory store.
"""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from src.adapters.memory_store import InMemoryContentStore
from src.components.content import ContentItem, ContentStores
from src.components.drafts import DraftLink
from src.domain.entities import DRAFT_ID_KEY, PUBLISHED_ID_KEY
from src.domain.state import ItemRole, LinkState
from src.ports.store import StoreError

TAXONOMIES = {"post": ["category", "post_tag"]}


@pytest.fixture
def store() -> InMemoryContentStore:
    return InMemoryContentStore(taxonomies=TAXONOMIES)


@pytest.fixture
def stores(store: InMemoryContentStore) -> ContentStores:
    return ContentStores.from_store(store)


@pytest.fixture
def published_id(store: InMemoryContentStore) -> int:
    item_id = store.insert(
        {"title": "Live", "body": "live body", "slug": "live", "status": "published"}
    )
    store.add(item_id, "subtitle", "live subtitle")
    store.set_assigned_terms(item_id, "category", {"news"})
    return item_id


def assert_pairing_invariant(store: InMemoryContentStore) -> None:
    """Every pointer names an existing item that points straight back."""
    for item_id in store.list_ids():
        meta = store.get_all(item_id)
        assert len(meta.get(DRAFT_ID_KEY, [])) <= 1
        assert len(meta.get(PUBLISHED_ID_KEY, [])) <= 1
        if DRAFT_ID_KEY in meta:
            draft_id = int(meta[DRAFT_ID_KEY][0])
            assert store.load(draft_id) is not None
            assert store.get_all(draft_id)[PUBLISHED_ID_KEY] == [str(item_id)]
        if PUBLISHED_ID_KEY in meta:
            target = int(meta[PUBLISHED_ID_KEY][0])
            assert store.get_all(target)[DRAFT_ID_KEY] == [str(item_id)]


# --- Resolution ---


class TestResolve:
    def test_plain_item_is_published_only(self, stores: ContentStores, published_id: int) -> None:
        link = DraftLink.resolve(published_id, stores)

        assert link.state is LinkState.PUBLISHED_ONLY
        assert link.published.id == published_id
        assert link.draft.id == 0
        assert link.requested_role is ItemRole.NONE

    @pytest.mark.parametrize("ref", [0, -5, "x", 999])
    def test_unresolvable_is_unbound(self, stores: ContentStores, ref: object) -> None:
        link = DraftLink.resolve(ref, stores)  # type: ignore[arg-type]

        assert link.state is LinkState.UNBOUND
        assert link.create() is False
        assert link.publish() is False
        assert link.delete() is False

    def test_draft_id_resolves_to_same_pairing(self, stores: ContentStores, published_id: int) -> None:
        link = DraftLink.resolve(published_id, stores)
        link.create()
        draft_id = link.draft.id

        from_draft = DraftLink.resolve(draft_id, stores)

        assert from_draft.state is LinkState.PUBLISHED_WITH_DRAFT
        assert from_draft.published.id == published_id
        assert from_draft.draft.id == draft_id
        assert from_draft.requested_role is ItemRole.DRAFT
        assert from_draft.is_consistent is True

    def test_draft_of_missing_published_item_is_unbound(
        self, store: InMemoryContentStore, stores: ContentStores
    ) -> None:
        stray = store.insert({"title": "Stray"})
        store.add(stray, PUBLISHED_ID_KEY, "999")

        assert DraftLink.resolve(stray, stores).state is LinkState.UNBOUND


# --- create ---


class TestCreate:
    def test_create_copies_published_item(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        link = DraftLink.resolve(published_id, stores)

        assert link.create() is True
        assert link.state is LinkState.PUBLISHED_WITH_DRAFT

        draft = store.load(link.draft.id)
        assert draft is not None
        assert draft.title == "Live"
        assert draft.body == "live body"
        assert draft.status == "draft"
        assert draft.slug != "live"
        assert store.get_one(link.draft.id, "subtitle") == "live subtitle"
        assert store.get_assigned_terms(link.draft.id, "category") == {"news"}
        assert_pairing_invariant(store)

    def test_create_is_idempotent(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        link = DraftLink.resolve(published_id, stores)
        assert link.create() is True
        assert link.create() is False
        assert DraftLink.resolve(published_id, stores).create() is False

        assert len(store.list_ids()) == 2

    def test_stale_link_cannot_create_second_draft(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        first = DraftLink.resolve(published_id, stores)
        second = DraftLink.resolve(published_id, stores)

        assert first.create() is True
        assert second.create() is False
        assert second.state is LinkState.PUBLISHED_WITH_DRAFT
        assert second.draft.id == first.draft.id
        assert len(store.list_ids()) == 2
        assert_pairing_invariant(store)

    def test_create_rolls_back_when_copy_fails(
        self,
        store: InMemoryContentStore,
        stores: ContentStores,
        published_id: int,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(ContentItem, "import_from", lambda self, source: False)

        with pytest.raises(StoreError):
            DraftLink.resolve(published_id, stores).create()

        assert store.list_ids() == [published_id]
        assert DRAFT_ID_KEY not in store.get_all(published_id)


# --- publish ---


class TestPublish:
    def test_round_trip(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        link = DraftLink.resolve(published_id, stores)
        link.create()
        draft_id = link.draft.id

        store.update(draft_id, {"title": "Edited", "body": "edited body"})
        store.unset(draft_id, "subtitle")
        store.add(draft_id, "subtitle", "edited subtitle")
        store.set_assigned_terms(draft_id, "category", {"sports"})

        assert DraftLink.resolve(draft_id, stores).publish() is True

        record = store.load(published_id)
        assert record is not None
        assert record.title == "Edited"
        assert record.body == "edited body"
        assert record.status == "published"
        assert record.slug == "live"
        assert store.get_all(published_id) == {"subtitle": ["edited subtitle"]}
        assert store.get_assigned_terms(published_id, "category") == {"sports"}
        assert store.load(draft_id) is None
        assert DraftLink.resolve(published_id, stores).state is LinkState.PUBLISHED_ONLY

    def test_publish_without_draft_is_a_no_op(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        assert DraftLink.resolve(published_id, stores).publish() is False
        assert store.load(published_id) is not None

    def test_publish_without_merge_keeps_pairing(
        self,
        store: InMemoryContentStore,
        stores: ContentStores,
        published_id: int,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        link = DraftLink.resolve(published_id, stores)
        link.create()
        draft_id = link.draft.id

        monkeypatch.setattr(ContentItem, "import_from", lambda self, source: False)

        assert link.publish() is False
        assert store.load(draft_id) is not None
        assert link.state is LinkState.PUBLISHED_WITH_DRAFT
        assert_pairing_invariant(store)

    def test_failed_publish_rolls_back(
        self, store: InMemoryContentStore, published_id: int
    ) -> None:
        class FailingTaxonomy:
            def __init__(self, inner: InMemoryContentStore) -> None:
                self.inner = inner
                self.fail = False

            def get_assigned_terms(self, item_id: int, taxonomy: str) -> set[str]:
                return self.inner.get_assigned_terms(item_id, taxonomy)

            def set_assigned_terms(self, item_id: int, taxonomy: str, slugs: Iterable[str]) -> None:
                if self.fail:
                    raise StoreError("term table unavailable")
                self.inner.set_assigned_terms(item_id, taxonomy, slugs)

            def applicable_taxonomies(self, item_type: str) -> set[str]:
                return self.inner.applicable_taxonomies(item_type)

        taxonomy = FailingTaxonomy(store)
        stores = ContentStores(items=store, metadata=store, taxonomy=taxonomy, unit_of_work=store)
        link = DraftLink.resolve(published_id, stores)
        link.create()
        draft_id = link.draft.id
        store.update(draft_id, {"title": "Edited"})
        store.add(draft_id, "extra", "1")

        taxonomy.fail = True
        with pytest.raises(StoreError):
            DraftLink.resolve(published_id, stores).publish()

        record = store.load(published_id)
        assert record is not None and record.title == "Live"
        assert "extra" not in store.get_all(published_id)
        assert store.load(draft_id) is not None
        assert_pairing_invariant(store)


# --- delete ---


class TestDelete:
    def test_delete_discards_draft(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        link = DraftLink.resolve(published_id, stores)
        link.create()
        draft_id = link.draft.id

        assert link.delete() is True
        assert link.state is LinkState.PUBLISHED_ONLY
        assert store.load(draft_id) is None
        assert DRAFT_ID_KEY not in store.get_all(published_id)
        assert DraftLink.resolve(published_id, stores).state is LinkState.PUBLISHED_ONLY
        assert DraftLink.resolve(draft_id, stores).state is LinkState.UNBOUND

    def test_delete_without_draft_is_a_no_op(self, stores: ContentStores, published_id: int) -> None:
        assert DraftLink.resolve(published_id, stores).delete() is False

    def test_sequence_keeps_invariant(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        other = store.insert({"title": "Other", "status": "published"})
        for ref, op in [
            (published_id, "create"),
            (other, "create"),
            (published_id, "publish"),
            (other, "delete"),
            (published_id, "create"),
            (published_id, "create"),
        ]:
            getattr(DraftLink.resolve(ref, stores), op)()
            assert_pairing_invariant(store)

        assert len(store.list_ids()) == 3


# --- Orphans and inconsistent pointers ---


class TestOrphans:
    def test_missing_draft_is_orphaned(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        store.add(published_id, DRAFT_ID_KEY, "999")

        link = DraftLink.resolve(published_id, stores)

        assert link.state is LinkState.PUBLISHED_WITH_DRAFT
        assert link.is_orphaned is True
        assert link.is_consistent is False
        assert link.summary().draft_id == 999

    def test_delete_cleans_orphan_pointer(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        store.add(published_id, DRAFT_ID_KEY, "999")

        assert DraftLink.resolve(published_id, stores).delete() is True
        assert DRAFT_ID_KEY not in store.get_all(published_id)

    def test_publish_of_orphan_cleans_and_fails(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        store.add(published_id, DRAFT_ID_KEY, "999")

        link = DraftLink.resolve(published_id, stores)

        assert link.publish() is False
        assert link.state is LinkState.PUBLISHED_ONLY
        assert DRAFT_ID_KEY not in store.get_all(published_id)
        record = store.load(published_id)
        assert record is not None and record.title == "Live"

    def test_delete_leaves_foreign_pointer(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        link = DraftLink.resolve(published_id, stores)
        link.create()
        real_draft = link.draft.id

        stray = store.insert({"title": "Stray"})
        store.add(stray, PUBLISHED_ID_KEY, str(published_id))

        stray_link = DraftLink.resolve(stray, stores)
        assert stray_link.is_consistent is False
        assert stray_link.delete() is True

        assert store.load(stray) is None
        assert store.get_all(published_id)[DRAFT_ID_KEY] == [str(real_draft)]

    def test_publish_of_stray_draft_leaves_live_item(
        self, store: InMemoryContentStore, stores: ContentStores, published_id: int
    ) -> None:
        link = DraftLink.resolve(published_id, stores)
        link.create()
        real_draft = link.draft.id

        stray = store.insert({"title": "Stray", "status": "draft"})
        store.add(stray, PUBLISHED_ID_KEY, str(published_id))
        store.add(stray, "subtitle", "stray subtitle")

        stray_link = DraftLink.resolve(stray, stores)
        assert stray_link.is_consistent is False
        assert stray_link.publish() is False

        record = store.load(published_id)
        assert record is not None and record.title == "Live"
        assert store.get_all(published_id)[DRAFT_ID_KEY] == [str(real_draft)]
        assert "stray subtitle" not in store.get_all(published_id).get("subtitle", [])
        assert store.load(stray) is not None
        assert store.load(real_draft) is not None


class TestSummary:
    def test_summary_to_dict(self, stores: ContentStores, published_id: int) -> None:
        link = DraftLink.resolve(published_id, stores)
        link.create()

        data = link.summary().to_dict()

        assert data["state"] == "published_with_draft"
        assert data["requested_role"] == "none"
        assert data["published_id"] == published_id
        assert data["draft_id"] == link.draft.id
        assert data["is_orphaned"] is False
        assert data["is_consistent"] is True
