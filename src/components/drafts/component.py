"""
Drafts component - the published/draft pairing and its lifecycle.

A published item P may have at most one draft D. The pairing lives in two
metadata pointers: D carries P's id under PUBLISHED_ID_KEY and P carries
D's id under DRAFT_ID_KEY. Both are written and removed together.

State machine:
    UNBOUND               -- nothing resolvable; every operation is a no-op
    PUBLISHED_ONLY        -- create()  -> PUBLISHED_WITH_DRAFT
    PUBLISHED_WITH_DRAFT  -- publish() -> PUBLISHED_ONLY (draft merged into P)
                          -- delete()  -> PUBLISHED_ONLY (draft discarded)

Resolving a draft's id gives the same link as resolving its published id.
"""

from __future__ import annotations

import logging

from src.components.content import ContentItem, ContentStores, ItemRef
from src.components.drafts.models import DraftSummary
from src.components.merge import MergeOptions
from src.domain.entities import DRAFT_ID_KEY, PUBLISHED_ID_KEY
from src.domain.state import ItemRole, LinkState, classify, draft_id_of, published_id_of
from src.ports.store import StoreError

logger = logging.getLogger(__name__)


class DraftLink:
    """A published item and, optionally, its draft."""

    def __init__(
        self,
        stores: ContentStores,
        published: ContentItem,
        draft: ContentItem,
        draft_ref: int = 0,
        requested_id: int = 0,
        requested_role: ItemRole = ItemRole.NONE,
        merge: MergeOptions | None = None,
    ) -> None:
        self._stores = stores
        self._published = published
        self._draft = draft
        # Draft id the pairing claims; may name a missing record (orphan).
        self._draft_ref = draft_ref or draft.id
        self._requested_id = requested_id
        self._requested_role = requested_role
        self._merge = merge or MergeOptions()

    @classmethod
    def resolve(
        cls,
        ref: ItemRef | None,
        stores: ContentStores,
        merge: MergeOptions | None = None,
    ) -> DraftLink:
        """
        Build the link for any item of a pairing.

        Args:
            ref: Published item, draft, or an item with no draft yet.
            stores: Store ports to read from.
            merge: Metadata merge options used by create/publish.

        Returns:
            The link; UNBOUND when the published side cannot be loaded.
        """
        item = ContentItem.resolve(ref, stores, merge)
        unresolved = ContentItem(None, stores, merge)
        if not item.id:
            return cls(stores, unresolved, unresolved, merge=merge)

        meta = item.metadata()
        role = classify(meta)

        match role:
            case ItemRole.PUBLISHED:
                draft_ref = draft_id_of(meta)
                draft = ContentItem.resolve(draft_ref, stores, merge)
                return cls(stores, item, draft, draft_ref, item.id, role, merge)
            case ItemRole.DRAFT:
                published = ContentItem.resolve(published_id_of(meta), stores, merge)
                if not published.id:
                    logger.warning(
                        "Draft %s points at missing published item %s",
                        item.id,
                        published_id_of(meta),
                    )
                    return cls(stores, unresolved, item, item.id, item.id, role, merge)
                return cls(stores, published, item, item.id, item.id, role, merge)
            case _:
                return cls(stores, item, unresolved, 0, item.id, role, merge)

    # --- State ---

    @property
    def state(self) -> LinkState:
        if not self._published.id:
            return LinkState.UNBOUND
        if self._draft_ref:
            return LinkState.PUBLISHED_WITH_DRAFT
        return LinkState.PUBLISHED_ONLY

    @property
    def published(self) -> ContentItem:
        return self._published

    @property
    def draft(self) -> ContentItem:
        return self._draft

    @property
    def requested_role(self) -> ItemRole:
        return self._requested_role

    @property
    def is_orphaned(self) -> bool:
        """The published item points at a draft that no longer exists."""
        return self.state is LinkState.PUBLISHED_WITH_DRAFT and not self._draft.id

    @property
    def is_consistent(self) -> bool:
        """Both pointers are present and name each other."""
        if self.state is not LinkState.PUBLISHED_WITH_DRAFT:
            return True
        if not self._draft.id:
            return False
        return (
            draft_id_of(self._published.metadata()) == self._draft.id
            and published_id_of(self._draft.metadata()) == self._published.id
        )

    def summary(self) -> DraftSummary:
        return DraftSummary(
            state=self.state,
            requested_id=self._requested_id,
            requested_role=self._requested_role,
            published_id=self._published.id,
            draft_id=self._draft_ref,
            is_orphaned=self.is_orphaned,
            is_consistent=self.is_consistent,
        )

    def __repr__(self) -> str:
        return (
            f"DraftLink(state={self.state.value}, published={self._published.id}, "
            f"draft={self._draft_ref})"
        )

    # --- Operations ---

    def create(self) -> bool:
        """Copy the published item into a new draft and link the two."""
        if self.state is not LinkState.PUBLISHED_ONLY:
            logger.debug("Create skipped for %r", self)
            return False

        published_id = self._published.id
        with self._stores.atomic():
            existing = draft_id_of(self._stores.metadata.get_all(published_id))
            if existing:
                logger.debug("Item %s gained draft %s before create", published_id, existing)
                draft_id = 0
            else:
                fields = self._published.export_fields()
                fields["status"] = "draft"
                draft_id = self._stores.items.insert(fields)

                draft = ContentItem.resolve(draft_id, self._stores, self._merge)
                if not draft.import_from(self._published):
                    raise StoreError(f"Could not copy item {published_id} into draft {draft_id}")

                self._write_pointer(draft_id, PUBLISHED_ID_KEY, published_id)
                self._write_pointer(published_id, DRAFT_ID_KEY, draft_id)

        self._refresh()
        if not draft_id:
            return False

        logger.info("Created draft %s of item %s", draft_id, published_id)
        return True

    def publish(self) -> bool:
        """Merge the draft into the published item, then discard the draft."""
        if self.state is not LinkState.PUBLISHED_WITH_DRAFT:
            logger.debug("Publish skipped for %r", self)
            return False

        if self.is_orphaned:
            logger.warning(
                "Item %s points at missing draft %s; clearing the pointer",
                self._published.id,
                self._draft_ref,
            )
            self.delete()
            return False

        if not self.is_consistent:
            logger.warning(
                "Item %s and draft %s do not point at each other; not publishing",
                self._published.id,
                self._draft.id,
            )
            return False

        published_id, draft_id = self._published.id, self._draft.id
        with self._stores.atomic():
            merged = self._published.import_from(self._draft)
            if merged:
                self._unlink()

        self._refresh()
        if not merged:
            logger.warning("Draft %s was not merged into item %s", draft_id, published_id)
            return False

        logger.info("Published draft %s into item %s", draft_id, published_id)
        return True

    def delete(self) -> bool:
        """Break the pairing and delete the draft."""
        if self.state is not LinkState.PUBLISHED_WITH_DRAFT:
            logger.debug("Delete skipped for %r", self)
            return False

        published_id, draft_id = self._published.id, self._draft_ref
        with self._stores.atomic():
            self._unlink()

        self._refresh()
        logger.info("Deleted draft %s of item %s", draft_id, published_id)
        return True

    # --- Internals ---

    def _write_pointer(self, item_id: int, key: str, target_id: int) -> None:
        self._stores.metadata.unset(item_id, key)
        self._stores.metadata.add(item_id, key, str(target_id))

    def _unlink(self) -> None:
        metadata = self._stores.metadata
        published_id = self._published.id

        if draft_id_of(metadata.get_all(published_id)) == self._draft_ref:
            metadata.unset(published_id, DRAFT_ID_KEY)
        else:
            logger.warning(
                "Item %s does not point at draft %s; pointer left in place",
                published_id,
                self._draft_ref,
            )

        if not self._draft.id:
            return

        owner = published_id_of(metadata.get_all(self._draft.id))
        if owner in (0, published_id):
            self._stores.items.delete(self._draft.id)
        else:
            logger.warning(
                "Draft %s belongs to item %s, not %s; not deleted",
                self._draft.id,
                owner,
                published_id,
            )

    def _refresh(self) -> None:
        fresh = DraftLink.resolve(self._published.id, self._stores, self._merge)
        self._published = fresh._published
        self._draft = fresh._draft
        self._draft_ref = fresh._draft_ref
