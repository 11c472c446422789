"""
DraftHooks - lifecycle hooks the host calls around item changes.

Key behaviors:
- A draft may never leave the "draft" status directly; the status is
  reverted and the caller gets a message and a listing URL to redirect to
- Removing either side of a pairing breaks the link and deletes the draft
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.components.content import ContentStores
from src.components.drafts import DraftLink
from src.components.merge import MergeOptions
from src.domain.state import LinkState, may_change_status, published_id_of
from src.rules.models import DraftRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardOutcome:
    """Result of the status transition guard."""

    reverted: bool
    message: str | None = None
    redirect_target: str | None = None


class DraftHooks:
    """Keeps drafts consistent when the host changes or removes items."""

    def __init__(self, stores: ContentStores, rules: DraftRules | None = None) -> None:
        self._stores = stores
        self._rules = rules or DraftRules()
        self._merge = MergeOptions.from_rules(self._rules.merge)

    def on_status_transition(
        self,
        item_id: int,
        new_status: str,
        old_status: str | None = None,
    ) -> GuardOutcome:
        """Call after an item's status changed; reverts a draft that left "draft"."""
        meta = self._stores.metadata.get_all(item_id)
        if may_change_status(meta, new_status):
            return GuardOutcome(reverted=False)

        record = self._stores.items.load(item_id)
        if record is None:
            return GuardOutcome(reverted=False)

        published_id = published_id_of(meta)
        self._stores.items.update(item_id, {"status": "draft"})
        logger.warning(
            "Reverted draft %s from %s to draft (was %s); publishes go through item %s",
            item_id,
            new_status,
            old_status,
            published_id,
        )

        message = self._rules.messages.draft_publish_blocked.format(
            item_id=item_id,
            published_id=published_id,
        )
        return GuardOutcome(
            reverted=True,
            message=message,
            redirect_target=self._rules.urls.listing_url_template.format(item_type=record.type),
        )

    def on_item_removed(self, item_id: int) -> bool:
        """Call before an item is trashed or deleted; discards its draft pairing."""
        link = DraftLink.resolve(item_id, self._stores, self._merge)
        if link.state is not LinkState.PUBLISHED_WITH_DRAFT:
            return False

        removed = link.delete()
        if removed:
            logger.info("Removed draft pairing of item %s", item_id)
        return removed
