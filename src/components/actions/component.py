"""
Actions component - entry points that trigger draft operations.

Callers pass the action name and item identifier explicitly (from a query
string, a form, a CLI argument); nothing is read from ambient request state.
An unknown action is rejected before any store is touched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, assert_never
from urllib.parse import urlencode

from src.components.actions.models import DispatchReason, DispatchResult, DraftAction
from src.components.actions.ports import AuthorizationPort, ContentStores
from src.components.content import ItemRef, item_id_of
from src.components.drafts import DraftLink
from src.components.merge import MergeOptions
from src.domain.entities import ActorContext
from src.domain.state import LinkState
from src.rules.models import UrlRules

logger = logging.getLogger(__name__)


class DraftActionController:
    """Parses, authorizes and runs draft actions; builds their URLs."""

    def __init__(
        self,
        stores: ContentStores,
        authorizer: AuthorizationPort,
        urls: UrlRules | None = None,
        merge: MergeOptions | None = None,
    ) -> None:
        self._stores = stores
        self._authorizer = authorizer
        self._urls = urls or UrlRules()
        self._merge = merge or MergeOptions()

    # --- Dispatch ---

    def dispatch(
        self,
        action_name: Any,
        identifier: ItemRef | None,
        actor: ActorContext | None = None,
    ) -> DispatchResult:
        """
        Run one action against the link of an item.

        Args:
            action_name: "create", "publish" or "delete".
            identifier: Any item of the pairing.
            actor: Who is asking; checked against the authorizer.

        Returns:
            DispatchResult with the edit URL to redirect to on success.
        """
        action = DraftAction.parse(action_name)
        if action is None:
            logger.debug("Rejected unknown draft action %r", action_name)
            return self._declined(None, "invalid_action")

        link = DraftLink.resolve(identifier, self._stores, self._merge)
        if link.state is LinkState.UNBOUND or link.published.record is None:
            return self._declined(action, "not_found")

        if not self._authorizer.can_act_on(actor, link.published.record):
            logger.info(
                "Actor %s may not %s drafts of item %s",
                actor.actor_id if actor else "anonymous",
                action.value,
                link.published.id,
            )
            return self._declined(action, "forbidden")

        match action:
            case DraftAction.CREATE:
                performed = link.create()
                target_id = link.draft.id
            case DraftAction.PUBLISH:
                performed = link.publish()
                target_id = link.published.id
            case DraftAction.DELETE:
                performed = link.delete()
                target_id = link.published.id
            case _:
                assert_never(action)

        if not performed:
            return self._declined(action, "precondition_failed")

        return DispatchResult(
            performed=True,
            redirect_target=self.edit_url(target_id),
            action=action,
            reason="ok",
        )

    def dispatch_query(
        self,
        params: Mapping[str, Any],
        actor: ActorContext | None = None,
    ) -> DispatchResult:
        """Dispatch from a query/form mapping using the configured parameter names."""
        return self.dispatch(
            params.get(self._urls.action_key),
            params.get(self._urls.item_key),
            actor,
        )

    # --- URLs ---

    def build_action_url(self, action_name: Any, item_id: ItemRef | None) -> str | None:
        """URL that triggers an action; None for an unknown action or bad id."""
        action = DraftAction.parse(action_name)
        target = item_id_of(item_id)
        if action is None or not target:
            return None

        query = urlencode({self._urls.action_key: action.value, self._urls.item_key: target})
        admin_url = self._urls.admin_url
        separator = "&" if "?" in admin_url else "?"
        return f"{admin_url}{separator}{query}"

    def available_actions(self, link: DraftLink) -> dict[str, str]:
        """Action URLs that make sense in the link's current state."""
        match link.state:
            case LinkState.PUBLISHED_ONLY:
                actions = [DraftAction.CREATE]
            case LinkState.PUBLISHED_WITH_DRAFT:
                actions = [DraftAction.PUBLISH, DraftAction.DELETE]
            case _:
                actions = []

        urls: dict[str, str] = {}
        for action in actions:
            url = self.build_action_url(action, link.published.id)
            if url:
                urls[action.value] = url
        return urls

    def edit_url(self, item_id: int) -> str:
        return self._urls.edit_url_template.format(item_id=item_id)

    @staticmethod
    def _declined(action: DraftAction | None, reason: DispatchReason) -> DispatchResult:
        return DispatchResult(performed=False, redirect_target=None, action=action, reason=reason)
