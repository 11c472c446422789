from typing import Protocol

from src.domain.entities import ActorContext, ContentRecord


class AuthorizationPort(Protocol):
    def can_act_on(self, actor: ActorContext | None, item: ContentRecord) -> bool:
        """May the actor manage drafts of this item?"""
        ...
