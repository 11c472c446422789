"""Drafts component models - frozen dataclass outputs."""

from dataclasses import asdict, dataclass
from typing import Any

from src.domain.state import ItemRole, LinkState


@dataclass(frozen=True)
class DraftSummary:
    """Snapshot of a published/draft pairing as seen from one item."""

    state: LinkState
    requested_id: int
    requested_role: ItemRole
    published_id: int
    draft_id: int
    is_orphaned: bool
    is_consistent: bool

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        data["requested_role"] = self.requested_role.value
        return data
