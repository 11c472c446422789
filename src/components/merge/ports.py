"""
Merge component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import ContentRecord
from src.ports.store import MetadataStorePort, TaxonomyStorePort

__all__ = ["ItemLoaderPort", "MetadataStorePort", "TaxonomyStorePort"]


class ItemLoaderPort(Protocol):
    """Read side of the item store, used to find an item's type."""

    def load(self, item_id: int) -> ContentRecord | None:
        ...
