"""
Content component port definitions.
"""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from typing import Any

from src.ports.store import ItemStorePort, MetadataStorePort, TaxonomyStorePort, UnitOfWorkPort

__all__ = [
    "ContentStores",
    "ItemStorePort",
    "MetadataStorePort",
    "TaxonomyStorePort",
    "UnitOfWorkPort",
]


@dataclass(frozen=True)
class ContentStores:
    """The store ports a content operation works against."""

    items: ItemStorePort
    metadata: MetadataStorePort
    taxonomy: TaxonomyStorePort
    unit_of_work: UnitOfWorkPort | None = None

    def atomic(self) -> AbstractContextManager[Any]:
        """Unit of work around several store calls; a no-op without one."""
        if self.unit_of_work is None:
            return nullcontext()
        return self.unit_of_work.atomic()

    @classmethod
    def from_store(cls, store: Any) -> ContentStores:
        """Bundle a single adapter that implements every port."""
        return cls(items=store, metadata=store, taxonomy=store, unit_of_work=store)
