"""
Drafts component port definitions.

DraftLink works against the same store bundle as ContentItem.
"""

from src.components.content.ports import (
    ContentStores,
    ItemStorePort,
    MetadataStorePort,
    TaxonomyStorePort,
    UnitOfWorkPort,
)

__all__ = [
    "ContentStores",
    "ItemStorePort",
    "MetadataStorePort",
    "TaxonomyStorePort",
    "UnitOfWorkPort",
]
