"""
Content component - a single content record with field export/import and
metadata access.
"""

from src.components.content.component import ContentItem
from src.components.content.models import ItemRef, item_id_of
from src.components.content.ports import (
    ContentStores,
    ItemStorePort,
    MetadataStorePort,
    TaxonomyStorePort,
    UnitOfWorkPort,
)

__all__ = [
    # Entry points
    "ContentItem",
    # Models
    "ItemRef",
    "item_id_of",
    # Ports
    "ContentStores",
    "ItemStorePort",
    "MetadataStorePort",
    "TaxonomyStorePort",
    "UnitOfWorkPort",
]
