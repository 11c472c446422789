"""
Drafts component - pairs a published item with a single draft version and
runs the create/publish/delete lifecycle.
"""

from src.components.drafts.component import DraftLink
from src.components.drafts.models import DraftSummary
from src.components.drafts.ports import (
    ContentStores,
    ItemStorePort,
    MetadataStorePort,
    TaxonomyStorePort,
    UnitOfWorkPort,
)

__all__ = [
    # Entry points
    "DraftLink",
    # Models
    "DraftSummary",
    # Ports
    "ContentStores",
    "ItemStorePort",
    "MetadataStorePort",
    "TaxonomyStorePort",
    "UnitOfWorkPort",
]
