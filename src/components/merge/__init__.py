"""
Merge component - metadata and taxonomy reconciliation between two items.
"""

from src.components.merge.component import MetadataMerger, TaxonomyMerger, reconcile_metadata
from src.components.merge.models import MergeOptions, MetaReconciliation
from src.components.merge.ports import ItemLoaderPort, MetadataStorePort, TaxonomyStorePort

__all__ = [
    # Entry points
    "reconcile_metadata",
    "MetadataMerger",
    "TaxonomyMerger",
    # Models
    "MergeOptions",
    "MetaReconciliation",
    # Ports
    "ItemLoaderPort",
    "MetadataStorePort",
    "TaxonomyStorePort",
]
